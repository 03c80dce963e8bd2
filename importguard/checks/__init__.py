"""Project-level checks built on the per-file import policy."""

from .project import (
    FileReport,
    collect_policy_violations,
    collect_project_files,
    diagnostics_to_json,
    format_diagnostics,
    offset_to_line_col,
)

__all__ = [
    "FileReport",
    "collect_policy_violations",
    "collect_project_files",
    "diagnostics_to_json",
    "format_diagnostics",
    "offset_to_line_col",
]
