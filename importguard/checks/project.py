"""Project-wide import policy check: runs the per-file policy over a source tree."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from importguard.host.adapter import create_plugin
from importguard.host.protocol import Diagnostic
from importguard.host.python_source import PythonLanguageService
from importguard.logging import get_logger
from importguard.policy.models import PolicyConfig

SKIP_DIRS = frozenset(
    {
        "__pycache__",
        ".git",
        ".venv",
        "venv",
        ".tox",
        ".mypy_cache",
        ".pytest_cache",
        "node_modules",
        "build",
        "dist",
    }
)


@dataclass(frozen=True)
class FileReport:
    path: str
    text: str
    diagnostics: tuple[Diagnostic, ...]


def collect_project_files(root: Path, *, include_tests: bool = False) -> list[Path]:
    """Python files under root in stable (sorted) order, skipping tool/venv dirs."""
    root = Path(root).resolve()
    files: list[Path] = []
    for path in sorted(root.rglob("*.py")):
        rel_parts = path.relative_to(root).parts
        if any(part in SKIP_DIRS for part in rel_parts):
            continue
        if not include_tests and rel_parts and rel_parts[0] == "tests":
            continue
        files.append(path)
    return files


def collect_policy_violations(
    root: Path,
    config: PolicyConfig,
    *,
    include_tests: bool = False,
    files: Iterable[Path] | None = None,
) -> list[FileReport]:
    """
    Run the import policy over every Python file of the project.

    Returns one FileReport per file that has diagnostics (policy violations and
    host syntax errors), in file order. Each file is evaluated independently.
    """
    root = Path(root).resolve()
    host = PythonLanguageService(root)
    service = create_plugin(host, config)
    reports: list[FileReport] = []
    targets = list(files) if files is not None else collect_project_files(root, include_tests=include_tests)
    for path in targets:
        name = host.file_identity(str(path))
        source_file = service.get_source_file(name)
        if source_file is None:
            get_logger("checks").warning("importguard: cannot read %s", name)
            continue
        diagnostics = service.get_semantic_diagnostics(name)
        if diagnostics:
            reports.append(FileReport(path=source_file.file_name, text=source_file.text, diagnostics=tuple(diagnostics)))
    return reports


def offset_to_line_col(text: str, offset: int) -> tuple[int, int]:
    """1-based (line, column) of a character offset."""
    offset = max(0, min(offset, len(text)))
    before = text[:offset]
    line = before.count("\n") + 1
    column = offset - (before.rfind("\n") + 1) + 1
    return line, column


def _diagnostic_code(diagnostic: Diagnostic) -> str:
    if diagnostic.source and diagnostic.code:
        return f"{diagnostic.source}({diagnostic.code})"
    return diagnostic.source or "error"


def format_diagnostics(reports: list[FileReport]) -> str:
    """Human-readable report: `path:line:col: error source(code) message`."""
    lines: list[str] = []
    for report in reports:
        for d in report.diagnostics:
            line, col = offset_to_line_col(report.text, d.start)
            specifier = report.text[d.start : d.start + d.length]
            head = f"{report.path}:{line}:{col}: {d.category.value} {_diagnostic_code(d)}"
            if specifier:
                head += f" '{specifier}'"
            message = d.message_text.rstrip("\n").replace("\n", "\n    ")
            lines.append(f"{head}: {message}")
    total = sum(len(r.diagnostics) for r in reports)
    if total:
        lines.append("")
        lines.append(f"{total} problem(s) in {len(reports)} file(s)")
    return "\n".join(lines)


def diagnostics_to_json(reports: list[FileReport]) -> str:
    items = []
    for report in reports:
        for d in report.diagnostics:
            line, col = offset_to_line_col(report.text, d.start)
            items.append(
                {
                    "file": report.path,
                    "start": d.start,
                    "length": d.length,
                    "line": line,
                    "column": col,
                    "category": d.category.value,
                    "code": d.code,
                    "source": d.source,
                    "message": d.message_text,
                }
            )
    return json.dumps(items, indent=2, ensure_ascii=False)
