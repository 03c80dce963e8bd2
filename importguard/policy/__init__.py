"""Import policy engine: glob matching and per-file evaluation."""

from .evaluator import allowed_imports_for, evaluate, is_import_allowed
from .glob import expand_braces, matches
from .models import (
    DEFAULT_SOURCE,
    FileIdentity,
    ImportOccurrence,
    PolicyConfig,
    PolicyRule,
    Severity,
    Violation,
    ViolationCode,
)

__all__ = [
    "DEFAULT_SOURCE",
    "FileIdentity",
    "ImportOccurrence",
    "PolicyConfig",
    "PolicyRule",
    "Severity",
    "Violation",
    "ViolationCode",
    "allowed_imports_for",
    "evaluate",
    "expand_braces",
    "is_import_allowed",
    "matches",
]
