"""Handlers for importguard CLI commands (check, explain, help)."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any

from importguard.checks.project import (
    collect_policy_violations,
    diagnostics_to_json,
    format_diagnostics,
)
from importguard.config import PolicyConfigError, load_policy_config
from importguard.host.python_source import PythonLanguageService
from importguard.logging import get_logger
from importguard.policy.evaluator import UNCONFIGURED_MESSAGE, allowed_imports_for
from importguard.policy.glob import matches
from importguard.policy.models import PolicyConfig

EXIT_OK = 0
EXIT_VIOLATIONS = 1
EXIT_USAGE = 2


def _clog() -> Any:
    return get_logger("cli")


def _err(msg: str) -> None:
    _clog().error("importguard: %s", msg)


def _check_path(path: Path, must_be_dir: bool = True) -> int:
    """Return 0 if path is valid, EXIT_USAGE and log error otherwise."""
    if not path.exists():
        _err(f"path does not exist: {path}")
        return EXIT_USAGE
    if must_be_dir and not path.is_dir():
        _err(f"not a directory: {path}")
        return EXIT_USAGE
    return EXIT_OK


def _load_config(root: Path, args: Any) -> PolicyConfig | None:
    try:
        return load_policy_config(root, getattr(args, "config", None))
    except PolicyConfigError as exc:
        _err(str(exc))
        return None


def handle_help(parser: argparse.ArgumentParser) -> int:
    print(
        "importguard: per-file import policy checks\n"
        "\n"
        "  importguard check [path]      report imports not allowed by the policy\n"
        "  importguard explain FILE      show which imports FILE may use\n"
        "\n"
        "Policy lives in [tool.importguard.imports] (pyproject.toml) or .importguard.toml:\n"
        '  "src/ui/**" = ["react", "./*.css"]\n'
    )
    parser.print_usage()
    return EXIT_OK


def handle_check(args: Any) -> int:
    root = Path(args.path).resolve()
    code = _check_path(root)
    if code:
        return code
    config = _load_config(root, args)
    if config is None:
        return EXIT_USAGE
    reports = collect_policy_violations(root, config, include_tests=bool(getattr(args, "include_tests", False)))
    if getattr(args, "format", "text") == "json":
        print(diagnostics_to_json(reports))
    else:
        text = format_diagnostics(reports)
        print(text if text else f"importguard: no policy violations ({len(config.rules)} rule(s))")
    return EXIT_VIOLATIONS if reports else EXIT_OK


def handle_explain(args: Any) -> int:
    root = Path(args.path).resolve()
    code = _check_path(root)
    if code:
        return code
    config = _load_config(root, args)
    if config is None:
        return EXIT_USAGE
    file_id = PythonLanguageService(root).file_identity(str(args.file))
    print(file_id)
    applicable = [rule for rule in config.rules if matches(file_id, rule.file_pattern)]
    for rule in applicable:
        patterns = ", ".join(rule.allowed_import_patterns) or "(empty)"
        print(f"  rule {rule.file_pattern!r}: {patterns}")
    allowed = allowed_imports_for(config, file_id)
    if not allowed:
        print(f"  {UNCONFIGURED_MESSAGE}")
        return EXIT_OK
    print("  allowed imports:")
    for pattern in allowed:
        print(f"    - {pattern}")
    return EXIT_OK
