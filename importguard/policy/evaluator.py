"""Import policy evaluation for a single file.

Pure function over (config, file, imports): no I/O, no state kept between
calls, same inputs give the same violations in the same order.
"""

from __future__ import annotations

from typing import Iterable

from .glob import matches
from .models import (
    FileIdentity,
    ImportOccurrence,
    PolicyConfig,
    Severity,
    Violation,
    ViolationCode,
)

DISALLOWED_MESSAGE = "Import not allowed. Only imports below allowed from this file: \n{allowed}\n"
UNCONFIGURED_MESSAGE = (
    "No imports specified for current file. "
    "Use `imports` option in importguard config ([tool.importguard.imports] in pyproject.toml)"
)


def allowed_imports_for(config: PolicyConfig, file_path: str) -> list[str]:
    """Union of allowed import patterns of every rule whose file pattern matches.

    Order is rule order, then pattern order; duplicates are kept.
    """
    allowed: list[str] = []
    for rule in config.rules:
        if matches(file_path, rule.file_pattern):
            allowed.extend(rule.allowed_import_patterns)
    return allowed


def is_import_allowed(specifier: str, allowed: list[str]) -> bool:
    # An empty allow-list permits nothing.
    return any(matches(specifier, pattern) for pattern in allowed)


def evaluate(
    config: PolicyConfig,
    file: FileIdentity,
    imports: Iterable[ImportOccurrence],
) -> list[Violation]:
    """Return one violation per disallowed import, in input order.

    Occurrences with an unknown position (``range_start < 0``) are skipped.
    Code 2 lists the allowed patterns; code 1 means nothing is configured
    for this file (no matching rule, or only empty allow-lists).
    """
    allowed = allowed_imports_for(config, file.path)
    if allowed:
        code = ViolationCode.DISALLOWED
        message = DISALLOWED_MESSAGE.format(allowed=", \n".join(allowed))
    else:
        code = ViolationCode.UNCONFIGURED
        message = UNCONFIGURED_MESSAGE

    violations: list[Violation] = []
    for occurrence in imports:
        if not occurrence.position_known:
            continue
        if is_import_allowed(occurrence.specifier, allowed):
            continue
        violations.append(
            Violation(
                file_id=file.path,
                range_start=occurrence.range_start,
                range_end=max(occurrence.range_start, occurrence.range_end),
                message=message,
                code=code,
                source=config.name,
                severity=Severity.ERROR,
            )
        )
    return violations
