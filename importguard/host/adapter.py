"""Language service decorator that adds import policy diagnostics.

Every attribute of the wrapped service is forwarded unchanged except
``get_semantic_diagnostics``, which appends the policy violations for the file
after dropping any diagnostics previously stamped with this engine's source.
"""

from __future__ import annotations

from typing import Any, List, Optional

from importguard.logging import get_logger
from importguard.policy.evaluator import evaluate
from importguard.policy.models import FileIdentity, PolicyConfig, Violation

from .protocol import Diagnostic, DiagnosticCategory, LanguageService, SourceFile


def violation_to_diagnostic(violation: Violation) -> Diagnostic:
    return Diagnostic(
        file_name=violation.file_id,
        start=violation.range_start,
        length=violation.length,
        message_text=violation.message,
        category=DiagnosticCategory(violation.severity.value),
        code=int(violation.code),
        source=violation.source,
    )


class PolicyLanguageService:
    """Wraps a LanguageService; only semantic diagnostics are augmented."""

    def __init__(self, service: LanguageService, config: PolicyConfig) -> None:
        self._service = service
        self._config = config

    def __getattr__(self, name: str) -> Any:
        return getattr(self._service, name)

    @property
    def config(self) -> PolicyConfig:
        return self._config

    def get_source_file(self, file_name: str) -> Optional[SourceFile]:
        return self._service.get_source_file(file_name)

    def get_semantic_diagnostics(self, file_name: str) -> List[Diagnostic]:
        existing = [
            d for d in self._service.get_semantic_diagnostics(file_name)
            if d.source != self._config.name
        ]
        source_file = self._service.get_source_file(file_name)
        if source_file is None:
            return existing
        violations = evaluate(
            self._config,
            FileIdentity(path=source_file.file_name),
            source_file.imports,
        )
        if violations:
            get_logger("host").debug(
                "importguard: %d policy violation(s) in %s", len(violations), source_file.file_name
            )
        return existing + [violation_to_diagnostic(v) for v in violations]


def create_plugin(service: LanguageService, config: PolicyConfig) -> PolicyLanguageService:
    """Host entry point: wrap ``service`` with the import policy for this session."""
    return PolicyLanguageService(service, config)
