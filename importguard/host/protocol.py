"""Host-side contract: the language service importguard plugs into."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Protocol, runtime_checkable

from importguard.policy.models import ImportOccurrence


class DiagnosticCategory(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    MESSAGE = "message"


@dataclass(frozen=True)
class SourceFile:
    """A parsed file as the host sees it: identity, text and import occurrences."""

    file_name: str
    text: str = ""
    imports: tuple[ImportOccurrence, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Diagnostic:
    file_name: str
    start: int
    length: int
    message_text: str
    category: DiagnosticCategory
    code: int
    source: Optional[str] = None


@runtime_checkable
class LanguageService(Protocol):
    """
    Minimal host language service.

    get_source_file returns None when the host has no parsed file for the name.
    get_semantic_diagnostics returns the host's own diagnostics for the file.
    """

    def get_source_file(self, file_name: str) -> Optional[SourceFile]:
        ...

    def get_semantic_diagnostics(self, file_name: str) -> List[Diagnostic]:
        ...
