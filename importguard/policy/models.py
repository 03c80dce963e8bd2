"""Import policy data model: rules, file identity, import occurrences, violations."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, Mapping, Sequence

DEFAULT_SOURCE = "importguard"


class Severity(str, Enum):
    ERROR = "error"


class ViolationCode(IntEnum):
    UNCONFIGURED = 1
    DISALLOWED = 2


@dataclass(frozen=True)
class PolicyRule:
    file_pattern: str
    allowed_import_patterns: tuple[str, ...] = ()


@dataclass(frozen=True)
class PolicyConfig:
    """Policy table for one analysis session.

    Rule order does not change which imports are allowed (all matching rules
    are unioned) but it fixes the order of patterns in violation messages.
    """

    rules: tuple[PolicyRule, ...] = ()
    name: str = DEFAULT_SOURCE

    @classmethod
    def from_imports(
        cls,
        imports: Mapping[str, Sequence[str]],
        *,
        name: str = DEFAULT_SOURCE,
    ) -> "PolicyConfig":
        """Build from the ``{file_glob: [import_glob, ...]}`` mapping form."""
        rules = tuple(
            PolicyRule(file_pattern=pattern, allowed_import_patterns=tuple(allowed))
            for pattern, allowed in imports.items()
        )
        return cls(rules=rules, name=name)


@dataclass(frozen=True)
class FileIdentity:
    path: str


@dataclass(frozen=True)
class ImportOccurrence:
    specifier: str
    range_start: int
    range_end: int

    @property
    def position_known(self) -> bool:
        return self.range_start >= 0


@dataclass(frozen=True)
class Violation:
    file_id: str
    range_start: int
    range_end: int
    message: str
    code: ViolationCode
    source: str
    severity: Severity = field(default=Severity.ERROR)

    @property
    def length(self) -> int:
        return self.range_end - self.range_start

    def to_dict(self) -> dict[str, Any]:
        return {
            "file": self.file_id,
            "start": self.range_start,
            "end": self.range_end,
            "message": self.message,
            "severity": self.severity.value,
            "code": int(self.code),
            "source": self.source,
        }
