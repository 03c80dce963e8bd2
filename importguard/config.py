"""Policy configuration loading and validation.

Sources (first hit wins):
1. explicit path (``--config``), TOML or ``.json``;
2. ``IMPORTGUARD_CONFIG`` environment variable;
3. ``<root>/.importguard.toml``;
4. ``<root>/pyproject.toml`` ``[tool.importguard]``.

Accepted table shape::

    name = "importguard"            # optional source identifier

    [imports]                       # file glob -> allowed import globs
    "src/ui/**" = ["react", "./*.css"]

    [[rules]]                       # same thing, list form
    file_pattern = "src/api/**"
    allowed_imports = ["fastapi", "pydantic.*"]

``filePattern`` / ``allowedImportPatterns`` keys are accepted in the list form.
"""

from __future__ import annotations

import json
import os
import tomllib
from pathlib import Path
from typing import Any, Mapping

from importguard.logging import get_logger
from importguard.policy.models import DEFAULT_SOURCE, PolicyConfig, PolicyRule

LOCAL_CONFIG_NAME = ".importguard.toml"
PYPROJECT_TABLE = ("tool", "importguard")

_FILE_PATTERN_KEYS = ("file_pattern", "filePattern")
_ALLOWED_KEYS = ("allowed_imports", "allowedImportPatterns", "allowed_import_patterns")


class PolicyConfigError(ValueError):
    """Raised when a policy configuration cannot be read or has the wrong shape."""


def _log():
    return get_logger("config")


def _read_document(path: Path) -> dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise PolicyConfigError(f"cannot read config {path}: {exc}") from exc
    try:
        if path.suffix == ".json":
            data = json.loads(text)
        else:
            data = tomllib.loads(text)
    except (json.JSONDecodeError, tomllib.TOMLDecodeError) as exc:
        raise PolicyConfigError(f"invalid config {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise PolicyConfigError(f"invalid config {path}: top level must be a table/object")
    return data


def _pattern_list(value: Any, where: str) -> tuple[str, ...]:
    if not isinstance(value, (list, tuple)):
        raise PolicyConfigError(f"{where}: expected a list of glob strings, got {type(value).__name__}")
    patterns: list[str] = []
    for item in value:
        if not isinstance(item, str) or not item.strip():
            raise PolicyConfigError(f"{where}: import patterns must be non-empty strings, got {item!r}")
        patterns.append(item)
    return tuple(patterns)


def _first_key(entry: Mapping[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        if key in entry:
            return entry[key]
    return None


def parse_policy_config(data: Mapping[str, Any], *, name: str | None = None) -> PolicyConfig:
    """Validate a decoded config table and build a PolicyConfig."""
    rules: list[PolicyRule] = []

    imports = data.get("imports")
    if imports is not None:
        if not isinstance(imports, Mapping):
            raise PolicyConfigError("imports: expected a table mapping file globs to lists")
        for file_pattern, allowed in imports.items():
            if not isinstance(file_pattern, str) or not file_pattern.strip():
                raise PolicyConfigError(f"imports: file patterns must be non-empty strings, got {file_pattern!r}")
            rules.append(PolicyRule(file_pattern, _pattern_list(allowed, f"imports.{file_pattern}")))

    listed = data.get("rules")
    if listed is not None:
        if not isinstance(listed, list):
            raise PolicyConfigError("rules: expected a list of rule tables")
        for index, entry in enumerate(listed):
            where = f"rules[{index}]"
            if not isinstance(entry, Mapping):
                raise PolicyConfigError(f"{where}: expected a table")
            file_pattern = _first_key(entry, _FILE_PATTERN_KEYS)
            if not isinstance(file_pattern, str) or not file_pattern.strip():
                raise PolicyConfigError(f"{where}: file_pattern must be a non-empty string")
            allowed = _first_key(entry, _ALLOWED_KEYS)
            rules.append(PolicyRule(file_pattern, _pattern_list(allowed if allowed is not None else [], where)))

    source = name or data.get("name") or DEFAULT_SOURCE
    if not isinstance(source, str):
        raise PolicyConfigError(f"name: expected a string, got {type(source).__name__}")
    return PolicyConfig(rules=tuple(rules), name=source)


def _table_from_pyproject(path: Path) -> dict[str, Any] | None:
    data = _read_document(path)
    table: Any = data
    for key in PYPROJECT_TABLE:
        if not isinstance(table, dict) or key not in table:
            return None
        table = table[key]
    if not isinstance(table, dict):
        raise PolicyConfigError(f"{path}: [tool.importguard] must be a table")
    return table


def find_config_table(root: Path, config_path: Path | None = None) -> tuple[Path, dict[str, Any]] | None:
    """Locate the config table for ``root``. Returns (source path, table) or None."""
    explicit = config_path
    if explicit is None:
        env_path = os.environ.get("IMPORTGUARD_CONFIG", "").strip()
        if env_path:
            explicit = Path(env_path)
    if explicit is not None:
        if not explicit.is_absolute() and not explicit.exists():
            explicit = root / explicit
        if explicit.name == "pyproject.toml":
            table = _table_from_pyproject(explicit)
            if table is None:
                raise PolicyConfigError(f"{explicit}: no [tool.importguard] table")
            return explicit, table
        return explicit, _read_document(explicit)

    local = root / LOCAL_CONFIG_NAME
    if local.exists():
        return local, _read_document(local)

    pyproject = root / "pyproject.toml"
    if pyproject.exists():
        table = _table_from_pyproject(pyproject)
        if table is not None:
            return pyproject, table
    return None


def load_policy_config(root: Path, config_path: Path | None = None) -> PolicyConfig:
    """Load and validate the policy for project ``root``.

    Raises PolicyConfigError on unreadable or malformed configuration. With no
    configuration at all an empty policy is returned, so every import is reported.
    """
    root = Path(root).resolve()
    found = find_config_table(root, config_path)
    name_override = os.environ.get("IMPORTGUARD_SOURCE", "").strip() or None
    if found is None:
        _log().warning("importguard: no policy configured under %s; every import will be reported", root)
        return PolicyConfig(name=name_override or DEFAULT_SOURCE)
    source_path, table = found
    config = parse_policy_config(table, name=name_override)
    _log().debug("importguard: loaded %d rule(s) from %s", len(config.rules), source_path)
    return config
