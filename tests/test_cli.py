"""Tests for importguard CLI commands."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from importguard.logging import configure_cli_logging, get_logger
from importguard_cli import main

PYPROJECT = """
[tool.importguard.imports]
"pkg/**" = ["json", "pkg.*"]
"""


def _write(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def _project(tmp_path: Path, body: str) -> Path:
    _write(tmp_path / "pyproject.toml", PYPROJECT)
    _write(tmp_path / "pkg" / "core.py", body)
    return tmp_path


def test_check_clean_project_exits_zero(tmp_path: Path, capsys) -> None:
    root = _project(tmp_path, "import json\nfrom pkg.util import x\n")
    assert main(["check", str(root), "-q"]) == 0
    assert "no policy violations" in capsys.readouterr().out


def test_check_reports_violations(tmp_path: Path, capsys) -> None:
    root = _project(tmp_path, "import json\nimport subprocess\n")
    assert main(["check", str(root), "-q"]) == 1
    out = capsys.readouterr().out
    assert "pkg/core.py:2:8" in out
    assert "'subprocess'" in out
    assert "pkg.*" in out


def test_check_json_format(tmp_path: Path, capsys) -> None:
    root = _project(tmp_path, "import yaml\n")
    assert main(["check", str(root), "--format", "json", "-q"]) == 1
    (item,) = json.loads(capsys.readouterr().out)
    assert item["file"] == "pkg/core.py"
    assert item["code"] == 2
    assert item["source"] == "importguard"


def test_check_bad_config_exits_two(tmp_path: Path, capsys) -> None:
    _write(tmp_path / ".importguard.toml", '[imports]\n"pkg/**" = "json"\n')
    assert main(["check", str(tmp_path), "-q"]) == 2
    assert capsys.readouterr().out == ""


def test_check_missing_path_exits_two(tmp_path: Path) -> None:
    assert main(["check", str(tmp_path / "nope"), "-q"]) == 2


def test_explain_lists_allowed_patterns(tmp_path: Path, capsys) -> None:
    root = _project(tmp_path, "")
    assert main(["explain", "pkg/core.py", str(root), "-q"]) == 0
    out = capsys.readouterr().out
    assert out.splitlines()[0] == "pkg/core.py"
    assert "    - json" in out
    assert "    - pkg.*" in out


def test_explain_unconfigured_file(tmp_path: Path, capsys) -> None:
    root = _project(tmp_path, "")
    assert main(["explain", "scripts/run.py", str(root), "-q"]) == 0
    assert "No imports specified" in capsys.readouterr().out


def test_no_command_prints_help(capsys) -> None:
    assert main([]) == 0
    assert "importguard check" in capsys.readouterr().out


def test_logging_children_follow_cli_flags(monkeypatch) -> None:
    monkeypatch.setenv("IMPORTGUARD_LOG_LEVEL", "ERROR")
    assert get_logger("glob").name == "importguard.glob"
    configure_cli_logging(verbose=True)
    assert get_logger("glob").getEffectiveLevel() == logging.DEBUG
    configure_cli_logging(quiet=True)
    assert get_logger("config").getEffectiveLevel() == logging.WARNING
    configure_cli_logging()
    assert get_logger("cli").getEffectiveLevel() == logging.ERROR
    root = logging.getLogger("importguard")
    assert len(root.handlers) == 1
    assert root.propagate is False
