"""Pytest configuration. Ensures project root is in sys.path for importguard_cli; isolates env and logging."""
import logging
from pathlib import Path

import pytest


@pytest.fixture(scope="session", autouse=True)
def _add_project_root_to_path():
    root = Path(__file__).resolve().parent.parent
    import sys
    if str(root) not in sys.path:
        sys.path.insert(0, str(root))


@pytest.fixture(autouse=True)
def _clean_importguard_env(monkeypatch):
    for name in ("IMPORTGUARD_CONFIG", "IMPORTGUARD_SOURCE", "IMPORTGUARD_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    yield
    logger = logging.getLogger("importguard")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True
