"""
Logging for importguard.

Everything logs under the ``importguard`` logger through children named after
the emitting layer: ``cli``, ``config``, ``host``, ``checks`` and ``glob``
(``get_logger("glob")`` returns ``importguard.glob``). Messages are plain
``%(message)s`` lines on stderr.

Level: ``IMPORTGUARD_LOG_LEVEL`` (e.g. ``DEBUG``, default ``INFO``), overridden
by the CLI ``--verbose`` (DEBUG) and ``--quiet`` (WARNING) flags. The stderr
handler is installed once by ``configure_cli_logging``; library callers that
never run the CLI get their own logging configuration through propagation.
"""

from __future__ import annotations

import logging
import os
import sys

_configured = False


def _resolve_level() -> int:
    raw = os.environ.get("IMPORTGUARD_LOG_LEVEL", "").strip().upper()
    if raw:
        return getattr(logging, raw, logging.INFO)
    return logging.INFO


def configure_cli_logging(*, quiet: bool = False, verbose: bool = False) -> None:
    """Set importguard.* logger levels from CLI flags. --quiet/--verbose override env."""
    global _configured
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = _resolve_level()
    root = logging.getLogger("importguard")
    root.setLevel(level)
    if not root.handlers:
        h = logging.StreamHandler(sys.stderr)
        h.setFormatter(logging.Formatter("%(message)s"))
        root.addHandler(h)
        root.propagate = False
    for child in ("cli", "config", "host", "checks", "glob"):
        logging.getLogger(f"importguard.{child}").setLevel(level)
    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Return logger ``importguard.<name>``; messages go through the importguard root handler."""
    logger = logging.getLogger(f"importguard.{name}")
    if not _configured:
        logger.setLevel(_resolve_level())
    return logger
