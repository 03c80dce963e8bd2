"""
importguard CLI

Entry point: argument parsing and dispatch only.
All command logic lives in importguard.cli.handlers.
"""

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

from dotenv import load_dotenv

from importguard import __version__
from importguard.cli import handlers
from importguard.logging import configure_cli_logging


def _add_common_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        help="Policy file (.toml, .json or pyproject.toml); default: discover under project root",
    )
    parser.add_argument("--quiet", "-q", action="store_true", help="Only warnings and errors on stderr")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging on stderr")


def _build_parser() -> argparse.ArgumentParser:
    """Configure top-level CLI parser and subcommands."""
    parser = argparse.ArgumentParser(
        prog="importguard",
        description="importguard: per-file import policy checks",
        epilog="Commands: check | explain. Use importguard help for an overview.",
    )
    parser.add_argument("--version", "-V", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command")

    check_parser = subparsers.add_parser("check", help="Report imports not allowed by the policy")
    check_parser.add_argument(
        "path",
        nargs="?",
        default=".",
        type=Path,
        help="Project root (default: .)",
    )
    check_parser.add_argument(
        "--format", "-f",
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)",
    )
    check_parser.add_argument("--include-tests", action="store_true", help="Also check files under tests/")
    _add_common_options(check_parser)

    explain_parser = subparsers.add_parser("explain", help="Show which imports a file may use")
    explain_parser.add_argument(
        "file",
        type=str,
        help="File path relative to project root (e.g. src/ui/button.py)",
    )
    explain_parser.add_argument(
        "path",
        nargs="?",
        default=".",
        type=Path,
        help="Project root (default: .)",
    )
    _add_common_options(explain_parser)

    subparsers.add_parser("help", help="Show importguard command overview")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    load_dotenv(Path.cwd() / ".env")
    parser = _build_parser()
    args = parser.parse_args(argv)
    configure_cli_logging(quiet=getattr(args, "quiet", False), verbose=getattr(args, "verbose", False))

    if args.command is None:
        return handlers.handle_help(parser)

    dispatch = {
        "help": lambda: handlers.handle_help(parser),
        "check": lambda: handlers.handle_check(args),
        "explain": lambda: handlers.handle_explain(args),
    }
    return dispatch[args.command]()


if __name__ == "__main__":
    sys.exit(main())
