"""
Reference host for Python projects (AST-based).

Parses a Python file and reports each import as an ImportOccurrence whose
range covers exactly the module specifier in the source text:

- `import a.b as c`                 -> "a.b"
- `from ..pkg.mod import x`         -> "..pkg.mod"   (`from . import x` -> ".")
- `importlib.import_module("m")`    -> "m"           (constant string argument)
- `__import__("m")`                 -> "m"

Offsets are character offsets into the file text. When the token cannot be
located reliably (unusual spacing, implicit string concatenation, ...), the
occurrence gets the -1 sentinel and is skipped by the policy engine.
"""

from __future__ import annotations

import ast
import os
import re
from pathlib import Path
from typing import List, Optional

from importguard.policy.models import ImportOccurrence

from .protocol import Diagnostic, DiagnosticCategory, SourceFile

PYTHON_SOURCE = "python"

_NEWLINE = re.compile(r"\r\n|\r|\n")
_FROM_GAP = re.compile(r"(?:[ \t\f]|\\\r?\n)+")
_DYNAMIC_IMPORT_NAMES = frozenset({"import_module", "__import__"})
_BOM = "\ufeff"


def _line_starts(text: str) -> list[int]:
    return [0] + [m.end() for m in _NEWLINE.finditer(text)]


class _ImportCollector(ast.NodeVisitor):
    """Collects import occurrences with character offsets."""

    def __init__(self, text: str) -> None:
        self.text = text
        self._starts = _line_starts(text)
        self.found: list[tuple[int, int, ImportOccurrence]] = []

    def _offset(self, lineno: int, col_offset: int) -> int:
        line_start = self._starts[lineno - 1]
        line_end = self._starts[lineno] if lineno < len(self._starts) else len(self.text)
        line_bytes = self.text[line_start:line_end].encode("utf-8")
        return line_start + len(line_bytes[:col_offset].decode("utf-8", errors="ignore"))

    def _add(self, node: ast.AST, specifier: str, start: int, end: int) -> None:
        self.found.append(
            (node.lineno, node.col_offset, ImportOccurrence(specifier=specifier, range_start=start, range_end=end))
        )

    def _add_located(self, node: ast.AST, specifier: str, start: int) -> None:
        end = start + len(specifier)
        if start >= 0 and self.text[start:end] == specifier:
            self._add(node, specifier, start, end)
        else:
            self._add(node, specifier, -1, -1)

    def visit_Import(self, node: ast.Import) -> None:
        for alias in node.names:
            lineno = getattr(alias, "lineno", None)
            if lineno is None:
                self._add(node, alias.name, -1, -1)
                continue
            self._add_located(alias, alias.name, self._offset(lineno, alias.col_offset))

    def visit_ImportFrom(self, node: ast.ImportFrom) -> None:
        specifier = "." * (node.level or 0) + (node.module or "")
        keyword_at = self._offset(node.lineno, node.col_offset)
        gap = _FROM_GAP.match(self.text, keyword_at + len("from"))
        if gap is None:
            self._add(node, specifier, -1, -1)
            return
        self._add_located(node, specifier, gap.end())

    def visit_Call(self, node: ast.Call) -> None:
        if _is_dynamic_import(node.func) and node.args:
            arg = node.args[0]
            if isinstance(arg, ast.Constant) and isinstance(arg.value, str):
                self._add_string_argument(node, arg)
        self.generic_visit(node)

    def _add_string_argument(self, node: ast.Call, arg: ast.Constant) -> None:
        value = arg.value
        if arg.end_lineno is None or arg.end_col_offset is None or arg.end_lineno != arg.lineno:
            self._add(node, value, -1, -1)
            return
        start = self._offset(arg.lineno, arg.col_offset)
        end = self._offset(arg.end_lineno, arg.end_col_offset)
        raw = self.text[start:end]
        if len(raw) >= 2 and raw[0] in "'\"" and raw[-1] == raw[0] and raw[1:-1] == value:
            self._add(node, value, start + 1, end - 1)
        else:
            self._add(node, value, -1, -1)


def _is_dynamic_import(func: ast.expr) -> bool:
    if isinstance(func, ast.Name):
        return func.id in _DYNAMIC_IMPORT_NAMES
    if isinstance(func, ast.Attribute):
        return func.attr == "import_module" and isinstance(func.value, ast.Name) and func.value.id == "importlib"
    return False


def extract_imports(text: str) -> list[ImportOccurrence]:
    """Return import occurrences of Python source ``text`` in source order ([] on syntax error).

    A leading byte order mark is skipped; offsets still index into ``text``.
    """
    if text.startswith(_BOM):
        return [_shifted(occurrence, len(_BOM)) for occurrence in extract_imports(text[len(_BOM) :])]
    try:
        tree = ast.parse(text)
    except (SyntaxError, ValueError):
        return []
    collector = _ImportCollector(text)
    collector.visit(tree)
    ordered = sorted(collector.found, key=lambda item: (item[0], item[1]))
    return [occurrence for _, _, occurrence in ordered]


def _shifted(occurrence: ImportOccurrence, by: int) -> ImportOccurrence:
    if not occurrence.position_known:
        return occurrence
    return ImportOccurrence(
        specifier=occurrence.specifier,
        range_start=occurrence.range_start + by,
        range_end=occurrence.range_end + by,
    )


class PythonLanguageService:
    """
    LanguageService over the Python files of a project root.

    File identity is the posix path relative to root. Symlinks are not followed
    for the file itself, so a link inside root keeps its in-tree name; absolute
    names outside root keep their posix form.
    Files are read as UTF-8; a byte order mark is dropped.
    """

    def __init__(self, root: Path) -> None:
        self.root = Path(root).resolve()

    def _resolve(self, file_name: str) -> Path:
        path = Path(file_name)
        return path if path.is_absolute() else self.root / path

    def file_identity(self, file_name: str) -> str:
        path = self._resolve(file_name)
        for candidate in (Path(os.path.normpath(path)), path.parent.resolve() / path.name):
            try:
                return candidate.relative_to(self.root).as_posix()
            except ValueError:
                continue
        return path.as_posix()

    def _read(self, file_name: str) -> Optional[str]:
        try:
            return self._resolve(file_name).read_text(encoding="utf-8-sig")
        except (OSError, UnicodeDecodeError):
            return None

    def get_source_file(self, file_name: str) -> Optional[SourceFile]:
        text = self._read(file_name)
        if text is None:
            return None
        return SourceFile(
            file_name=self.file_identity(file_name),
            text=text,
            imports=tuple(extract_imports(text)),
        )

    def get_semantic_diagnostics(self, file_name: str) -> List[Diagnostic]:
        text = self._read(file_name)
        if text is None:
            return []
        try:
            ast.parse(text[len(_BOM) :] if text.startswith(_BOM) else text)
        except (SyntaxError, ValueError) as exc:
            start = 0
            if getattr(exc, "lineno", None):
                starts = _line_starts(text)
                if exc.lineno <= len(starts):
                    start = starts[exc.lineno - 1] + max((exc.offset or 1) - 1, 0)
            return [
                Diagnostic(
                    file_name=self.file_identity(file_name),
                    start=min(start, len(text)),
                    length=0,
                    message_text=f"{type(exc).__name__}: {getattr(exc, 'msg', None) or exc}",
                    category=DiagnosticCategory.ERROR,
                    code=0,
                    source=PYTHON_SOURCE,
                )
            ]
        return []
