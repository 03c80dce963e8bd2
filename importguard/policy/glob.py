"""Glob matching for file paths and import specifiers.

Semantics:
- ``{a,b}`` alternation (nested) and ``{1..3}`` / ``{a..c}`` sequences are
  expanded before matching; a brace group that is neither stays literal.
- Candidate and pattern are compared segment by segment (``/``). A ``**``
  segment matches zero or more segments; other segments use ``fnmatchcase``
  (``*``, ``?``, ``[...]``, ``[!...]`` / ``[^...]``). Case-sensitive.
- A segment starting with ``.`` only matches a pattern segment that starts
  with ``.``, so ``*`` and ``**`` skip dot-segments and relative specifiers.
- Empty pattern matches only the empty string, ``#...`` matches nothing,
  leading ``!`` negates.
- Runs of ``**`` count as one, and a pattern expanding to more than
  MAX_BRACE_EXPANSIONS alternatives matches nothing.

``matches`` never raises: a pattern that cannot be compiled matches nothing.
"""

from __future__ import annotations

import re
from fnmatch import fnmatchcase
from functools import lru_cache

from importguard.logging import get_logger

_SPECIAL = "*?[]\\"
_ALPHA_RANGE = re.compile(r"^([a-zA-Z])\.\.([a-zA-Z])(?:\.\.(-?\d+))?$")
_NUMERIC_RANGE = re.compile(r"^(-?\d+)\.\.(-?\d+)(?:\.\.(-?\d+))?$")

MAX_BRACE_EXPANSIONS = 1024


def matches(candidate: str, pattern: str) -> bool:
    """True if ``candidate`` matches glob ``pattern``."""
    try:
        return _matches(candidate, pattern)
    except (re.error, RecursionError, ValueError) as exc:
        get_logger("glob").debug("glob pattern %r rejected: %s", pattern, exc)
        return False


def _matches(candidate: str, pattern: str) -> bool:
    if not pattern:
        return candidate == ""
    if pattern.startswith("#"):
        return False
    negated = False
    while pattern.startswith("!"):
        negated = not negated
        pattern = pattern[1:]
    names = candidate.split("/")
    hit = any(_match_segments(names, _collapse_globstars(p.split("/"))) for p in _expand(pattern))
    return hit != negated


def expand_braces(pattern: str) -> list[str]:
    """Expand the brace groups of ``pattern`` into plain glob patterns.

    Raises ValueError when the expansion exceeds MAX_BRACE_EXPANSIONS.
    """
    return list(_expand(pattern))


@lru_cache(maxsize=512)
def _expand(pattern: str) -> tuple[str, ...]:
    start, end, parts = _find_brace_group(pattern)
    if start < 0:
        return (pattern,)
    prefix, suffix = pattern[:start], pattern[end + 1 :]
    expanded: list[str] = []
    for part in parts:
        expanded.extend(_expand(prefix + part + suffix))
        if len(expanded) > MAX_BRACE_EXPANSIONS:
            raise ValueError(f"brace expansion exceeds {MAX_BRACE_EXPANSIONS} patterns")
    return tuple(expanded)


def _find_brace_group(pattern: str) -> tuple[int, int, list[str]]:
    i = 0
    while i < len(pattern):
        ch = pattern[i]
        if ch == "\\":
            i += 2
            continue
        if ch == "{":
            close = _matching_brace(pattern, i)
            if close > 0:
                body = pattern[i + 1 : close]
                parts = _split_top_level(body)
                if len(parts) > 1:
                    return i, close, parts
                sequence = _expand_sequence(body)
                if sequence:
                    return i, close, sequence
        i += 1
    return -1, -1, []


def _matching_brace(pattern: str, open_at: int) -> int:
    depth = 0
    i = open_at
    while i < len(pattern):
        ch = pattern[i]
        if ch == "\\":
            i += 2
            continue
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return i
        i += 1
    return -1


def _split_top_level(body: str) -> list[str]:
    parts: list[str] = []
    depth = 0
    current: list[str] = []
    i = 0
    while i < len(body):
        ch = body[i]
        if ch == "\\" and i + 1 < len(body):
            current.append(body[i : i + 2])
            i += 2
            continue
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
        elif ch == "," and depth == 0:
            parts.append("".join(current))
            current = []
            i += 1
            continue
        current.append(ch)
        i += 1
    parts.append("".join(current))
    return parts


def _expand_sequence(body: str) -> list[str]:
    numeric = _NUMERIC_RANGE.match(body)
    if numeric:
        first, last = int(numeric.group(1)), int(numeric.group(2))
        step = abs(int(numeric.group(3) or 1)) or 1
        if first > last:
            step = -step
        return [str(n) for n in _bounded_range(first, last, step)]
    alpha = _ALPHA_RANGE.match(body)
    if alpha:
        first, last = ord(alpha.group(1)), ord(alpha.group(2))
        step = abs(int(alpha.group(3) or 1)) or 1
        if first > last:
            step = -step
        return [chr(n) for n in _bounded_range(first, last, step)]
    return []


def _bounded_range(first: int, last: int, step: int) -> range:
    values = range(first, last + (1 if step > 0 else -1), step)
    if len(values) > MAX_BRACE_EXPANSIONS:
        raise ValueError(f"brace sequence exceeds {MAX_BRACE_EXPANSIONS} items")
    return values


def _collapse_globstars(parts: list[str]) -> list[str]:
    collapsed: list[str] = []
    for part in parts:
        if part == "**" and collapsed and collapsed[-1] == "**":
            continue
        collapsed.append(part)
    return collapsed


def _match_segments(names: list[str], parts: list[str]) -> bool:
    memo: dict[tuple[int, int], bool] = {}

    def match(i: int, j: int) -> bool:
        key = (i, j)
        if key not in memo:
            memo[key] = _match_from(i, j)
        return memo[key]

    def _match_from(i: int, j: int) -> bool:
        if j == len(parts):
            return i == len(names)
        if parts[j] == "**":
            for index in range(i, len(names) + 1):
                if match(index, j + 1):
                    return True
                if index < len(names) and names[index].startswith("."):
                    return False
            return False
        if i == len(names):
            return False
        return _match_segment(names[i], parts[j]) and match(i + 1, j + 1)

    return match(0, 0)


def _match_segment(name: str, part: str) -> bool:
    if name.startswith(".") and not part.startswith("."):
        return False
    return fnmatchcase(name, _to_fnmatch(part))


def _to_fnmatch(part: str) -> str:
    """Rewrite ``\\x`` escapes and ``[^...]`` classes into fnmatch syntax."""
    if "\\" not in part and "[^" not in part:
        return part
    out: list[str] = []
    i = 0
    while i < len(part):
        ch = part[i]
        if ch == "\\" and i + 1 < len(part):
            nxt = part[i + 1]
            out.append(f"[{nxt}]" if nxt in _SPECIAL else nxt)
            i += 2
            continue
        if ch == "[" and part.startswith("[^", i):
            out.append("[!")
            i += 2
            continue
        out.append(ch)
        i += 1
    return "".join(out)
