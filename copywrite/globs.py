# Copyright (C) 2026 Copywrite Authors
# SPDX-License-Identifier: AGPL-3.0-or-later
"""Doublestar glob matching for ignore patterns.

``*`` stays inside one path segment, ``**`` as a whole segment crosses any
number of directories, ``?`` is one character, ``[...]`` a character class and
``{a,b}`` an alternation. Paths are compared with forward slashes.
"""

from __future__ import annotations

import os
import re
from functools import lru_cache
from pathlib import PurePath
from typing import Iterable, List, Pattern, Sequence, Union

from .errors import PatternError


def _closing_bracket(pattern: str, start: int) -> int:
    idx = start + 1
    if idx < len(pattern) and pattern[idx] in "!^":
        idx += 1
    if idx < len(pattern) and pattern[idx] == "]":
        idx += 1
    while idx < len(pattern) and pattern[idx] != "]":
        idx += 1
    return idx if idx < len(pattern) else -1


def _split_alternatives(pattern: str, start: int):
    """Return ``(alternatives, end)`` for the brace group opening at ``start``."""
    depth = 0
    pieces: List[str] = []
    current = start + 1
    idx = start
    while idx < len(pattern):
        char = pattern[idx]
        if char == "\\":
            idx += 2
            continue
        if char == "[":
            close = _closing_bracket(pattern, idx)
            if close < 0:
                raise PatternError(f"unterminated character class in {pattern!r}")
            idx = close + 1
            continue
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                pieces.append(pattern[current:idx])
                return pieces, idx
        elif char == "," and depth == 1:
            pieces.append(pattern[current:idx])
            current = idx + 1
        idx += 1
    raise PatternError(f"unterminated brace group in {pattern!r}")


def _translate(pattern: str) -> str:
    out: List[str] = []
    idx = 0
    size = len(pattern)
    while idx < size:
        char = pattern[idx]
        if char == "*":
            if pattern.startswith("**", idx):
                after = idx + 2
                whole_segment = (idx == 0 or pattern[idx - 1] == "/") and (
                    after == size or pattern[after] == "/"
                )
                if whole_segment and after == size:
                    if out and out[-1] == "/":
                        out[-1] = "(?:/.*)?"
                    else:
                        out.append(".*")
                    idx = after
                    continue
                if whole_segment:
                    out.append("(?:.*/)?")
                    idx = after + 1
                    continue
                out.append("[^/]*")
                idx = after
                continue
            out.append("[^/]*")
        elif char == "?":
            out.append("[^/]")
        elif char == "[":
            close = _closing_bracket(pattern, idx)
            if close < 0:
                raise PatternError(f"unterminated character class in {pattern!r}")
            body = pattern[idx + 1 : close]
            if body[:1] in ("!", "^"):
                body = "^" + body[1:]
            out.append("[" + body.replace("\\", "\\\\") + "]")
            idx = close
        elif char == "{":
            alternatives, close = _split_alternatives(pattern, idx)
            out.append("(?:" + "|".join(_translate(alt) for alt in alternatives) + ")")
            idx = close
        elif char == "\\":
            if idx + 1 >= size:
                raise PatternError(f"trailing escape in {pattern!r}")
            out.append(re.escape(pattern[idx + 1]))
            idx += 1
        elif char == "/":
            out.append("/")
        else:
            out.append(re.escape(char))
        idx += 1
    return "".join(out)


@lru_cache(maxsize=256)
def compile_pattern(pattern: str) -> Pattern[str]:
    try:
        return re.compile("^" + _translate(pattern) + "$")
    except re.error as exc:
        raise PatternError(f"invalid pattern {pattern!r}: {exc}") from exc


def validate_patterns(patterns: Iterable[str]) -> None:
    invalid = []
    for pattern in patterns:
        try:
            compile_pattern(pattern)
        except PatternError:
            invalid.append(pattern)
    if len(invalid) == 1:
        raise PatternError(f"headerignore pattern {invalid[0]!r} is not valid")
    if invalid:
        raise PatternError(
            "headerignore patterns " + ", ".join(repr(p) for p in invalid) + " are not valid"
        )


def normalize_path(path: Union[str, PurePath]) -> str:
    text = os.path.normpath(str(path)).replace(os.sep, "/")
    return "" if text == "." else text


def matches(path: Union[str, PurePath], patterns: Sequence[str]) -> bool:
    """True when ``path`` matches any of ``patterns``; patterns must be valid."""
    target = normalize_path(path)
    return any(compile_pattern(pattern).match(target) for pattern in patterns)
