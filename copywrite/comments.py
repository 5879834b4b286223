# Copyright (C) 2026 Copywrite Authors
# SPDX-License-Identifier: AGPL-3.0-or-later
"""Locate the comment marker that introduces a copyright statement on a line."""

from __future__ import annotations

from pathlib import PurePath
from typing import NamedTuple, Tuple, Union

# Ordered by specificity: a longer marker must be listed before any marker it contains.
COMMENT_PREFIXES: Tuple[str, ...] = (
    "<%/* ",
    "<%/*",
    "(** ",
    "(**",
    "/** ",
    "/**",
    "<!-- ",
    "<!--",
    "{{! ",
    "{{!",
    "/* ",
    "/*",
    ";; ",
    ";;",
    "-- ",
    "--",
    "// ",
    "//",
    "# ",
    "#",
    "% ",
    "%",
    "* ",
    "*",
)

_LICENSE_STEMS = ("license", "licence", "copying")
_LICENSE_SUFFIXES = {"", ".txt", ".md", ".rst"}
_HORIZONTAL_SPACE = " \t"


class PrefixMatch(NamedTuple):
    text: str
    offset: int
    usable: bool


UNUSABLE = PrefixMatch("", 0, False)


def is_license_file(path: Union[str, PurePath]) -> bool:
    """True for LICENSE/LICENCE/COPYING files, with or without a text extension."""
    name = PurePath(path).name.lower()
    stem, dot, suffix = name.partition(".")
    if dot and f".{suffix}" not in _LICENSE_SUFFIXES:
        return False
    return any(stem == base or stem.startswith(base + "-") for base in _LICENSE_STEMS)


def find_marker(line: str) -> Tuple[int, str]:
    """Return ``(index, marker)`` of the earliest comment marker, or ``(-1, "")``."""
    best_idx = -1
    best_marker = ""
    for marker in COMMENT_PREFIXES:
        idx = line.find(marker)
        if idx < 0:
            continue
        if best_idx == -1 or idx < best_idx:
            best_idx = idx
            best_marker = marker
    return best_idx, best_marker


def resolve_prefix(line: str, path: Union[str, PurePath]) -> PrefixMatch:
    """Work out which part of ``line`` precedes the statement text.

    The prefix spans the earliest comment marker plus any spaces or tabs right
    before it. LICENSE files may carry statements with no marker at all; for
    those the prefix is just the indentation.
    """
    if is_license_file(path):
        stripped = line.lstrip(_HORIZONTAL_SPACE)
        if stripped[:9].lower() == "copyright":
            return PrefixMatch(line[: len(line) - len(stripped)], 0, True)

    idx, marker = find_marker(line)
    if idx < 0:
        return UNUSABLE

    start = idx
    while start > 0 and line[start - 1] in _HORIZONTAL_SPACE:
        start -= 1
    return PrefixMatch(line[start : idx + len(marker)], start, True)
