# Copyright (C) 2026 Copywrite Authors
# SPDX-License-Identifier: AGPL-3.0-or-later
"""Parse single lines into ``CopyrightStatement`` records.

Parsing is a fixed sequence of small steps rather than a list of competing
regular expressions:

1. find the comment prefix (see :mod:`copywrite.comments`);
2. require the word ``copyright`` right after it, then drop it and any ``(c)``;
3. scan for four digit year runs;
4. split what is left into holder, years and trailing text.

Lines that do not survive every step are ordinary text, never an error.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from pathlib import PurePath
from typing import List, Optional, Sequence, Tuple, Union

from .comments import resolve_prefix

KEYWORD = "copyright"
COPYRIGHT_MARKERS = ("(c)", "©")
YEAR_SEPARATORS = frozenset("-–, \t")
BLOCK_CLOSERS = ("*/%>", "*/", "-->", "*)", "}}")


class Organization(str, Enum):
    IBM = "ibm"
    HASHICORP = "hashicorp"
    CONFIGURED = "configured"
    OTHER = "other"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class OrganizationAlias:
    organization: Organization
    pattern: re.Pattern


# Adding a recognized organization is a new row here, nothing else.
ORGANIZATIONS: Tuple[OrganizationAlias, ...] = (
    OrganizationAlias(
        Organization.IBM,
        re.compile(r"\bibm\b(?:\s+corp(?:oration\b|\.|\b))?", re.IGNORECASE),
    ),
    OrganizationAlias(
        Organization.HASHICORP,
        re.compile(r"\bhashicorp\b(?:,?\s*inc(?:\.|\b))?", re.IGNORECASE),
    ),
)


@dataclass
class CopyrightStatement:
    line_number: int
    original_line: str
    holder: str
    start_year: int = 0
    end_year: int = 0
    prefix: str = ""
    prefix_offset: int = 0
    trailing_text: str = ""
    organization: Organization = Organization.UNKNOWN

    @property
    def has_years(self) -> bool:
        return bool(self.start_year or self.end_year)

    @property
    def is_inline(self) -> bool:
        return self.prefix_offset > 0


def classify_holder(
    holder: str, organizations: Sequence[OrganizationAlias] = ORGANIZATIONS
) -> Organization:
    if not holder.strip():
        return Organization.UNKNOWN
    for alias in organizations:
        if alias.pattern.search(holder):
            return alias.organization
    return Organization.OTHER


def organizations_for(holder: str) -> Tuple[OrganizationAlias, ...]:
    """Alias table extended with ``holder`` when it is not a known organization."""
    holder = holder.strip()
    if not holder or classify_holder(holder) is not Organization.OTHER:
        return ORGANIZATIONS
    pattern = re.compile(r"(?<!\w)" + re.escape(holder) + r"(?!\w)", re.IGNORECASE)
    return ORGANIZATIONS + (OrganizationAlias(Organization.CONFIGURED, pattern),)


def strip_keyword(content: str) -> Optional[str]:
    """Drop the leading ``copyright`` word and an optional ``(c)``.

    Returns ``None`` when ``content`` does not start with the whole word.
    """
    if content[: len(KEYWORD)].lower() != KEYWORD:
        return None
    rest = content[len(KEYWORD) :]
    if rest and _is_word_char(rest[0]):
        return None
    rest = rest.lstrip()
    for marker in COPYRIGHT_MARKERS:
        if rest[: len(marker)].lower() == marker:
            rest = rest[len(marker) :].lstrip()
            break
    return rest


def year_runs(text: str) -> List[Tuple[int, int]]:
    """Spans of every run of exactly four digits with no word character on either side."""
    runs: List[Tuple[int, int]] = []
    idx = 0
    size = len(text)
    while idx < size:
        if not _is_year_digit(text[idx]):
            idx += 1
            continue
        start = idx
        while idx < size and _is_year_digit(text[idx]):
            idx += 1
        if idx - start != 4:
            continue
        if start > 0 and _is_word_char(text[start - 1]):
            continue
        if idx < size and _is_word_char(text[idx]):
            continue
        runs.append((start, idx))
    return runs


def split_closer(text: str) -> Tuple[str, str]:
    """Split ``text`` into its content and any trailing block-comment closer."""
    stripped = text.rstrip()
    for closer in BLOCK_CLOSERS:
        if stripped.endswith(closer):
            body = stripped[: -len(closer)].rstrip()
            return body, text[len(body) :]
    return stripped, text[len(stripped) :]


def split_organization(
    text: str, organizations: Sequence[OrganizationAlias] = ORGANIZATIONS
) -> Optional[Tuple[str, str]]:
    """Split a recognized organization name off the start of ``text``.

    Returns ``(name, remainder)`` with the remainder kept verbatim, or ``None``
    when no known organization starts the text.
    """
    body = text.lstrip()
    for alias in organizations:
        match = alias.pattern.match(body)
        if match is None:
            continue
        name = match.group(0).rstrip()
        remainder = body[len(name) :]
        if remainder and _is_word_char(remainder[0]):
            continue
        return name, remainder
    return None


def parse_copyright_line(
    line: str,
    line_number: int,
    path: Union[str, PurePath],
    organizations: Sequence[OrganizationAlias] = ORGANIZATIONS,
) -> Optional[CopyrightStatement]:
    prefix = resolve_prefix(line, path)
    if not prefix.usable:
        return None

    content = line[prefix.offset + len(prefix.text) :].lstrip(" \t")
    body = strip_keyword(content)
    if body is None:
        return None

    statement = CopyrightStatement(
        line_number=line_number,
        original_line=line,
        holder="",
        prefix=prefix.text,
        prefix_offset=prefix.offset,
    )

    runs = year_runs(body)
    if not runs:
        holder, trailing = split_closer(body)
        named = split_organization(holder, organizations)
        if named is not None and named[1].strip():
            holder, extra = named
            trailing = extra + trailing
        statement.holder = holder.strip()
        statement.trailing_text = trailing
        statement.organization = classify_holder(statement.holder, organizations)
        return statement

    end_start, end_stop = runs[-1]
    end_year = int(body[end_start:end_stop])
    start_year = end_year
    first_used = end_start
    if len(runs) >= 2:
        prev_start, prev_stop = runs[-2]
        between = body[prev_stop:end_start]
        if all(char in YEAR_SEPARATORS for char in between):
            start_year = int(body[prev_start:prev_stop])
            first_used = prev_start

    statement.start_year = start_year
    statement.end_year = end_year
    statement.holder = body[:first_used].strip()
    statement.trailing_text = body[end_stop:]

    if not statement.holder and statement.trailing_text.strip():
        named = split_organization(statement.trailing_text, organizations)
        if named is not None:
            statement.holder, statement.trailing_text = named

    statement.organization = classify_holder(statement.holder, organizations)
    return statement


def extract_statements(
    content: str,
    path: Union[str, PurePath],
    organizations: Sequence[OrganizationAlias] = ORGANIZATIONS,
) -> List[CopyrightStatement]:
    """Every copyright statement in ``content``, in line order."""
    statements: List[CopyrightStatement] = []
    for number, line in enumerate(content.split("\n"), start=1):
        if KEYWORD not in line.lower():
            continue
        statement = parse_copyright_line(line, number, path, organizations)
        if statement is not None:
            statements.append(statement)
    return statements


def _is_word_char(char: str) -> bool:
    return char.isalnum() or char == "_"


def _is_year_digit(char: str) -> bool:
    return "0" <= char <= "9"
