# Copyright (C) 2026 Copywrite Authors
# SPDX-License-Identifier: AGPL-3.0-or-later
"""Decide whether a copyright statement is stale and what its years should become."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date
from typing import FrozenSet, NamedTuple, Optional, Tuple

from .statement import (
    CopyrightStatement,
    Organization,
    OrganizationAlias,
    organizations_for,
)

IN_SCOPE: FrozenSet[Organization] = frozenset(
    {Organization.IBM, Organization.HASHICORP, Organization.CONFIGURED}
)

_YEAR_RANGE = re.compile(r"^\s*(\d{4})\s*(?:[-,]\s*(\d{4})\s*)?$")


def _this_year() -> int:
    return date.today().year


@dataclass(frozen=True)
class YearPolicy:
    holder: str = "IBM Corp."
    start_year: int = 0
    force_current_year: bool = False
    organizations: FrozenSet[Organization] = IN_SCOPE
    current_year: int = field(default_factory=_this_year)

    @property
    def aliases(self) -> Tuple[OrganizationAlias, ...]:
        return organizations_for(self.holder)

    def covers(self, statement: CopyrightStatement) -> bool:
        return statement.organization in self.organizations

    def owns_holder(self, holder: str) -> bool:
        """True when ``holder`` is nothing but the name of an in-scope organization."""
        name = holder.strip().rstrip(",;:").rstrip()
        return any(
            alias.organization in self.organizations and alias.pattern.fullmatch(name)
            for alias in self.aliases
        )


@dataclass(frozen=True)
class FileHistory:
    """What version control knows about one file; ``None`` means unknown."""

    last_commit_year: Optional[int] = None
    repo_first_year: Optional[int] = None


class YearUpdate(NamedTuple):
    should_update: bool
    new_start: int
    new_end: int


@dataclass(frozen=True)
class StatementUpdate:
    statement: CopyrightStatement
    holder: str
    new_start: int
    new_end: int


def calculate_year_update(
    statement: CopyrightStatement,
    canonical_start_year: int,
    last_commit_year: int,
    current_year: int,
    force_current_year: bool,
) -> YearUpdate:
    should_update = False
    new_start = statement.start_year
    new_end = statement.end_year

    if canonical_start_year > 0 and statement.start_year != canonical_start_year:
        new_start = canonical_start_year
        should_update = True

    # The end year tracks when the policy was last enforced, not the commit itself.
    if last_commit_year > statement.end_year and statement.end_year < current_year:
        new_end = current_year
        should_update = True

    if force_current_year and statement.end_year < current_year:
        new_end = current_year
        should_update = True

    if new_end and new_end < new_start:
        new_end = new_start
    elif not new_end and new_start:
        new_end = new_start
    return YearUpdate(should_update, new_start, new_end)


def format_year_field(start: int, end: int) -> str:
    """``"2020"`` for a single year, ``"2020, 2026"`` for a range, ``""`` for none."""
    years = sorted(year for year in (start, end) if year)
    if not years:
        return ""
    if years[0] == years[-1]:
        return str(years[0])
    return f"{years[0]}, {years[-1]}"


def parse_year_range(text: str) -> Tuple[int, int]:
    """Parse ``"2020"``, ``"2020-2025"`` or ``"2020, 2025"`` into ``(start, end)``."""
    match = _YEAR_RANGE.match(text or "")
    if match is None:
        raise ValueError(f"not a year or year range: {text!r}")
    start = int(match.group(1))
    end = int(match.group(2)) if match.group(2) else start
    if end < start:
        raise ValueError(f"year range runs backwards: {text!r}")
    return start, end


def canonical_start_year(policy: YearPolicy, history: FileHistory) -> int:
    if policy.start_year > 0:
        return policy.start_year
    return history.repo_first_year or 0


def header_year_field(policy: YearPolicy, history: FileHistory) -> str:
    """Year field for a new header: the canonical start year through the current year."""
    start = canonical_start_year(policy, history) or policy.current_year
    return format_year_field(start, max(start, policy.current_year))


def plan_statement_update(
    statement: CopyrightStatement,
    policy: YearPolicy,
    history: FileHistory,
) -> Optional[StatementUpdate]:
    """Return the rewrite ``statement`` needs under ``policy``, or ``None``."""
    if not policy.covers(statement):
        return None

    update = calculate_year_update(
        statement,
        canonical_start_year(policy, history),
        history.last_commit_year or 0,
        policy.current_year,
        policy.force_current_year,
    )
    # Holders naming anyone besides an in-scope organization keep their text.
    holder = statement.holder
    if policy.holder.strip() and policy.owns_holder(statement.holder):
        holder = policy.holder.strip()
    if not update.should_update and holder == statement.holder:
        return None
    return StatementUpdate(statement, holder, update.new_start, update.new_end)
