# Copyright (C) 2026 Copywrite Authors
# SPDX-License-Identifier: AGPL-3.0-or-later
"""Rewrite stale copyright statements in place, one addressed line at a time."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import PurePath
from typing import List, Union

from .classify import is_generated, is_sentinel, sentinel_head
from .statement import CopyrightStatement, extract_statements
from .years import FileHistory, StatementUpdate, YearPolicy, format_year_field, plan_statement_update

logger = logging.getLogger(__name__)

SPDX_MARKER = "spdx-license-identifier"


@dataclass
class RewriteResult:
    content: str
    statements: List[CopyrightStatement] = field(default_factory=list)
    updates: List[StatementUpdate] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.updates)


def render_statement(statement: CopyrightStatement, holder: str, start: int, end: int) -> str:
    """Prefix, keyword, holder and year field, followed by the original trailing text."""
    parts = ["Copyright"]
    if holder:
        parts.append(holder)
    years = format_year_field(start, end)
    if years:
        parts.append(years)
    return statement.prefix + " ".join(parts) + statement.trailing_text


def apply_update(
    original_line: str,
    statement: CopyrightStatement,
    new_start: int,
    new_end: int,
    holder: str = "",
) -> str:
    rendered = render_statement(statement, holder or statement.holder, new_start, new_end)
    if 0 < statement.prefix_offset < len(original_line):
        return original_line[: statement.prefix_offset] + rendered
    return rendered


def update_content(
    content: str,
    path: Union[str, PurePath],
    policy: YearPolicy,
    history: FileHistory,
) -> RewriteResult:
    """Apply ``policy`` to every in-scope statement of ``content``.

    Only the lines holding stale statements change; everything else,
    including line endings and the final newline, is kept as is.
    """
    if is_generated(content):
        return RewriteResult(content)

    protected = 0
    if is_sentinel(path):
        protected = sentinel_head(content).count("\n")

    statements = extract_statements(content, path, policy.aliases)
    result = RewriteResult(content, statements=statements)

    lines = content.split("\n")
    for statement in statements:
        if statement.line_number <= protected:
            continue
        if SPDX_MARKER in statement.original_line.lower():
            continue
        update = plan_statement_update(statement, policy, history)
        if update is None:
            continue
        idx = statement.line_number - 1
        new_line = apply_update(
            lines[idx], statement, update.new_start, update.new_end, update.holder
        )
        if new_line == lines[idx]:
            continue
        logger.debug("%s:%d: %r -> %r", path, statement.line_number, lines[idx], new_line)
        lines[idx] = new_line
        result.updates.append(update)

    if result.updates:
        result.content = "\n".join(lines)
    return result
