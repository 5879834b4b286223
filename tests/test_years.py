# Copyright (C) 2026 Copywrite Authors
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import pytest

from copywrite.statement import parse_copyright_line
from copywrite.years import (
    FileHistory,
    YearPolicy,
    calculate_year_update,
    canonical_start_year,
    format_year_field,
    header_year_field,
    parse_year_range,
    plan_statement_update,
)


def statement(line: str):
    return parse_copyright_line(line, 1, "main.go")


def test_canonical_start_and_forced_end():
    stmt = statement("// Copyright (c) HashiCorp, Inc. 2023")
    update = calculate_year_update(stmt, 2020, 0, 2026, True)
    assert update == (True, 2020, 2026)


def test_end_year_moves_to_current_year_after_newer_commit():
    stmt = statement("// Copyright IBM Corp. 2014, 2020")
    update = calculate_year_update(stmt, 0, 2025, 2026, False)
    assert update == (True, 2014, 2026)


def test_commit_in_statement_end_year_is_not_stale():
    stmt = statement("// Copyright IBM Corp. 2020, 2025")
    update = calculate_year_update(stmt, 2020, 2025, 2026, False)
    assert update.should_update is False
    assert (update.new_start, update.new_end) == (2020, 2025)


def test_statement_already_at_current_year_is_left_alone():
    stmt = statement("// Copyright IBM Corp. 2020, 2026")
    assert calculate_year_update(stmt, 2020, 2026, 2026, True).should_update is False


def test_end_year_never_falls_below_new_start():
    stmt = statement("// Copyright IBM Corp. 2020, 2023")
    update = calculate_year_update(stmt, 2025, 0, 2026, False)
    assert update == (True, 2025, 2025)


def test_yearless_statement_gets_start_year_only():
    stmt = statement("// Copyright IBM Corp.")
    update = calculate_year_update(stmt, 2020, 0, 2026, False)
    assert update == (True, 2020, 2020)


@pytest.mark.parametrize(
    "start,end,expected",
    [
        (2020, 2020, "2020"),
        (2020, 2026, "2020, 2026"),
        (2026, 2020, "2020, 2026"),
        (0, 2026, "2026"),
        (0, 0, ""),
    ],
)
def test_format_year_field(start, end, expected):
    assert format_year_field(start, end) == expected


def test_parse_year_range():
    assert parse_year_range("2020") == (2020, 2020)
    assert parse_year_range("2020-2025") == (2020, 2025)
    assert parse_year_range("2020, 2025") == (2020, 2025)
    with pytest.raises(ValueError):
        parse_year_range("2025-2020")
    with pytest.raises(ValueError):
        parse_year_range("twenty")


def test_canonical_start_prefers_configured_year():
    assert canonical_start_year(YearPolicy(start_year=2018), FileHistory(repo_first_year=2015)) == 2018
    assert canonical_start_year(YearPolicy(), FileHistory(repo_first_year=2015)) == 2015
    assert canonical_start_year(YearPolicy(), FileHistory()) == 0


def test_other_holders_are_never_planned():
    policy = YearPolicy(start_year=2020, force_current_year=True, current_year=2026)
    stmt = statement("// Copyright (c) Other Company 2019")
    assert plan_statement_update(stmt, policy, FileHistory(last_commit_year=2026)) is None


def test_holder_is_normalized_even_when_years_are_current():
    policy = YearPolicy(holder="IBM Corp.", current_year=2026)
    stmt = statement("// Copyright HashiCorp, Inc. 2026")
    update = plan_statement_update(stmt, policy, FileHistory())
    assert update is not None
    assert update.holder == "IBM Corp."
    assert (update.new_start, update.new_end) == (2026, 2026)


def test_up_to_date_statement_needs_no_plan():
    policy = YearPolicy(holder="IBM Corp.", start_year=2020, current_year=2026)
    stmt = statement("// Copyright IBM Corp. 2020, 2026")
    assert plan_statement_update(stmt, policy, FileHistory(last_commit_year=2026)) is None


def test_holder_swap_requires_a_bare_organization_name():
    policy = YearPolicy(holder="IBM Corp.", current_year=2026)
    assert policy.owns_holder("HashiCorp, Inc.")
    assert policy.owns_holder("IBM Corp.,")
    assert not policy.owns_holder("Google LLC and HashiCorp, Inc.")
    assert not policy.owns_holder("Other Company")


def test_header_year_field():
    assert header_year_field(YearPolicy(start_year=2020, current_year=2026), FileHistory()) == "2020, 2026"
    assert header_year_field(YearPolicy(current_year=2026), FileHistory(repo_first_year=2018)) == "2018, 2026"
    assert header_year_field(YearPolicy(current_year=2026), FileHistory()) == "2026"
