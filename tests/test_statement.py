# Copyright (C) 2026 Copywrite Authors
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from copywrite.statement import (
    Organization,
    classify_holder,
    extract_statements,
    organizations_for,
    parse_copyright_line,
    year_runs,
)


def parse(line, path="main.go"):
    return parse_copyright_line(line, 1, path)


def test_holder_then_single_year():
    statement = parse("// Copyright (c) HashiCorp, Inc. 2023")
    assert statement.holder == "HashiCorp, Inc."
    assert (statement.start_year, statement.end_year) == (2023, 2023)
    assert statement.prefix == "// "
    assert statement.trailing_text == ""
    assert statement.organization is Organization.HASHICORP


def test_holder_then_year_range():
    statement = parse("// Copyright IBM Corp. 2014, 2020")
    assert statement.holder == "IBM Corp."
    assert (statement.start_year, statement.end_year) == (2014, 2020)
    assert statement.organization is Organization.IBM


def test_dash_separated_range():
    statement = parse("# Copyright IBM Corp. 2014-2020", "tool.py")
    assert (statement.start_year, statement.end_year) == (2014, 2020)


def test_copyright_sign_is_dropped():
    statement = parse("// Copyright © IBM Corp. 2021")
    assert statement.holder == "IBM Corp."


def test_trailing_block_closer_is_kept_verbatim():
    statement = parse("/* Copyright IBM Corp. 2020 */", "main.c")
    assert statement.prefix == "/* "
    assert statement.trailing_text == " */"


def test_yearless_statement_moves_closer_to_trailing_text():
    statement = parse("<!-- Copyright IBM Corp. -->", "index.html")
    assert statement.holder == "IBM Corp."
    assert statement.trailing_text == " -->"
    assert not statement.has_years


def test_yearless_statement_splits_known_organization_from_prose():
    statement = parse("// Copyright HashiCorp, Inc. All rights reserved.")
    assert statement.holder == "HashiCorp, Inc."
    assert statement.trailing_text == " All rights reserved."


def test_years_first_statement_with_known_organization():
    statement = parse("# Copyright 2020 HashiCorp, Inc.", "tool.py")
    assert statement.holder == "HashiCorp, Inc."
    assert statement.trailing_text == ""
    assert statement.organization is Organization.HASHICORP


def test_years_only_statement_has_empty_holder():
    statement = parse("// Copyright 2020 Google LLC")
    assert statement.holder == ""
    assert statement.trailing_text == " Google LLC"
    assert statement.organization is Organization.UNKNOWN


def test_non_adjacent_earlier_year_is_folded_into_holder():
    # Only the last run is a year here; the earlier number is part of the holder.
    statement = parse("// Copyright 2019 Foo 2020")
    assert statement.holder == "2019 Foo"
    assert (statement.start_year, statement.end_year) == (2020, 2020)


def test_three_year_runs_use_last_two():
    statement = parse("// Copyright Acme 2018 2019-2020")
    assert (statement.start_year, statement.end_year) == (2019, 2020)
    assert statement.holder == "Acme 2018"


def test_lines_that_only_mention_copyright_are_ignored():
    assert parse("// This file mentions copyright law") is None
    assert parse("// Copyrighted material") is None
    assert parse("var copyright = 2020") is None


def test_year_runs_need_exactly_four_digits():
    assert year_runs("v2020 20201 2021 x_2022") == [(12, 16)]


def test_classification():
    assert classify_holder("Other Company") is Organization.OTHER
    assert classify_holder("  ") is Organization.UNKNOWN
    assert classify_holder("IBM Corporation") is Organization.IBM
    assert classify_holder("HashiCorp Inc") is Organization.HASHICORP


def test_configured_holder_gets_its_own_organization():
    table = organizations_for("Acme Widgets")
    statement = parse_copyright_line("// Copyright Acme Widgets 2020", 1, "main.go", table)
    assert statement.organization is Organization.CONFIGURED
    assert organizations_for("IBM Corp.") == organizations_for("")


def test_configured_holder_does_not_match_longer_names():
    table = organizations_for("Acme")
    statement = parse_copyright_line("// Copyright Acmeville Ltd 2020", 1, "main.go", table)
    assert statement.organization is Organization.OTHER


def test_non_ascii_digits_are_not_years():
    statement = parse_copyright_line("// Copyright Foo \u00b2\u00b2\u00b2\u00b2", 1, "a.go")
    assert statement is not None
    assert not statement.has_years


def test_extract_statements_reports_line_numbers():
    content = "package main\n\n// Copyright IBM Corp. 2020\n// Copyright (c) Other Company 2019\n"
    statements = extract_statements(content, "main.go")
    assert [s.line_number for s in statements] == [3, 4]
    assert [s.organization for s in statements] == [Organization.IBM, Organization.OTHER]


def test_bare_statement_in_license_file():
    statement = parse_copyright_line("Copyright IBM Corp. 2020, 2026", 1, "LICENSE")
    assert statement.prefix == ""
    assert statement.prefix_offset == 0
    assert (statement.start_year, statement.end_year) == (2020, 2026)
