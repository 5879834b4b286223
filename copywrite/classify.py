# Copyright (C) 2026 Copywrite Authors
# SPDX-License-Identifier: AGPL-3.0-or-later
"""Classify whole files: generated, special first lines, existing licenses."""

from __future__ import annotations

import re
from pathlib import PurePath
from typing import Union

CONFIG_FILE_NAME = ".copywrite.toml"

GENERATED_MARKERS = (
    re.compile(r"^.{1,2} Code generated .* DO NOT EDIT\.$", re.MULTILINE),
    re.compile(r"^DO NOT EDIT! Replaced on runs of cargo-raze$", re.MULTILINE),
    re.compile(
        r'^# This file is maintained automatically by "terraform init"\.$',
        re.MULTILINE,
    ),
)

SPECIAL_HEADS = (
    "#!",
    "<?xml",
    "<!doctype",
    "# encoding:",
    "# frozen_string_literal:",
    "#\\",
    "<?php",
    "# escape",
    "# syntax",
    "/** @jest-environment",
)

LICENSE_INDICATORS = ("copyright", "mozilla public", "spdx-license-identifier")
LICENSE_SCAN_LIMIT = 1000


def is_generated(content: str) -> bool:
    return any(marker.search(content) for marker in GENERATED_MARKERS)


def has_license(content: str) -> bool:
    head = content[:LICENSE_SCAN_LIMIT].lower()
    return any(indicator in head for indicator in LICENSE_INDICATORS)


def is_config_file(path: Union[str, PurePath]) -> bool:
    return PurePath(path).name == CONFIG_FILE_NAME


def is_sentinel(path: Union[str, PurePath]) -> bool:
    return PurePath(path).name.lower().endswith(".sentinel")


def sentinel_head(content: str) -> str:
    """Leading comment block of a Sentinel policy, including the blank line after it.

    Sentinel shows that block as the policy description, so nothing may be
    inserted above it. Returns ``""`` when the file does not open with one.
    """
    lines = content.splitlines(keepends=True)
    if not lines:
        return ""

    first = lines[0]
    if first.startswith("/*"):
        for idx, line in enumerate(lines):
            if line.rstrip("\r\n").endswith("*/") and idx + 1 < len(lines):
                if not lines[idx + 1].strip():
                    return "".join(lines[: idx + 2])
        return ""

    for marker in ("#", "//"):
        if not first.startswith(marker):
            continue
        idx = 0
        while idx < len(lines) and lines[idx].startswith(marker):
            idx += 1
        if idx < len(lines) and lines[idx] in ("\n", "\r\n"):
            return "".join(lines[: idx + 1])
        return ""
    return ""


def special_head(content: str, path: Union[str, PurePath]) -> str:
    """Text at the top of ``content`` that a new header must be inserted below."""
    if is_sentinel(path):
        head = sentinel_head(content)
        if head:
            return head

    newline = content.find("\n")
    first = content if newline < 0 else content[: newline + 1]
    lowered = first.lower()
    for prefix in SPECIAL_HEADS:
        if lowered.startswith(prefix):
            return first
    return ""


def has_special_first_line(content: str, path: Union[str, PurePath]) -> bool:
    return bool(content) and bool(special_head(content, path))
