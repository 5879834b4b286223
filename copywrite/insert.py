# Copyright (C) 2026 Copywrite Authors
# SPDX-License-Identifier: AGPL-3.0-or-later
"""Prepend a license header to files that do not carry one yet."""

from __future__ import annotations

import os
import stat
from dataclasses import dataclass
from pathlib import Path, PurePath
from typing import Optional, Union

from .classify import has_license, is_generated, special_head
from .templates import LicenseData, render_header


@dataclass
class InsertResult:
    content: str
    inserted: bool = False
    reason: str = ""


def insert_header(
    content: str,
    path: Union[str, PurePath],
    template: str,
    data: LicenseData,
) -> InsertResult:
    if is_generated(content):
        return InsertResult(content, reason="generated")
    if has_license(content):
        return InsertResult(content, reason="has license")

    header = render_header(path, template, data)
    if header is None:
        return InsertResult(content, reason="no applicable header format")

    head = special_head(content, path)
    body = content[len(head):]
    if head and not head.endswith("\n"):
        head += "\n"
    return InsertResult(head + header + body, inserted=True)


def write_file(path: Union[str, Path], content: str, mode: Optional[int] = None) -> None:
    """Replace ``path`` atomically, keeping its permission bits."""
    path = Path(path)
    if mode is None:
        mode = path.stat().st_mode
    tmp_path = path.with_name(f".{path.name}.copywrite.tmp")
    with open(tmp_path, "w", encoding="utf-8", newline="") as handle:
        handle.write(content)
    try:
        os.chmod(tmp_path, stat.S_IMODE(mode))
        tmp_path.replace(path)
    except OSError:
        tmp_path.unlink(missing_ok=True)
        raise
