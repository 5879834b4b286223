# Copyright (C) 2026 Copywrite Authors
# SPDX-License-Identifier: AGPL-3.0-or-later
"""Utilities for timing labeled stages of execution."""
import sys
import time
from typing import Optional, TextIO


def stage(title: str, actions: bool = False, stream: Optional[TextIO] = None) -> float:
    """Begin a stage with the given *title* and return the start timestamp.

    Inside GitHub Actions the stage becomes a collapsible log group.
    """
    out = stream or sys.stdout
    out.write(f"::group::{title}\n" if actions else f"\n=== {title} ===\n")
    out.flush()
    return time.perf_counter()


def stage_done(
    start: float,
    note: Optional[str] = "",
    actions: bool = False,
    stream: Optional[TextIO] = None,
) -> None:
    """Log completion of a stage that started at *start* with an optional *note*."""
    out = stream or sys.stdout
    elapsed = int((time.perf_counter() - start) * 1000)
    out.write(f"--- done in {elapsed} ms {note}\n")
    if actions:
        out.write("::endgroup::\n")
    out.flush()
