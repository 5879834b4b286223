# Copyright (C) 2026 Copywrite Authors
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Make the packages importable from a source checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Run inside an empty directory with no CI or copywrite variables set."""
    for name in (
        "GITHUB_ACTIONS",
        "RUNNER_DEBUG",
        "GITHUB_TOKEN",
        "COPYWRITE_LOG_LEVEL",
        "COPYWRITE_LOG_FILE",
        "COPYWRITE_WORKERS",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path
