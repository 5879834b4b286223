# Copyright (C) 2026 Copywrite Authors
# SPDX-License-Identifier: AGPL-3.0-or-later
"""Copyright header parsing, reconciliation and rewriting engine."""

from importlib.metadata import PackageNotFoundError, version

__all__ = ["get_version"]


def get_version() -> str:
    """Return the package version if installed, otherwise ``"0.1.0"``."""
    try:
        return version("copywrite")
    except PackageNotFoundError:  # pragma: no cover - fallback for source checkouts
        return "0.1.0"
