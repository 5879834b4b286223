# Copyright (C) 2026 Copywrite Authors
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from typing import Iterable, List


class CopywriteError(Exception):
    ...


class ConfigError(CopywriteError):
    """Raised when a config file or flag value cannot be turned into a ``Config``."""

    def __init__(self, message: str, problems: Iterable[str] = ()) -> None:
        self.problems: List[str] = list(problems)
        if self.problems:
            message = message + ": " + "; ".join(self.problems)
        super().__init__(message)


class PatternError(CopywriteError):
    ...


class TemplateError(CopywriteError):
    ...


class LicenseFileError(CopywriteError):
    ...


class GitHubError(CopywriteError):
    def __init__(self, message: str, status: int = 0) -> None:
        super().__init__(message)
        self.status = status
