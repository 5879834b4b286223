# Copyright (C) 2026 Copywrite Authors
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


class Settings(BaseSettings):
    log_level: Optional[str] = None
    log_file: Optional[str] = None
    workers: int = 8
    github_token: Optional[str] = Field(default=None, alias="GITHUB_TOKEN")
    github_actions: bool = Field(default=False, alias="GITHUB_ACTIONS")
    runner_debug: bool = Field(default=False, alias="RUNNER_DEBUG")

    # Version-agnostic config for pydantic-settings 2.x
    model_config = {
        "env_prefix": "COPYWRITE_",
        "env_file": ".env",
        "extra": "ignore",
        "populate_by_name": True,
    }

    def resolve_log_level(self, verbose: bool = False) -> int:
        """An explicit ``COPYWRITE_LOG_LEVEL`` wins, then runner debug or ``-v``."""
        if self.log_level:
            level = _LEVELS.get(self.log_level.strip().lower())
            if level is not None:
                return level
        if self.runner_debug or verbose:
            return logging.DEBUG
        return logging.INFO
