# Copyright (C) 2026 Copywrite Authors
# SPDX-License-Identifier: AGPL-3.0-or-later
"""GitHub Actions workflow commands, with a plain-text fallback outside Actions."""

from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO

_LEVEL_COMMANDS = {
    logging.DEBUG: "debug",
    logging.WARNING: "warning",
    logging.ERROR: "error",
    logging.CRITICAL: "error",
}


def escape_data(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def escape_property(value: str) -> str:
    return escape_data(value).replace(":", "%3A").replace(",", "%2C")


class ActionsOutput:
    def __init__(self, enabled: bool, stream: Optional[TextIO] = None) -> None:
        self.enabled = enabled
        self.stream = stream

    def _write(self, text: str) -> None:
        stream = self.stream or sys.stdout
        stream.write(text + "\n")
        stream.flush()

    def error(self, message: str, file: Optional[str] = None) -> None:
        if not self.enabled:
            prefix = f"{file}: " if file else ""
            self._write(f"error: {prefix}{message}")
            return
        props = f" file={escape_property(file)}" if file else ""
        self._write(f"::error{props}::{escape_data(message)}")


class ActionsFormatter(logging.Formatter):
    """Turn debug, warning and error records into workflow commands."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        command = _LEVEL_COMMANDS.get(record.levelno)
        if command is None:
            return message
        return f"::{command}::{escape_data(message)}"
