# Copyright (C) 2026 Copywrite Authors
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from .gha import ActionsFormatter

LOGGER_NAMES = ("copywrite", "copywrite_cli")
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"


class ConsoleHandler(logging.StreamHandler):
    """Stream handler that writes to whatever ``sys.stderr`` is at emit time.

    A stream set with ``setStream()`` is replaced again on the next record.
    """

    def __init__(self) -> None:
        super().__init__(sys.stderr)

    def emit(self, record: logging.LogRecord) -> None:
        self.stream = sys.stderr
        super().emit(record)

    def flush(self) -> None:
        self.stream = sys.stderr
        super().flush()


def setup_logging(
    level: int = logging.INFO,
    log_path: Optional[Path] = None,
    actions: bool = False,
) -> logging.Logger:
    """Configure the engine and CLI loggers; repeated calls only adjust level and format."""
    formatter = ActionsFormatter("%(message)s") if actions else logging.Formatter(LOG_FORMAT)
    for name in LOGGER_NAMES:
        logger = logging.getLogger(name)
        logger.setLevel(level)
        console = [h for h in logger.handlers if isinstance(h, ConsoleHandler)]
        if not console:
            console = [ConsoleHandler()]
            logger.addHandler(console[0])
        console[0].setFormatter(formatter)
        if log_path is not None and not any(isinstance(h, RotatingFileHandler) for h in logger.handlers):
            log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = RotatingFileHandler(log_path, maxBytes=5_000_000, backupCount=3, encoding="utf-8")
            file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
            logger.addHandler(file_handler)
    return logging.getLogger(LOGGER_NAMES[-1])
