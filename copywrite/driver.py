# Copyright (C) 2026 Copywrite Authors
# SPDX-License-Identifier: AGPL-3.0-or-later
"""Walk file sets and apply the insert or update operation to every file."""

from __future__ import annotations

import concurrent.futures
import logging
import os
import stat
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Sequence

from .classify import is_config_file, is_generated
from .errors import TemplateError
from .gitmeta import GitHistory
from .globs import matches, validate_patterns
from .insert import insert_header, write_file
from .rewrite import update_content
from .templates import LicenseData
from .years import FileHistory, YearPolicy, header_year_field

logger = logging.getLogger(__name__)

DEFAULT_WORKERS = 8
PRIME_THRESHOLD = 16
SKIPPED_DIRS = {".git", ".hg", ".svn"}


class Operation(str, Enum):
    INSERT = "insert"
    UPDATE = "update"


class Outcome(str, Enum):
    UNCHANGED = "unchanged"
    MODIFIED = "modified"
    WOULD_MODIFY = "would_modify"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class FileTask:
    path: Path
    mode: int


@dataclass
class FileResult:
    path: Path
    outcome: Outcome
    reason: str = ""
    error: Optional[str] = None
    updates: int = 0
    inserted: bool = False


@dataclass
class HeaderJob:
    """Everything a worker needs to process one file."""

    operation: Operation
    policy: YearPolicy
    template: str
    license_data: LicenseData
    history: Optional[GitHistory] = None
    check_only: bool = False
    insert_missing: bool = True


@dataclass
class RunReport:
    operation: Operation
    check_only: bool
    results: List[FileResult] = field(default_factory=list)

    def with_outcome(self, outcome: Outcome) -> List[FileResult]:
        return [result for result in self.results if result.outcome is outcome]

    @property
    def modified(self) -> List[FileResult]:
        return self.with_outcome(Outcome.MODIFIED)

    @property
    def would_modify(self) -> List[FileResult]:
        return self.with_outcome(Outcome.WOULD_MODIFY)

    @property
    def failed(self) -> List[FileResult]:
        return self.with_outcome(Outcome.FAILED)

    @property
    def errors(self) -> List[str]:
        return [f"{result.path}: {result.error}" for result in self.failed]

    @property
    def exit_code(self) -> int:
        if self.failed:
            return 1
        if self.check_only and self.would_modify:
            return 1
        return 0

    def summary_line(self) -> str:
        changed = len(self.would_modify) if self.check_only else len(self.modified)
        verb = "Would change" if self.check_only else "Changed"
        return (
            f"Scanned: {len(self.results)} • {verb}: {changed} • "
            f"Skipped: {len(self.with_outcome(Outcome.SKIPPED))} • Failed: {len(self.failed)}"
        )


def walk(patterns: Iterable[str], ignore: Sequence[str] = ()) -> Iterator[FileTask]:
    """Yield a task for every regular file under ``patterns`` not matched by ``ignore``."""
    validate_patterns(ignore)
    for pattern in patterns:
        start = Path(pattern)
        if not start.exists():
            logger.warning("%s: no such file or directory", pattern)
            continue
        if not start.is_dir():
            task = _task_for(start, ignore)
            if task is not None:
                yield task
            continue
        for dirpath, dirnames, filenames in os.walk(start):
            dirnames[:] = sorted(name for name in dirnames if name not in SKIPPED_DIRS)
            for name in sorted(filenames):
                task = _task_for(Path(dirpath) / name, ignore)
                if task is not None:
                    yield task


def _task_for(path: Path, ignore: Sequence[str]) -> Optional[FileTask]:
    if ignore and matches(path, ignore):
        logger.debug("skipping: %s", path)
        return None
    try:
        info = path.lstat()
    except OSError as exc:
        logger.warning("%s: %s", path, exc)
        return None
    if not stat.S_ISREG(info.st_mode):
        return None
    return FileTask(path=path, mode=stat.S_IMODE(info.st_mode))


def read_source(path: Path) -> str:
    with open(path, "r", encoding="utf-8", newline="") as handle:
        return handle.read()


def file_history(job: HeaderJob, path: Path) -> FileHistory:
    if job.history is None:
        return FileHistory()
    first = None
    if job.policy.start_year <= 0:
        first = job.history.first_commit_year(path)
    return FileHistory(
        last_commit_year=job.history.file_last_commit_year(path),
        repo_first_year=first,
    )


def process_file(task: FileTask, job: HeaderJob) -> FileResult:
    path = task.path
    if is_config_file(path):
        return FileResult(path, Outcome.SKIPPED, reason="configuration file")
    try:
        content = read_source(path)
    except UnicodeDecodeError:
        return FileResult(path, Outcome.SKIPPED, reason="not UTF-8 text")
    except OSError as exc:
        return FileResult(path, Outcome.FAILED, error=str(exc))

    if is_generated(content):
        return FileResult(path, Outcome.SKIPPED, reason="generated")

    history = file_history(job, path)
    new_content = content
    updates = 0
    has_statements = False
    if job.operation is Operation.UPDATE:
        rewrite = update_content(content, path, job.policy, history)
        new_content = rewrite.content
        updates = len(rewrite.updates)
        has_statements = bool(rewrite.statements)

    inserted = False
    if job.insert_missing and not has_statements:
        # New headers carry the years the update rules would settle on.
        data = replace(job.license_data, year=header_year_field(job.policy, history))
        try:
            insertion = insert_header(new_content, path, job.template, data)
        except TemplateError as exc:
            return FileResult(path, Outcome.FAILED, error=str(exc))
        if insertion.inserted:
            new_content = insertion.content
            inserted = True
        elif not updates and insertion.reason == "no applicable header format":
            return FileResult(path, Outcome.SKIPPED, reason=insertion.reason)

    if new_content == content:
        return FileResult(path, Outcome.UNCHANGED)
    if job.check_only:
        return FileResult(path, Outcome.WOULD_MODIFY, updates=updates, inserted=inserted)

    try:
        write_file(path, new_content, task.mode)
    except OSError as exc:
        return FileResult(path, Outcome.FAILED, error=str(exc))
    logger.info("%s modified", path)
    return FileResult(path, Outcome.MODIFIED, updates=updates, inserted=inserted)


def run(
    tasks: Iterable[FileTask],
    job: HeaderJob,
    workers: int = DEFAULT_WORKERS,
) -> RunReport:
    """Process every task on a bounded thread pool and collect the outcomes.

    A failing file is recorded in the report; it never stops the other files.
    """
    task_list = list(tasks)
    report = RunReport(operation=job.operation, check_only=job.check_only)
    if not task_list:
        return report

    if job.history is not None and job.operation is Operation.UPDATE:
        if len(task_list) >= PRIME_THRESHOLD:
            job.history.prime(task.path for task in task_list)

    max_workers = min(max(1, workers), len(task_list))
    with concurrent.futures.ThreadPoolExecutor(max_workers=max_workers) as pool:
        futures = {pool.submit(process_file, task, job): task for task in task_list}
        for future in concurrent.futures.as_completed(futures):
            report.results.append(future.result())

    report.results.sort(key=lambda result: str(result.path))
    for result in report.failed:
        logger.error("%s: %s", result.path, result.error)
    return report
