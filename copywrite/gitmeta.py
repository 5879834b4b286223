# Copyright (C) 2026 Copywrite Authors
# SPDX-License-Identifier: AGPL-3.0-or-later
"""Commit years from git, cached per repository and per file.

Every lookup returns ``None`` when git is missing, the path is outside a
repository or the history is empty. Nothing here raises for those cases.
"""

from __future__ import annotations

import logging
import os
import subprocess
import threading
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Set, Union

logger = logging.getLogger(__name__)

GitRunner = Callable[[Sequence[str], str], Optional[str]]

YEAR_FORMAT = ("--format=%ad", "--date=format:%Y")
# git expands %x00 itself; argv cannot carry a NUL byte.
_COMMIT_MARK = "\x00"


def run_git(args: Sequence[str], cwd: str) -> Optional[str]:
    """Run ``git args`` in ``cwd``; stdout on success, ``None`` otherwise."""
    try:
        completed = subprocess.run(
            ["git", *args],
            cwd=cwd,
            capture_output=True,
            check=False,
            text=True,
        )
    except (FileNotFoundError, NotADirectoryError) as exc:
        logger.debug("git %s unavailable in %s: %s", " ".join(args), cwd, exc)
        return None
    if completed.returncode != 0:
        logger.debug(
            "git %s exited with status %d in %s: %s",
            " ".join(args),
            completed.returncode,
            cwd,
            completed.stderr.strip(),
        )
        return None
    return completed.stdout


def parse_year(output: Optional[str], first_line: bool = False) -> Optional[int]:
    if not output:
        return None
    lines = [line.strip() for line in output.strip().splitlines() if line.strip()]
    if not lines or (len(lines) > 1 and not first_line):
        return None
    try:
        year = int(lines[0])
    except ValueError:
        return None
    return year if year > 0 else None


class GitHistory:
    def __init__(self, runner: Optional[GitRunner] = None) -> None:
        self._run: GitRunner = runner or run_git
        self._lock = threading.Lock()
        self._roots: Dict[str, Optional[str]] = {}
        self._first_years: Dict[str, Optional[int]] = {}
        self._last_years: Dict[str, Optional[int]] = {}
        self._file_years: Dict[str, Optional[int]] = {}
        self._primed: Dict[str, Dict[str, int]] = {}

    def repo_root(self, path: Union[str, Path]) -> Optional[str]:
        directory = Path(path).resolve()
        if not directory.is_dir():
            directory = directory.parent
        key = str(directory)
        with self._lock:
            if key in self._roots:
                return self._roots[key]
        output = self._run(["rev-parse", "--show-toplevel"], key)
        root = output.strip() if output else ""
        with self._lock:
            return self._roots.setdefault(key, str(Path(root).resolve()) if root else None)

    def first_commit_year(self, path: Union[str, Path]) -> Optional[int]:
        root = self.repo_root(path)
        if root is None:
            return None
        return self._repo_year(self._first_years, root, ["log", "--reverse", *YEAR_FORMAT], True)

    def last_commit_year(self, path: Union[str, Path]) -> Optional[int]:
        root = self.repo_root(path)
        if root is None:
            return None
        return self._repo_year(self._last_years, root, ["log", "-1", *YEAR_FORMAT], False)

    def _repo_year(
        self, cache: Dict[str, Optional[int]], root: str, args: List[str], first_line: bool
    ) -> Optional[int]:
        # git runs unlocked; concurrent misses on one root may both query it.
        with self._lock:
            if root in cache:
                return cache[root]
        year = parse_year(self._run(args, root), first_line=first_line)
        with self._lock:
            return cache.setdefault(root, year)

    def file_last_commit_year(self, path: Union[str, Path]) -> Optional[int]:
        absolute = Path(path).resolve()
        key = str(absolute)
        with self._lock:
            if key in self._file_years:
                return self._file_years[key]

        root = self.repo_root(absolute.parent)
        year: Optional[int] = None
        if root is not None:
            relative = Path(os.path.relpath(absolute, root)).as_posix()
            primed = self._primed.get(root)
            if primed is not None:
                year = primed.get(relative)
            else:
                output = self._run(["log", "-1", *YEAR_FORMAT, "--", relative], root)
                year = parse_year(output)
        with self._lock:
            return self._file_years.setdefault(key, year)

    def prime(self, paths: Iterable[Union[str, Path]]) -> None:
        """Load the last commit year of every file in the repositories holding ``paths``.

        One ``git log --name-only`` per repository replaces a call per file.
        """
        roots: Set[str] = set()
        for path in paths:
            root = self.repo_root(Path(path).resolve().parent)
            if root is not None:
                roots.add(root)
        for root in sorted(roots):
            if root in self._primed:
                continue
            output = self._run(
                ["log", "--format=%x00%ad", "--date=format:%Y", "--name-only"],
                root,
            )
            if output is None:
                continue
            self._primed[root] = _latest_years(output.splitlines())
            logger.debug("primed %d file histories in %s", len(self._primed[root]), root)


def _latest_years(lines: List[str]) -> Dict[str, int]:
    """Map each file named in newest-first ``git log --name-only`` output to its newest year."""
    years: Dict[str, int] = {}
    current: Optional[int] = None
    for line in lines:
        if line.startswith(_COMMIT_MARK):
            try:
                current = int(line[len(_COMMIT_MARK) :].strip())
            except ValueError:
                current = None
            continue
        name = line.strip()
        if name and current is not None:
            years.setdefault(name, current)
    return years
