# Copyright (C) 2026 Copywrite Authors
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import os
import shutil
import subprocess
import threading

import pytest

from copywrite import gitmeta
from copywrite.driver import HeaderJob, Operation, run, walk
from copywrite.gitmeta import GitHistory, parse_year, run_git
from copywrite.templates import LicenseData
from copywrite.years import YearPolicy

FIRST = ("log", "--reverse", "--format=%ad", "--date=format:%Y")
LAST = ("log", "-1", "--format=%ad", "--date=format:%Y")
TOPLEVEL = ("rev-parse", "--show-toplevel")
NAME_ONLY = ("log", "--format=%x00%ad", "--date=format:%Y", "--name-only")


class FakeGit:
    """Answers git invocations from a table keyed by argument tuple."""

    def __init__(self, responses):
        self.responses = responses
        self.calls = []

    def __call__(self, args, cwd):
        self.calls.append(tuple(args))
        return self.responses.get(tuple(args))


def make_repo(tmp_path):
    src = tmp_path / "src"
    src.mkdir()
    for name in ("a.go", "b.go", "c.go"):
        (src / name).write_text("package src\n", encoding="utf-8")
    return src


def test_parse_year():
    assert parse_year("2024\n") == 2024
    assert parse_year("") is None
    assert parse_year(None) is None
    assert parse_year("soon\n") is None
    assert parse_year("2019\n2020\n") is None
    assert parse_year("2019\n2020\n", first_line=True) == 2019


def test_repository_years(tmp_path):
    fake = FakeGit(
        {
            TOPLEVEL: f"{tmp_path}\n",
            FIRST: "2019\n2021\n2024\n",
            LAST: "2025\n",
        }
    )
    history = GitHistory(runner=fake)

    assert history.repo_root(tmp_path) == str(tmp_path.resolve())
    assert history.first_commit_year(tmp_path) == 2019
    assert history.last_commit_year(tmp_path) == 2025
    # Each lookup hits git once per repository.
    history.first_commit_year(tmp_path)
    history.last_commit_year(tmp_path)
    assert fake.calls.count(FIRST) == 1
    assert fake.calls.count(LAST) == 1
    assert fake.calls.count(TOPLEVEL) == 1


def test_file_year_is_looked_up_once(tmp_path):
    src = make_repo(tmp_path)
    per_file = LAST + ("--", "src/a.go")
    fake = FakeGit({TOPLEVEL: f"{tmp_path}\n", per_file: "2024\n"})
    history = GitHistory(runner=fake)

    assert history.file_last_commit_year(src / "a.go") == 2024
    assert history.file_last_commit_year(src / "a.go") == 2024
    assert fake.calls.count(per_file) == 1


def test_outside_a_repository_everything_is_unknown(tmp_path):
    history = GitHistory(runner=FakeGit({}))
    assert history.repo_root(tmp_path) is None
    assert history.first_commit_year(tmp_path) is None
    assert history.last_commit_year(tmp_path) is None
    assert history.file_last_commit_year(tmp_path / "missing.go") is None


def test_prime_replaces_per_file_calls(tmp_path):
    src = make_repo(tmp_path)
    log = "\x002025\nsrc/a.go\n\n\x002020\nsrc/a.go\nsrc/b.go\n"
    fake = FakeGit({TOPLEVEL: f"{tmp_path}\n", NAME_ONLY: log})
    history = GitHistory(runner=fake)

    history.prime([src / "a.go", src / "b.go", src / "c.go"])

    assert history.file_last_commit_year(src / "a.go") == 2025
    assert history.file_last_commit_year(src / "b.go") == 2020
    assert history.file_last_commit_year(src / "c.go") is None
    assert fake.calls.count(NAME_ONLY) == 1
    assert not [call for call in fake.calls if "--" in call]


def test_lookups_for_different_repositories_overlap(tmp_path):
    one = tmp_path / "one"
    two = tmp_path / "two"
    one.mkdir()
    two.mkdir()
    released = threading.Event()
    waited = []

    def runner(args, cwd):
        if cwd == str(one.resolve()):
            waited.append(released.wait(timeout=5))
        else:
            released.set()
        return f"{cwd}\n"

    history = GitHistory(runner=runner)
    worker = threading.Thread(target=history.repo_root, args=(one,))
    worker.start()
    assert history.repo_root(two) == str(two.resolve())
    worker.join(timeout=10)

    assert waited == [True]
    assert history.repo_root(one) == str(one.resolve())


def test_run_git_without_git_installed(monkeypatch, tmp_path):
    def missing(*args, **kwargs):
        raise FileNotFoundError("git")

    monkeypatch.setattr(gitmeta.subprocess, "run", missing)
    assert run_git(["status"], str(tmp_path)) is None


def test_run_git_nonzero_exit(monkeypatch, tmp_path):
    def failing(cmd, **kwargs):
        return subprocess.CompletedProcess(cmd, 128, stdout="", stderr="fatal: not a git repository")

    monkeypatch.setattr(gitmeta.subprocess, "run", failing)
    assert run_git(["rev-parse", "--show-toplevel"], str(tmp_path)) is None


def test_run_git_returns_stdout(monkeypatch, tmp_path):
    seen = {}

    def ok(cmd, **kwargs):
        seen["cmd"] = cmd
        seen["cwd"] = kwargs["cwd"]
        return subprocess.CompletedProcess(cmd, 0, stdout="2024\n", stderr="")

    monkeypatch.setattr(gitmeta.subprocess, "run", ok)
    assert run_git(["log", "-1"], str(tmp_path)) == "2024\n"
    assert seen == {"cmd": ["git", "log", "-1"], "cwd": str(tmp_path)}


needs_git = pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")


def git(repo, *args, date="2021-06-01T12:00:00"):
    env = dict(
        os.environ,
        GIT_AUTHOR_NAME="Test",
        GIT_AUTHOR_EMAIL="test@example.com",
        GIT_COMMITTER_NAME="Test",
        GIT_COMMITTER_EMAIL="test@example.com",
        GIT_AUTHOR_DATE=date,
        GIT_COMMITTER_DATE=date,
    )
    subprocess.run(
        ["git", "-c", "commit.gpgsign=false", *args],
        cwd=repo,
        env=env,
        check=True,
        capture_output=True,
    )


@needs_git
def test_prime_against_a_real_repository(tmp_path):
    src = make_repo(tmp_path)
    git(tmp_path, "init", "-q")
    git(tmp_path, "add", ".")
    git(tmp_path, "commit", "-q", "-m", "first", date="2019-03-01T12:00:00")
    (src / "a.go").write_text("package src\n\nfunc A() {}\n", encoding="utf-8")
    git(tmp_path, "commit", "-q", "-am", "second", date="2022-03-01T12:00:00")

    history = GitHistory()
    history.prime([src / "a.go", src / "b.go", src / "c.go"])

    assert history.file_last_commit_year(src / "a.go") == 2022
    assert history.file_last_commit_year(src / "b.go") == 2019
    assert history.first_commit_year(src) == 2019
    assert history.last_commit_year(src) == 2022


@needs_git
def test_large_update_run_inside_a_repository(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    for idx in range(20):
        (tmp_path / f"f{idx:02d}.go").write_text(
            "// Copyright IBM Corp. 2019\npackage main\n", encoding="utf-8"
        )
    git(tmp_path, "init", "-q")
    git(tmp_path, "add", ".")
    git(tmp_path, "commit", "-q", "-m", "files", date="2021-06-01T12:00:00")

    job = HeaderJob(
        operation=Operation.UPDATE,
        policy=YearPolicy(holder="IBM Corp.", start_year=2019, current_year=2026),
        template="",
        license_data=LicenseData(holder="IBM Corp."),
        history=GitHistory(),
        check_only=True,
        insert_missing=False,
    )
    report = run(walk(["."]), job)

    assert len(report.results) == 20
    assert not report.failed
    # Committed in 2021 after the 2019 statement was written.
    assert len(report.would_modify) == 20
