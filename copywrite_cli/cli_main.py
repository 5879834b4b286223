# Copyright (C) 2026 Copywrite Authors
# SPDX-License-Identifier: AGPL-3.0-or-later
"""copywrite CLI entrypoints."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from copywrite import get_version
from copywrite.classify import CONFIG_FILE_NAME
from copywrite.config import Config, load_config, render_config, with_overrides
from copywrite.driver import HeaderJob, Operation, RunReport, run, walk
from copywrite.errors import CopywriteError, GitHubError, LicenseFileError
from copywrite.gitmeta import GitHistory
from copywrite.github import GitHubClient, discover_repo
from copywrite.licensefile import check_license_file, refresh_license_year
from copywrite.templates import LicenseData, fetch_template
from copywrite.years import FileHistory, YearPolicy, parse_year_range

from .gha import ActionsOutput
from .logging_setup import setup_logging
from .reporting import license_summary, run_summary
from .settings import Settings
from .util.stage import stage, stage_done

logger = logging.getLogger(__name__)


def _overrides(args) -> dict:
    return {
        "copyright_holder": getattr(args, "holder", None),
        "license": getattr(args, "spdx", None),
        "copyright_year": getattr(args, "year", None),
        "copyright_year1": getattr(args, "year1", None),
        "copyright_year2": getattr(args, "year2", None),
    }


def _prepare(args) -> Tuple[Settings, Config, ActionsOutput]:
    settings = Settings()
    log_path = Path(settings.log_file) if settings.log_file else None
    setup_logging(settings.resolve_log_level(args.verbose), log_path, settings.github_actions)
    config = with_overrides(load_config(args.config), **_overrides(args))
    return settings, config, ActionsOutput(settings.github_actions)


def _history_for(policy: YearPolicy, history: GitHistory, path: Path) -> FileHistory:
    if policy.start_year > 0:
        return FileHistory()
    return FileHistory(repo_first_year=history.first_commit_year(path))


def _run_job(
    args,
    settings: Settings,
    out: ActionsOutput,
    job: HeaderJob,
    paths: Sequence[str],
    ignore: Sequence[str],
) -> int:
    title = "Checking copyright headers" if job.check_only else "Updating copyright headers"
    start = stage(title, actions=out.enabled)
    report: RunReport = run(walk(paths, ignore), job, workers=settings.workers)
    stage_done(start, note=f"({len(report.results)} files)", actions=out.enabled)

    print(run_summary(report, verbose=args.verbose))
    for result in report.failed:
        out.error(result.error or "failed", file=str(result.path))
    if job.check_only and report.would_modify:
        if out.enabled:
            for result in report.would_modify:
                out.error("copyright header is missing or out of date", file=str(result.path))
        print("Run without the --plan flag to fix this")

    if not job.check_only and report.modified and job.history is not None:
        license_dir = Path(paths[0]) if len(paths) == 1 and Path(paths[0]).is_dir() else Path(".")
        license_history = _history_for(job.policy, job.history, license_dir)
        try:
            if refresh_license_year(license_dir, job.policy, license_history):
                print("LICENSE copyright year updated")
        except LicenseFileError as exc:
            out.error(str(exc))
            return 1
    return report.exit_code


def headers_cmd(args) -> int:
    settings, config, out = _prepare(args)
    project = config.project
    paths = args.paths or ["."]
    policy = YearPolicy(holder=project.copyright_holder, start_year=project.start_year)
    data = LicenseData(holder=project.copyright_holder, spdx_id=project.license)
    job = HeaderJob(
        operation=Operation.UPDATE,
        policy=policy,
        template=fetch_template(project.license, args.template_file),
        license_data=data,
        history=GitHistory(),
        check_only=args.plan,
    )
    return _run_job(args, settings, out, job, paths, project.header_ignore)


def update_cmd(args) -> int:
    settings, config, out = _prepare(args)
    project = config.project
    policy = YearPolicy(
        holder=project.copyright_holder,
        start_year=project.start_year,
        force_current_year=args.force_current_year,
    )
    job = HeaderJob(
        operation=Operation.UPDATE,
        policy=policy,
        template="",
        license_data=LicenseData(holder=project.copyright_holder),
        history=GitHistory(),
        check_only=args.plan,
        insert_missing=False,
    )
    return _run_job(args, settings, out, job, args.paths or ["."], project.header_ignore)


def infer_year_range(directory: str, token: Optional[str]) -> str:
    logger.info(
        "Copyright year was not supplied via config or via the --year/--year1/--year2 flags. "
        "Attempting to infer from the year the GitHub repo was created."
    )
    try:
        repo = discover_repo(directory)
        year = GitHubClient(token).repo_creation_year(repo)
    except GitHubError as exc:
        raise CopywriteError(
            "unable to automatically determine copyright year: Please specify it manually "
            f"in the config or via the --year, --year1, or --year2 flag: {exc}"
        ) from None
    return str(year)


def license_cmd(args) -> int:
    settings, config, out = _prepare(args)
    project = config.project
    year_range = project.year_range() or infer_year_range(args.dir, settings.github_token)

    print(f"Licensing under the following terms: {project.license}")
    print(f"Using year of initial copyright: {year_range}")
    print(f"Using copyright holder: {project.copyright_holder}\n")

    report = check_license_file(
        args.dir,
        holder=project.copyright_holder,
        year_range=year_range,
        spdx_id=project.license,
        plan=args.plan,
    )
    # An explicit end year is kept as configured.
    if not args.plan and report.ok and not project.copyright_year2:
        start, _ = parse_year_range(year_range)
        policy = YearPolicy(holder=project.copyright_holder, start_year=start)
        try:
            if refresh_license_year(args.dir, policy, FileHistory()):
                report.year_updated = True
                report.notes.append("Copyright year advanced to the current year.")
        except LicenseFileError as exc:
            report.errors.append(str(exc))
    print(license_summary(report))
    for message in report.errors + report.findings:
        out.error(message, file=str(report.path) if report.path else None)
    return report.exit_code


def init_cmd(args) -> int:
    settings = Settings()
    setup_logging(settings.resolve_log_level(args.verbose), actions=settings.github_actions)
    target = Path(args.config)
    if target.exists() and not args.force:
        print(f"{target} already exists; use --force to overwrite it", file=sys.stderr)
        return 1
    config = with_overrides(Config(), **_overrides(args))
    target.write_text(render_config(config), encoding="utf-8")
    print(f"Wrote {target}")
    return 0


def debug_cmd(args) -> int:
    settings, config, _ = _prepare(args)
    history = GitHistory()
    root = history.repo_root(Path("."))
    info = {
        "version": get_version(),
        "config_file": str(Path(args.config).resolve()),
        "config_file_exists": Path(args.config).exists(),
        "config": config.model_dump(),
        "git": {
            "repo_root": root,
            "first_commit_year": history.first_commit_year(Path(".")) if root else None,
            "last_commit_year": history.last_commit_year(Path(".")) if root else None,
        },
        "environment": {
            "github_actions": settings.github_actions,
            "runner_debug": settings.runner_debug,
            "github_token_set": bool(settings.github_token),
            "log_level": logging.getLevelName(settings.resolve_log_level(args.verbose)),
            "workers": settings.workers,
        },
    }
    print(json.dumps(info, indent=2, sort_keys=True))
    return 0


def _add_policy_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("-c", "--holder", default=None, help='Copyright holder (default "IBM Corp.")')
    parser.add_argument("-s", "--spdx", default=None, help="SPDX license identifier")
    parser.add_argument("-y", "--year", type=int, default=None, help="Year of initial copyright")
    parser.add_argument("--year1", type=int, default=None, help="Start year for the copyright range")
    parser.add_argument("--year2", type=int, default=None, help="End year for the copyright range")


def _wire_headers(subparsers):
    parser = subparsers.add_parser(
        "headers", help="Add missing copyright headers and update stale ones"
    )
    parser.add_argument("paths", nargs="*", help="Files or directories (default: current directory)")
    parser.add_argument("--plan", action="store_true", help="Dry run; non-zero exit if any file needs a change")
    parser.add_argument("--template-file", default=None, help="Use this file as the header template")
    _add_policy_flags(parser)
    parser.set_defaults(func=headers_cmd)


def _wire_update(subparsers):
    parser = subparsers.add_parser("update", help="Update years and holders of existing copyright statements")
    parser.add_argument("paths", nargs="*", help="Files or directories (default: current directory)")
    parser.add_argument("--plan", action="store_true", help="Dry run; non-zero exit if any file needs a change")
    parser.add_argument(
        "--force-current-year",
        action="store_true",
        help="Move every in-scope end year to the current year regardless of git history",
    )
    _add_policy_flags(parser)
    parser.set_defaults(func=update_cmd)


def _wire_license(subparsers):
    parser = subparsers.add_parser("license", help="Validate the LICENSE file and fix what can be fixed")
    parser.add_argument("-d", "--dir", default=".", help="Directory holding the LICENSE file")
    parser.add_argument("--plan", action="store_true", help="Dry run; non-zero exit if improperly licensed")
    _add_policy_flags(parser)
    parser.set_defaults(func=license_cmd)


def _wire_init(subparsers):
    parser = subparsers.add_parser("init", help=f"Write a commented {CONFIG_FILE_NAME}")
    parser.add_argument("--force", action="store_true", help="Overwrite an existing config file")
    _add_policy_flags(parser)
    parser.set_defaults(func=init_cmd)


def _wire_debug(subparsers):
    parser = subparsers.add_parser("debug", help="Show version, running configuration and environment")
    parser.set_defaults(func=debug_cmd)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="copywrite", description="Insert, check and update copyright headers"
    )
    parser.add_argument("--config", default=CONFIG_FILE_NAME, help="Path to the config file")
    parser.add_argument("-v", "--verbose", action="store_true")
    parser.add_argument("--version", action="version", version=get_version())
    subparsers = parser.add_subparsers(dest="command")
    _wire_headers(subparsers)
    _wire_update(subparsers)
    _wire_license(subparsers)
    _wire_init(subparsers)
    _wire_debug(subparsers)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    func = getattr(args, "func", None)
    if func is None:
        parser.print_help()
        return 0
    try:
        result = func(args)
    except CopywriteError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0 if result is None else int(result)


__all__ = ["build_parser", "main"]
