# Copyright (C) 2026 Copywrite Authors
# SPDX-License-Identifier: AGPL-3.0-or-later
"""Human-readable summaries of header runs and LICENSE checks."""

from __future__ import annotations

from typing import List

from copywrite.driver import Outcome, RunReport
from copywrite.licensefile import LicenseReport


def run_summary(report: RunReport, verbose: bool = False) -> str:
    output: List[str] = []
    if report.check_only:
        if report.would_modify:
            output.append("The following files need copyright headers added or updated:")
            output.extend(f"  - {result.path}" for result in report.would_modify)
    elif report.modified:
        output.append("Changes:")
        for result in report.modified:
            detail = "header added" if result.inserted else f"{result.updates} statement(s) updated"
            output.append(f"  - {result.path} ({detail})")
    if verbose:
        skipped = report.with_outcome(Outcome.SKIPPED)
        if skipped:
            output.append("Skipped:")
            output.extend(f"  - {result.path}: {result.reason}" for result in skipped)
    if report.failed:
        output.append("Errors:")
        output.extend(f"  - {line}" for line in report.errors)
    output.append(report.summary_line())
    return "\n".join(output)


def license_summary(report: LicenseReport) -> str:
    output = [f"Expected copyright statement: {report.expected}"]
    if report.path is not None:
        output.append(f"License file: {report.path}")
    if report.notes:
        output.append("Notes:")
        output.extend(f"  - {line}" for line in report.notes)
    if report.findings:
        output.append("Findings:")
        output.extend(f"  - {line}" for line in report.findings)
    if report.errors:
        output.append("Errors:")
        output.extend(f"  - {line}" for line in report.errors)
    return "\n".join(output)
