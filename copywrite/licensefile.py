# Copyright (C) 2026 Copywrite Authors
# SPDX-License-Identifier: AGPL-3.0-or-later
"""Keep exactly one properly named LICENSE file with the expected copyright statement."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field, replace
from importlib import resources
from pathlib import Path
from typing import List, Optional, Union

from .errors import LicenseFileError
from .insert import write_file
from .rewrite import update_content
from .years import FileHistory, YearPolicy

logger = logging.getLogger(__name__)

LICENSE_NAME = "LICENSE"
LICENSE_FILE_PATTERN = re.compile(r"^(license\.md|license\.txt|license)$", re.IGNORECASE)
HEADER_SCAN_LIMIT = 300

BUNDLED_LICENSES = {
    "Apache-2.0": "Apache-2.0.txt",
    "BSD-3-Clause": "BSD-3-Clause.txt",
    "MIT": "MIT.txt",
    "MPL-2.0": "MPL-2.0.txt",
}


@dataclass
class LicenseReport:
    directory: Path
    plan: bool
    expected: str
    path: Optional[Path] = None
    created: bool = False
    renamed: bool = False
    header_added: bool = False
    year_updated: bool = False
    findings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    notes: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.findings and not self.errors

    @property
    def exit_code(self) -> int:
        return 0 if self.ok else 1


def expected_statement(holder: str, year_range: str = "") -> str:
    return " ".join(part for part in ("Copyright", holder, year_range) if part)


def find_license_files(directory: Union[str, Path]) -> List[Path]:
    base = Path(directory)
    if not base.is_dir():
        raise LicenseFileError(f"{base} is not a directory")
    return sorted(
        entry for entry in base.iterdir() if entry.is_file() and LICENSE_FILE_PATTERN.match(entry.name)
    )


def ensure_correct_name(path: Union[str, Path]) -> Path:
    """Rename ``path`` to ``LICENSE`` in the same directory; returns the new path."""
    path = Path(path)
    desired = path.with_name(LICENSE_NAME)
    if path.name == LICENSE_NAME:
        return path
    logger.info('Found improperly named file "%s". Renaming to "%s"', path, desired)
    try:
        path.rename(desired)
    except OSError as exc:
        raise LicenseFileError(f'unable to rename file "{path}": {exc}') from exc
    return desired


def license_text(spdx_id: str) -> str:
    name = BUNDLED_LICENSES.get(spdx_id)
    if name is None:
        options = ", ".join(sorted(BUNDLED_LICENSES))
        raise LicenseFileError(
            f"unknown SPDX license ID: {spdx_id}. The following options are supported at this time: {options}"
        )
    return resources.files("copywrite").joinpath("licenses", name).read_text(encoding="utf-8")


def add_license_file(directory: Union[str, Path], spdx_id: str) -> Path:
    """Write the bundled text for ``spdx_id`` to ``directory/LICENSE``.

    No copyright statement is added; call :func:`add_header` for that.
    """
    text = license_text(spdx_id)
    destination = Path(directory).resolve() / LICENSE_NAME
    try:
        destination.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise LicenseFileError(f"unable to write {destination}: {exc}") from exc
    return destination


def _head(path: Union[str, Path]) -> str:
    try:
        with open(path, "r", encoding="utf-8", errors="replace") as handle:
            return handle.read(HEADER_SCAN_LIMIT)
    except OSError as exc:
        raise LicenseFileError(f"unable to read {path}: {exc}") from exc


def has_copyright(path: Union[str, Path]) -> bool:
    return "copyright" in _head(path).lower()


def has_matching_copyright(path: Union[str, Path], statement: str, case_sensitive: bool = True) -> bool:
    head = _head(path)
    if case_sensitive:
        return statement in head
    return statement.lower() in head.lower()


def add_header(path: Union[str, Path], header: str) -> None:
    """Prepend ``header`` and a blank line to the file at ``path``."""
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8", newline="") as handle:
            content = handle.read()
        write_file(path, header + "\n\n" + content)
    except OSError as exc:
        raise LicenseFileError(f"unable to add header to {path}: {exc}") from exc


def check_license_file(
    directory: Union[str, Path],
    holder: str,
    year_range: str = "",
    spdx_id: str = "MPL-2.0",
    plan: bool = False,
) -> LicenseReport:
    directory = Path(directory)
    report = LicenseReport(directory=directory, plan=plan, expected=expected_statement(holder, year_range))

    try:
        files = find_license_files(directory)
    except LicenseFileError as exc:
        report.errors.append(str(exc))
        return report

    if len(files) > 1:
        names = ", ".join(str(path) for path in files)
        report.errors.append(
            "more than one license file exists: Please review the following files and "
            f"manually ensure only one is present: {names}"
        )
        return report

    if not files:
        if plan:
            report.findings.append("missing license file. Run without the --plan flag to fix this")
            return report
        try:
            report.path = add_license_file(directory, spdx_id)
            add_header(report.path, report.expected)
        except LicenseFileError as exc:
            report.errors.append(str(exc))
            return report
        report.created = True
        report.header_added = True
        report.notes.append("No license file found, created one.")
        return report

    path = files[0]
    if plan:
        if path.name != LICENSE_NAME:
            report.findings.append("license file is misnamed. Run without the --plan flag to fix this")
        else:
            report.notes.append("License file is present and named properly!")
    else:
        try:
            renamed = ensure_correct_name(path)
        except LicenseFileError as exc:
            report.errors.append(str(exc))
            return report
        report.renamed = renamed != path
        path = renamed
    report.path = path

    try:
        if has_copyright(path):
            if has_matching_copyright(path, report.expected):
                report.notes.append("Copyright statement is valid!")
            else:
                report.errors.append(
                    "license file has a copyright statement, but it is malformed; "
                    f'Expected to find: "{report.expected}" Please resolve this manually'
                )
        elif plan:
            report.findings.append(
                "a LICENSE file exists, but the copyright statement is missing. "
                "Run without the --plan flag to fix this"
            )
        else:
            add_header(path, report.expected)
            report.header_added = True
            report.notes.append("Copyright statement was missing, added it.")
    except LicenseFileError as exc:
        report.errors.append(str(exc))
    return report


def refresh_license_year(
    directory: Union[str, Path],
    policy: YearPolicy,
    history: FileHistory,
    check_only: bool = False,
) -> bool:
    """Advance the LICENSE copyright to the current year after a header run.

    Returns True when the file changed (or would change with ``check_only``).
    Raises ``LicenseFileError`` when the new text cannot be written.
    """
    try:
        files = find_license_files(directory)
    except LicenseFileError as exc:
        logger.debug("skipping LICENSE year refresh: %s", exc)
        return False
    if len(files) != 1:
        return False
    path = files[0]
    try:
        with open(path, "r", encoding="utf-8", newline="") as handle:
            content = handle.read()
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("%s: %s", path, exc)
        return False

    result = update_content(content, path, replace(policy, force_current_year=True), history)
    if not result.changed:
        return False
    if not check_only:
        try:
            write_file(path, result.content)
        except OSError as exc:
            raise LicenseFileError(f"unable to update copyright year in {path}: {exc}") from exc
        logger.info("%s copyright year updated", path)
    return True
