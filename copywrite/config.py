# Copyright (C) 2026 Copywrite Authors
# SPDX-License-Identifier: AGPL-3.0-or-later
"""Project configuration stored in ``.copywrite.toml``."""

from __future__ import annotations

import json
import tomllib
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from .classify import CONFIG_FILE_NAME
from .errors import ConfigError
from .templates import normalize_license, valid_spdx
from .years import format_year_field

SCHEMA_VERSION = 1
DEFAULT_HOLDER = "IBM Corp."
DEFAULT_LICENSE = "MPL-2.0"


def _check_year(value: int) -> int:
    if value and not 1000 <= value <= 9999:
        raise ValueError(f"{value} is not a four digit year")
    return value


class Project(BaseModel):
    model_config = ConfigDict(extra="forbid")

    copyright_holder: str = DEFAULT_HOLDER
    copyright_year: int = 0
    copyright_year1: int = 0
    copyright_year2: int = 0
    license: str = DEFAULT_LICENSE
    header_ignore: List[str] = Field(default_factory=list)
    upstream: str = ""

    @field_validator("copyright_year", "copyright_year1", "copyright_year2")
    @classmethod
    def _four_digit_year(cls, value: int) -> int:
        return _check_year(value)

    @field_validator("license")
    @classmethod
    def _known_license(cls, value: str) -> str:
        value = normalize_license(value.strip())
        if value and not valid_spdx(value):
            raise ValueError(f"{value!r} is not a recognized SPDX license identifier")
        return value

    @model_validator(mode="after")
    def _ordered_range(self) -> "Project":
        if self.copyright_year1 and self.copyright_year2 and self.copyright_year2 < self.copyright_year1:
            raise ValueError("copyright_year2 must not be earlier than copyright_year1")
        return self

    @property
    def start_year(self) -> int:
        return self.copyright_year1 or self.copyright_year

    def year_range(self) -> str:
        """Year field for LICENSE statements; year1/year2 win over the legacy single year."""
        if self.copyright_year1 or self.copyright_year2:
            return format_year_field(self.copyright_year1, self.copyright_year2)
        if self.copyright_year:
            return str(self.copyright_year)
        return ""


class Config(BaseModel):
    model_config = ConfigDict(extra="forbid")

    schema_version: int = SCHEMA_VERSION
    project: Project = Field(default_factory=Project)

    @field_validator("schema_version")
    @classmethod
    def _supported_schema(cls, value: int) -> int:
        if value != SCHEMA_VERSION:
            raise ValueError(f"unsupported schema_version {value}, expected {SCHEMA_VERSION}")
        return value


def _problems(exc: ValidationError) -> List[str]:
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()))
        message = error.get("msg", "invalid value")
        problems.append(f"{location}: {message}" if location else message)
    return problems


def parse_config(data: Dict[str, Any], source: str = CONFIG_FILE_NAME) -> Config:
    try:
        return Config(**data)
    except ValidationError as exc:
        raise ConfigError(f"invalid configuration in {source}", _problems(exc)) from None


def load_config(path: Optional[Union[str, Path]] = None) -> Config:
    """Read ``path`` (default ``.copywrite.toml``); a missing file gives the defaults."""
    path = Path(path or CONFIG_FILE_NAME)
    if not path.exists():
        return Config()
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigError(f"unable to read {path}: {exc}") from None
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"unable to parse {path}: {exc}") from None
    return parse_config(data, str(path))


def with_overrides(config: Config, **overrides: Any) -> Config:
    """Copy of ``config`` with the given project keys replaced.

    ``None`` means the flag was not given and leaves the file value alone.
    """
    updates = {key: value for key, value in overrides.items() if value is not None}
    if not updates:
        return config
    data = config.model_dump()
    data["project"].update(updates)
    return parse_config(data, "command-line flags")


def _toml_string(value: str) -> str:
    # JSON string literals are valid TOML basic strings.
    return json.dumps(value, ensure_ascii=False)


def render_config(config: Config) -> str:
    """TOML text for ``copywrite init``."""
    project = config.project
    ignore = ", ".join(_toml_string(pattern) for pattern in project.header_ignore)
    return f"""schema_version = {config.schema_version}

[project]
# Holder named in every copyright statement this tool writes.
copyright_holder = {_toml_string(project.copyright_holder)}

# First year of copyright. 0 means infer it from the repository history.
copyright_year = {project.copyright_year}

# Optional explicit year range for the LICENSE statement.
# copyright_year1 = 2020
# copyright_year2 = 2026

# SPDX identifier used for new headers and LICENSE files.
license = {_toml_string(project.license)}

# Doublestar globs of files that never get headers, e.g. "vendor/**".
header_ignore = [{ignore}]

# Upstream repository this project was forked from, if any.
upstream = {_toml_string(project.upstream)}
"""
