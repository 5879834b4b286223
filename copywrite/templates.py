# Copyright (C) 2026 Copywrite Authors
# SPDX-License-Identifier: AGPL-3.0-or-later
"""Header templates and the per-extension comment styles used to wrap them."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path, PurePath
from typing import Dict, Optional, Union

from .errors import TemplateError


@dataclass(frozen=True)
class CommentStyle:
    top: str
    mid: str
    bottom: str


BLOCK = CommentStyle("/*", " * ", " */")
DOC_BLOCK = CommentStyle("/**", " * ", " */")
SLASHES = CommentStyle("", "// ", "")
HASH = CommentStyle("", "# ", "")
LISP = CommentStyle("", ";; ", "")
ERLANG = CommentStyle("", "% ", "")
DASHES = CommentStyle("", "-- ", "")
HANDLEBARS = CommentStyle("{{!", "  ", "}}")
MARKUP = CommentStyle("<!--", " ", "-->")
OCAML = CommentStyle("(**", "   ", "*)")
EJS = CommentStyle("<%/*", "  ", "*/%>")

_STYLE_GROUPS = (
    (BLOCK, (".c", ".h", ".gv", ".java", ".scala", ".kt", ".kts")),
    (
        DOC_BLOCK,
        (".js", ".mjs", ".cjs", ".jsx", ".tsx", ".css", ".scss", ".sass", ".ts", ".gjs", ".gts"),
    ),
    (
        SLASHES,
        (
            ".cc", ".cpp", ".cs", ".go", ".hh", ".hpp", ".m", ".mm", ".proto", ".rs",
            ".swift", ".dart", ".groovy", ".v", ".sv", ".lr", ".php",
        ),
    ),
    (
        HASH,
        (
            ".py", ".sh", ".bash", ".zsh", ".yaml", ".yml", ".dockerfile", "dockerfile",
            ".rb", "gemfile", ".ru", ".tcl", ".hcl", ".tf", ".tfvars", ".nomad", ".bzl",
            ".pl", ".pp", ".ps1", ".psd1", ".psm1", ".txtar", ".sentinel",
        ),
    ),
    (LISP, (".el", ".lisp")),
    (ERLANG, (".erl",)),
    (DASHES, (".hs", ".sql", ".sdl")),
    (HANDLEBARS, (".hbs",)),
    (MARKUP, (".html", ".htm", ".xml", ".vue", ".wxi", ".wxl", ".wxs")),
    (OCAML, (".ml", ".mli", ".mll", ".mly")),
    (EJS, (".ejs",)),
)

COMMENT_STYLES: Dict[str, CommentStyle] = {
    key: style for style, keys in _STYLE_GROUPS for key in keys
}

SPDX_TEMPLATE = "{notice}\nSPDX-License-Identifier: {spdx_id}"

APACHE_TEMPLATE = """{notice}

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at

    http://www.apache.org/licenses/LICENSE-2.0

Unless required by applicable law or agreed to in writing, software
distributed under the License is distributed on an "AS IS" BASIS,
WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
See the License for the specific language governing permissions and
limitations under the License."""

MIT_TEMPLATE = """{notice}

Permission is hereby granted, free of charge, to any person obtaining a copy
of this software and associated documentation files (the "Software"), to deal
in the Software without restriction, including without limitation the rights
to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
copies of the Software, and to permit persons to whom the Software is
furnished to do so, subject to the following conditions:

The above copyright notice and this permission notice shall be included in
all copies or substantial portions of the Software.

THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN
THE SOFTWARE."""

BSD_TEMPLATE = """{notice} All rights reserved.
Use of this source code is governed by a BSD-style
license that can be found in the LICENSE file."""

MPL_TEMPLATE = """{notice}

This Source Code Form is subject to the terms of the Mozilla Public
License, v. 2.0. If a copy of the MPL was not distributed with this
file, You can obtain one at https://mozilla.org/MPL/2.0/."""

LICENSE_TEMPLATES: Dict[str, str] = {
    "Apache-2.0": APACHE_TEMPLATE,
    "MIT": MIT_TEMPLATE,
    "BSD-3-Clause": BSD_TEMPLATE,
    "MPL-2.0": MPL_TEMPLATE,
}

LEGACY_LICENSE_NAMES = {
    "apache": "Apache-2.0",
    "mit": "MIT",
    "bsd": "BSD-3-Clause",
    "mpl": "MPL-2.0",
}

SPDX_OFF = "off"
SPDX_ON = "on"
SPDX_ONLY = "only"

# Identifiers accepted without a network lookup; extend as projects need them.
KNOWN_SPDX_IDS = frozenset(
    {
        "0BSD", "AFL-3.0", "AGPL-3.0-only", "AGPL-3.0-or-later", "Apache-1.1",
        "Apache-2.0", "Artistic-2.0", "BSD-1-Clause", "BSD-2-Clause",
        "BSD-2-Clause-Patent", "BSD-3-Clause", "BSD-3-Clause-Clear", "BSD-4-Clause",
        "BSL-1.0", "BUSL-1.1", "CC-BY-4.0", "CC-BY-SA-4.0", "CC0-1.0",
        "CDDL-1.0", "CDDL-1.1", "CECILL-2.1", "ECL-2.0", "EPL-1.0", "EPL-2.0",
        "EUPL-1.1", "EUPL-1.2", "GPL-2.0-only", "GPL-2.0-or-later", "GPL-3.0-only",
        "GPL-3.0-or-later", "ISC", "LGPL-2.1-only", "LGPL-2.1-or-later",
        "LGPL-3.0-only", "LGPL-3.0-or-later", "LPPL-1.3c", "MIT", "MIT-0",
        "MPL-1.1", "MPL-2.0", "MPL-2.0-no-copyleft-exception", "MS-PL", "MS-RL",
        "MulanPSL-2.0", "NCSA", "ODbL-1.0", "OFL-1.1", "OSL-3.0", "PostgreSQL",
        "Python-2.0", "Unlicense", "UPL-1.0", "Vim", "W3C", "WTFPL", "Zlib",
        "ZPL-2.1",
    }
)


@dataclass(frozen=True)
class LicenseData:
    holder: str
    year: str = ""
    spdx_id: str = ""

    @property
    def notice(self) -> str:
        return " ".join(part for part in ("Copyright", self.holder, self.year) if part)

    def fields(self) -> Dict[str, str]:
        return {
            "holder": self.holder,
            "year": self.year,
            "spdx_id": self.spdx_id,
            "notice": self.notice,
        }


def normalize_license(name: str) -> str:
    return LEGACY_LICENSE_NAMES.get(name, name)


def valid_spdx(spdx_id: str) -> bool:
    return spdx_id in KNOWN_SPDX_IDS


def file_extension(name: str) -> str:
    """Lowercased extension of ``name``, or the whole name when it has none."""
    ext = os.path.splitext(name)[1]
    return ext if ext else name


def comment_style(path: Union[str, PurePath]) -> Optional[CommentStyle]:
    base = PurePath(path).name.lower()
    style = COMMENT_STYLES.get(file_extension(base))
    if style is not None:
        return style
    if base == "cmakelists.txt" or base.endswith(".cmake") or base.endswith(".cmake.in"):
        return HASH
    return None


def fetch_template(
    spdx_id: str = "",
    template_file: Optional[Union[str, Path]] = None,
    spdx: str = SPDX_ONLY,
) -> str:
    """Pick the header template for a license.

    A template file always wins. Otherwise ``spdx`` decides: ``only`` gives the
    two-line SPDX header, ``on`` appends an SPDX line to the license text and
    ``off`` uses the license text alone.
    """
    if template_file:
        try:
            return Path(template_file).read_text(encoding="utf-8")
        except OSError as exc:
            raise TemplateError(f"cannot read template file {template_file}: {exc}") from exc

    spdx_id = normalize_license(spdx_id)
    if spdx == SPDX_ONLY:
        return SPDX_TEMPLATE

    template = LICENSE_TEMPLATES.get(spdx_id)
    if template is None:
        if spdx == SPDX_ON and spdx_id:
            return SPDX_TEMPLATE
        raise TemplateError(f"unknown license: {spdx_id!r}")
    if spdx == SPDX_ON:
        template = f"{template}\n\nSPDX-License-Identifier: {{spdx_id}}"
    return template


def execute_template(template: str, data: LicenseData, style: CommentStyle) -> str:
    try:
        text = template.format_map(data.fields())
    except (KeyError, IndexError, ValueError) as exc:
        raise TemplateError(f"cannot render header template: {exc}") from exc

    out = []
    if style.top:
        out.append(style.top + "\n")
    for line in text.splitlines():
        out.append((style.mid + line).rstrip() + "\n")
    if style.bottom:
        out.append(style.bottom + "\n")
    out.append("\n")
    return "".join(out)


def render_header(
    path: Union[str, PurePath], template: str, data: LicenseData
) -> Optional[str]:
    """Comment-wrapped header for ``path``, or ``None`` for unknown file types."""
    style = comment_style(path)
    if style is None:
        return None
    return execute_template(template, data, style)
