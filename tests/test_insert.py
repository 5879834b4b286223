# Copyright (C) 2026 Copywrite Authors
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import stat

from copywrite.insert import insert_header, write_file
from copywrite.templates import SPDX_TEMPLATE, LicenseData

DATA = LicenseData(holder="IBM Corp.", year="2026", spdx_id="MPL-2.0")
GO_HEADER = "// Copyright IBM Corp. 2026\n// SPDX-License-Identifier: MPL-2.0\n\n"
SH_HEADER = "# Copyright IBM Corp. 2026\n# SPDX-License-Identifier: MPL-2.0\n\n"


def test_header_goes_first():
    result = insert_header("package main\n", "main.go", SPDX_TEMPLATE, DATA)
    assert result.inserted
    assert result.content == GO_HEADER + "package main\n"


def test_header_goes_below_shebang():
    result = insert_header("#!/bin/sh\necho hi\n", "run.sh", SPDX_TEMPLATE, DATA)
    assert result.content == "#!/bin/sh\n" + SH_HEADER + "echo hi\n"


def test_shebang_without_newline_gets_one():
    result = insert_header("#!/bin/sh", "run.sh", SPDX_TEMPLATE, DATA)
    assert result.content == "#!/bin/sh\n" + SH_HEADER


def test_header_goes_below_sentinel_description():
    content = "# Enforce tags\n\nmain = rule { true }\n"
    result = insert_header(content, "policy.sentinel", SPDX_TEMPLATE, DATA)
    assert result.content == "# Enforce tags\n\n" + SH_HEADER + "main = rule { true }\n"


def test_files_with_a_license_are_left_alone():
    content = "// Copyright Someone 2001\npackage main\n"
    result = insert_header(content, "main.go", SPDX_TEMPLATE, DATA)
    assert not result.inserted
    assert result.reason == "has license"
    assert result.content == content


def test_generated_files_are_left_alone():
    content = "// Code generated by mockgen. DO NOT EDIT.\npackage mocks\n"
    result = insert_header(content, "mock.go", SPDX_TEMPLATE, DATA)
    assert result.reason == "generated"


def test_unknown_file_types_are_reported():
    result = insert_header("data\n", "blob.bin", SPDX_TEMPLATE, DATA)
    assert not result.inserted
    assert result.reason == "no applicable header format"


def test_write_file_keeps_permissions(tmp_path):
    script = tmp_path / "run.sh"
    script.write_text("echo hi\n", encoding="utf-8")
    script.chmod(0o755)

    write_file(script, "#!/bin/sh\necho hi\n")

    assert script.read_text(encoding="utf-8") == "#!/bin/sh\necho hi\n"
    assert stat.S_IMODE(script.stat().st_mode) == 0o755
    assert sorted(p.name for p in tmp_path.iterdir()) == ["run.sh"]


def test_write_file_does_not_translate_newlines(tmp_path):
    target = tmp_path / "main.go"
    target.write_bytes(b"x\r\n")
    write_file(target, "// hi\r\nx\r\n")
    assert target.read_bytes() == b"// hi\r\nx\r\n"
