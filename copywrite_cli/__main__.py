# Copyright (C) 2026 Copywrite Authors
# SPDX-License-Identifier: AGPL-3.0-or-later

from copywrite_cli.cli_main import main

raise SystemExit(main())
