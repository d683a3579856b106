"""Helpers shared by unit and integration tests."""

from __future__ import annotations

import re

# "#Mon Oct 19 12:00:00 UTC 2026"
DATE_COMMENT = re.compile(r"^#\w{3} \w{3} \d{2} \d{2}:\d{2}:\d{2} .*\d{4}$")
