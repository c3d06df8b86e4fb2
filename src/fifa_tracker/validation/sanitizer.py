from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Mapping

_SCRIPT_BLOCK = re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE)


def strip_scripts(text: str) -> str:
    return _SCRIPT_BLOCK.sub("", text.strip())


def sanitize(record: Mapping[str, Any]) -> dict[str, Any]:
    """Return a copy of *record* with string values trimmed and script blocks removed."""
    return {key: strip_scripts(value) if isinstance(value, str) else value for key, value in record.items()}
