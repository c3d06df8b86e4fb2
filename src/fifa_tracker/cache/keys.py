from __future__ import annotations

import json
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping


def cache_key(table: str, query: str, options: Mapping[str, object] | None = None) -> str:
    """Return ``"<table>:<canonical json>"`` for a read.

    Keys are sorted so logically identical options always produce the same
    string. The table name leads the key so writes can invalidate by substring.
    """
    shape = {"query": query, "options": dict(options or {})}
    return f"{table}:{json.dumps(shape, sort_keys=True, separators=(',', ':'), default=str)}"
