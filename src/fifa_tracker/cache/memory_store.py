from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, NamedTuple

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 30.0


class _Entry(NamedTuple):
    value: object
    expires_at: float


class MemoryCacheStore:
    """Process-local cache of query results with per-entry expiry.

    Expired entries are dropped lazily when read. There is no size bound;
    entries only leave through expiry or ``invalidate``.
    """

    def __init__(
        self,
        default_ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._default_ttl_seconds = default_ttl_seconds
        self._clock = clock
        self._entries: dict[str, _Entry] = {}

    def get(self, key: str) -> object | None:
        entry = self._entries.get(key)
        if entry is not None and self._clock() < entry.expires_at:
            return entry.value
        self._entries.pop(key, None)
        return None

    def set(self, key: str, value: object, ttl_seconds: float | None = None) -> None:
        ttl = self._default_ttl_seconds if ttl_seconds is None else ttl_seconds
        self._entries[key] = _Entry(value, self._clock() + ttl)

    def invalidate(self, pattern: str | None = None) -> None:
        """Drop every key containing *pattern*, or everything when it is ``None``."""
        if pattern is None:
            logger.debug("Clearing %d cache entries", len(self._entries))
            self._entries.clear()
            return
        stale = [key for key in self._entries if pattern in key]
        for key in stale:
            del self._entries[key]
        logger.debug("Invalidated %d cache entries matching %r", len(stale), pattern)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)
