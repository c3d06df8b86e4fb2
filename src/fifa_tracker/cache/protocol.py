from __future__ import annotations

from typing import Protocol


class CacheStore(Protocol):
    def get(self, key: str) -> object | None: ...

    def set(self, key: str, value: object, ttl_seconds: float | None = None) -> None: ...

    def invalidate(self, pattern: str | None = None) -> None: ...
