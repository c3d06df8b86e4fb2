from fifa_tracker.cache.inflight import InFlightRequests
from fifa_tracker.cache.keys import cache_key
from fifa_tracker.cache.memory_store import DEFAULT_TTL_SECONDS, MemoryCacheStore
from fifa_tracker.cache.protocol import CacheStore

__all__ = ["DEFAULT_TTL_SECONDS", "CacheStore", "InFlightRequests", "MemoryCacheStore", "cache_key"]
