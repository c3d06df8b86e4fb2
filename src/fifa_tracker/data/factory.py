from __future__ import annotations

from typing import TYPE_CHECKING

from fifa_tracker.cache.memory_store import MemoryCacheStore
from fifa_tracker.config import ConfigurationError, load_data_settings
from fifa_tracker.data.manager import DataManager
from fifa_tracker.data.retry import RetryExecutor
from fifa_tracker.db.connection import ConnectionMonitor
from fifa_tracker.db.postgrest import PostgrestClient

if TYPE_CHECKING:
    import httpx

    from fifa_tracker.config import AppConfig


def create_data_manager(
    config: AppConfig | None = None,
    http: httpx.AsyncClient | None = None,
    monitor: ConnectionMonitor | None = None,
) -> DataManager:
    """Build a DataManager wired to the hosted database described by *config*."""
    settings = load_data_settings(config)
    if not settings.database_url:
        raise ConfigurationError("database.url is required (FIFA_TRACKER__DATABASE__URL)")
    if not settings.api_key:
        raise ConfigurationError("database.api_key is required (FIFA_TRACKER__DATABASE__API_KEY)")

    connectivity = monitor or ConnectionMonitor()
    client = PostgrestClient(settings.database_url, settings.api_key, http=http, timeout=settings.timeout)
    return DataManager(
        client,
        connectivity=connectivity,
        cache=MemoryCacheStore(default_ttl_seconds=settings.cache_ttl_seconds),
        retry=RetryExecutor(
            connectivity,
            max_attempts=settings.max_attempts,
            backoff_initial=settings.backoff_initial,
            backoff_max=settings.backoff_max,
        ),
    )
