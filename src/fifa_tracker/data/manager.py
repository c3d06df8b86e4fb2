"""Query/mutation façade over the remote database.

Reads go cache -> in-flight tracker -> retry executor -> remote client, and
successful results are cached. Writes are sanitized and validated, executed
through the retry executor, then invalidate every cached read of the table.

Usage:
    manager = DataManager(PostgrestClient(url, key), connectivity=monitor)
    players = await manager.get_players_by_team("AEK")
    await manager.insert("players", {"name": "Max Müller", "team": "AEK"})
    app_data = await manager.load_all_app_data()
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import TYPE_CHECKING, Any

from fifa_tracker.cache.inflight import InFlightRequests
from fifa_tracker.cache.keys import cache_key
from fifa_tracker.cache.memory_store import MemoryCacheStore
from fifa_tracker.data.models import AppData, BatchRequest, BatchResult, Order, SelectOptions, SelectResult
from fifa_tracker.data.retry import RetryExecutor, is_non_retryable
from fifa_tracker.errors import MissingIdError, ValidationError
from fifa_tracker.result import capture
from fifa_tracker.validation.sanitizer import sanitize
from fifa_tracker.validation.validator import Validator

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from fifa_tracker.cache.protocol import CacheStore
    from fifa_tracker.data.models import Row
    from fifa_tracker.db.protocol import APIResponse, ConnectivityMonitor, DatabaseClient, QueryBuilder

logger = logging.getLogger(__name__)

_NEWEST_FIRST = SelectOptions(order=Order("id", ascending=False))
_OLDEST_FIRST = SelectOptions(order=Order("id", ascending=True))

APP_DATA_REQUESTS: tuple[BatchRequest, ...] = (
    BatchRequest("matches", "matches", options=_NEWEST_FIRST),
    BatchRequest("players", "players"),
    BatchRequest("bans", "bans"),
    BatchRequest("finances", "finances"),
    BatchRequest("transactions", "transactions", options=_NEWEST_FIRST),
    BatchRequest("spieler_des_spiels", "spieler_des_spiels"),
    BatchRequest("managers", "managers", options=_OLDEST_FIRST),
)

GOAL_LIST_FIELDS = ("goalslista", "goalslistb")


def normalize_goal_lists(match: Mapping[str, Any]) -> Row:
    """Return a copy of *match* whose goal-list fields are lists.

    The columns may hold JSON text, a decoded list, or nothing. If either
    field fails to parse, both are reset to empty lists.
    """
    normalized = dict(match)
    try:
        for name in GOAL_LIST_FIELDS:
            value = normalized.get(name)
            if isinstance(value, str):
                value = json.loads(value)
            normalized[name] = value if isinstance(value, list) else []
    except ValueError as e:
        logger.warning("Error parsing goals for match %s: %s", match.get("id"), e)
        for name in GOAL_LIST_FIELDS:
            normalized[name] = []
    return normalized


def _missing(row_id: object) -> bool:
    return row_id is None or row_id == ""


class DataManager:
    def __init__(
        self,
        client: DatabaseClient,
        *,
        cache: CacheStore | None = None,
        inflight: InFlightRequests | None = None,
        retry: RetryExecutor | None = None,
        validator: Validator | None = None,
        connectivity: ConnectivityMonitor | None = None,
    ) -> None:
        self._client = client
        self._cache: CacheStore = cache if cache is not None else MemoryCacheStore()
        self._inflight = inflight if inflight is not None else InFlightRequests()
        self._retry = retry if retry is not None else RetryExecutor(connectivity)
        self._validator = validator if validator is not None else Validator()
        self._connectivity = connectivity
        # Bumped by every invalidation; a read that started under an older
        # generation must not cache its result.
        self._generation = 0

    # -- reads ------------------------------------------------------------

    async def select(self, table: str, query: str = "*", options: SelectOptions | None = None) -> SelectResult:
        opts = options or SelectOptions()
        key = cache_key(table, query, opts.to_key_dict())

        cached = self._cache.get(key)
        if cached is not None:
            logger.debug("Cache hit [key=%s]", key)
            return SelectResult(data=cached, from_cache=True)

        generation = self._generation
        task = self._inflight.get_or_create(key, lambda: self._fetch(key, table, query, opts, generation))
        # Shielded so one caller's cancellation does not abort the shared request.
        return await asyncio.shield(task)

    async def _fetch(self, key: str, table: str, query: str, options: SelectOptions, generation: int) -> SelectResult:
        logger.debug("Cache miss [key=%s], querying %s", key, table)
        response = await self._retry.run(lambda: self._build_select(table, query, options).execute())
        if generation != self._generation:
            logger.debug("Not caching result invalidated during fetch [key=%s]", key)
        elif response.data is not None:
            self._cache.set(key, response.data)
        return SelectResult(data=response.data)

    def _build_select(self, table: str, query: str, options: SelectOptions) -> QueryBuilder:
        builder = self._client.from_(table).select(query)
        for column, value in options.eq.items():
            builder = builder.eq(column, value)
        if options.order is not None:
            builder = builder.order(options.order.column, ascending=options.order.ascending)
        if options.limit is not None:
            builder = builder.limit(options.limit)
        if options.range is not None:
            builder = builder.range(*options.range)
        return builder

    async def batched_select(self, requests: Sequence[BatchRequest]) -> list[BatchResult]:
        """Run independent reads concurrently; a failed read does not fail the batch."""
        outcomes = await asyncio.gather(*(capture(self.select(r.table, r.query, r.options)) for r in requests))
        return [BatchResult(request.key, outcome) for request, outcome in zip(requests, outcomes, strict=True)]

    # -- writes -----------------------------------------------------------

    def _prepare(self, table: str, data: Mapping[str, Any]) -> Row:
        record = sanitize(data)
        validation = self._validator.validate(table, record)
        if not validation.valid:
            raise ValidationError(validation.errors)
        return record

    async def insert(self, table: str, data: Mapping[str, Any]) -> APIResponse:
        record = self._prepare(table, data)
        response = await self._retry.run(lambda: self._client.from_(table).insert([record]).select().execute())
        self.invalidate_cache(table)
        return response

    async def update(self, table: str, data: Mapping[str, Any], row_id: object) -> APIResponse:
        if _missing(row_id):
            raise MissingIdError("Aktualisieren")
        record = self._prepare(table, data)
        response = await self._retry.run(
            lambda: self._client.from_(table).update(record).eq("id", row_id).select().execute()
        )
        self.invalidate_cache(table)
        return response

    async def delete(self, table: str, row_id: object) -> APIResponse:
        if _missing(row_id):
            raise MissingIdError("Löschen")
        response = await self._retry.run(lambda: self._client.from_(table).delete().eq("id", row_id).execute())
        self.invalidate_cache(table)
        return response

    async def upsert(self, table: str, data: Mapping[str, Any]) -> APIResponse:
        record = self._prepare(table, data)
        response = await self._retry.run(lambda: self._client.from_(table).upsert(record).select().execute())
        self.invalidate_cache(table)
        return response

    def invalidate_cache(self, table: str | None = None) -> None:
        """Drop cached reads of *table* (all tables when ``None``).

        Reads still in flight are detached so later callers start fresh, and
        their results are not cached when they arrive.
        """
        self._generation += 1
        self._cache.invalidate(table)
        self._inflight.forget(table)

    # -- convenience accessors ---------------------------------------------

    async def get_players_by_team(self, team: str) -> SelectResult:
        return await self.select("players", "*", SelectOptions(eq={"team": team}))

    async def get_all_players(self) -> SelectResult:
        return await self.select("players")

    async def get_all_matches(self) -> SelectResult:
        return await self.select("matches", "*", _NEWEST_FIRST)

    async def get_bans(self) -> SelectResult:
        return await self.select("bans")

    async def get_finances(self) -> SelectResult:
        return await self.select("finances")

    async def get_transactions(self) -> SelectResult:
        return await self.select("transactions", "*", _NEWEST_FIRST)

    async def get_spieler_des_spiels(self) -> SelectResult:
        return await self.select("spieler_des_spiels")

    async def get_managers(self) -> SelectResult:
        return await self.select("managers", "*", _OLDEST_FIRST)

    # -- batch loading -----------------------------------------------------

    async def load_all_app_data(self) -> AppData:
        results = await self.batched_select(APP_DATA_REQUESTS)

        tables: dict[str, list[Row]] = {}
        for result in results:
            if result.data is not None:
                tables[result.key] = list(result.data.data or [])
            else:
                logger.error("Failed to load %s: %s", result.key, result.error)
                tables[result.key] = []

        tables["matches"] = [normalize_goal_lists(match) for match in tables["matches"]]
        return AppData(**tables)

    async def ping(self) -> None:
        """Probe the database with one uncached single-row read.

        The probe runs even while the monitor reports offline, and its outcome
        is reported back: success or a non-retryable error (the server
        answered) marks the database online, a retryable error marks it
        offline. Failures are raised.
        """
        try:
            response = await self._build_select("players", "id", SelectOptions(limit=1)).execute()
            if response.error:
                raise response.error
        except Exception as e:
            self._report_connectivity(online=is_non_retryable(e))
            raise
        self._report_connectivity(online=True)

    def _report_connectivity(self, *, online: bool) -> None:
        if self._connectivity is None:
            return
        if online:
            self._connectivity.mark_online()
        else:
            self._connectivity.mark_offline()

    async def health_check(self) -> bool:
        try:
            await self.ping()
        except Exception as e:
            logger.error("Health check failed: %s", e)
            return False
        return True

    async def aclose(self) -> None:
        """Release the remote client's connections, if it holds any."""
        closer = getattr(self._client, "aclose", None)
        if closer is not None:
            await closer()
