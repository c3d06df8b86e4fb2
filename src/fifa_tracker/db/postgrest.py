"""Async PostgREST client for the hosted database.

Builds requests with the same fluent shape as the Supabase JS client:

    response = await client.from_("players").select("*").eq("team", "AEK").order("id").execute()

HTTP and transport failures are never raised. They come back as
``APIResponse(error=RemoteError(...))`` with the error kind assigned here,
once, from the status code and PostgREST/Postgres error code.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Self

import httpx

from fifa_tracker.db.protocol import APIResponse
from fifa_tracker.errors import ErrorKind, RemoteError

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence
    from types import TracebackType

logger = logging.getLogger(__name__)

_REST_PATH = "/rest/v1/"


def classify_error(status: int, payload: Mapping[str, Any]) -> RemoteError:
    """Map an HTTP error response onto a ``RemoteError``."""
    code = payload.get("code")
    code = str(code) if code is not None else None
    message = str(payload.get("message") or payload.get("error") or f"HTTP {status}")

    if status == 401 or code == "PGRST301":
        kind = ErrorKind.AUTH
    elif status == 403 or code == "42501":
        kind = ErrorKind.PERMISSION
    elif status == 404 or code == "PGRST116":
        kind = ErrorKind.NOT_FOUND
    elif status == 409 or (code is not None and code.startswith("23")):
        kind = ErrorKind.CONSTRAINT
    elif status >= 500 or status in (408, 429):
        kind = ErrorKind.TRANSIENT
    else:
        kind = ErrorKind.BAD_REQUEST
    return RemoteError(kind, message, code=code, status=status)


def _error_payload(response: httpx.Response) -> Mapping[str, Any]:
    try:
        body = response.json()
    except ValueError:
        return {"message": response.text or response.reason_phrase}
    if isinstance(body, dict):
        return body
    return {"message": str(body)}


def _filter_value(value: object) -> str:
    if value is None:
        return "is.null"
    if isinstance(value, bool):
        return f"eq.{str(value).lower()}"
    return f"eq.{value}"


def _total_count(response: httpx.Response) -> int | None:
    content_range = response.headers.get("content-range", "")
    _, _, total = content_range.partition("/")
    return int(total) if total.isdigit() else None


class PostgrestQuery:
    """One pending request; filters and modifiers accumulate until ``execute``."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        url: str,
        method: str,
        headers: Mapping[str, str],
        *,
        body: object = None,
        columns: str | None = None,
        prefer: Sequence[str] = (),
    ) -> None:
        self._http = http
        self._url = url
        self._method = method
        self._headers = dict(headers)
        self._body = body
        self._columns = columns
        self._prefer = list(prefer)
        self._filters: list[tuple[str, str]] = []
        self._order: list[str] = []
        self._limit: int | None = None
        self._offset: int | None = None

    def eq(self, column: str, value: object) -> Self:
        self._filters.append((column, _filter_value(value)))
        return self

    def order(self, column: str, *, ascending: bool = True) -> Self:
        self._order.append(f"{column}.{'asc' if ascending else 'desc'}")
        return self

    def limit(self, count: int) -> Self:
        self._limit = count
        return self

    def range(self, start: int, end: int) -> Self:
        """Restrict to rows ``start..end`` inclusive."""
        self._offset = start
        self._limit = end - start + 1
        return self

    def select(self, columns: str = "*") -> Self:
        """Choose columns; after a write this asks for the written rows back."""
        self._columns = columns
        if self._method != "GET" and "return=representation" not in self._prefer:
            self._prefer.append("return=representation")
        return self

    def build_request(self) -> httpx.Request:
        params: list[tuple[str, str]] = []
        if self._columns is not None:
            params.append(("select", self._columns))
        params.extend(self._filters)
        if self._order:
            params.append(("order", ",".join(self._order)))
        if self._limit is not None:
            params.append(("limit", str(self._limit)))
        if self._offset is not None:
            params.append(("offset", str(self._offset)))

        headers = dict(self._headers)
        if self._prefer:
            headers["Prefer"] = ",".join(self._prefer)
        return self._http.build_request(
            self._method,
            self._url,
            params=params,
            headers=headers,
            json=self._body,
        )

    async def execute(self) -> APIResponse:
        request = self.build_request()
        try:
            response = await self._http.send(request)
        except httpx.TimeoutException as e:
            logger.debug("%s %s timed out: %s", request.method, request.url.path, e)
            return APIResponse(error=RemoteError(ErrorKind.TRANSIENT, f"Request timed out: {e}"))
        except httpx.TransportError as e:
            logger.debug("%s %s failed: %s", request.method, request.url.path, e)
            return APIResponse(error=RemoteError(ErrorKind.TRANSIENT, f"Network error: {e}"))

        if response.is_error:
            error = classify_error(response.status_code, _error_payload(response))
            logger.debug("%s %s -> %d %r", request.method, request.url.path, response.status_code, error)
            return APIResponse(error=error, status=response.status_code)

        data = response.json() if response.content else None
        return APIResponse(data=data, status=response.status_code, count=_total_count(response))


class PostgrestTable:
    def __init__(self, http: httpx.AsyncClient, url: str, headers: Mapping[str, str]) -> None:
        self._http = http
        self._url = url
        self._headers = headers

    def _query(self, method: str, **kwargs: Any) -> PostgrestQuery:
        return PostgrestQuery(self._http, self._url, method, self._headers, **kwargs)

    def select(self, columns: str = "*") -> PostgrestQuery:
        return self._query("GET", columns=columns)

    def insert(self, rows: Sequence[Mapping[str, Any]]) -> PostgrestQuery:
        return self._query("POST", body=[dict(row) for row in rows])

    def update(self, values: Mapping[str, Any]) -> PostgrestQuery:
        return self._query("PATCH", body=dict(values))

    def delete(self) -> PostgrestQuery:
        return self._query("DELETE")

    def upsert(self, values: Mapping[str, Any]) -> PostgrestQuery:
        return self._query("POST", body=dict(values), prefer=("resolution=merge-duplicates",))


class PostgrestClient:
    def __init__(
        self,
        base_url: str,
        api_key: str,
        http: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ) -> None:
        self._rest_url = base_url.rstrip("/") + _REST_PATH
        self._headers = {"apikey": api_key, "Authorization": f"Bearer {api_key}"}
        self._http = http or httpx.AsyncClient(timeout=httpx.Timeout(timeout, connect=10.0))

    def from_(self, table: str) -> PostgrestTable:
        return PostgrestTable(self._http, self._rest_url + table, self._headers)

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()
