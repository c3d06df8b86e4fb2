"""Interfaces of the remote database client consumed by the data manager.

The shape follows the PostgREST/Supabase fluent builder: pick a table, pick
an operation, chain filters, then ``await builder.execute()``. Any object
satisfying these protocols can stand in for the hosted service, which is how
tests substitute an in-memory double.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol, Self

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from fifa_tracker.errors import RemoteError


@dataclass(frozen=True)
class APIResponse:
    """Outcome of one remote call.

    Exactly one of ``data`` / ``error`` is meaningful: failed calls carry a
    classified ``RemoteError`` and no data.
    """

    data: Any = None
    error: RemoteError | None = None
    status: int | None = None
    count: int | None = None


class QueryBuilder(Protocol):
    def eq(self, column: str, value: object) -> Self: ...

    def order(self, column: str, *, ascending: bool = True) -> Self: ...

    def limit(self, count: int) -> Self: ...

    def range(self, start: int, end: int) -> Self: ...

    def select(self, columns: str = "*") -> Self: ...

    async def execute(self) -> APIResponse: ...


class TableClient(Protocol):
    def select(self, columns: str = "*") -> QueryBuilder: ...

    def insert(self, rows: Sequence[Mapping[str, Any]]) -> QueryBuilder: ...

    def update(self, values: Mapping[str, Any]) -> QueryBuilder: ...

    def delete(self) -> QueryBuilder: ...

    def upsert(self, values: Mapping[str, Any]) -> QueryBuilder: ...


class DatabaseClient(Protocol):
    def from_(self, table: str) -> TableClient: ...


class ConnectivityProbe(Protocol):
    def is_available(self) -> bool: ...


class ConnectivityMonitor(ConnectivityProbe, Protocol):
    def mark_online(self) -> None: ...

    def mark_offline(self) -> None: ...
