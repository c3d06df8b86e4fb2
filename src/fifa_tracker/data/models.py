from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from fifa_tracker.result import Err, Ok

if TYPE_CHECKING:
    from collections.abc import Mapping

Row = dict[str, Any]


@dataclass(frozen=True)
class Order:
    column: str
    ascending: bool = True


@dataclass(frozen=True)
class SelectOptions:
    """Modifiers for a read.

    Attributes:
        eq: Column/value pairs that must all match.
        order: Sort column and direction.
        limit: Maximum number of rows.
        range: Inclusive ``(start, end)`` row window.
    """

    eq: Mapping[str, object] = field(default_factory=dict)
    order: Order | None = None
    limit: int | None = None
    range: tuple[int, int] | None = None

    def to_key_dict(self) -> dict[str, object]:
        """Plain-data form used to build cache keys; unset modifiers are omitted."""
        shape: dict[str, object] = {}
        if self.eq:
            shape["eq"] = dict(self.eq)
        if self.order is not None:
            shape["order"] = {"column": self.order.column, "ascending": self.order.ascending}
        if self.limit is not None:
            shape["limit"] = self.limit
        if self.range is not None:
            shape["range"] = {"from": self.range[0], "to": self.range[1]}
        return shape


@dataclass(frozen=True)
class SelectResult:
    data: Any
    from_cache: bool = False


@dataclass(frozen=True)
class BatchRequest:
    key: str
    table: str
    query: str = "*"
    options: SelectOptions | None = None


@dataclass(frozen=True)
class BatchResult:
    key: str
    outcome: Ok[SelectResult] | Err[Exception]

    @property
    def success(self) -> bool:
        return self.outcome.is_ok()

    @property
    def data(self) -> SelectResult | None:
        return self.outcome.unwrap() if self.outcome.is_ok() else None

    @property
    def error(self) -> Exception | None:
        return self.outcome.unwrap_err() if self.outcome.is_err() else None


@dataclass(frozen=True)
class AppData:
    """Every table the application shows, loaded in one batch."""

    matches: list[Row] = field(default_factory=list)
    players: list[Row] = field(default_factory=list)
    bans: list[Row] = field(default_factory=list)
    finances: list[Row] = field(default_factory=list)
    transactions: list[Row] = field(default_factory=list)
    spieler_des_spiels: list[Row] = field(default_factory=list)
    managers: list[Row] = field(default_factory=list)

    def as_dict(self) -> dict[str, list[Row]]:
        return {
            "matches": self.matches,
            "players": self.players,
            "bans": self.bans,
            "finances": self.finances,
            "transactions": self.transactions,
            "spieler_des_spiels": self.spieler_des_spiels,
            "managers": self.managers,
        }
