"""Result type for per-request outcomes in batch loads.

A batch of independent reads must not fail as a whole when one table is
unavailable, so each request's outcome is captured as ``Ok(value)`` or
``Err(exception)`` instead of being raised.

Usage:
    outcome = await capture(manager.select("bans"))
    if outcome.is_ok():
        rows = outcome.unwrap().data
    else:
        logger.error("bans failed: %s", outcome.unwrap_err())
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Generic, TypeVar, final

if TYPE_CHECKING:
    from collections.abc import Awaitable

T = TypeVar("T")
E = TypeVar("E", bound=BaseException)
_T = TypeVar("_T")


class UnwrapError(Exception):
    """Raised when unwrap() is called on an Err or unwrap_err() on an Ok."""


@final
@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """A successful outcome."""

    _value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self._value

    def unwrap_or(self, default: T) -> T:
        return self._value

    def unwrap_err(self) -> BaseException:
        raise UnwrapError("Called unwrap_err on Ok value")


@final
@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """A failed outcome holding the exception that caused it."""

    _error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> _T:  # noqa: UP049 # pyright: ignore[reportInvalidTypeVarUse]
        raise UnwrapError(f"Called unwrap on Err value: {self._error}")

    def unwrap_or(self, default: _T) -> _T:  # noqa: UP049
        return default

    def unwrap_err(self) -> E:
        return self._error


Result = Ok[T] | Err[E]


async def capture(awaitable: Awaitable[_T]) -> Ok[_T] | Err[Exception]:  # noqa: UP049
    """Await *awaitable* and wrap its value or raised exception.

    Only ``Exception`` subclasses are captured; cancellation and other
    ``BaseException`` types still propagate.
    """
    try:
        return Ok(await awaitable)
    except Exception as e:
        return Err(e)
