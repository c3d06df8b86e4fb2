from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any, TypeVar

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _consume_exception(task: asyncio.Task[Any]) -> None:
    # Callers await through asyncio.shield; if all of them were cancelled the
    # failure would otherwise be reported as never retrieved.
    if not task.cancelled():
        task.exception()


class InFlightRequests:
    """Coalesces concurrent identical reads into a single running task.

    While a task is pending for a key, every caller asking for that key gets
    the same task. The key is released when the task settles, whatever the
    outcome, so the next call after completion starts a fresh request.
    ``forget`` releases keys early so later callers do not join a request
    that started before a write.
    """

    def __init__(self) -> None:
        self._pending: dict[str, asyncio.Task[Any]] = {}

    def get_or_create(self, key: str, factory: Callable[[], Awaitable[T]]) -> asyncio.Task[T]:
        existing = self._pending.get(key)
        if existing is not None:
            logger.debug("Joining in-flight request [key=%s]", key)
            return existing
        task = asyncio.ensure_future(self._run(key, factory))
        task.add_done_callback(_consume_exception)
        self._pending[key] = task
        return task

    async def _run(self, key: str, factory: Callable[[], Awaitable[T]]) -> T:
        try:
            return await factory()
        finally:
            # The key may already belong to a newer task after forget().
            if self._pending.get(key) is asyncio.current_task():
                del self._pending[key]

    def forget(self, pattern: str | None = None) -> None:
        """Stop handing out pending tasks whose key contains *pattern* (all when ``None``).

        The tasks themselves keep running for the callers already awaiting them.
        """
        stale = [key for key in self._pending if pattern is None or pattern in key]
        for key in stale:
            del self._pending[key]
        if stale:
            logger.debug("Detached %d in-flight requests matching %r", len(stale), pattern)

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def __contains__(self, key: object) -> bool:
        return key in self._pending
