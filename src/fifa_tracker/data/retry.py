from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, TypeVar

from tenacity import AsyncRetrying, retry_if_exception, stop_after_attempt, wait_exponential

from fifa_tracker.errors import DataAccessError, DatabaseUnavailableError, RemoteError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from fifa_tracker.db.protocol import ConnectivityProbe

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Fallback for errors that did not come through the client adapter.
_NON_RETRYABLE_PATTERNS = ("auth", "permission", "constraint")
_NON_RETRYABLE_CODES = frozenset({"PGRST301", "PGRST116"})


def is_non_retryable(error: BaseException) -> bool:
    """Return True when retrying *error* cannot help.

    ``RemoteError`` carries its classification. Anything else is matched on
    its message and ``code`` attribute.
    """
    if isinstance(error, RemoteError):
        return not error.retryable
    message = str(getattr(error, "message", None) or error)
    if any(pattern in message for pattern in _NON_RETRYABLE_PATTERNS):
        return True
    return getattr(error, "code", None) in _NON_RETRYABLE_CODES


def _should_retry(error: BaseException) -> bool:
    return isinstance(error, Exception) and not is_non_retryable(error)


class _AlwaysAvailable:
    def is_available(self) -> bool:
        return True


class RetryExecutor:
    """Runs remote operations with capped exponential backoff.

    The delay before attempt ``n + 1`` is ``min(backoff_initial * 2 ** (n - 1), backoff_max)``.
    A result with a non-empty ``error`` attribute counts as a failed attempt.
    """

    def __init__(
        self,
        connectivity: ConnectivityProbe | None = None,
        max_attempts: int = 3,
        backoff_initial: float = 1.0,
        backoff_max: float = 5.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._connectivity = connectivity or _AlwaysAvailable()
        self._max_attempts = max_attempts
        self._backoff_initial = backoff_initial
        self._backoff_max = backoff_max
        self._sleep = sleep

    @property
    def max_attempts(self) -> int:
        return self._max_attempts

    def _retrying(self) -> AsyncRetrying:
        return AsyncRetrying(
            stop=stop_after_attempt(self._max_attempts),
            wait=wait_exponential(multiplier=self._backoff_initial, max=self._backoff_max),
            retry=retry_if_exception(_should_retry),
            sleep=self._sleep,
            reraise=True,
        )

    async def run(self, operation: Callable[[], Awaitable[T]]) -> T:
        if not self._connectivity.is_available():
            raise DatabaseUnavailableError()

        async for attempt in self._retrying():
            with attempt:
                try:
                    result = await operation()
                    error = getattr(result, "error", None)
                    if error:
                        raise error if isinstance(error, BaseException) else DataAccessError(str(error))
                except Exception as e:
                    logger.warning(
                        "Database operation failed (attempt %d/%d): %s",
                        attempt.retry_state.attempt_number,
                        self._max_attempts,
                        e,
                    )
                    raise
        return result
