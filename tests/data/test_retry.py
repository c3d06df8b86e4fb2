from __future__ import annotations

import logging

import pytest

from fifa_tracker.data.retry import RetryExecutor, is_non_retryable
from fifa_tracker.db.connection import ConnectionMonitor
from fifa_tracker.db.protocol import APIResponse
from fifa_tracker.errors import DatabaseUnavailableError, DataAccessError, ErrorKind, RemoteError
from tests.fakes.timing import RecordingSleep


def _transient(message: str = "upstream timeout") -> RemoteError:
    return RemoteError(ErrorKind.TRANSIENT, message, status=503)


class CodedError(Exception):
    def __init__(self, message: str, code: str) -> None:
        super().__init__(message)
        self.code = code


class TestIsNonRetryable:
    @pytest.mark.parametrize(
        "kind", [ErrorKind.AUTH, ErrorKind.PERMISSION, ErrorKind.CONSTRAINT, ErrorKind.NOT_FOUND, ErrorKind.BAD_REQUEST]
    )
    def test_typed_permanent_kinds(self, kind: ErrorKind) -> None:
        assert is_non_retryable(RemoteError(kind, "nope"))

    def test_typed_transient_ignores_message(self) -> None:
        assert not is_non_retryable(RemoteError(ErrorKind.TRANSIENT, "permission service timed out"))

    @pytest.mark.parametrize("message", ["auth session missing", "permission denied", "violates check constraint"])
    def test_untyped_message_patterns(self, message: str) -> None:
        assert is_non_retryable(RuntimeError(message))

    def test_untyped_author_matches_auth_pattern(self) -> None:
        assert is_non_retryable(RuntimeError("author column missing"))

    @pytest.mark.parametrize("code", ["PGRST301", "PGRST116"])
    def test_untyped_codes(self, code: str) -> None:
        assert is_non_retryable(CodedError("something", code))

    def test_plain_network_error_is_retryable(self) -> None:
        assert not is_non_retryable(ConnectionError("Failed to fetch"))


class TestRetryExecutor:
    async def test_success_on_first_attempt(self) -> None:
        sleeps = RecordingSleep()
        executor = RetryExecutor(sleep=sleeps)

        async def op() -> APIResponse:
            return APIResponse(data=[1])

        assert (await executor.run(op)).data == [1]
        assert sleeps.delays == []

    async def test_retries_until_success(self) -> None:
        sleeps = RecordingSleep()
        executor = RetryExecutor(sleep=sleeps)
        calls: list[int] = []

        async def op() -> APIResponse:
            calls.append(1)
            if len(calls) < 3:
                return APIResponse(error=_transient())
            return APIResponse(data="ok")

        assert (await executor.run(op)).data == "ok"
        assert len(calls) == 3
        assert sleeps.delays == [1.0, 2.0]

    async def test_raised_exceptions_are_retried(self) -> None:
        executor = RetryExecutor(sleep=RecordingSleep())
        calls: list[int] = []

        async def op() -> str:
            calls.append(1)
            if len(calls) == 1:
                raise ConnectionError("Failed to fetch")
            return "ok"

        assert await executor.run(op) == "ok"
        assert len(calls) == 2

    async def test_retry_ceiling_surfaces_last_error(self) -> None:
        sleeps = RecordingSleep()
        executor = RetryExecutor(sleep=sleeps)
        errors = [_transient(f"failure {i}") for i in range(1, 4)]
        calls: list[int] = []

        async def op() -> APIResponse:
            calls.append(1)
            return APIResponse(error=errors[len(calls) - 1])

        with pytest.raises(RemoteError) as excinfo:
            await executor.run(op)
        assert excinfo.value is errors[-1]
        assert len(calls) == 3
        assert sleeps.delays == [1.0, 2.0]

    async def test_backoff_is_capped(self) -> None:
        sleeps = RecordingSleep()
        executor = RetryExecutor(max_attempts=6, sleep=sleeps)

        async def op() -> APIResponse:
            return APIResponse(error=_transient())

        with pytest.raises(RemoteError):
            await executor.run(op)
        assert sleeps.delays == [1.0, 2.0, 4.0, 5.0, 5.0]

    async def test_non_retryable_stops_after_one_attempt(self) -> None:
        sleeps = RecordingSleep()
        executor = RetryExecutor(sleep=sleeps)
        calls: list[int] = []

        async def op() -> APIResponse:
            calls.append(1)
            return APIResponse(error=RemoteError(ErrorKind.PERMISSION, "permission denied", code="42501"))

        with pytest.raises(RemoteError, match="permission denied"):
            await executor.run(op)
        assert len(calls) == 1
        assert sleeps.delays == []

    async def test_untyped_permission_message_stops_after_one_attempt(self) -> None:
        executor = RetryExecutor(sleep=RecordingSleep())
        calls: list[int] = []

        async def op() -> str:
            calls.append(1)
            raise RuntimeError("new row violates row-level security: permission denied")

        with pytest.raises(RuntimeError):
            await executor.run(op)
        assert len(calls) == 1

    async def test_non_exception_error_field_is_wrapped(self) -> None:
        executor = RetryExecutor(max_attempts=1, sleep=RecordingSleep())

        async def op() -> APIResponse:
            return APIResponse(error="service exploded")  # type: ignore[arg-type]

        with pytest.raises(DataAccessError, match="service exploded"):
            await executor.run(op)

    async def test_offline_raises_before_any_attempt(self) -> None:
        monitor = ConnectionMonitor(available=False)
        executor = RetryExecutor(monitor, sleep=RecordingSleep())
        calls: list[int] = []

        async def op() -> str:
            calls.append(1)
            return "ok"

        with pytest.raises(DatabaseUnavailableError, match="Keine Datenbankverbindung"):
            await executor.run(op)
        assert calls == []

    async def test_logs_warning_per_failed_attempt(self, caplog: pytest.LogCaptureFixture) -> None:
        executor = RetryExecutor(sleep=RecordingSleep())

        async def op() -> APIResponse:
            return APIResponse(error=_transient("gateway timeout"))

        with caplog.at_level(logging.WARNING, logger="fifa_tracker.data.retry"), pytest.raises(RemoteError):
            await executor.run(op)

        warnings = [r.getMessage() for r in caplog.records if r.name == "fifa_tracker.data.retry"]
        assert warnings == [
            "Database operation failed (attempt 1/3): gateway timeout",
            "Database operation failed (attempt 2/3): gateway timeout",
            "Database operation failed (attempt 3/3): gateway timeout",
        ]

    def test_max_attempts_property(self) -> None:
        assert RetryExecutor(max_attempts=5).max_attempts == 5
