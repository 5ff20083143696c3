"""
Persistence retry policy tests.
"""

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from guild_tracker.core.exceptions import PersistenceContentionError
from guild_tracker.infrastructure.database import RetryPolicy, is_contention_error


def locked_error():
    return OperationalError("UPDATE guild_members", {}, Exception("database is locked"))


class FlakyOperation:
    """Fails with the given errors, then succeeds."""

    def __init__(self, *errors):
        self.errors = list(errors)
        self.calls = 0

    async def __call__(self, value):
        self.calls += 1
        if self.errors:
            raise self.errors.pop(0)
        return value


class TestContentionDetection:
    """Test the retryable error classification."""

    def test_locked_database(self):
        assert is_contention_error(locked_error())

    def test_postgres_serialization_failure(self):
        class Orig(Exception):
            sqlstate = "40001"

        assert is_contention_error(OperationalError("COMMIT", {}, Orig("conflict")))

    def test_contention_error_itself(self):
        assert is_contention_error(PersistenceContentionError("busy"))

    def test_other_errors(self):
        assert not is_contention_error(ValueError("nope"))
        assert not is_contention_error(
            IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed"))
        )


class TestRetryPolicy:
    """Test RetryPolicy functionality."""

    async def test_retries_until_success(self, retry_policy, sleep):
        operation = FlakyOperation(locked_error(), locked_error())

        result = await retry_policy.run(operation, "done")

        assert result == "done"
        assert operation.calls == 3
        assert len(sleep.delays) == 2

    async def test_delays_are_jittered_within_bounds(self, sleep):
        policy = RetryPolicy(max_attempts=5, backoff_min=0.1, backoff_max=1.1, sleep=sleep)
        operation = FlakyOperation(*[locked_error() for _ in range(4)])

        await policy.run(operation, "done")

        assert len(sleep.delays) == 4
        assert all(0.1 <= delay < 1.1 for delay in sleep.delays)

    async def test_exhaustion_raises_contention_error(self, retry_policy):
        operation = FlakyOperation(*[locked_error() for _ in range(5)])

        with pytest.raises(PersistenceContentionError) as exc_info:
            await retry_policy.run(operation, "never")

        assert operation.calls == 3
        assert isinstance(exc_info.value.original_exception, OperationalError)

    async def test_non_retryable_error_propagates_at_once(self, retry_policy, sleep):
        operation = FlakyOperation(ValueError("bad row"))

        with pytest.raises(ValueError):
            await retry_policy.run(operation, "never")

        assert operation.calls == 1
        assert sleep.delays == []

    async def test_kwargs_are_forwarded(self, retry_policy):
        operation = FlakyOperation()

        assert await retry_policy.run(operation, value=42) == 42

    @pytest.mark.parametrize("draw, expected", [(0.0, 0.1), (0.5, 0.6)])
    async def test_delay_follows_uniform_draw(self, retry_policy, sleep, monkeypatch, draw, expected):
        monkeypatch.setattr("random.random", lambda: draw)

        await retry_policy.run(FlakyOperation(locked_error()), "done")

        assert sleep.delays == [pytest.approx(expected)]

    async def test_delay_stays_below_upper_bound(self, retry_policy, sleep, monkeypatch):
        monkeypatch.setattr("random.random", lambda: 0.999999)

        await retry_policy.run(FlakyOperation(locked_error()), "done")

        assert sleep.delays[0] < 1.1
