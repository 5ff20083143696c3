"""
Persistence Retry Policy

Retries store writes that fail on transactional contention.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, TypeVar

from sqlalchemy.exc import DBAPIError, OperationalError
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    wait_random,
)

from ...core.exceptions import PersistenceContentionError

logger = logging.getLogger(__name__)

T = TypeVar('T')

# Serialization failure, deadlock, lock not available
CONTENTION_SQLSTATES = {"40001", "40P01", "55P03"}

CONTENTION_MARKERS = (
    "database is locked",
    "database table is locked",
    "deadlock",
    "could not serialize",
    "lock timeout",
    "lock not available",
)


def is_contention_error(exc: BaseException) -> bool:
    """True for lock conflicts worth retrying."""
    if isinstance(exc, PersistenceContentionError):
        return True

    if not isinstance(exc, (OperationalError, DBAPIError)):
        return False

    orig = getattr(exc, "orig", None)
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate in CONTENTION_SQLSTATES:
        return True

    message = str(orig if orig is not None else exc).lower()
    return any(marker in message for marker in CONTENTION_MARKERS)


@dataclass
class RetryPolicy:
    """
    Retry policy for persistence writes.

    Each delay is drawn uniformly from [backoff_min, backoff_max); the
    upper bound itself is never waited.
    Non-retryable errors propagate immediately. Once the attempts are used
    up, a retryable error is raised as PersistenceContentionError.
    """

    max_attempts: int = 3
    backoff_min: float = 0.1
    backoff_max: float = 1.1
    retryable: Callable[[BaseException], bool] = is_contention_error
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep

    def _log_retry(self, retry_state: RetryCallState) -> None:
        exc = retry_state.outcome.exception() if retry_state.outcome else None
        delay = retry_state.next_action.sleep if retry_state.next_action else 0.0
        logger.warning(
            f"Write failed (attempt {retry_state.attempt_number}/{self.max_attempts}): "
            f"{type(exc).__name__}: {exc}. Retrying in {delay:.2f}s..."
        )

    async def run(
        self,
        operation: Callable[..., Awaitable[T]],
        *args: Any,
        **kwargs: Any
    ) -> T:
        """
        Run an async operation under this policy.

        Raises:
            PersistenceContentionError: Contention persisted through every attempt
        """
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_random(self.backoff_min, self.backoff_max),
            retry=retry_if_exception(self.retryable),
            before_sleep=self._log_retry,
            sleep=self.sleep,
            reraise=True,
        )

        try:
            async for attempt in retrying:
                with attempt:
                    result = await operation(*args, **kwargs)
        except PersistenceContentionError:
            raise
        except Exception as e:
            if not self.retryable(e):
                raise
            raise PersistenceContentionError(
                f"Write still contended after {self.max_attempts} attempts",
                operation=getattr(operation, "__name__", None),
                original_exception=e
            ) from e

        return result
