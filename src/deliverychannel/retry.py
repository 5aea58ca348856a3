"""Bounded-duration retries with exponential backoff."""

from __future__ import annotations

import logging
import random
import time
from collections.abc import Callable
from typing import TypeVar

from .errors import RetryTimeoutError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RetryPolicy:
    """Re-run an operation while it fails with a retryable error, up to a timeout."""

    def __init__(
        self,
        timeout: float,
        retryable: Callable[[BaseException], bool],
        *,
        base_delay: float = 0.5,
        max_delay: float = 10.0,
        jitter: float = 0.1,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.timeout = timeout
        self.retryable = retryable
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.jitter = jitter
        self._sleep = sleep
        self._clock = clock

    def delay(self, attempt: int) -> float:
        """Backoff before the retry that follows the given (1-based) attempt."""
        delay = min(self.base_delay * 2 ** min(attempt - 1, 10), self.max_delay)
        return delay * (1 + random.uniform(-self.jitter, self.jitter))

    def run(self, operation: Callable[[], T]) -> T:
        """Run the operation until it succeeds, fails terminally, or the timeout elapses.

        Terminal errors propagate unchanged. When the timeout elapses while the
        last error was still retryable, RetryTimeoutError is raised with that
        error attached.
        """
        deadline = self._clock() + self.timeout
        attempt = 0
        while True:
            attempt += 1
            try:
                return operation()
            except Exception as exc:
                if not self.retryable(exc):
                    raise
                remaining = deadline - self._clock()
                if remaining <= 0:
                    raise RetryTimeoutError(self.timeout, attempt, exc) from exc
                delay = min(self.delay(attempt), remaining)
                logger.debug("Attempt %d failed (%s); retrying in %.2fs", attempt, exc, delay)
                self._sleep(delay)


def retry_then_once(policy: RetryPolicy, operation: Callable[[], T]) -> T:
    """Run under the policy; once it times out, make one final unguarded attempt."""
    try:
        return policy.run(operation)
    except RetryTimeoutError as exc:
        logger.warning("Retries exhausted after %d attempt(s); trying once more", exc.attempts)
    return operation()
