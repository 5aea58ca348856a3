"""Tests for deliverychannel.retry."""

from __future__ import annotations

import logging

import pytest

from deliverychannel.errors import RemoteError, RetryTimeoutError
from deliverychannel.retry import RetryPolicy, retry_then_once


def _transient(exc: BaseException) -> bool:
    return isinstance(exc, RemoteError) and exc.code == "Transient"


class Flaky:
    """Operation that fails with the given errors, then returns 'ok'."""

    def __init__(self, *errors: Exception, forever: Exception | None = None) -> None:
        self.errors = list(errors)
        self.forever = forever
        self.calls = 0

    def __call__(self) -> str:
        self.calls += 1
        if self.forever is not None:
            raise self.forever
        if self.errors:
            raise self.errors.pop(0)
        return "ok"


def _policy(clock, timeout: float = 10.0) -> RetryPolicy:
    return RetryPolicy(
        timeout, _transient, base_delay=1.0, max_delay=4.0, jitter=0.0,
        sleep=clock.sleep, clock=clock,
    )


class TestDelay:
    def test_exponential_and_capped(self, clock):
        policy = _policy(clock)
        assert [policy.delay(n) for n in range(1, 6)] == [1.0, 2.0, 4.0, 4.0, 4.0]

    def test_jitter_bounds(self, clock):
        policy = RetryPolicy(10.0, _transient, base_delay=1.0, jitter=0.5)
        for _ in range(50):
            assert 0.5 <= policy.delay(1) <= 1.5


class TestRun:
    def test_success_first_try(self, clock):
        op = Flaky()
        assert _policy(clock).run(op) == "ok"
        assert op.calls == 1
        assert clock.sleeps == []

    def test_retries_until_success(self, clock):
        op = Flaky(RemoteError("Transient"), RemoteError("Transient"))
        assert _policy(clock).run(op) == "ok"
        assert op.calls == 3
        assert clock.sleeps == [1.0, 2.0]

    def test_terminal_error_is_not_retried(self, clock):
        op = Flaky(RemoteError("Fatal"))
        with pytest.raises(RemoteError, match="Fatal"):
            _policy(clock).run(op)
        assert op.calls == 1
        assert clock.sleeps == []

    def test_timeout_raises_with_last_error(self, clock):
        last = RemoteError("Transient", "still failing")
        op = Flaky(forever=last)
        with pytest.raises(RetryTimeoutError) as info:
            _policy(clock).run(op)
        # sleeps 1, 2, 4, then the remaining 3 seconds
        assert clock.sleeps == [1.0, 2.0, 4.0, 3.0]
        assert clock.now == 10.0
        assert info.value.attempts == op.calls == 5
        assert info.value.last_error is last

    def test_zero_timeout_runs_once(self, clock):
        op = Flaky(forever=RemoteError("Transient"))
        with pytest.raises(RetryTimeoutError):
            _policy(clock, timeout=0).run(op)
        assert op.calls == 1


class TestRetryThenOnce:
    def test_returns_policy_result(self, clock):
        op = Flaky(RemoteError("Transient"))
        assert retry_then_once(_policy(clock), op) == "ok"
        assert op.calls == 2

    def test_final_attempt_after_timeout(self, clock):
        # fails for the whole window, then succeeds on the extra attempt
        op = Flaky(*[RemoteError("Transient")] * 5)
        assert retry_then_once(_policy(clock), op) == "ok"
        assert op.calls == 6
        assert clock.now == 10.0

    def test_final_attempt_error_surfaces(self, clock):
        op = Flaky(forever=RemoteError("Transient", "final"))
        with pytest.raises(RemoteError, match="final"):
            retry_then_once(_policy(clock), op)
        assert op.calls == 6

    def test_terminal_error_skips_final_attempt(self, clock):
        op = Flaky(RemoteError("Fatal"))
        with pytest.raises(RemoteError, match="Fatal"):
            retry_then_once(_policy(clock), op)
        assert op.calls == 1

    def test_logs_exhaustion(self, clock, caplog):
        op = Flaky(*[RemoteError("Transient")] * 5)
        with caplog.at_level(logging.WARNING, logger="deliverychannel.retry"):
            retry_then_once(_policy(clock), op)
        assert "Retries exhausted after 5 attempt(s)" in caplog.text
