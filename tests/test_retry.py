import time

import httpx
import pytest

from connectors.base import AuthenticationError, ConnectorError, VendorApiError
from connectors.utils import (
    RateLimitExceeded,
    RequestThrottle,
    backoff_delay,
    is_retryable_error,
    retry_operation,
)


class Flaky:
    def __init__(self, failures: int, error: Exception):
        self.failures = failures
        self.error = error
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        if self.calls <= self.failures:
            raise self.error
        return "ok"


async def test_fails_twice_then_succeeds_with_exponential_delays(sleep):
    operation = Flaky(2, ConnectorError("v", "boom"))
    result = await retry_operation(operation, max_attempts=3, base_delay=1.0, sleep=sleep)
    assert result == "ok"
    assert operation.calls == 3
    assert sleep.delays == [2.0, 4.0]


async def test_all_attempts_fail_reraises_last_error(sleep):
    errors = [ConnectorError("v", f"boom {i}") for i in range(3)]
    calls = iter(errors)

    async def operation():
        raise next(calls)

    with pytest.raises(ConnectorError) as exc_info:
        await retry_operation(operation, max_attempts=3, sleep=sleep)
    assert exc_info.value is errors[-1]
    assert sleep.delays == [2.0, 4.0]


async def test_non_recoverable_errors_are_not_retried(sleep):
    operation = Flaky(5, AuthenticationError("v"))
    with pytest.raises(AuthenticationError):
        await retry_operation(operation, max_attempts=3, sleep=sleep)
    assert operation.calls == 1
    assert sleep.delays == []


async def test_deadline_stops_retrying_early(sleep):
    operation = Flaky(5, ConnectorError("v", "slow"))
    with pytest.raises(ConnectorError):
        await retry_operation(
            operation,
            max_attempts=5,
            base_delay=1.0,
            deadline=time.monotonic() + 3.0,
            sleep=sleep,
        )
    # 2s tient dans le budget, 4s non
    assert sleep.delays == [2.0]
    assert operation.calls == 2


async def test_max_attempts_must_be_positive(sleep):
    with pytest.raises(ValueError):
        await retry_operation(Flaky(0, ValueError()), max_attempts=0, sleep=sleep)


def test_retryable_classification():
    assert is_retryable_error(httpx.ConnectError("down"))
    assert is_retryable_error(VendorApiError("v", "HTTP 503", status_code=503))
    assert not is_retryable_error(VendorApiError("v", "HTTP 400", status_code=400))
    assert not is_retryable_error(ValueError("bug"))
    assert backoff_delay(1, 0.5) == 1.0


async def test_throttle_uses_a_sliding_minute_window(sleep, clock):
    throttle = RequestThrottle(per_minute=3, per_hour=1000, per_day=10000, clock=clock, sleep=sleep)
    for _ in range(3):
        await throttle.acquire()
        clock.advance(10)
    assert sleep.delays == []

    # 4e requête à t+30 : la plus ancienne sort de la fenêtre à t+60
    await throttle.acquire()
    assert sleep.delays == [30.0]

    clock.advance(60)
    await throttle.acquire()
    assert sleep.delays == [30.0]


async def test_throttle_enforces_hourly_budget(sleep, clock):
    throttle = RequestThrottle(per_minute=600, per_hour=2, per_day=100, clock=clock, sleep=sleep)
    await throttle.acquire()
    clock.advance(1)
    await throttle.acquire()
    clock.advance(1)
    with pytest.raises(RateLimitExceeded) as exc_info:
        await throttle.acquire()
    assert exc_info.value.window == "hour"
    clock.advance(3600)
    await throttle.acquire()
    assert throttle.requests_in_last_hour == 1
