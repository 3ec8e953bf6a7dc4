"""Unit tests for the sliding-window rate limiter."""

from unittest.mock import AsyncMock, patch

import pytest

from hybrid_vectors.utils import AsyncRateLimiter


@pytest.mark.asyncio
async def test_disabled_limiter_never_records():
    limiter = AsyncRateLimiter(rpm=0)
    for _ in range(5):
        await limiter.acquire()
    assert limiter.current_usage == 0


@pytest.mark.asyncio
async def test_records_requests_within_budget():
    limiter = AsyncRateLimiter(rpm=3)
    with patch("hybrid_vectors.utils.rate_limiter.asyncio.sleep", new=AsyncMock()) as sleep:
        for _ in range(3):
            await limiter.acquire()
    sleep.assert_not_awaited()
    assert limiter.current_usage == 3


@pytest.mark.asyncio
async def test_waits_when_window_is_full():
    limiter = AsyncRateLimiter(rpm=1, window=30.0)
    with patch("hybrid_vectors.utils.rate_limiter.asyncio.sleep", new=AsyncMock()) as sleep:
        await limiter.acquire()
        await limiter.acquire()
    sleep.assert_awaited_once()
    waited = sleep.await_args.args[0]
    assert 0 < waited <= 30.0
