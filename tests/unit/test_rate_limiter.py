"""Token bucket rate limiter tests."""

import asyncio

import pytest

from storefront_localizer.translation.rate_limiter import RateLimiter


def make_limiter(clock, requests_per_minute=60):
    sleeps = []

    async def fake_sleep(seconds):
        sleeps.append(seconds)
        clock.advance(seconds)

    limiter = RateLimiter(requests_per_minute, clock=clock, sleep=fake_sleep)
    return limiter, sleeps


class TestRateLimiter:
    def test_starts_full(self, clock):
        limiter, _ = make_limiter(clock, 60)
        assert limiter.capacity == 60
        assert limiter.refill_interval == 1.0
        assert limiter.available_tokens == 60

    def test_burst_up_to_capacity_without_waiting(self, clock):
        limiter, sleeps = make_limiter(clock, 60)

        async def drain():
            for _ in range(60):
                await limiter.wait_for_token()

        asyncio.run(drain())
        assert sleeps == []
        assert limiter.available_tokens == 0

    def test_waits_for_next_token_when_empty(self, clock):
        limiter, sleeps = make_limiter(clock, 60)

        async def drain_and_one_more():
            for _ in range(61):
                await limiter.wait_for_token()

        asyncio.run(drain_and_one_more())
        assert sleeps == [1.0]
        assert limiter.available_tokens == 0

    def test_refill_never_exceeds_capacity(self, clock):
        limiter, _ = make_limiter(clock, 60)

        async def take(n):
            for _ in range(n):
                await limiter.wait_for_token()

        asyncio.run(take(10))
        clock.advance(3600)
        assert limiter.available_tokens == 60

    def test_refill_keeps_partial_interval(self, clock):
        limiter, _ = make_limiter(clock, 60)

        async def take(n):
            for _ in range(n):
                await limiter.wait_for_token()

        asyncio.run(take(3))
        clock.advance(2.5)
        assert limiter.available_tokens == 59
        clock.advance(0.5)
        assert limiter.available_tokens == 60

    def test_tokens_never_negative(self, clock):
        limiter, sleeps = make_limiter(clock, 2)

        async def take(n):
            for _ in range(n):
                await limiter.wait_for_token()
                assert limiter._tokens >= 0

        asyncio.run(take(5))
        assert len(sleeps) == 3
        assert all(wait == pytest.approx(30.0) for wait in sleeps)

    def test_rejects_non_positive_rate(self):
        with pytest.raises(ValueError):
            RateLimiter(0)
