"""Token-bucket rate limiter for outbound provider calls."""

import asyncio
import logging
import time
from typing import Awaitable, Callable

logger = logging.getLogger(__name__)


class RateLimiter:
    """
    Token bucket holding up to `requests_per_minute` tokens.

    One token is added every 60 / requests_per_minute seconds. Waiters are not
    queued: each one re-checks the bucket after sleeping, so concurrent callers
    may overshoot slightly. Token accounting assumes a single event loop.
    """

    def __init__(
        self,
        requests_per_minute: int,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        if requests_per_minute <= 0:
            raise ValueError("requests_per_minute must be positive")
        self.capacity = requests_per_minute
        self.refill_interval = 60.0 / requests_per_minute
        self._clock = clock
        self._sleep = sleep
        self._tokens = requests_per_minute
        self._last_refill = clock()

    @property
    def available_tokens(self) -> int:
        self._refill()
        return self._tokens

    async def wait_for_token(self) -> None:
        """Consume a token, sleeping until one is available."""
        while True:
            self._refill()
            if self._tokens > 0:
                self._tokens -= 1
                return

            wait_time = self.refill_interval - (self._clock() - self._last_refill)
            if wait_time > 0:
                logger.debug("Rate limit reached, waiting %.3fs for next token", wait_time)
                await self._sleep(wait_time)
            else:
                await self._sleep(0)

    def _refill(self) -> None:
        now = self._clock()
        tokens_to_add = int((now - self._last_refill) // self.refill_interval)
        if tokens_to_add <= 0:
            return

        if self._tokens + tokens_to_add >= self.capacity:
            self._tokens = self.capacity
            self._last_refill = now
        else:
            self._tokens += tokens_to_add
            # Keep the partial interval so refill stays continuous
            self._last_refill += tokens_to_add * self.refill_interval
