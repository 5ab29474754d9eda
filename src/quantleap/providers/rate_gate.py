"""Fixed-interval gate pacing calls against a per-minute quota."""

import asyncio
import time
from typing import Awaitable, Callable, Optional

from ..config.logging import get_logger

logger = get_logger(__name__)


class RateGate:
    """
    Serializes callers and keeps at least ``min_interval`` seconds between
    successive acquisitions.

    Clock and sleep are injectable so tests can drive time explicitly.
    """

    def __init__(
        self,
        min_interval: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        name: str = "rate_gate",
    ):
        if min_interval < 0:
            raise ValueError("min_interval must be zero or positive")
        self.min_interval = min_interval
        self._clock = clock
        self._sleep = sleep
        self._lock = asyncio.Lock()
        self._last_acquired: Optional[float] = None
        self.logger = logger.bind(gate=name)

    async def acquire(self) -> None:
        """Wait until the next call is allowed."""
        async with self._lock:
            if self._last_acquired is not None:
                wait = self._last_acquired + self.min_interval - self._clock()
                if wait > 0:
                    self.logger.debug("Pacing provider call", wait_seconds=wait)
                    await self._sleep(wait)
            self._last_acquired = self._clock()

    async def __aenter__(self) -> "RateGate":
        await self.acquire()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        return None
