# ABOUTME: Pacing abstraction that spaces out sequential upstream requests
# ABOUTME: A single-slot token bucket: each acquire waits until the interval since the last one has passed

import asyncio
import time
from collections.abc import Awaitable, Callable

from poudre_flies.utils.logging import get_logger

logger = get_logger(__name__)


class Pacer:
    """Blocks callers so consecutive acquisitions are at least ``interval`` seconds apart.

    The first acquisition never waits. Pacing is a politeness throttle for
    sequential work; it does not limit concurrency.
    """

    def __init__(
        self,
        interval: float = 0.2,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        if interval < 0:
            raise ValueError("interval must be non-negative")
        self.interval = interval
        self._clock = clock
        self._sleep = sleep
        self._last_acquired: float | None = None
        self.total_waited = 0.0

    async def acquire(self) -> float:
        """Wait for the next slot and return the time slept."""
        waited = 0.0
        if self._last_acquired is not None and self.interval > 0:
            elapsed = self._clock() - self._last_acquired
            if elapsed < self.interval:
                waited = self.interval - elapsed
                logger.debug("Pacing upstream request", sleep_time=round(waited, 3))
                await self._sleep(waited)

        self._last_acquired = self._clock()
        self.total_waited += waited
        return waited

    def reset(self) -> None:
        self._last_acquired = None
        self.total_waited = 0.0
