import asyncio
from collections import deque
from time import monotonic
import logging


logger = logging.getLogger(__name__)


class AsyncRateLimiter:
    """
    Sliding-window limiter for outbound embedding calls.

    ``rpm <= 0`` disables throttling entirely.
    """

    def __init__(self, rpm: int, window: float = 60.0):
        self.rpm = rpm
        self.window = window
        self._timestamps: deque[float] = deque()
        self._lock = asyncio.Lock()

    def _evict(self, now: float) -> None:
        while self._timestamps and now - self._timestamps[0] >= self.window:
            self._timestamps.popleft()

    async def acquire(self) -> None:
        """Wait until a request slot is available."""
        if self.rpm <= 0:
            return

        async with self._lock:
            now = monotonic()
            self._evict(now)

            if len(self._timestamps) >= self.rpm:
                wait_time = self.window - (now - self._timestamps[0])
                if wait_time > 0:
                    logger.debug(f"Embedding rate limit reached, waiting {wait_time:.2f}s")
                    await asyncio.sleep(wait_time)
                    self._evict(monotonic())

            self._timestamps.append(monotonic())

    @property
    def current_usage(self) -> int:
        """Number of requests recorded in the current window."""
        self._evict(monotonic())
        return len(self._timestamps)
