"""Minimum-interval rate limiter for outbound Discogs requests."""

import threading
import time
from collections.abc import Callable


class RateLimiter:
    """Spaces out requests so no two slots start closer than 60 / rpm seconds."""

    def __init__(
        self,
        requests_per_minute: int,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Initialize the rate limiter.

        Args:
            requests_per_minute: Request budget per minute (must be positive)
            clock: Monotonic time source in seconds
            sleep: Function used to block the calling thread
        """
        if requests_per_minute <= 0:
            raise ValueError("requests_per_minute must be a positive integer")

        self.requests_per_minute = requests_per_minute
        self.min_interval = 60.0 / requests_per_minute
        self._clock = clock
        self._sleep = sleep
        self._last_slot: float | None = None
        self._lock = threading.Lock()

    def wait_for_next_slot(self) -> None:
        """Block until the minimum interval since the last granted slot has passed."""
        with self._lock:
            if self._last_slot is not None:
                elapsed = self._clock() - self._last_slot
                if elapsed < self.min_interval:
                    self._sleep(self.min_interval - elapsed)

            self._last_slot = self._clock()
