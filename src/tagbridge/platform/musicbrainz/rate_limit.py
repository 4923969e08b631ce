"""Where: src/tagbridge/platform/musicbrainz/rate_limit.py
What: Thread-safe throttle enforcing spacing between remote calls.
Why: MusicBrainz asks clients to stay at roughly one request per second.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from typing import Final

DEFAULT_MIN_INTERVAL_SECONDS: Final[float] = 1.1


class RateLimiter:
    """Monotonic sleep guard owned by a single client instance.

    The lock serialises callers, so whoever holds it is the only writer of
    the last-call timestamp.
    """

    def __init__(
        self,
        min_interval_seconds: float = DEFAULT_MIN_INTERVAL_SECONDS,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._min_interval: float = min_interval_seconds
        self._clock: Callable[[], float] = clock
        self._sleep: Callable[[float], None] = sleep
        self._lock: Final[threading.Lock] = threading.Lock()
        self._last_start: float | None = None

    @property
    def min_interval(self) -> float:
        return self._min_interval

    def respect(self) -> float:
        """Delay the caller until the minimum spacing constraint is met.

        Returns:
            float: Seconds spent waiting.
        """

        with self._lock:
            waited = 0.0
            if self._last_start is not None:
                elapsed = self._clock() - self._last_start
                wait = self._min_interval - elapsed
                if wait > 0:
                    self._sleep(wait)
                    waited = wait
            self._last_start = self._clock()
            return waited


__all__ = ["DEFAULT_MIN_INTERVAL_SECONDS", "RateLimiter"]
