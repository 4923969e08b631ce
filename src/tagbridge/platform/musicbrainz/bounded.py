"""Where: src/tagbridge/platform/musicbrainz/bounded.py
What: Run one blocking remote call on a worker thread with a deadline and cancellation.
Why: The caller must stay responsive to cancellation while a socket read blocks.

Python threads cannot be killed, so termination is cooperative: the worker
receives an ``abort`` event that is set whenever the wait ends early, and
network calls inside the worker carry their own socket timeout no longer than
the ceiling. A worker that outlives its abort is remembered, and the next
call waits for it to finish before starting, so calls never overlap.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from typing import Any, Final, TypeVar, final

from tagbridge.platform.logging import logger
from tagbridge.shared.cancellation import CancelCheck, is_cancelled
from tagbridge.shared.errors import NetworkTimeoutError

T = TypeVar("T")

DEFAULT_TIMEOUT_SECONDS: Final[float] = 20.0
DEFAULT_POLL_INTERVAL_SECONDS: Final[float] = 0.1


@final
class BoundedCall:
    """Submit, await with deadline, abandon on cancel."""

    def __init__(
        self,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        poll_interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS,
        *,
        name: str = "remote",
    ) -> None:
        self.timeout_seconds: float = timeout_seconds
        self.poll_interval_seconds: float = poll_interval_seconds
        self.name: str = name
        self._abandoned: Future[Any] | None = None

    @property
    def busy(self) -> bool:
        """``True`` while an abandoned worker from an earlier call is still running."""

        return self._abandoned is not None and not self._abandoned.done()

    def settle(self, cancel: CancelCheck | None = None) -> bool:
        """Wait, within the ceiling, for an abandoned worker to finish.

        Returns:
            ``False`` when cancellation fired while waiting.

        Raises:
            NetworkTimeoutError: The earlier worker is still running at the ceiling.
        """

        pending = self._abandoned
        if pending is None:
            return True
        deadline = time.monotonic() + self.timeout_seconds
        while not pending.done():
            if is_cancelled(cancel):
                return False
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                logger.warning(
                    "Previous %s call still running after %.1fs",
                    self.name,
                    self.timeout_seconds,
                    extra={"tag_event": "remote.timeout"},
                )
                raise NetworkTimeoutError(f"previous {self.name} call is still running")
            _ = wait([pending], timeout=min(self.poll_interval_seconds, remaining))
        self._abandoned = None
        return True

    def run(
        self,
        work: Callable[[threading.Event], T],
        cancel: CancelCheck | None = None,
    ) -> T | None:
        """Execute ``work`` and wait for it.

        Args:
            work: Callable receiving the abort event; it should return promptly
                once the event is set.
            cancel: Predicate polled at every increment.

        Returns:
            The worker's result, or ``None`` when cancellation fired first.

        Raises:
            NetworkTimeoutError: The ceiling elapsed before the worker finished,
                or an earlier abandoned worker never finished.
            Exception: Whatever the worker raised.
        """

        if is_cancelled(cancel) or not self.settle(cancel):
            return None

        abort = threading.Event()
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix=f"tagbridge-{self.name}")
        future = executor.submit(work, abort)
        deadline = time.monotonic() + self.timeout_seconds
        try:
            while True:
                if is_cancelled(cancel):
                    logger.debug("%s call cancelled by caller", self.name)
                    return None
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    logger.warning(
                        "%s call exceeded %.1fs",
                        self.name,
                        self.timeout_seconds,
                        extra={"tag_event": "remote.timeout"},
                    )
                    raise NetworkTimeoutError(
                        f"{self.name} call timed out after {self.timeout_seconds:.1f}s"
                    )
                done, _ = wait(
                    [future],
                    timeout=min(self.poll_interval_seconds, remaining),
                    return_when=FIRST_COMPLETED,
                )
                if done:
                    return future.result()
        finally:
            abort.set()
            _ = future.cancel()
            executor.shutdown(wait=False, cancel_futures=True)
            self._remember(future)

    def _remember(self, future: Future[T]) -> None:
        # One poll interval of grace lets a cooperative worker observe the abort.
        if not future.done():
            _ = wait([future], timeout=self.poll_interval_seconds)
        if future.done():
            self._abandoned = None
            return
        logger.debug("%s worker still running after abort", self.name)
        self._abandoned = future


__all__ = ["DEFAULT_POLL_INTERVAL_SECONDS", "DEFAULT_TIMEOUT_SECONDS", "BoundedCall"]
