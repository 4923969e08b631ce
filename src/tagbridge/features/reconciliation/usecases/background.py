"""Where: src/tagbridge/features/reconciliation/usecases/background.py
What: Single-worker runner that supersedes older catalog work.
Why: Keep network-bound reconciliation off the caller's thread and drop stale results.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Generic, TypeVar, final

from tagbridge.platform.logging import logger
from tagbridge.shared.cancellation import CancellationToken, GenerationCounter

T = TypeVar("T")


@dataclass(slots=True)
class BackgroundResult(Generic[T]):
    """Completed work plus whether a newer submission superseded it."""

    value: T | None
    stale: bool


@final
class BackgroundRunner:
    """Run one operation at a time on a worker thread.

    Submitting new work advances the generation, which cancels the token
    handed to every earlier submission.
    """

    def __init__(self, name: str = "tagbridge-worker") -> None:
        self.generations = GenerationCounter()
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix=name)
        self._lock = threading.Lock()
        self._closed = False

    def submit(
        self, work: Callable[[CancellationToken], T]
    ) -> tuple[CancellationToken, Future[BackgroundResult[T]]]:
        """Queue ``work`` with a fresh token, superseding everything submitted before.

        Raises:
            RuntimeError: The runner was shut down.
        """

        with self._lock:
            if self._closed:
                raise RuntimeError("BackgroundRunner is shut down")
            token = self.generations.issue()
            future = self._executor.submit(self._run, work, token)
        return token, future

    def cancel_all(self) -> None:
        """Supersede all outstanding work without queueing anything new."""

        _ = self.generations.advance()

    def shutdown(self, wait: bool = True) -> None:
        with self._lock:
            self._closed = True
        self.cancel_all()
        self._executor.shutdown(wait=wait, cancel_futures=True)

    @staticmethod
    def _run(
        work: Callable[[CancellationToken], T], token: CancellationToken
    ) -> BackgroundResult[T]:
        if token.is_cancelled():
            return BackgroundResult(None, stale=True)
        value = work(token)
        stale = token.is_cancelled()
        if stale:
            logger.debug("Discarding stale result from generation %d", token.generation)
        return BackgroundResult(None if stale else value, stale=stale)

    def __enter__(self) -> BackgroundRunner:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()


__all__ = ["BackgroundResult", "BackgroundRunner"]
