"""Where: src/tagbridge/shared/cancellation.py
What: Generation counter and per-operation cancellation tokens.
Why: Let a newer request supersede in-flight catalog work without shared flags.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Final

CancelCheck = Callable[[], bool]


class GenerationCounter:
    """Monotonic counter bumped whenever a superseding operation starts."""

    def __init__(self) -> None:
        self._lock: Final[threading.Lock] = threading.Lock()
        self._value: int = 0

    @property
    def current(self) -> int:
        with self._lock:
            return self._value

    def advance(self) -> int:
        """Invalidate every token issued so far and return the new generation."""

        with self._lock:
            self._value += 1
            return self._value

    def issue(self) -> CancellationToken:
        """Start a new generation and hand out a token bound to it."""

        return CancellationToken(self, self.advance())

    def capture(self) -> CancellationToken:
        """Bind a token to the current generation without superseding it."""

        return CancellationToken(self, self.current)


class CancellationToken:
    """Reports cancellation once its generation is no longer current.

    Tokens are callable so they can be handed to anything expecting a plain
    ``() -> bool`` predicate.
    """

    def __init__(self, counter: GenerationCounter | None = None, generation: int = 0) -> None:
        self._counter: GenerationCounter | None = counter
        self._generation: int = generation
        self._cancelled: threading.Event = threading.Event()

    @classmethod
    def never(cls) -> CancellationToken:
        return cls()

    @property
    def generation(self) -> int:
        return self._generation

    def cancel(self) -> None:
        self._cancelled.set()

    def is_cancelled(self) -> bool:
        if self._cancelled.is_set():
            return True
        if self._counter is None:
            return False
        return self._counter.current != self._generation

    def __call__(self) -> bool:
        return self.is_cancelled()


def is_cancelled(check: CancelCheck | None) -> bool:
    """Evaluate an optional predicate, treating ``None`` as "never cancelled"."""

    return check is not None and bool(check())


__all__ = ["CancelCheck", "CancellationToken", "GenerationCounter", "is_cancelled"]
