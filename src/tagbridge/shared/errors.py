"""Where: src/tagbridge/shared/errors.py
What: Error taxonomy shared by the tag, artwork and catalog layers.
Why: Give callers distinguishable failures without leaking mutagen or requests types.
"""

from __future__ import annotations


class TagBridgeError(Exception):
    """Base class for all tagbridge failures."""


class TagNotFoundError(TagBridgeError, FileNotFoundError):
    """The path is missing or cannot be opened for reading."""


class UnsupportedFormatError(TagBridgeError, ValueError):
    """The container is unknown, malformed, or rejects the requested change."""


class TagIOError(TagBridgeError, OSError):
    """Persisting tag or artwork changes failed at the storage layer."""


class RemoteError(TagBridgeError):
    """Base class for catalog and cover archive failures."""


class NetworkError(RemoteError):
    """Transport failure or a non-success, non-redirect HTTP status."""

    def __init__(self, message: str, *, status: int = 0) -> None:
        super().__init__(message)
        self.status: int = status


class NetworkTimeoutError(RemoteError):
    """A bounded remote call exceeded its deadline."""

    status: int = 408


__all__ = [
    "NetworkError",
    "NetworkTimeoutError",
    "RemoteError",
    "TagBridgeError",
    "TagIOError",
    "TagNotFoundError",
    "UnsupportedFormatError",
]
