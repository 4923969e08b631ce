"""Shared value types used across features."""

from .cancellation import CancelCheck, CancellationToken, GenerationCounter, is_cancelled
from .errors import (
    NetworkError,
    NetworkTimeoutError,
    RemoteError,
    TagBridgeError,
    TagIOError,
    TagNotFoundError,
    UnsupportedFormatError,
)
from .remote import RemoteHit, RemoteRelease, RemoteTrack
from .tag_record import ArtworkBlob, TagRecord

__all__ = [
    "ArtworkBlob",
    "CancelCheck",
    "CancellationToken",
    "GenerationCounter",
    "NetworkError",
    "NetworkTimeoutError",
    "RemoteError",
    "RemoteHit",
    "RemoteRelease",
    "RemoteTrack",
    "TagBridgeError",
    "TagIOError",
    "TagNotFoundError",
    "TagRecord",
    "UnsupportedFormatError",
    "is_cancelled",
]
