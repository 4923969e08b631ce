"""Where: src/tagbridge/features/tags/usecases/dispatch.py
What: Map file extensions onto the three tag dialects.
Why: Tag and artwork stores must agree on which container a path holds.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Final

from tagbridge.shared.errors import UnsupportedFormatError


class DialectKind(Enum):
    """Tag encoding families."""

    FRAME = "frame"  # ID3v2
    ATOM = "atom"  # MP4 ilst
    PROPERTY = "property"  # Vorbis comments


EXTENSION_DIALECTS: Final[dict[str, DialectKind]] = {
    ".mp3": DialectKind.FRAME,
    ".m4a": DialectKind.ATOM,
    ".m4b": DialectKind.ATOM,
    ".mp4": DialectKind.ATOM,
    ".flac": DialectKind.PROPERTY,
    ".ogg": DialectKind.PROPERTY,
    ".oga": DialectKind.PROPERTY,
    ".opus": DialectKind.PROPERTY,
}

SUPPORTED_EXTENSIONS: Final[frozenset[str]] = frozenset(EXTENSION_DIALECTS)


def dialect_for(path: Path) -> DialectKind:
    """Return the dialect for ``path`` or raise ``UnsupportedFormatError``."""

    kind = EXTENSION_DIALECTS.get(path.suffix.lower())
    if kind is None:
        raise UnsupportedFormatError(f"Unsupported audio container: {path.suffix or path.name}")
    return kind


def is_supported(path: Path) -> bool:
    return path.suffix.lower() in EXTENSION_DIALECTS


__all__ = [
    "EXTENSION_DIALECTS",
    "SUPPORTED_EXTENSIONS",
    "DialectKind",
    "dialect_for",
    "is_supported",
]
