"""Image type detection from leading bytes.

Where: src/tagbridge/features/artwork/usecases/mime.py
What: Sniff PNG and JPEG signatures and normalise declared MIME types.
Why: Containers disagree on how image types are labelled; covers need one vocabulary.
"""

from __future__ import annotations

from typing import Final

PNG_SIGNATURE: Final[bytes] = b"\x89PNG\r\n\x1a\n"
JPEG_MARKER: Final[bytes] = b"\xff\xd8"

PNG_MIME: Final[str] = "image/png"
JPEG_MIME: Final[str] = "image/jpeg"


def sniff_mime(data: bytes | bytearray | memoryview | None) -> str | None:
    """Return ``image/png`` or ``image/jpeg`` for recognised buffers, else ``None``.

    Buffers shorter than the PNG signature are never classified.
    """

    if data is None:
        return None
    head = bytes(data[: len(PNG_SIGNATURE)])
    if len(head) < len(PNG_SIGNATURE):
        return None
    if head == PNG_SIGNATURE:
        return PNG_MIME
    if head.startswith(JPEG_MARKER):
        return JPEG_MIME
    return None


def normalize_mime(mime: str | None) -> str:
    """Lower-case a MIME string and fold the ``image/jpg`` alias."""

    if not mime:
        return ""
    cleaned = mime.split(";", 1)[0].strip().lower()
    return JPEG_MIME if cleaned == "image/jpg" else cleaned


__all__ = ["JPEG_MIME", "PNG_MIME", "normalize_mime", "sniff_mime"]
