"""Artwork store use cases."""

from __future__ import annotations

from .artwork_store import ArtworkStore
from .mime import JPEG_MIME, PNG_MIME, normalize_mime, sniff_mime

__all__ = ["JPEG_MIME", "PNG_MIME", "ArtworkStore", "normalize_mime", "sniff_mime"]
