"""Expose the embedded cover store and MIME sniffing."""

from .usecases import ArtworkStore, sniff_mime

__all__ = ["ArtworkStore", "sniff_mime"]
