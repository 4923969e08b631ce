"""Where: src/tagbridge/shared/tag_record.py
What: Canonical TagRecord and ArtworkBlob value types shared across features.
Why: One metadata shape for every tag dialect, the catalog client and the CLI.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from typing import ClassVar


@dataclass(slots=True)
class TagRecord:
    """Canonical metadata for one audio file.

    Text fields use ``""`` and numeric fields use ``0`` for "not present".
    Writing a record removes the stored value behind any empty field instead
    of storing a literal empty string or zero.
    """

    TEXT_FIELDS: ClassVar[tuple[str, ...]] = (
        "title",
        "artist",
        "album",
        "album_artist",
        "composer",
        "genre",
        "comment",
    )
    NUMBER_FIELDS: ClassVar[tuple[str, ...]] = (
        "year",
        "track",
        "track_total",
        "disc",
        "disc_total",
    )
    DERIVED_FIELDS: ClassVar[tuple[str, ...]] = (
        "length_seconds",
        "bitrate",
        "sample_rate",
        "channels",
    )
    IDENTIFIER_FIELDS: ClassVar[tuple[str, ...]] = (
        "external_album_id",
        "external_artist_id",
        "external_track_id",
        "acoustic_fingerprint",
        "acoustic_id",
    )

    title: str = ""
    artist: str = ""
    album: str = ""
    album_artist: str = ""
    composer: str = ""
    genre: str = ""
    comment: str = ""

    year: int = 0
    track: int = 0
    track_total: int = 0
    disc: int = 0
    disc_total: int = 0

    # Read-only stream properties; never written back to the file.
    length_seconds: int = 0
    bitrate: int = 0
    sample_rate: int = 0
    channels: int = 0

    external_album_id: str = ""
    external_artist_id: str = ""
    external_track_id: str = ""
    acoustic_fingerprint: str = ""
    acoustic_id: str = ""

    def copy(self, **changes: object) -> TagRecord:
        """Return a detached copy, optionally overriding fields."""

        return replace(self, **changes)

    def fill_blank(self, name: str, value: str | int) -> bool:
        """Set ``name`` only when it is currently absent.

        Returns:
            bool: ``True`` when the value was taken.
        """

        if not value or getattr(self, name):
            return False
        setattr(self, name, value)
        return True

    def as_dict(self) -> dict[str, str | int]:
        """Expose all fields in declaration order."""

        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass(slots=True, frozen=True)
class ArtworkBlob:
    """Raw embedded image bytes plus their MIME type (``""`` when unknown)."""

    data: bytes
    mime: str = ""
    description: str = field(default="", compare=False)

    def __bool__(self) -> bool:
        return len(self.data) > 0

    @property
    def size(self) -> int:
        return len(self.data)


__all__ = ["ArtworkBlob", "TagRecord"]
