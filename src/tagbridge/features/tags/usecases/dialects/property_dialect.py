"""Vorbis comment property dialect.

Where: src/tagbridge/features/tags/usecases/dialects/property_dialect.py
What: Read and write TagRecord fields as Vorbis comments on FLAC, Ogg Vorbis and Opus.
Why: Several historical key spellings exist per field; the tables below list them.
"""

from __future__ import annotations

from collections.abc import Iterator
from functools import partial
from pathlib import Path
from typing import Any, ClassVar, Final, final, override

import mutagen
from mutagen import MutagenError
from mutagen.flac import FLAC
from mutagen.oggopus import OggOpus
from mutagen.oggvorbis import OggVorbis

from tagbridge.shared.tag_record import TagRecord

from .._tag_utils import first_text, format_pair, parse_pair, parse_uint, parse_year
from ..dispatch import DialectKind
from ._base import FieldWriter, TagDialect

__all__ = ["PropertyDialect"]

_TRACK_TOTAL_KEYS: Final[tuple[str, ...]] = ("TRACKTOTAL", "TOTALTRACKS", "TOTAL TRACKS")
_DISC_TOTAL_KEYS: Final[tuple[str, ...]] = ("DISCTOTAL", "TOTALDISCS", "TOTAL DISCS")


@final
class PropertyDialect(TagDialect):
    """Generic uppercase key -> value list mapping."""

    KIND: ClassVar[DialectKind] = DialectKind.PROPERTY

    # First key is written; the rest are read fallbacks erased on write.
    TEXT_KEYS: ClassVar[dict[str, tuple[str, ...]]] = {
        "title": ("TITLE",),
        "artist": ("ARTIST",),
        "album": ("ALBUM",),
        "album_artist": ("ALBUMARTIST", "ALBUM ARTIST", "ALBUM_ARTIST"),
        "composer": ("COMPOSER",),
        "genre": ("GENRE",),
        "comment": ("COMMENT", "DESCRIPTION"),
        "external_album_id": ("MUSICBRAINZ_ALBUMID",),
        "external_artist_id": ("MUSICBRAINZ_ARTISTID",),
        "external_track_id": ("MUSICBRAINZ_TRACKID",),
        "acoustic_fingerprint": ("ACOUSTID_FINGERPRINT",),
        "acoustic_id": ("ACOUSTID_ID",),
    }
    YEAR_KEYS: ClassVar[tuple[str, ...]] = ("DATE", "YEAR")

    @override
    def _load(self, path: Path) -> Any:
        audio = mutagen.File(path, options=[FLAC, OggVorbis, OggOpus])
        if audio is None:
            raise MutagenError(f"{path.name} is not a FLAC, Ogg Vorbis or Opus stream")
        if audio.tags is None:
            audio.add_tags()
        return audio

    @override
    def _read_fields(self, handle: Any, record: TagRecord) -> None:
        tags = handle.tags
        for field, keys in self.TEXT_KEYS.items():
            setattr(record, field, first_text(tags, keys))

        record.year = parse_year(first_text(tags, self.YEAR_KEYS))

        record.track, record.track_total = parse_pair(first_text(tags, ("TRACKNUMBER",)))
        _ = record.fill_blank("track_total", parse_uint(first_text(tags, _TRACK_TOTAL_KEYS)))
        record.disc, record.disc_total = parse_pair(first_text(tags, ("DISCNUMBER",)))
        _ = record.fill_blank("disc_total", parse_uint(first_text(tags, _DISC_TOTAL_KEYS)))

    @override
    def _field_writers(self, handle: Any, record: TagRecord) -> Iterator[FieldWriter]:
        tags = handle.tags
        for field, keys in self.TEXT_KEYS.items():
            yield field, partial(self._replace, tags, keys, getattr(record, field))
        yield "year", partial(
            self._replace, tags, self.YEAR_KEYS, str(record.year) if record.year > 0 else ""
        )
        yield "track", partial(
            self._set_pair,
            tags,
            "TRACKNUMBER",
            _TRACK_TOTAL_KEYS,
            record.track,
            record.track_total,
        )
        yield "disc", partial(
            self._set_pair,
            tags,
            "DISCNUMBER",
            _DISC_TOTAL_KEYS,
            record.disc,
            record.disc_total,
        )

    @override
    def _save(self, handle: Any, path: Path) -> None:
        handle.save()

    @staticmethod
    def _erase(tags: Any, key: str) -> None:
        if key in tags:
            del tags[key]

    @classmethod
    def _replace(cls, tags: Any, keys: tuple[str, ...], value: str) -> None:
        for key in keys:
            cls._erase(tags, key)
        if value:
            tags[keys[0]] = [value]

    @classmethod
    def _set_pair(
        cls,
        tags: Any,
        number_key: str,
        total_keys: tuple[str, ...],
        number: int,
        total: int,
    ) -> None:
        cls._erase(tags, number_key)
        for key in total_keys:
            cls._erase(tags, key)
        pair = format_pair(number, total)
        if pair:
            tags[number_key] = [pair]
        if total > 0:
            # Readers that ignore "N/M" still find the total here.
            for key in total_keys[:2]:
                tags[key] = [str(total)]
