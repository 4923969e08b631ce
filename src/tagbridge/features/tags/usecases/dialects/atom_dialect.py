"""MP4 atom dialect.

Where: src/tagbridge/features/tags/usecases/dialects/atom_dialect.py
What: Map TagRecord fields onto iTunes-style ilst atoms and freeform atoms.
Why: Pair fields are native tuples here and catalog ids need vendor freeform keys.
"""

from __future__ import annotations

from collections.abc import Iterator
from functools import partial
from pathlib import Path
from typing import Any, ClassVar, Final, final, override

from mutagen.mp4 import MP4, AtomDataType, MP4FreeForm

from tagbridge.shared.tag_record import TagRecord

from .._tag_utils import first_text, parse_uint, parse_year
from ..dispatch import DialectKind
from ._base import FieldWriter, TagDialect

__all__ = ["FREEFORM_PREFIX", "AtomDialect"]

FREEFORM_PREFIX: Final[str] = "----:com.apple.iTunes:"

_FREEFORM_NAMES: Final[dict[str, str]] = {
    "external_album_id": "MusicBrainz Album Id",
    "external_artist_id": "MusicBrainz Artist Id",
    "external_track_id": "MusicBrainz Track Id",
    "acoustic_fingerprint": "Acoustid Fingerprint",
    "acoustic_id": "Acoustid Id",
}


def _decode_freeform(values: Any) -> str:
    if not isinstance(values, list):
        return ""
    for value in values:
        raw = bytes(value)
        text = raw.decode("utf-8", errors="replace").strip()
        if text:
            return text
    return ""


def _read_tuple(tags: Any, key: str) -> tuple[int, int]:
    values = tags.get(key)
    if not values:
        return 0, 0
    first = values[0]
    if isinstance(first, tuple):
        number = parse_uint(first[0]) if len(first) > 0 else 0
        total = parse_uint(first[1]) if len(first) > 1 else 0
        return number, total
    return parse_uint(first), 0


@final
class AtomDialect(TagDialect):
    """MP4/M4A/M4B containers."""

    KIND: ClassVar[DialectKind] = DialectKind.ATOM

    TEXT_KEYS: ClassVar[dict[str, tuple[str, ...]]] = {
        "title": ("\xa9nam",),
        "artist": ("\xa9ART",),
        "album": ("\xa9alb",),
        "album_artist": ("aART", FREEFORM_PREFIX + "ALBUMARTIST"),
        "composer": ("\xa9wrt",),
        "genre": ("\xa9gen",),
        "comment": ("\xa9cmt",),
    }
    YEAR_KEY: ClassVar[str] = "\xa9day"

    @override
    def _load(self, path: Path) -> MP4:
        audio = MP4(path)
        if audio.tags is None:
            audio.add_tags()
        return audio

    @override
    def _read_fields(self, handle: MP4, record: TagRecord) -> None:
        tags = handle.tags if handle.tags is not None else {}
        for field, keys in self.TEXT_KEYS.items():
            text_keys = [key for key in keys if not key.startswith(FREEFORM_PREFIX)]
            value = first_text(tags, text_keys)
            if not value:
                for key in keys:
                    if key.startswith(FREEFORM_PREFIX):
                        value = _decode_freeform(tags.get(key))
                        if value:
                            break
            setattr(record, field, value)

        record.year = parse_year(first_text(tags, (self.YEAR_KEY,)))
        record.track, record.track_total = _read_tuple(tags, "trkn")
        record.disc, record.disc_total = _read_tuple(tags, "disk")

        for field, name in _FREEFORM_NAMES.items():
            setattr(record, field, _decode_freeform(tags.get(FREEFORM_PREFIX + name)))

    @override
    def _field_writers(self, handle: MP4, record: TagRecord) -> Iterator[FieldWriter]:
        tags = handle.tags
        for field, keys in self.TEXT_KEYS.items():
            yield field, partial(self._set_text, tags, keys, getattr(record, field))
        yield "year", partial(
            self._set_text, tags, (self.YEAR_KEY,), str(record.year) if record.year > 0 else ""
        )
        yield "track", partial(self._set_tuple, tags, "trkn", record.track, record.track_total)
        yield "disc", partial(self._set_tuple, tags, "disk", record.disc, record.disc_total)
        for field, name in _FREEFORM_NAMES.items():
            key = FREEFORM_PREFIX + name
            yield field, partial(self._set_freeform, tags, key, getattr(record, field))

    @override
    def _save(self, handle: MP4, path: Path) -> None:
        handle.save()

    @staticmethod
    def _remove(tags: Any, key: str) -> None:
        if key in tags:
            del tags[key]

    @classmethod
    def _set_text(cls, tags: Any, keys: tuple[str, ...], value: str) -> None:
        primary, *fallbacks = keys
        for key in fallbacks:
            cls._remove(tags, key)
        if value:
            tags[primary] = [value]
        else:
            cls._remove(tags, primary)

    @classmethod
    def _set_tuple(cls, tags: Any, key: str, number: int, total: int) -> None:
        if number <= 0 and total <= 0:
            cls._remove(tags, key)
            return
        tags[key] = [(max(number, 0), max(total, 0))]

    @classmethod
    def _set_freeform(cls, tags: Any, key: str, value: str) -> None:
        if not value:
            cls._remove(tags, key)
            return
        tags[key] = [MP4FreeForm(value.encode("utf-8"), dataformat=AtomDataType.UTF8)]
