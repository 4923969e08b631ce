"""ID3v2 frame dialect.

Where: src/tagbridge/features/tags/usecases/dialects/frame_dialect.py
What: Read and write TagRecord fields as ID3v2.4 frames on MP3 files.
Why: ID3 mixes standard frames with user TXXX frames; keep that split explicit.
"""

from __future__ import annotations

from collections.abc import Iterator
from functools import partial
from pathlib import Path
from typing import ClassVar, Final, final, override

from mutagen.id3 import COMM, ID3, TXXX, Encoding, Frames
from mutagen.mp3 import MP3

from tagbridge.shared.tag_record import TagRecord

from .._tag_utils import format_pair, parse_pair, parse_uint, parse_year
from ..dispatch import DialectKind
from ._base import FieldWriter, TagDialect

__all__ = ["FrameDialect", "TXXX_DESCRIPTIONS", "load_frame_tags"]

# TagRecord identifier field -> TXXX description (matched case-insensitively).
TXXX_DESCRIPTIONS: Final[dict[str, str]] = {
    "external_album_id": "MusicBrainz Album Id",
    "external_artist_id": "MusicBrainz Artist Id",
    "external_track_id": "MusicBrainz Track Id",
    "acoustic_fingerprint": "Acoustid Fingerprint",
    "acoustic_id": "Acoustid Id",
}

_TRACK_TOTAL_DESCS: Final[tuple[str, ...]] = ("TRACKTOTAL", "TOTALTRACKS")
_DISC_TOTAL_DESCS: Final[tuple[str, ...]] = ("DISCTOTAL", "TOTALDISCS")
_ALBUM_ARTIST_DESCS: Final[tuple[str, ...]] = ("ALBUMARTIST", "ALBUM ARTIST")


def _txxx_frames(tags: ID3, description: str) -> list[TXXX]:
    wanted = description.casefold()
    return [frame for frame in tags.getall("TXXX") if str(frame.desc).casefold() == wanted]


def _txxx_text(tags: ID3, descriptions: tuple[str, ...]) -> str:
    for description in descriptions:
        for frame in _txxx_frames(tags, description):
            for text in frame.text:
                if str(text).strip():
                    return str(text).strip()
    return ""


def _remove_txxx(tags: ID3, description: str) -> None:
    for frame in _txxx_frames(tags, description):
        del tags[frame.HashKey]


def _frame_text(tags: ID3, frame_id: str) -> str:
    for frame in tags.getall(frame_id):
        for text in frame.text:
            if str(text).strip():
                return str(text).strip()
    return ""


def load_frame_tags(path: Path) -> ID3:
    """Load the ID3 tag of an MPEG file, upgraded to v2.4 with genre text kept verbatim.

    Raises:
        MutagenError: No MPEG frame could be found (``HeaderNotFoundError``)
            or the tag is corrupt.
    """

    audio = MP3(path, translate=False)
    tags = audio.tags if audio.tags is not None else ID3()
    # update_to_v24 rewrites TCON through TCON.genres, turning "2" into "Country".
    stored_genre = list(tags["TCON"].text) if "TCON" in tags else None
    tags.update_to_v24()
    if stored_genre is not None and "TCON" in tags:
        tags["TCON"].text = stored_genre
    return tags


@final
class FrameDialect(TagDialect):
    """ID3v2 on MP3. Valid MPEG files without an ID3 header read as empty."""

    KIND: ClassVar[DialectKind] = DialectKind.FRAME

    # TagRecord text field -> standard text frame id.
    TEXT_FRAMES: ClassVar[dict[str, str]] = {
        "title": "TIT2",
        "artist": "TPE1",
        "album": "TALB",
        "album_artist": "TPE2",
        "composer": "TCOM",
    }

    @override
    def _load(self, path: Path) -> ID3:
        return load_frame_tags(path)

    @override
    def _stream_info(self, handle: ID3, path: Path) -> object:
        return MP3(path).info

    @override
    def _read_fields(self, handle: ID3, record: TagRecord) -> None:
        for field, frame_id in self.TEXT_FRAMES.items():
            setattr(record, field, _frame_text(handle, frame_id))
        _ = record.fill_blank("album_artist", _txxx_text(handle, _ALBUM_ARTIST_DESCS))

        # Raw text; TCON.genres would turn "2" into an ID3v1 genre name.
        record.genre = _frame_text(handle, "TCON")

        for frame in handle.getall("COMM"):
            text = next((str(t).strip() for t in frame.text if str(t).strip()), "")
            if text:
                record.comment = text
                break

        record.year = parse_year(_frame_text(handle, "TDRC")) or parse_year(
            _frame_text(handle, "TYER")
        )

        record.track, record.track_total = parse_pair(_frame_text(handle, "TRCK"))
        record.disc, record.disc_total = parse_pair(_frame_text(handle, "TPOS"))
        _ = record.fill_blank("track_total", parse_uint(_txxx_text(handle, _TRACK_TOTAL_DESCS)))
        _ = record.fill_blank("disc_total", parse_uint(_txxx_text(handle, _DISC_TOTAL_DESCS)))

        for field, description in TXXX_DESCRIPTIONS.items():
            setattr(record, field, _txxx_text(handle, (description,)))

    @override
    def _field_writers(self, handle: ID3, record: TagRecord) -> Iterator[FieldWriter]:
        for field, frame_id in self.TEXT_FRAMES.items():
            yield field, partial(self._set_text_frame, handle, frame_id, getattr(record, field))
        yield "album_artist", partial(self._drop_txxx, handle, _ALBUM_ARTIST_DESCS)
        yield "genre", partial(self._set_text_frame, handle, "TCON", record.genre)
        yield "comment", partial(self._set_comment, handle, record.comment)
        yield "year", partial(self._set_year, handle, record.year)
        yield "track", partial(
            self._set_pair, handle, "TRCK", record.track, record.track_total, _TRACK_TOTAL_DESCS
        )
        yield "disc", partial(
            self._set_pair, handle, "TPOS", record.disc, record.disc_total, _DISC_TOTAL_DESCS
        )
        for field, description in TXXX_DESCRIPTIONS.items():
            yield field, partial(self._set_txxx, handle, description, getattr(record, field))

    @override
    def _save(self, handle: ID3, path: Path) -> None:
        handle.save(path, v2_version=4)

    @staticmethod
    def _set_text_frame(tags: ID3, frame_id: str, value: str) -> None:
        if not value:
            tags.delall(frame_id)
            return
        frame_class = Frames[frame_id]
        tags.setall(frame_id, [frame_class(encoding=Encoding.UTF8, text=[value])])

    @staticmethod
    def _set_comment(tags: ID3, value: str) -> None:
        tags.delall("COMM")
        if value:
            tags.add(COMM(encoding=Encoding.UTF8, lang="eng", desc="", text=[value]))

    @staticmethod
    def _set_year(tags: ID3, year: int) -> None:
        tags.delall("TDRC")
        tags.delall("TYER")
        if year > 0:
            tags.add(Frames["TDRC"](encoding=Encoding.UTF8, text=[str(year)]))

    @classmethod
    def _set_pair(
        cls,
        tags: ID3,
        frame_id: str,
        number: int,
        total: int,
        total_descriptions: tuple[str, ...],
    ) -> None:
        # Totals live in the pair frame; stale TXXX totals would shadow a removal.
        cls._drop_txxx(tags, total_descriptions)
        cls._set_text_frame(tags, frame_id, format_pair(number, total))

    @staticmethod
    def _drop_txxx(tags: ID3, descriptions: tuple[str, ...]) -> None:
        for description in descriptions:
            _remove_txxx(tags, description)

    @staticmethod
    def _set_txxx(tags: ID3, description: str, value: str) -> None:
        _remove_txxx(tags, description)
        if value:
            tags.add(TXXX(encoding=Encoding.UTF8, desc=description, text=[value]))
