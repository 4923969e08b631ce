"""ID3v2 round trips on synthesised MP3 files."""

from collections.abc import Callable
from pathlib import Path

import pytest
from mutagen.id3 import ID3, TRCK, TXXX, Encoding

from tagbridge.features.tags import TagStore
from tagbridge.features.tags.usecases.dialects.frame_dialect import FrameDialect
from tagbridge.shared.tag_record import TagRecord

FULL = TagRecord(
    title="Teardrop",
    artist="Massive Attack",
    album="Mezzanine",
    album_artist="Massive Attack",
    composer="Del Naja",
    genre="Trip Hop",
    comment="remastered",
    year=1998,
    track=3,
    track_total=11,
    disc=1,
    disc_total=2,
    external_album_id="a3f1c2d4-0000-4000-8000-000000000001",
    external_artist_id="10adbe5e-a2c0-4bf3-8249-2b4cbf6e6ca8",
    external_track_id="b2c3d4e5-0000-4000-8000-000000000003",
    acoustic_fingerprint="AQADtE",
    acoustic_id="c0ffee00-0000-4000-8000-000000000004",
)

TAG_FIELDS = (
    TagRecord.TEXT_FIELDS + TagRecord.NUMBER_FIELDS + TagRecord.IDENTIFIER_FIELDS
)


def _tag_values(record: TagRecord) -> dict[str, str | int]:
    return {name: getattr(record, name) for name in TAG_FIELDS}


def test_round_trip(make_mp3: Callable[[str], Path]) -> None:
    path = make_mp3("01 Teardrop.mp3")
    store = TagStore()

    assert store.write_tags(path, FULL)

    assert _tag_values(store.read_tags(path)) == _tag_values(FULL)


def test_untagged_file_reads_empty(make_mp3: Callable[[str], Path]) -> None:
    record = TagStore().read_tags(make_mp3("blank.mp3"))

    assert _tag_values(record) == _tag_values(TagRecord())
    assert (record.bitrate, record.sample_rate, record.channels) == (128, 44100, 2)


@pytest.mark.parametrize("genre", ["2", "(17)", "Trip Hop"])
def test_genre_text_round_trips_verbatim(make_mp3: Callable[[str], Path], genre: str) -> None:
    path = make_mp3("genre.mp3")
    store = TagStore()

    assert store.write_tags(path, TagRecord(genre=genre))

    assert store.read_tags(path).genre == genre


def test_empty_fields_remove_frames(make_mp3: Callable[[str], Path]) -> None:
    path = make_mp3("delete.mp3")
    store = TagStore()
    assert store.write_tags(path, FULL)

    cleared = FULL.copy(
        title="", comment="", year=0, track=0, track_total=0, external_album_id=""
    )
    assert store.write_tags(path, cleared)

    record = store.read_tags(path)
    assert record.title == ""
    assert record.comment == ""
    assert record.year == 0
    assert (record.track, record.track_total) == (0, 0)
    assert record.external_album_id == ""
    assert record.album == "Mezzanine"

    tags = ID3(path)
    for frame_id in ("TIT2", "COMM", "TDRC", "TRCK"):
        assert tags.getall(frame_id) == []
    assert not any(str(frame.desc) == "MusicBrainz Album Id" for frame in tags.getall("TXXX"))


def test_track_without_total_is_single_number(make_mp3: Callable[[str], Path]) -> None:
    path = make_mp3("single.mp3")
    assert TagStore().write_tags(path, TagRecord(track=3))
    assert str(ID3(path)["TRCK"]) == "3"


def test_user_text_totals_and_case_insensitive_ids(make_mp3: Callable[[str], Path]) -> None:
    path = make_mp3("legacy.mp3")
    tags = ID3()
    tags.add(TRCK(encoding=Encoding.UTF8, text=["4"]))
    tags.add(TXXX(encoding=Encoding.UTF8, desc="TOTALTRACKS", text=["9"]))
    tags.add(TXXX(encoding=Encoding.UTF8, desc="musicbrainz album id", text=["rel-1"]))
    tags.add(TXXX(encoding=Encoding.UTF8, desc="ALBUM ARTIST", text=["Fallback Artist"]))
    tags.save(path, v2_version=4)

    record = TagStore().read_tags(path)

    assert (record.track, record.track_total) == (4, 9)
    assert record.external_album_id == "rel-1"
    assert record.album_artist == "Fallback Artist"


def test_failed_field_is_skipped_not_rolled_back(
    make_mp3: Callable[[str], Path], monkeypatch: pytest.MonkeyPatch
) -> None:
    path = make_mp3("partial.mp3")

    def _boom(_tags: ID3, _value: str) -> None:
        raise ValueError("cannot encode comment")

    monkeypatch.setattr(FrameDialect, "_set_comment", staticmethod(_boom))

    assert not TagStore().write_tags(path, FULL)

    record = TagStore().read_tags(path)
    assert record.title == "Teardrop"
    assert record.comment == ""
