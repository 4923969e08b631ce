"""Tests for the shared TagRecord, ArtworkBlob and remote value types."""

from tagbridge.shared.remote import RemoteHit, RemoteRelease, RemoteTrack
from tagbridge.shared.tag_record import ArtworkBlob, TagRecord


def test_defaults_are_absent_values() -> None:
    record = TagRecord()
    assert all(value in ("", 0) for value in record.as_dict().values())


def test_copy_is_detached() -> None:
    original = TagRecord(title="A", track=1)
    changed = original.copy(title="B")
    assert original.title == "A"
    assert changed.title == "B"
    assert changed.track == 1


def test_fill_blank_only_sets_absent_fields() -> None:
    record = TagRecord(track_total=12)
    assert not record.fill_blank("track_total", 10)
    assert record.fill_blank("disc_total", 2)
    assert not record.fill_blank("album_artist", "")
    assert record.track_total == 12
    assert record.disc_total == 2


def test_as_dict_follows_declaration_order() -> None:
    names = list(TagRecord().as_dict())
    assert names[0] == "title"
    assert names[-1] == "acoustic_id"
    assert len(names) == (
        len(TagRecord.TEXT_FIELDS)
        + len(TagRecord.NUMBER_FIELDS)
        + len(TagRecord.DERIVED_FIELDS)
        + len(TagRecord.IDENTIFIER_FIELDS)
    )


def test_artwork_blob_truthiness() -> None:
    assert not ArtworkBlob(b"")
    assert ArtworkBlob(b"\xff\xd8", mime="image/jpeg").size == 2


def test_hit_label_omits_missing_parts() -> None:
    full = RemoteHit(
        recording_id="r",
        title="Song",
        artist="Band",
        release_id="x",
        release_title="Album",
        country="GB",
        year=1997,
        track_count=12,
    )
    assert full.label == "Band - Song (Album, 1997, GB, 12 Tracks)"
    assert RemoteHit(recording_id="r", title="Song", artist="Band").label == "Band - Song"


def test_track_duration_label() -> None:
    assert RemoteTrack(1, 1, 245, "Song", "r").duration_label == "4:05"


def test_release_is_empty_without_tracks() -> None:
    assert RemoteRelease(release_id="x").is_empty
