"""Where: src/tagbridge/platform/musicbrainz/parsing.py
What: Turn MusicBrainz WS2 JSON documents into RemoteHit and RemoteRelease values.
Why: Keep payload shape knowledge separate from transport and retry policy.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, cast

from tagbridge.shared.remote import RemoteHit, RemoteRelease, RemoteTrack


def escape_query_value(value: str) -> str:
    """Escape embedded quotes for use inside a quoted Lucene term."""

    return value.replace('"', '\\"')


def build_recording_query(artist: str, title: str, album: str | None = None) -> str:
    """Build ``artist:"A" AND recording:"T"`` with an optional release clause."""

    query = f'artist:"{escape_query_value(artist)}" AND recording:"{escape_query_value(title)}"'
    if album:
        query += f' AND release:"{escape_query_value(album)}"'
    return query


def parse_year(date: object) -> int:
    """Return the leading year of an ISO-ish date string, or 0."""

    if not isinstance(date, str):
        return 0
    digits = ""
    for char in date.strip():
        if not char.isdigit():
            break
        digits += char
    return int(digits) if digits else 0


def _as_int(value: object) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return 0


def _items(payload: Mapping[str, Any], key: str) -> list[Mapping[str, Any]]:
    raw = payload.get(key)
    if not isinstance(raw, list):
        return []
    return [
        cast(Mapping[str, Any], item)
        for item in cast(Sequence[object], raw)
        if isinstance(item, Mapping)
    ]


def _credited_names(payload: Mapping[str, Any]) -> list[str]:
    names: list[str] = []
    for credit in _items(payload, "artist-credit"):
        artist = credit.get("artist")
        if isinstance(artist, Mapping):
            name = cast(Mapping[str, Any], artist).get("name")
            if isinstance(name, str) and name:
                names.append(name)
    return names


def format_artist_credit(payload: Mapping[str, Any]) -> str:
    """Join every credited artist name with ``", "``."""

    return ", ".join(_credited_names(payload))


def release_track_count(release: Mapping[str, Any]) -> int:
    """Sum track counts across every medium, falling back to the release total."""

    media = _items(release, "media")
    total = 0
    for medium in media:
        count = _as_int(medium.get("track-count"))
        if not count:
            count = len(_items(medium, "tracks"))
        total += count
    if total:
        return total
    return _as_int(release.get("track-count"))


def extract_recording_hits(payload: Mapping[str, Any]) -> list[RemoteHit]:
    """Expand a recording search result into one hit per associated release."""

    hits: list[RemoteHit] = []
    for recording in _items(payload, "recordings"):
        recording_id = str(recording.get("id") or "")
        title = str(recording.get("title") or "")
        artist = format_artist_credit(recording)
        releases = _items(recording, "releases")
        if not releases:
            hits.append(RemoteHit(recording_id=recording_id, title=title, artist=artist))
            continue
        for release in releases:
            hits.append(
                RemoteHit(
                    recording_id=recording_id,
                    title=title,
                    artist=artist,
                    release_id=str(release.get("id") or ""),
                    release_title=str(release.get("title") or ""),
                    country=str(release.get("country") or ""),
                    year=parse_year(release.get("date")),
                    track_count=release_track_count(release),
                )
            )
    return hits


def parse_release(release_id: str, payload: Mapping[str, Any]) -> RemoteRelease:
    """Build a RemoteRelease from a ``release/{id}`` lookup document.

    Album artist is the first credited artist. Disc is the medium position and
    track is the position within that medium.
    """

    names = _credited_names(payload)
    group = payload.get("release-group")
    group_id = ""
    if isinstance(group, Mapping):
        group_id = str(cast(Mapping[str, Any], group).get("id") or "")

    tracks: list[RemoteTrack] = []
    for index, medium in enumerate(_items(payload, "media"), start=1):
        disc = _as_int(medium.get("position")) or index
        for track in _items(medium, "tracks"):
            recording = track.get("recording")
            recording_map = (
                cast(Mapping[str, Any], recording) if isinstance(recording, Mapping) else {}
            )
            length_ms = _as_int(track.get("length")) or _as_int(recording_map.get("length"))
            tracks.append(
                RemoteTrack(
                    disc=disc,
                    track=_as_int(track.get("position")),
                    length_seconds=length_ms // 1000,
                    title=str(recording_map.get("title") or track.get("title") or ""),
                    recording_id=str(recording_map.get("id") or ""),
                )
            )

    return RemoteRelease(
        release_id=str(payload.get("id") or release_id),
        album=str(payload.get("title") or ""),
        album_artist=names[0] if names else "",
        release_group_id=group_id,
        year=parse_year(payload.get("date")),
        tracks=tracks,
    )


def first_release_id(payload: Mapping[str, Any]) -> str:
    """Return the first release id attached to a recording lookup, or ``""``."""

    for release in _items(payload, "releases"):
        release_id = release.get("id")
        if isinstance(release_id, str) and release_id:
            return release_id
    return ""


__all__ = [
    "build_recording_query",
    "escape_query_value",
    "extract_recording_hits",
    "first_release_id",
    "format_artist_credit",
    "parse_release",
    "parse_year",
    "release_track_count",
]
