"""Where: src/tagbridge/shared/remote.py
What: Value types describing catalog search hits and resolved releases.
Why: Keep the catalog client and the reconciliation engine on a common vocabulary.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(slots=True, frozen=True)
class RemoteHit:
    """One candidate from a recording search, bound to at most one release."""

    recording_id: str
    title: str
    artist: str
    release_id: str = ""
    release_title: str = ""
    country: str = ""
    year: int = 0
    track_count: int = 0

    @property
    def label(self) -> str:
        """Render ``Artist - Title (Release, Year, Country, N Tracks)``."""

        extra: list[str] = []
        if self.release_title:
            extra.append(self.release_title)
        if self.year > 0:
            extra.append(str(self.year))
        if self.country:
            extra.append(self.country)
        if self.track_count > 0:
            extra.append(f"{self.track_count} Tracks")
        base = f"{self.artist} - {self.title}"
        if not extra:
            return base
        return f"{base} ({', '.join(extra)})"


@dataclass(slots=True, frozen=True)
class RemoteTrack:
    """A track slot on a release medium."""

    disc: int
    track: int
    length_seconds: int
    title: str
    recording_id: str

    @property
    def duration_label(self) -> str:
        minutes, seconds = divmod(max(self.length_seconds, 0), 60)
        return f"{minutes}:{seconds:02d}"


@dataclass(slots=True)
class RemoteRelease:
    """Resolved release detail; only ``release_id`` is set when lookup failed."""

    release_id: str
    album: str = ""
    album_artist: str = ""
    release_group_id: str = ""
    year: int = 0
    tracks: list[RemoteTrack] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.tracks


__all__ = ["RemoteHit", "RemoteRelease", "RemoteTrack"]
