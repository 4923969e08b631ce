"""Where: src/tagbridge/features/reconciliation/usecases/matching.py
What: Assign local files to remote tracks and rank search hits.
Why: Pure functions so the heuristic is deterministic and testable without I/O.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from pathlib import Path
from typing import Final

from tagbridge.shared.remote import RemoteHit, RemoteTrack

from ..domain.models import UNASSIGNED, LocalTrackInfo, MatchAssignment

DEFAULT_DURATION_TOLERANCE_SECONDS: Final[int] = 15

# "03 - Title", "1-03 Title" (disc-track), "Track 05", "CD2 07. Title"
_DISC_TRACK_RE: Final[re.Pattern[str]] = re.compile(r"^\s*\d{1,2}-(\d{1,3})(?!\d)")
_LEADING_RE: Final[re.Pattern[str]] = re.compile(
    r"^\s*(?:track\s*)?(\d{1,3})(?!\d)", re.IGNORECASE
)
_CD_PREFIX_RE: Final[re.Pattern[str]] = re.compile(
    r"^\s*(?:cd|disc|disk)\s*\d{1,2}\s*[-_. ]\s*", re.IGNORECASE
)


def extract_track_number(filename: str) -> int:
    """Parse a track number out of a file name, or return 0."""

    stem = Path(filename).stem
    stem = _CD_PREFIX_RE.sub("", stem)
    disc_track = _DISC_TRACK_RE.match(stem)
    if disc_track and int(disc_track.group(1)) > 0:
        return int(disc_track.group(1))
    leading = _LEADING_RE.match(stem)
    if leading:
        return int(leading.group(1))
    return 0


def _match_by_number(
    number: int,
    length_seconds: int,
    tracks: Sequence[RemoteTrack],
    used: list[bool],
    tolerance: int,
) -> tuple[int, bool]:
    """Return ``(track_index, mismatch)`` for the first unused track numbered ``number``."""

    for index, track in enumerate(tracks):
        if used[index] or track.track != number:
            continue
        if abs(track.length_seconds - length_seconds) <= tolerance:
            return index, False
        return UNASSIGNED, True
    return UNASSIGNED, False


def match_album(
    files: Sequence[LocalTrackInfo],
    tracks: Sequence[RemoteTrack],
    tolerance: int = DEFAULT_DURATION_TOLERANCE_SECONDS,
) -> MatchAssignment:
    """Assign files (already sorted by the caller) to release tracks.

    1. Stored track number with matching duration.
    2. Track number parsed from the file name with matching duration.
    3. Remaining files take the next unused tracks in release order.

    Confident when every file is assigned, no stored number disagreed on
    duration, and at least half the files were matched by number.
    """

    used = [False] * len(tracks)
    file_to_track = [UNASSIGNED] * len(files)
    matched = 0
    mismatch = False

    for file_index, info in enumerate(files):
        track_index = UNASSIGNED
        if info.track > 0:
            track_index, number_mismatch = _match_by_number(
                info.track, info.length_seconds, tracks, used, tolerance
            )
            mismatch = mismatch or number_mismatch

        if track_index == UNASSIGNED:
            from_name = extract_track_number(info.path.name)
            if from_name > 0:
                track_index, _ = _match_by_number(
                    from_name, info.length_seconds, tracks, used, tolerance
                )

        if track_index != UNASSIGNED:
            file_to_track[file_index] = track_index
            used[track_index] = True
            matched += 1

    next_track = 0
    for file_index in range(len(files)):
        if file_to_track[file_index] != UNASSIGNED:
            continue
        while next_track < len(tracks) and used[next_track]:
            next_track += 1
        if next_track >= len(tracks):
            break
        file_to_track[file_index] = next_track
        used[next_track] = True

    assignment = MatchAssignment(
        file_to_track=file_to_track,
        duration_mismatch=mismatch,
        matched_by_number=matched,
    )
    assignment.confident = (
        bool(files)
        and assignment.all_assigned
        and not mismatch
        and 2 * matched >= len(files)
    )
    return assignment


def rank_hits(hits: Sequence[RemoteHit], target_track_count: int) -> list[RemoteHit]:
    """Order hits by closeness of track count to ``target_track_count``, newest first on ties.

    A non-positive target leaves the order unchanged.
    """

    if target_track_count <= 0:
        return list(hits)
    return sorted(hits, key=lambda hit: (abs(hit.track_count - target_track_count), -hit.year))


__all__ = [
    "DEFAULT_DURATION_TOLERANCE_SECONDS",
    "extract_track_number",
    "match_album",
    "rank_hits",
]
