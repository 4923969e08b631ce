"""Where: src/tagbridge/features/reconciliation/domain/models.py
What: Value types produced and consumed by the reconciliation engine.
Why: Keep assignment, hand-off and outcome shapes independent of I/O code.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Final

from tagbridge.shared.remote import RemoteRelease, RemoteTrack
from tagbridge.shared.tag_record import ArtworkBlob

UNASSIGNED: Final[int] = -1


@dataclass(slots=True)
class LocalTrackInfo:
    """What matching needs to know about one local file."""

    path: Path
    track: int = 0
    length_seconds: int = 0


@dataclass(slots=True)
class MatchAssignment:
    """Local file index -> remote track index, or ``UNASSIGNED``."""

    file_to_track: list[int]
    confident: bool = False
    duration_mismatch: bool = False
    matched_by_number: int = 0

    @property
    def all_assigned(self) -> bool:
        return all(index != UNASSIGNED for index in self.file_to_track)

    def pairs(self) -> list[tuple[int, int]]:
        """Return ``(file_index, track_index)`` for assigned files only."""

        return [
            (file_index, track_index)
            for file_index, track_index in enumerate(self.file_to_track)
            if track_index != UNASSIGNED
        ]


@dataclass(slots=True)
class ManualMatchRequest:
    """Payload handed to the manual-matching collaborator."""

    files: list[Path]
    tracks: list[RemoteTrack]
    assignment: MatchAssignment
    release: RemoteRelease
    cover: ArtworkBlob | None = None


class ReconcileStatus(Enum):
    APPLIED = "applied"
    MANUAL_REQUIRED = "manual_required"
    CANCELLED = "cancelled"
    RELEASE_NOT_FOUND = "release_not_found"


@dataclass(slots=True)
class ReconcileOutcome:
    """Result of one reconciliation invocation."""

    status: ReconcileStatus
    release: RemoteRelease | None = None
    assignment: MatchAssignment | None = None
    written: list[Path] = field(default_factory=list)
    failed: list[Path] = field(default_factory=list)
    cover_applied: bool = False
    cover_failed: list[Path] = field(default_factory=list)
    request: ManualMatchRequest | None = None

    @property
    def ok(self) -> bool:
        return self.status is ReconcileStatus.APPLIED and not self.failed


__all__ = [
    "UNASSIGNED",
    "LocalTrackInfo",
    "ManualMatchRequest",
    "MatchAssignment",
    "ReconcileOutcome",
    "ReconcileStatus",
]
