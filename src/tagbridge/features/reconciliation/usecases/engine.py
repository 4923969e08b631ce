"""Reconciliation engine.

Where: src/tagbridge/features/reconciliation/usecases/engine.py
What: Resolve a remote release, match local files to its tracks and write the result.
Why: One pipeline shared by automatic album matching, single-track application
and manually confirmed mappings.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import final

from tagbridge.config.settings import COVER_SIZE, DURATION_TOLERANCE_SECONDS
from tagbridge.features.tags.usecases.dispatch import is_supported
from tagbridge.platform.logging import logger
from tagbridge.shared.cancellation import CancelCheck, is_cancelled
from tagbridge.shared.errors import TagBridgeError
from tagbridge.shared.remote import RemoteHit, RemoteRelease, RemoteTrack
from tagbridge.shared.tag_record import ArtworkBlob, TagRecord

from ..domain.models import (
    UNASSIGNED,
    LocalTrackInfo,
    ManualMatchRequest,
    MatchAssignment,
    ReconcileOutcome,
    ReconcileStatus,
)
from .matching import match_album, rank_hits
from .ports import (
    ArtworkStorePort,
    ChangeListener,
    ManualMatchHandler,
    RemoteCatalogPort,
    TagStorePort,
)

# Catalog ids are 36-character UUIDs; anything much shorter is a placeholder.
MIN_STORED_RELEASE_ID_LENGTH = 30

_RecordBuilder = Callable[[TagRecord], TagRecord]


@dataclass(slots=True)
class _Resolved:
    release: RemoteRelease
    cover: ArtworkBlob | None


@final
class ReconciliationEngine:
    """Apply catalog metadata to local files.

    Every remote step checks the cancellation predicate before it starts;
    a cancelled run returns ``ReconcileStatus.CANCELLED`` and leaves any
    files not yet reached untouched.
    """

    def __init__(
        self,
        catalog: RemoteCatalogPort,
        tag_store: TagStorePort,
        artwork_store: ArtworkStorePort,
        *,
        listener: ChangeListener | None = None,
        manual_handler: ManualMatchHandler | None = None,
        cover_size: int = COVER_SIZE,
        tolerance: int = DURATION_TOLERANCE_SECONDS,
    ) -> None:
        self.catalog = catalog
        self.tag_store = tag_store
        self.artwork_store = artwork_store
        self.listener = listener
        self.manual_handler = manual_handler
        self.cover_size = cover_size
        self.tolerance = tolerance

    # ------------------------------------------------------------------ search

    def search(
        self,
        artist: str,
        title: str,
        album: str | None = None,
        *,
        target_track_count: int = 0,
        cancel: CancelCheck | None = None,
    ) -> list[RemoteHit]:
        """Search recordings and rank them by plausibility for ``target_track_count`` files."""

        hits = self.catalog.search_recording(artist, title, album or None, cancel)
        if is_cancelled(cancel):
            return []
        return rank_hits(hits, target_track_count)

    # --------------------------------------------------------------- resolving

    def resolve_release(
        self,
        recording_id: str = "",
        release_id: str = "",
        cancel: CancelCheck | None = None,
    ) -> RemoteRelease | None:
        """Return release details, or ``None`` when cancelled.

        Without ``release_id`` the first release of ``recording_id`` is used.
        A release that could not be found comes back with an empty track list.
        """

        effective = release_id
        if not effective and recording_id:
            effective = self.catalog.best_release_for_recording(recording_id, cancel)
        if is_cancelled(cancel):
            return None
        if not effective:
            return RemoteRelease(release_id="")
        release = self.catalog.get_release_details(effective, cancel)
        if is_cancelled(cancel):
            return None
        return release

    def resolve_artwork(
        self, release: RemoteRelease, cancel: CancelCheck | None = None
    ) -> ArtworkBlob | None:
        """Fetch the release-group cover, else the release cover; never raises."""

        cover: ArtworkBlob | None = None
        if release.release_group_id:
            cover = self.catalog.fetch_cover(
                release.release_group_id, self.cover_size, True, cancel
            )
        if cover is None and release.release_id and not is_cancelled(cancel):
            cover = self.catalog.fetch_cover(release.release_id, self.cover_size, False, cancel)
        if cover is None:
            logger.debug("No cover art for release %s", release.release_id)
        return cover

    def _prepare(
        self, recording_id: str, release_id: str, cancel: CancelCheck | None
    ) -> _Resolved | ReconcileOutcome:
        release = self.resolve_release(recording_id, release_id, cancel)
        if release is None:
            return self._cancelled()
        if not release.release_id or release.is_empty:
            logger.warning(
                "Release not found (recording=%s, release=%s)",
                recording_id or "-",
                release_id or "-",
            )
            return ReconcileOutcome(ReconcileStatus.RELEASE_NOT_FOUND, release=release)
        cover = self.resolve_artwork(release, cancel)
        if is_cancelled(cancel):
            return self._cancelled(release)
        return _Resolved(release, cover)

    # -------------------------------------------------------------- album mode

    def apply_album(
        self,
        files: Sequence[Path],
        *,
        recording_id: str = "",
        release_id: str = "",
        cancel: CancelCheck | None = None,
    ) -> ReconcileOutcome:
        """Match ``files`` against one release and write them when confident.

        A single file stands for its whole directory. When the match is not
        confident, the manual handler receives a ``ManualMatchRequest`` and
        nothing is written.
        """

        if is_cancelled(cancel):
            return self._cancelled()
        prepared = self._prepare(recording_id, release_id, cancel)
        if isinstance(prepared, ReconcileOutcome):
            return prepared
        release, cover = prepared.release, prepared.cover

        ordered = sorted(expand_album_files(files))
        infos: list[LocalTrackInfo] = []
        for path in ordered:
            if is_cancelled(cancel):
                return self._cancelled(release)
            infos.append(self._local_info(path))

        assignment = match_album(infos, release.tracks, self.tolerance)
        if not assignment.confident:
            request = ManualMatchRequest(
                files=ordered,
                tracks=list(release.tracks),
                assignment=assignment,
                release=release,
                cover=cover,
            )
            logger.info(
                "Match for %s needs confirmation (%d/%d by number, mismatch=%s)",
                release.album or release.release_id,
                assignment.matched_by_number,
                len(ordered),
                assignment.duration_mismatch,
                extra={"tag_event": "reconcile.manual", "release_id": release.release_id},
            )
            if self.manual_handler is not None:
                self.manual_handler.request_manual_match(request)
            return ReconcileOutcome(
                ReconcileStatus.MANUAL_REQUIRED,
                release=release,
                assignment=assignment,
                request=request,
            )

        return self._write_assignment(ordered, release, assignment, cover, cancel)

    def apply_confirmed_mapping(
        self,
        request: ManualMatchRequest,
        mapping: Sequence[int],
        cancel: CancelCheck | None = None,
    ) -> ReconcileOutcome:
        """Write a mapping confirmed by the manual-matching collaborator.

        ``mapping[i]`` is the track index for ``request.files[i]``; files mapped
        to ``UNASSIGNED`` (or out of range) are left untouched.

        Raises:
            ValueError: ``mapping`` does not cover every requested file.
        """

        if len(mapping) != len(request.files):
            raise ValueError(
                f"Mapping has {len(mapping)} entries for {len(request.files)} files"
            )
        track_count = len(request.release.tracks)
        file_to_track = [
            index if 0 <= index < track_count else UNASSIGNED for index in mapping
        ]
        assignment = MatchAssignment(
            file_to_track=file_to_track,
            confident=True,
            matched_by_number=request.assignment.matched_by_number,
        )
        return self._write_assignment(
            request.files, request.release, assignment, request.cover, cancel
        )

    def _write_assignment(
        self,
        files: Sequence[Path],
        release: RemoteRelease,
        assignment: MatchAssignment,
        cover: ArtworkBlob | None,
        cancel: CancelCheck | None,
    ) -> ReconcileOutcome:
        outcome = ReconcileOutcome(
            ReconcileStatus.APPLIED, release=release, assignment=assignment
        )
        for file_index, track_index in assignment.pairs():
            if is_cancelled(cancel):
                return self._cancelled(release, outcome)
            path = files[file_index]
            track = release.tracks[track_index]
            self._apply_file(
                path,
                lambda base: album_record(base, release, track),
                cover,
                outcome,
            )
        self._log_applied(release, outcome)
        return outcome

    # -------------------------------------------------------------- track mode

    def apply_track(
        self,
        files: Sequence[Path],
        *,
        recording_id: str,
        release_id: str = "",
        cancel: CancelCheck | None = None,
    ) -> ReconcileOutcome:
        """Apply one recording's release to ``files``.

        Every file gets the album-level fields. Title, track, disc and the
        track id only go to files that already carry ``recording_id`` or,
        when there is just one target, to that file.
        """

        if is_cancelled(cancel):
            return self._cancelled()
        prepared = self._prepare(recording_id, release_id, cancel)
        if isinstance(prepared, ReconcileOutcome):
            return prepared
        release, cover = prepared.release, prepared.cover

        track = next(
            (item for item in release.tracks if item.recording_id == recording_id), None
        )
        if track is None:
            logger.info("Recording %s not on release %s", recording_id, release.release_id)

        sole_target = len(files) == 1

        def build(base: TagRecord) -> TagRecord:
            record = base.copy(
                album=release.album,
                album_artist=release.album_artist,
                year=release.year,
                external_album_id=release.release_id,
            )
            qualifies = sole_target or (
                bool(recording_id) and base.external_track_id == recording_id
            )
            if track is not None and qualifies:
                record = record.copy(
                    title=track.title,
                    track=track.track,
                    disc=track.disc,
                    external_track_id=track.recording_id,
                )
            return record

        outcome = ReconcileOutcome(ReconcileStatus.APPLIED, release=release)
        for path in sorted(files):
            if is_cancelled(cancel):
                return self._cancelled(release, outcome)
            self._apply_file(path, build, cover, outcome)

        self._log_applied(release, outcome)
        return outcome

    # ------------------------------------------------------------ cover lookup

    def fetch_cover_for_file(
        self, path: Path, cancel: CancelCheck | None = None
    ) -> ArtworkBlob | None:
        """Find a cover for one file from its stored ids or its tags.

        Raises:
            TagNotFoundError: ``path`` is missing or unreadable.
            UnsupportedFormatError: ``path`` is not a supported container.
        """

        record = self.tag_store.read_tags(path)
        release_id = record.external_album_id.strip()
        if len(release_id) < MIN_STORED_RELEASE_ID_LENGTH:
            release_id = ""

        if not release_id:
            hits = self.catalog.search_recording(
                record.artist, record.title, record.album or None, cancel
            )
            if is_cancelled(cancel):
                return None
            release_id = next((hit.release_id for hit in hits if hit.release_id), "")
        if not release_id or is_cancelled(cancel):
            return None

        cover = self.catalog.fetch_cover(release_id, self.cover_size, False, cancel)
        if cover is not None or is_cancelled(cancel):
            return cover

        release = self.catalog.get_release_details(release_id, cancel)
        if not release.release_group_id or is_cancelled(cancel):
            return None
        return self.catalog.fetch_cover(release.release_group_id, self.cover_size, True, cancel)

    # ----------------------------------------------------------------- helpers

    def _local_info(self, path: Path) -> LocalTrackInfo:
        try:
            record = self.tag_store.read_tags(path)
        except TagBridgeError as exc:
            logger.warning("Matching %s without tags: %s", path, exc)
            return LocalTrackInfo(path=path)
        return LocalTrackInfo(path=path, track=record.track, length_seconds=record.length_seconds)

    def _apply_file(
        self,
        path: Path,
        build: _RecordBuilder,
        cover: ArtworkBlob | None,
        outcome: ReconcileOutcome,
    ) -> None:
        try:
            record = build(self.tag_store.read_tags(path))
            ok = self.tag_store.write_tags(path, record)
        except TagBridgeError as exc:
            logger.error("Failed to apply metadata to %s: %s", path, exc)
            outcome.failed.append(path)
            return

        (outcome.written if ok else outcome.failed).append(path)
        if cover:
            # Tags are already on disk; a cover failure does not undo them.
            try:
                if self.artwork_store.write_cover(path, cover):
                    outcome.cover_applied = True
            except TagBridgeError as exc:
                logger.warning("Failed to embed cover in %s: %s", path, exc)
                outcome.cover_failed.append(path)
        if self.listener is not None:
            self.listener.metadata_changed(path, record)

    @staticmethod
    def _log_applied(release: RemoteRelease, outcome: ReconcileOutcome) -> None:
        logger.info(
            "Applied %s to %d file(s)",
            release.album or release.release_id,
            len(outcome.written),
            extra={
                "tag_event": "reconcile.applied",
                "release_id": release.release_id,
                "written": len(outcome.written),
                "failed": len(outcome.failed),
                "cover_failed": len(outcome.cover_failed),
            },
        )

    @staticmethod
    def _cancelled(
        release: RemoteRelease | None = None, partial: ReconcileOutcome | None = None
    ) -> ReconcileOutcome:
        logger.info("Reconciliation cancelled", extra={"tag_event": "reconcile.cancelled"})
        outcome = ReconcileOutcome(ReconcileStatus.CANCELLED, release=release)
        if partial is not None:
            outcome.assignment = partial.assignment
            outcome.written = partial.written
            outcome.failed = partial.failed
            outcome.cover_applied = partial.cover_applied
            outcome.cover_failed = partial.cover_failed
        return outcome


def album_record(base: TagRecord, release: RemoteRelease, track: RemoteTrack) -> TagRecord:
    """Merge one release track into ``base``; the album artist also becomes the artist."""

    return base.copy(
        artist=release.album_artist,
        album=release.album,
        title=track.title,
        year=release.year,
        track=track.track,
        track_total=len(release.tracks),
        disc=track.disc,
        album_artist=release.album_artist,
        external_album_id=release.release_id,
        external_track_id=track.recording_id,
    )


def expand_album_files(files: Sequence[Path]) -> list[Path]:
    """Replace a single selected file with every supported file in its directory."""

    if len(files) != 1:
        return list(files)
    directory = files[0].parent
    try:
        siblings = [
            entry for entry in directory.iterdir() if entry.is_file() and is_supported(entry)
        ]
    except OSError as exc:
        logger.warning("Cannot list %s: %s", directory, exc)
        return list(files)
    return siblings or list(files)


__all__ = [
    "MIN_STORED_RELEASE_ID_LENGTH",
    "ReconciliationEngine",
    "album_record",
    "expand_album_files",
]
