from __future__ import annotations

import io
from pathlib import Path

from pytest_mock import MockerFixture
from rich.console import Console

from tagbridge.features.reconciliation import (
    ManualMatchRequest,
    MatchAssignment,
    ReconciliationEngine,
    ReconcileOutcome,
    ReconcileStatus,
)
from tagbridge.shared.remote import RemoteHit, RemoteRelease, RemoteTrack
from tagbridge.ui.cli.args.options import ApplyArgs, SearchArgs
from tagbridge.ui.cli.commands import ApplyCommand, SearchCommand
from tagbridge.ui.cli.commands.catalog import (
    EXIT_FAILED,
    EXIT_MANUAL_REQUIRED,
    EXIT_OK,
)
from tagbridge.ui.cli.display import CatalogDisplay

RELEASE = RemoteRelease(
    release_id="rel-1",
    album="Post",
    album_artist="Björk",
    tracks=[RemoteTrack(disc=1, track=1, length_seconds=300, title="Army of Me", recording_id="r1")],
)


def _display() -> tuple[CatalogDisplay, io.StringIO]:
    buffer = io.StringIO()
    return CatalogDisplay(Console(file=buffer, width=160, color_system=None)), buffer


def _apply_args(album: bool = False) -> ApplyArgs:
    return ApplyArgs(
        command="apply",
        recording_id="r1",
        release_id="rel-1",
        album_mode=album,
        files=[Path("/music/a.flac")],
    )


def test_search_prints_ranked_hits(mocker: MockerFixture) -> None:
    engine = mocker.create_autospec(ReconciliationEngine, instance=True)
    engine.search.return_value = [
        RemoteHit("r1", "Army of Me", "Björk", release_id="rel-1", release_title="Post")
    ]
    display, buffer = _display()
    args = SearchArgs(
        command="search",
        artist="Björk",
        title="Army of Me",
        album=None,
        target_track_count=11,
        contact=None,
        verbose=False,
        quiet=False,
    )

    assert SearchCommand(args, engine=engine, display=display).execute() == EXIT_OK

    assert engine.search.call_args.kwargs["target_track_count"] == 11
    assert "Björk - Army of Me (Post)" in buffer.getvalue()


def test_apply_track_mode_success(mocker: MockerFixture) -> None:
    engine = mocker.create_autospec(ReconciliationEngine, instance=True)
    engine.apply_track.return_value = ReconcileOutcome(
        ReconcileStatus.APPLIED, release=RELEASE, written=[Path("/music/a.flac")]
    )
    display, buffer = _display()

    assert ApplyCommand(_apply_args(), engine=engine, display=display).execute() == EXIT_OK

    engine.apply_album.assert_not_called()
    assert "Written: 1" in buffer.getvalue()


def test_apply_failures_exit_nonzero(mocker: MockerFixture) -> None:
    engine = mocker.create_autospec(ReconciliationEngine, instance=True)
    engine.apply_album.return_value = ReconcileOutcome(
        ReconcileStatus.APPLIED, release=RELEASE, failed=[Path("/music/a.flac")]
    )
    display, _ = _display()

    assert ApplyCommand(_apply_args(album=True), engine=engine, display=display).execute() == (
        EXIT_FAILED
    )


def test_apply_manual_required(mocker: MockerFixture) -> None:
    assignment = MatchAssignment(file_to_track=[0], duration_mismatch=True)
    request = ManualMatchRequest(
        files=[Path("/music/a.flac")],
        tracks=list(RELEASE.tracks),
        assignment=assignment,
        release=RELEASE,
    )
    engine = mocker.create_autospec(ReconciliationEngine, instance=True)
    engine.apply_album.return_value = ReconcileOutcome(
        ReconcileStatus.MANUAL_REQUIRED, release=RELEASE, assignment=assignment, request=request
    )
    display, buffer = _display()

    code = ApplyCommand(_apply_args(album=True), engine=engine, display=display).execute()

    assert code == EXIT_MANUAL_REQUIRED
    assert "Army of Me" in buffer.getvalue()


def test_release_not_found_fails(mocker: MockerFixture) -> None:
    engine = mocker.create_autospec(ReconciliationEngine, instance=True)
    engine.apply_track.return_value = ReconcileOutcome(ReconcileStatus.RELEASE_NOT_FOUND)
    display, buffer = _display()

    assert ApplyCommand(_apply_args(), engine=engine, display=display).execute() == EXIT_FAILED
    assert "Release not found" in buffer.getvalue()


def test_engine_factory_receives_contact(mocker: MockerFixture) -> None:
    engine = mocker.create_autospec(ReconciliationEngine, instance=True)
    factory = mocker.Mock(return_value=engine)
    args = _apply_args()
    args.contact = "ops@example.org"

    command = ApplyCommand(args, engine_factory=factory)

    factory.assert_called_once_with("ops@example.org")
    assert command.engine is engine
