"""src/tagbridge/ui/cli/commands/catalog.py
What: Execute MusicBrainz search and reconciliation from the command line.
Why: Drive the engine off the main thread so Ctrl+C cancels in-flight requests.
"""

from __future__ import annotations

from collections.abc import Callable
from concurrent.futures import Future
from typing import TypeVar, final

from tagbridge.config.settings import MIRROR_ATTRIBUTES
from tagbridge.features.artwork import ArtworkStore
from tagbridge.features.reconciliation import (
    BackgroundResult,
    BackgroundRunner,
    ReconcileOutcome,
    ReconcileStatus,
    ReconciliationEngine,
)
from tagbridge.features.tags import TagStore, default_mirror
from tagbridge.platform.musicbrainz import MusicBrainzClient
from tagbridge.shared.cancellation import CancellationToken
from tagbridge.ui.cli.args.options import ApplyArgs, SearchArgs
from tagbridge.ui.cli.display.catalog import CatalogDisplay

T = TypeVar("T")

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_MANUAL_REQUIRED = 2


def build_engine(contact: str | None = None) -> ReconciliationEngine:
    """Wire the engine to the real catalog client and file stores."""

    return ReconciliationEngine(
        MusicBrainzClient(contact),
        TagStore(default_mirror(MIRROR_ATTRIBUTES)),
        ArtworkStore(),
    )


def run_in_background(
    runner: BackgroundRunner, work: Callable[[CancellationToken], T]
) -> T | None:
    """Run ``work`` on ``runner`` and wait; Ctrl+C supersedes it before re-raising."""

    future: Future[BackgroundResult[T]]
    _token, future = runner.submit(work)
    try:
        result = future.result()
    except KeyboardInterrupt:
        runner.cancel_all()
        raise
    return None if result.stale else result.value


class _CatalogCommand:
    def __init__(
        self,
        engine: ReconciliationEngine | None,
        engine_factory: Callable[[str | None], ReconciliationEngine],
        contact: str | None,
        display: CatalogDisplay | None,
    ) -> None:
        self.engine = engine or engine_factory(contact)
        self.display = display or CatalogDisplay()
        self.runner = BackgroundRunner(name="tagbridge-catalog")


@final
class SearchCommand(_CatalogCommand):
    """Print ranked recording hits."""

    def __init__(
        self,
        args: SearchArgs,
        *,
        engine: ReconciliationEngine | None = None,
        engine_factory: Callable[[str | None], ReconciliationEngine] = build_engine,
        display: CatalogDisplay | None = None,
    ) -> None:
        super().__init__(engine, engine_factory, args.contact, display)
        self.args = args

    def execute(self) -> int:
        args = self.args
        with self.runner:
            hits = run_in_background(
                self.runner,
                lambda token: self.engine.search(
                    args.artist,
                    args.title,
                    args.album,
                    target_track_count=args.target_track_count,
                    cancel=token,
                ),
            )
        self.display.show_hits(hits or [], quiet=args.quiet)
        return EXIT_OK


@final
class ApplyCommand(_CatalogCommand):
    """Apply a release to files; a non-confident album match is only reported."""

    def __init__(
        self,
        args: ApplyArgs,
        *,
        engine: ReconciliationEngine | None = None,
        engine_factory: Callable[[str | None], ReconciliationEngine] = build_engine,
        display: CatalogDisplay | None = None,
    ) -> None:
        super().__init__(engine, engine_factory, args.contact, display)
        self.args = args

    def execute(self) -> int:
        with self.runner:
            outcome = run_in_background(self.runner, self._apply)
        if outcome is None:
            outcome = ReconcileOutcome(ReconcileStatus.CANCELLED)
        self.display.show_outcome(outcome, quiet=self.args.quiet)

        if outcome.status is ReconcileStatus.MANUAL_REQUIRED:
            return EXIT_MANUAL_REQUIRED
        return EXIT_OK if outcome.ok else EXIT_FAILED

    def _apply(self, token: CancellationToken) -> ReconcileOutcome:
        args = self.args
        if args.album_mode:
            return self.engine.apply_album(
                args.files,
                recording_id=args.recording_id,
                release_id=args.release_id,
                cancel=token,
            )
        return self.engine.apply_track(
            args.files,
            recording_id=args.recording_id,
            release_id=args.release_id,
            cancel=token,
        )


__all__ = [
    "EXIT_FAILED",
    "EXIT_MANUAL_REQUIRED",
    "EXIT_OK",
    "ApplyCommand",
    "SearchCommand",
    "build_engine",
    "run_in_background",
]
