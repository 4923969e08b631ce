"""src/tagbridge/ui/cli/display/catalog.py
What: Render search hits, reconciliation outcomes and manual-match payloads.
Why: Show the user what was applied or what still needs confirmation.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import final

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from tagbridge.features.reconciliation import (
    UNASSIGNED,
    ManualMatchRequest,
    ReconcileOutcome,
    ReconcileStatus,
)
from tagbridge.shared.remote import RemoteHit


@final
class CatalogDisplay:
    """Handles catalog result display in CLI."""

    console: Console

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def show_hits(self, hits: Sequence[RemoteHit], *, quiet: bool = False) -> None:
        if quiet:
            return
        if not hits:
            self.console.print("[yellow]No matching recordings found.[/yellow]")
            return

        table = Table(
            title="MusicBrainz Recordings",
            show_header=True,
            header_style="bold magenta",
            box=box.SIMPLE_HEAD,
        )
        table.add_column("#", justify="right", style="dim")
        table.add_column("Match")
        table.add_column("Recording", style="cyan")
        table.add_column("Release", style="dim")
        for index, hit in enumerate(hits, start=1):
            table.add_row(str(index), hit.label, hit.recording_id, hit.release_id or "-")
        self.console.print(table)

    def show_outcome(self, outcome: ReconcileOutcome, *, quiet: bool = False) -> None:
        """Summarise an outcome; failures are always shown."""

        status = outcome.status
        if status is ReconcileStatus.RELEASE_NOT_FOUND:
            self.console.print("[red]Release not found.[/red]")
            return
        if status is ReconcileStatus.CANCELLED:
            self.console.print("[yellow]Cancelled.[/yellow]")
            return
        if status is ReconcileStatus.MANUAL_REQUIRED:
            if outcome.request is not None:
                self.show_manual_request(outcome.request)
            return

        if not quiet:
            album = outcome.release.album if outcome.release is not None else ""
            self.console.print(f"\n[bold]Applied {album or 'release'}:[/bold]")
            self.console.print(f"[green]Written: {len(outcome.written)}[/green]")
            if outcome.cover_applied:
                self.console.print("Cover art embedded")
        if outcome.failed:
            self.console.print(f"[red]Failed: {len(outcome.failed)}[/red]")
            for path in outcome.failed:
                self.console.print(f"[red]  • {path}[/red]")
        if outcome.cover_failed:
            self.console.print(
                f"[yellow]Cover not embedded: {len(outcome.cover_failed)}[/yellow]"
            )
            for path in outcome.cover_failed:
                self.console.print(f"[yellow]  • {path}[/yellow]")

    def show_manual_request(self, request: ManualMatchRequest) -> None:
        """Print the tentative mapping the user has to confirm."""

        title = request.release.album or request.release.release_id
        table = Table(
            title=f"Confirm track mapping for {title}",
            show_header=True,
            header_style="bold magenta",
            box=box.SIMPLE_HEAD,
        )
        table.add_column("File", style="bold")
        table.add_column("Track", justify="right")
        table.add_column("Title")
        table.add_column("Length", justify="right", style="dim")

        for path, track_index in zip(request.files, request.assignment.file_to_track):
            if track_index == UNASSIGNED:
                table.add_row(
                    path.name, Text("?", style="red"), Text("unassigned", style="red"), ""
                )
                continue
            track = request.tracks[track_index]
            table.add_row(
                path.name, f"{track.disc}-{track.track}", track.title, track.duration_label
            )

        self.console.print(table)
        reasons: list[str] = []
        if request.assignment.duration_mismatch:
            reasons.append("track lengths disagree with stored track numbers")
        if not request.assignment.all_assigned:
            reasons.append("some files have no candidate track")
        if not reasons:
            reasons.append("too few files matched by track number")
        self.console.print(f"[yellow]Not applied: {'; '.join(reasons)}.[/yellow]")


__all__ = ["CatalogDisplay"]
