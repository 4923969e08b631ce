"""src/tagbridge/ui/cli/display/tags.py
What: Render stored tags and cover details as Rich tables.
Why: Keep console formatting out of the command classes.
"""

from __future__ import annotations

from pathlib import Path
from typing import final

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from tagbridge.shared.tag_record import ArtworkBlob, TagRecord


@final
class TagDisplay:
    """Handles tag display in CLI."""

    console: Console

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def show_record(self, path: Path, record: TagRecord, *, quiet: bool = False) -> None:
        """Print every field of ``record``; absent values are dimmed."""

        if quiet:
            return
        self.console.print(self.build_table(path, record))

    @staticmethod
    def build_table(path: Path, record: TagRecord) -> Table:
        table = Table(
            title=path.name,
            show_header=True,
            header_style="bold magenta",
            box=box.SIMPLE_HEAD,
        )
        table.add_column("Field", style="bold")
        table.add_column("Value")

        for name, value in record.as_dict().items():
            if value in ("", 0):
                table.add_row(name, Text("-", style="dim"))
            else:
                table.add_row(name, str(value))
        return table

    def show_written(self, path: Path, changes: dict[str, str | int], ok: bool) -> None:
        if not ok:
            self.console.print(f"[yellow]Some fields of {path} could not be written.[/yellow]")
            return
        names = ", ".join(sorted(changes))
        self.console.print(f"[green]Updated {path.name}:[/green] {names}")

    def show_cover(self, path: Path, blob: ArtworkBlob | None, *, quiet: bool = False) -> None:
        if quiet:
            return
        if blob is None:
            self.console.print(f"[yellow]No embedded cover in {path}.[/yellow]")
            return
        mime = blob.mime or "unknown type"
        self.console.print(f"[green]Cover of {path.name}:[/green] {blob.size} bytes, {mime}")


__all__ = ["TagDisplay"]
