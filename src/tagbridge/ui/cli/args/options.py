"""src/tagbridge/ui/cli/args/options.py
What: Typed option records produced by the argument parser, one per subcommand.
Why: Commands consume validated dataclasses instead of a raw namespace.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal, final


@final
@dataclass(slots=True)
class ReadArgs:
    """Command line arguments for the ``read`` subcommand."""

    command: Literal["read"]
    paths: list[Path]
    verbose: bool
    quiet: bool


@final
@dataclass(slots=True)
class WriteArgs:
    """Command line arguments for the ``write`` subcommand.

    ``changes`` maps TagRecord field names to their new values; ``""`` and
    ``0`` remove the stored value.
    """

    command: Literal["write"]
    path: Path
    changes: dict[str, str | int]
    verbose: bool
    quiet: bool


@final
@dataclass(slots=True)
class CoverArgs:
    """Command line arguments for the ``cover`` subcommands."""

    command: Literal["cover"]
    action: Literal["extract", "set", "clear"]
    path: Path
    verbose: bool
    quiet: bool
    image: Path | None = None
    output: Path | None = None
    mime: str | None = None


@final
@dataclass(slots=True)
class SearchArgs:
    """Command line arguments for the ``search`` subcommand."""

    command: Literal["search"]
    artist: str
    title: str
    album: str | None
    target_track_count: int
    contact: str | None
    verbose: bool
    quiet: bool


@final
@dataclass(slots=True)
class ApplyArgs:
    """Command line arguments for the ``apply`` subcommand."""

    command: Literal["apply"]
    recording_id: str
    release_id: str
    album_mode: bool
    files: list[Path] = field(default_factory=list)
    contact: str | None = None
    verbose: bool = False
    quiet: bool = False


CLIArgs = ReadArgs | WriteArgs | CoverArgs | SearchArgs | ApplyArgs

__all__ = ["ApplyArgs", "CLIArgs", "CoverArgs", "ReadArgs", "SearchArgs", "WriteArgs"]
