"""Command execution package for CLI."""

from tagbridge.ui.cli.commands.catalog import ApplyCommand, SearchCommand
from tagbridge.ui.cli.commands.tags import CoverCommand, ReadCommand, WriteCommand

__all__ = [
    "ApplyCommand",
    "CoverCommand",
    "ReadCommand",
    "SearchCommand",
    "WriteCommand",
]
