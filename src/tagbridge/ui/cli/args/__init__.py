"""Command line argument handling package."""

from tagbridge.ui.cli.args.parser import ArgumentParser
from tagbridge.ui.cli.args.options import (
    ApplyArgs,
    CLIArgs,
    CoverArgs,
    ReadArgs,
    SearchArgs,
    WriteArgs,
)

__all__ = [
    "ApplyArgs",
    "ArgumentParser",
    "CLIArgs",
    "CoverArgs",
    "ReadArgs",
    "SearchArgs",
    "WriteArgs",
]
