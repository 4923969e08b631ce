"""Command line interface package."""

from tagbridge.ui.cli.cli import CommandProcessor, main

__all__ = ["CommandProcessor", "main"]
