"""Display management for CLI interface."""

from tagbridge.ui.cli.display.catalog import CatalogDisplay
from tagbridge.ui.cli.display.tags import TagDisplay

__all__ = ["CatalogDisplay", "TagDisplay"]
