"""Tag store facade.

Where: src/tagbridge/features/tags/usecases/tag_store.py
What: Read and write canonical TagRecords, dispatching to a dialect by container type.
Why: Callers should not care which of ID3, MP4 or Vorbis comments a file carries.
"""

from __future__ import annotations

import os
from pathlib import Path

from tagbridge.platform.logging import logger
from tagbridge.shared.errors import TagNotFoundError
from tagbridge.shared.tag_record import TagRecord

from ..adapters.attribute_mirror import AttributeMirror, NullMirror
from .dialects import DIALECTS, TagDialect
from .dispatch import dialect_for

__all__ = ["TagStore", "ensure_readable"]


def ensure_readable(path: Path) -> Path:
    """Return ``path`` as a ``Path`` or raise ``TagNotFoundError``."""

    resolved = Path(path)
    if not resolved.is_file() or not os.access(resolved, os.R_OK):
        raise TagNotFoundError(f"No readable file at {resolved}")
    return resolved


class TagStore:
    """Canonical metadata access for one file at a time.

    Concurrent writers to the same path are not coordinated here; callers
    serialise them.
    """

    def __init__(self, mirror: AttributeMirror | None = None) -> None:
        self._mirror: AttributeMirror = mirror or NullMirror()

    @staticmethod
    def dialect(path: Path) -> TagDialect:
        """Return the dialect strategy for ``path``.

        Raises:
            UnsupportedFormatError: The extension maps to no known container.
        """

        return DIALECTS[dialect_for(Path(path))]

    def read_tags(self, path: Path) -> TagRecord:
        """Read a fresh TagRecord.

        Raises:
            TagNotFoundError: Missing or unreadable path.
            UnsupportedFormatError: Unknown or malformed container.
        """

        resolved = ensure_readable(path)
        record = self.dialect(resolved).read(resolved)
        logger.debug(
            "Read tags from %s", resolved, extra={"tag_event": "tags.read", "path": resolved}
        )
        return record

    def write_tags(self, path: Path, record: TagRecord) -> bool:
        """Write every tag-backed field of ``record``.

        Empty strings and zeros remove the stored value. Fields that fail to
        encode are skipped and logged; already-applied fields are kept.

        Returns:
            bool: ``False`` when at least one field was skipped.

        Raises:
            TagNotFoundError: Missing or unreadable path.
            UnsupportedFormatError: Unknown or malformed container.
            TagIOError: Saving the container failed.
        """

        resolved = ensure_readable(path)
        failed = self.dialect(resolved).write(resolved, record)

        if failed:
            logger.warning(
                "Partial tag write for %s: %s",
                resolved,
                ", ".join(failed),
                extra={"tag_event": "tags.write.partial", "path": resolved, "fields": failed},
            )
        else:
            logger.info(
                "Wrote tags to %s", resolved, extra={"tag_event": "tags.write", "path": resolved}
            )

        self._sync_attributes(resolved, record)
        return not failed

    def _sync_attributes(self, path: Path, record: TagRecord) -> None:
        if isinstance(self._mirror, NullMirror):
            return
        # Stream properties come from the file, not from the caller's record.
        try:
            stored = self.dialect(path).read(path)
        except (OSError, ValueError) as exc:
            logger.debug("Attribute mirror skipped for %s: %s", path, exc)
            stored = record
        if not self._mirror.mirror(path, stored):
            logger.debug("Attribute mirror incomplete for %s", path)
