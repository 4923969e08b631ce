"""Shared base class for tag dialects.

Where: src/tagbridge/features/tags/usecases/dialects/_base.py
What: Open/read/write/save skeleton every dialect follows, plus stream-info handling.
Why: Keep per-format modules down to key tables and value codecs.
"""

from __future__ import annotations

import abc
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any, ClassVar

from mutagen import MutagenError

from tagbridge.platform.logging import logger
from tagbridge.shared.errors import TagIOError, UnsupportedFormatError
from tagbridge.shared.tag_record import TagRecord

from ..dispatch import DialectKind

__all__ = ["FieldWriter", "TagDialect"]

FieldWriter = tuple[str, Callable[[], None]]

# Errors a single field codec may raise; anything else is a bug and propagates.
_FIELD_ERRORS: tuple[type[BaseException], ...] = (
    MutagenError,
    ValueError,
    TypeError,
    KeyError,
    UnicodeError,
)


class TagDialect(abc.ABC):
    """One tag encoding family.

    Subclasses declare their key priority tables as class data and implement
    :meth:`_load`, :meth:`_read_fields`, :meth:`_field_writers` and :meth:`_save`.
    """

    KIND: ClassVar[DialectKind]

    # ``TagRecord`` text field -> keys tried in order until one is non-empty.
    TEXT_KEYS: ClassVar[dict[str, tuple[str, ...]]] = {}

    @abc.abstractmethod
    def _load(self, path: Path) -> Any:
        """Open the container; raise ``MutagenError`` when it is malformed."""
        raise NotImplementedError

    @abc.abstractmethod
    def _read_fields(self, handle: Any, record: TagRecord) -> None:
        """Populate tag-backed fields of ``record`` from ``handle``."""
        raise NotImplementedError

    @abc.abstractmethod
    def _field_writers(self, handle: Any, record: TagRecord) -> Iterator[FieldWriter]:
        """Yield ``(field, apply)`` pairs mutating ``handle`` in memory."""
        raise NotImplementedError

    @abc.abstractmethod
    def _save(self, handle: Any, path: Path) -> None:
        raise NotImplementedError

    def _stream_info(self, handle: Any, path: Path) -> Any:
        """Return an object exposing mutagen's ``StreamInfo`` attributes."""

        return getattr(handle, "info", None)

    def open(self, path: Path) -> Any:
        try:
            return self._load(path)
        except MutagenError as exc:
            raise UnsupportedFormatError(f"Cannot parse {path.name}: {exc}") from exc

    def read(self, path: Path) -> TagRecord:
        """Read a fresh record; unreadable fields degrade to absent values."""

        handle = self.open(path)
        record = TagRecord()
        self._read_fields(handle, record)
        self._read_stream_info(handle, path, record)
        return record

    def write(self, path: Path, record: TagRecord) -> list[str]:
        """Apply ``record`` and save.

        Returns:
            list[str]: Fields that could not be encoded; they were skipped and
            everything else was still saved.

        Raises:
            TagIOError: The container could not be saved.
        """

        handle = self.open(path)
        failed: list[str] = []
        for name, apply in self._field_writers(handle, record):
            try:
                apply()
            except _FIELD_ERRORS as exc:
                logger.warning("Failed to write %s to %s: %s", name, path, exc)
                failed.append(name)

        try:
            self._save(handle, path)
        except (MutagenError, OSError) as exc:
            raise TagIOError(f"Failed to save tags to {path}: {exc}") from exc
        return failed

    def _read_stream_info(self, handle: Any, path: Path, record: TagRecord) -> None:
        try:
            info = self._stream_info(handle, path)
        except (MutagenError, OSError, ValueError) as exc:
            logger.debug("No stream info for %s: %s", path, exc)
            return
        if info is None:
            return
        record.length_seconds = int(getattr(info, "length", 0) or 0)
        record.bitrate = int(getattr(info, "bitrate", 0) or 0) // 1000
        record.sample_rate = int(getattr(info, "sample_rate", 0) or 0)
        record.channels = int(getattr(info, "channels", 0) or 0)

    @classmethod
    def _text_keys(cls, field: str) -> tuple[str, ...]:
        return cls.TEXT_KEYS.get(field, ())
