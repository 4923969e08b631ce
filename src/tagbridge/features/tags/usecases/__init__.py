"""Tag store use cases."""

from __future__ import annotations

from .dispatch import SUPPORTED_EXTENSIONS, DialectKind, dialect_for, is_supported
from .tag_store import TagStore, ensure_readable

__all__ = [
    "SUPPORTED_EXTENSIONS",
    "DialectKind",
    "TagStore",
    "dialect_for",
    "ensure_readable",
    "is_supported",
]
