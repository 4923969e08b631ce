"""Expose the tag store and its format dispatch helpers."""

from .adapters import AttributeMirror, NullMirror, XattrMirror, default_mirror
from .usecases import SUPPORTED_EXTENSIONS, DialectKind, TagStore, dialect_for, is_supported

__all__ = [
    "SUPPORTED_EXTENSIONS",
    "AttributeMirror",
    "DialectKind",
    "NullMirror",
    "TagStore",
    "XattrMirror",
    "default_mirror",
    "dialect_for",
    "is_supported",
]
