"""Filesystem-side adapters for the tag store."""

from __future__ import annotations

from .attribute_mirror import AttributeMirror, NullMirror, XattrMirror, default_mirror

__all__ = ["AttributeMirror", "NullMirror", "XattrMirror", "default_mirror"]
