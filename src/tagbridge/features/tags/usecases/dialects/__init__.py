"""Tag dialect strategies keyed by :class:`DialectKind`."""

from __future__ import annotations

from typing import Final

from ..dispatch import DialectKind
from ._base import TagDialect
from .atom_dialect import AtomDialect
from .frame_dialect import FrameDialect
from .property_dialect import PropertyDialect

DIALECTS: Final[dict[DialectKind, TagDialect]] = {
    DialectKind.FRAME: FrameDialect(),
    DialectKind.ATOM: AtomDialect(),
    DialectKind.PROPERTY: PropertyDialect(),
}

__all__ = ["DIALECTS", "AtomDialect", "FrameDialect", "PropertyDialect", "TagDialect"]
