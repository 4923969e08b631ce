"""Where: src/tagbridge/features/tags/adapters/attribute_mirror.py
What: Mirror written tag values into ``user.*`` extended file attributes.
Why: File managers and desktop search can index attributes without parsing audio containers.
"""

from __future__ import annotations

import errno
import os
from pathlib import Path
from typing import Final, Protocol, final, runtime_checkable

from tagbridge.platform.logging import logger
from tagbridge.shared.tag_record import TagRecord

# TagRecord field -> attribute name without the ``user.`` namespace prefix.
ATTRIBUTE_NAMES: Final[dict[str, str]] = {
    "title": "Media:Title",
    "artist": "Audio:Artist",
    "album": "Audio:Album",
    "genre": "Media:Genre",
    "comment": "Media:Comment",
    "year": "Media:Year",
    "track": "Audio:Track",
    "length_seconds": "Media:Length",
    "bitrate": "Audio:Bitrate",
    "sample_rate": "Audio:Rate",
    "channels": "Audio:Channels",
    "album_artist": "Media:AlbumArtist",
    "composer": "Media:Composer",
    "track_total": "Media:TrackTotal",
    "disc": "Media:Disc",
    "disc_total": "Media:DiscTotal",
    "external_album_id": "Media:MBAlbumID",
    "external_artist_id": "Media:MBArtistID",
    "external_track_id": "Media:MBTrackID",
    "acoustic_id": "Media:AcoustID",
}

_NAMESPACE: Final[str] = "user."
_UNSUPPORTED_ERRNOS: Final[frozenset[int]] = frozenset(
    {errno.ENOTSUP, errno.EOPNOTSUPP, errno.EPERM, errno.EACCES, errno.EROFS}
)


@runtime_checkable
class AttributeMirror(Protocol):
    """Best-effort side channel updated after a successful tag write."""

    def mirror(self, path: Path, record: TagRecord) -> bool: ...


@final
class NullMirror:
    """Mirror that does nothing, for platforms without extended attributes."""

    def mirror(self, path: Path, record: TagRecord) -> bool:
        return False


@final
class XattrMirror:
    """Linux ``user.`` namespace extended attributes via ``os.setxattr``."""

    def mirror(self, path: Path, record: TagRecord) -> bool:
        """Write or remove one attribute per field.

        Returns:
            bool: ``True`` when every attribute was updated. Failures are logged
            at DEBUG and never raised.
        """

        ok = True
        for field, name in ATTRIBUTE_NAMES.items():
            value = getattr(record, field)
            attribute = _NAMESPACE + name
            try:
                if value:
                    os.setxattr(path, attribute, str(value).encode("utf-8"))
                else:
                    self._remove(path, attribute)
            except OSError as exc:
                logger.debug("Attribute mirror skipped %s on %s: %s", attribute, path, exc)
                if exc.errno in _UNSUPPORTED_ERRNOS:
                    return False
                ok = False
        return ok

    @staticmethod
    def _remove(path: Path, attribute: str) -> None:
        try:
            os.removexattr(path, attribute)
        except OSError as exc:
            if exc.errno != errno.ENODATA:
                raise


def default_mirror(enabled: bool = True) -> AttributeMirror:
    """Pick the extended-attribute mirror when the platform supports it."""

    if enabled and hasattr(os, "setxattr"):
        return XattrMirror()
    return NullMirror()


__all__ = ["ATTRIBUTE_NAMES", "AttributeMirror", "NullMirror", "XattrMirror", "default_mirror"]
