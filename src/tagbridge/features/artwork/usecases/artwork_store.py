"""Embedded cover art store.

Where: src/tagbridge/features/artwork/usecases/artwork_store.py
What: Extract and replace the single embedded cover image for every supported container.
Why: Writing a cover always leaves zero or one image behind, whatever the format.
"""

from __future__ import annotations

import base64
from collections.abc import Callable
from pathlib import Path
from typing import Any, Final

import mutagen
from mutagen import MutagenError
from mutagen.flac import FLAC, Picture
from mutagen.id3 import APIC, ID3, Encoding, ID3NoHeaderError, PictureType
from mutagen.mp4 import MP4, MP4Cover
from mutagen.oggopus import OggOpus
from mutagen.oggvorbis import OggVorbis

from tagbridge.features.tags.usecases.dialects.frame_dialect import load_frame_tags
from tagbridge.features.tags.usecases.dispatch import DialectKind, dialect_for
from tagbridge.features.tags.usecases.tag_store import ensure_readable
from tagbridge.platform.logging import logger
from tagbridge.shared.errors import TagIOError, UnsupportedFormatError
from tagbridge.shared.tag_record import ArtworkBlob

from .mime import JPEG_MIME, PNG_MIME, normalize_mime, sniff_mime

__all__ = ["ArtworkStore"]

_PICTURE_COMMENT_KEYS: Final[tuple[str, ...]] = ("METADATA_BLOCK_PICTURE", "COVERART")
_ATOM_FORMATS: Final[dict[str, int]] = {
    PNG_MIME: MP4Cover.FORMAT_PNG,
    JPEG_MIME: MP4Cover.FORMAT_JPEG,
}
_READ_ERRORS: Final[tuple[type[BaseException], ...]] = (MutagenError, ValueError, OSError)


def _frame_cover(path: Path) -> ArtworkBlob | None:
    try:
        tags = ID3(path)
    except ID3NoHeaderError:
        return None
    for frame in tags.getall("APIC"):
        if frame.data:
            return ArtworkBlob(
                bytes(frame.data), mime=normalize_mime(frame.mime), description=str(frame.desc)
            )
    return None


def _property_cover(path: Path) -> ArtworkBlob | None:
    audio = mutagen.File(path, options=[FLAC, OggVorbis, OggOpus])
    if audio is None:
        return None
    if isinstance(audio, FLAC):
        for picture in audio.pictures:
            if picture.data:
                return ArtworkBlob(bytes(picture.data), mime=normalize_mime(picture.mime))
    tags = audio.tags
    if tags is None:
        return None
    for encoded in tags.get("METADATA_BLOCK_PICTURE", []):
        try:
            picture = Picture(base64.b64decode(encoded))
        except (ValueError, MutagenError):
            continue
        if picture.data:
            return ArtworkBlob(bytes(picture.data), mime=normalize_mime(picture.mime))
    return None


def _atom_cover(path: Path) -> ArtworkBlob | None:
    audio = MP4(path)
    if audio.tags is None:
        return None
    for cover in audio.tags.get("covr", []):
        data = bytes(cover)
        if not data:
            continue
        is_png = getattr(cover, "imageformat", None) == MP4Cover.FORMAT_PNG
        return ArtworkBlob(data, mime=PNG_MIME if is_png else JPEG_MIME)
    return None


# Fixed lookup order: frame, property, then atom representations.
_EXTRACTORS: Final[tuple[Callable[[Path], ArtworkBlob | None], ...]] = (
    _frame_cover,
    _property_cover,
    _atom_cover,
)


class ArtworkStore:
    """Embedded cover CRUD; shares the tag store's extension dispatch."""

    def extract_cover(self, path: Path) -> ArtworkBlob | None:
        """Return the first non-empty embedded image, or ``None``.

        Raises:
            TagNotFoundError: Missing or unreadable path.
        """

        resolved = ensure_readable(path)
        for extractor in _EXTRACTORS:
            try:
                blob = extractor(resolved)
            except _READ_ERRORS as exc:
                logger.debug("%s found no cover in %s: %s", extractor.__name__, resolved, exc)
                continue
            if blob:
                return blob
        return None

    def write_cover(
        self,
        path: Path,
        blob: ArtworkBlob | None,
        mime_hint: str | None = None,
    ) -> bool:
        """Replace all embedded images with ``blob`` (or with nothing).

        The MIME type is the hint, else the blob's own type, else sniffed.

        Raises:
            TagNotFoundError: Missing or unreadable path.
            UnsupportedFormatError: Unknown container, or a non PNG/JPEG image
                for an MP4 container.
            TagIOError: Saving failed.
        """

        resolved = ensure_readable(path)
        kind = dialect_for(resolved)
        image = blob if blob else None
        mime = ""
        if image is not None:
            mime = normalize_mime(mime_hint) or normalize_mime(image.mime) or (
                sniff_mime(image.data) or ""
            )

        try:
            if kind is DialectKind.FRAME:
                self._write_frame(resolved, image, mime or JPEG_MIME)
            elif kind is DialectKind.PROPERTY:
                self._write_property(resolved, image, mime or JPEG_MIME)
            else:
                self._write_atom(resolved, image, mime)
        except MutagenError as exc:
            raise UnsupportedFormatError(f"Cannot parse {resolved.name}: {exc}") from exc

        logger.info(
            "%s cover for %s",
            "Replaced" if image is not None else "Removed",
            resolved,
            extra={"tag_event": "artwork.write", "path": resolved},
        )
        return True

    @staticmethod
    def _write_frame(path: Path, image: ArtworkBlob | None, mime: str) -> None:
        tags = load_frame_tags(path)
        tags.delall("APIC")
        if image is not None:
            tags.add(
                APIC(
                    encoding=Encoding.UTF8,
                    mime=mime,
                    type=PictureType.COVER_FRONT,
                    desc=image.description or "Cover",
                    data=image.data,
                )
            )
        _save(lambda: tags.save(path, v2_version=4), path)

    @staticmethod
    def _write_property(path: Path, image: ArtworkBlob | None, mime: str) -> None:
        audio: Any = mutagen.File(path, options=[FLAC, OggVorbis, OggOpus])
        if audio is None:
            raise UnsupportedFormatError(f"Cannot parse {path.name} as FLAC or Ogg")

        picture: Picture | None = None
        if image is not None:
            picture = Picture()
            picture.type = PictureType.COVER_FRONT
            picture.mime = mime
            picture.desc = image.description
            picture.data = image.data

        if isinstance(audio, FLAC):
            audio.clear_pictures()
            if picture is not None:
                audio.add_picture(picture)
        else:
            if audio.tags is None:
                audio.add_tags()
            for key in _PICTURE_COMMENT_KEYS:
                if key in audio.tags:
                    del audio.tags[key]
            if picture is not None:
                encoded = base64.b64encode(picture.write()).decode("ascii")
                audio.tags["METADATA_BLOCK_PICTURE"] = [encoded]
        _save(audio.save, path)

    @staticmethod
    def _write_atom(path: Path, image: ArtworkBlob | None, mime: str) -> None:
        image_format: int | None = None
        if image is not None:
            image_format = _ATOM_FORMATS.get(mime)
            if image_format is None:
                raise UnsupportedFormatError(
                    f"MP4 covers must be PNG or JPEG, got {mime or 'unknown data'}"
                )

        audio = MP4(path)
        if audio.tags is None:
            audio.add_tags()
        if "covr" in audio.tags:
            del audio.tags["covr"]
        if image is not None and image_format is not None:
            audio.tags["covr"] = [MP4Cover(image.data, imageformat=image_format)]
        _save(audio.save, path)


def _save(save: Callable[[], None], path: Path) -> None:
    try:
        save()
    except (MutagenError, OSError) as exc:
        raise TagIOError(f"Failed to save cover to {path}: {exc}") from exc
