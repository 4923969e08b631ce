"""src/tagbridge/ui/cli/commands/tags.py
What: Execute tag and cover subcommands against local files.
Why: Expose the tag and artwork stores without any catalog access.
"""

from __future__ import annotations

from typing import final

from tagbridge.config.settings import MIRROR_ATTRIBUTES
from tagbridge.features.artwork import ArtworkStore
from tagbridge.features.tags import TagStore, default_mirror
from tagbridge.platform.logging import logger
from tagbridge.shared.errors import TagBridgeError
from tagbridge.shared.tag_record import ArtworkBlob
from tagbridge.ui.cli.args.options import CoverArgs, ReadArgs, WriteArgs
from tagbridge.ui.cli.display.tags import TagDisplay


@final
class ReadCommand:
    """Print the tags of every requested file."""

    def __init__(
        self,
        args: ReadArgs,
        *,
        store: TagStore | None = None,
        display: TagDisplay | None = None,
    ) -> None:
        self.args = args
        self.store = store or TagStore()
        self.display = display or TagDisplay()

    def execute(self) -> int:
        exit_code = 0
        for path in self.args.paths:
            try:
                record = self.store.read_tags(path)
            except TagBridgeError as exc:
                logger.error("Cannot read %s: %s", path, exc)
                exit_code = 1
                continue
            self.display.show_record(path, record, quiet=self.args.quiet)
        return exit_code


@final
class WriteCommand:
    """Read-modify-write the requested fields of one file."""

    def __init__(
        self,
        args: WriteArgs,
        *,
        store: TagStore | None = None,
        display: TagDisplay | None = None,
    ) -> None:
        self.args = args
        self.store = store or TagStore(default_mirror(MIRROR_ATTRIBUTES))
        self.display = display or TagDisplay()

    def execute(self) -> int:
        """Returns 0 when every field was written, 1 otherwise."""

        path = self.args.path
        record = self.store.read_tags(path).copy(**self.args.changes)
        ok = self.store.write_tags(path, record)
        if not self.args.quiet or not ok:
            self.display.show_written(path, self.args.changes, ok)
        return 0 if ok else 1


@final
class CoverCommand:
    """Extract, replace or remove the embedded cover of one file."""

    def __init__(
        self,
        args: CoverArgs,
        *,
        store: ArtworkStore | None = None,
        display: TagDisplay | None = None,
    ) -> None:
        self.args = args
        self.store = store or ArtworkStore()
        self.display = display or TagDisplay()

    def execute(self) -> int:
        args = self.args
        if args.action == "extract":
            if args.output is None:
                raise ValueError("cover extract needs an output path")
            blob = self.store.extract_cover(args.path)
            self.display.show_cover(args.path, blob, quiet=args.quiet)
            if blob is None:
                return 1
            _ = args.output.write_bytes(blob.data)
            logger.info("Saved cover of %s to %s", args.path, args.output)
            return 0

        if args.action == "set":
            if args.image is None:
                raise ValueError("cover set needs an image path")
            blob = ArtworkBlob(args.image.read_bytes(), mime=args.mime or "")
            _ = self.store.write_cover(args.path, blob, args.mime)
            return 0

        _ = self.store.write_cover(args.path, None)
        return 0


__all__ = ["CoverCommand", "ReadCommand", "WriteCommand"]
