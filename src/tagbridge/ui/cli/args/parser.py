"""src/tagbridge/ui/cli/args/parser.py
What: Build the argparse tree and turn parsed arguments into option records.
Why: Validation and logging setup happen once, before any command runs.
"""

import argparse
import logging
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Final, final

from tagbridge.config.config import Config
from tagbridge.platform.logging import DEFAULT_LOG_FILE, logger, setup_logger
from tagbridge.ui.cli.args.options import (
    ApplyArgs,
    CLIArgs,
    CoverArgs,
    ReadArgs,
    SearchArgs,
    WriteArgs,
)

# option dest -> TagRecord field
TEXT_OPTIONS: Final[dict[str, str]] = {
    "title": "title",
    "artist": "artist",
    "album": "album",
    "album_artist": "album_artist",
    "composer": "composer",
    "genre": "genre",
    "comment": "comment",
    "album_id": "external_album_id",
    "artist_id": "external_artist_id",
    "track_id": "external_track_id",
}
NUMBER_OPTIONS: Final[dict[str, str]] = {
    "year": "year",
    "track": "track",
    "track_total": "track_total",
    "disc": "disc",
    "disc_total": "disc_total",
}


def _non_negative(value: str) -> int:
    try:
        number = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected an integer, got {value!r}") from exc
    if number < 0:
        raise argparse.ArgumentTypeError(f"expected a value >= 0, got {number}")
    return number


@final
class ArgumentParser:
    """Command line argument parser."""

    @staticmethod
    def create_parser() -> argparse.ArgumentParser:
        """Create argument parser.

        Returns:
            argparse.ArgumentParser: Configured argument parser.
        """
        parser = argparse.ArgumentParser(
            description="tagbridge - read, write and reconcile audio tags with MusicBrainz.",
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        subparsers = parser.add_subparsers(dest="command", required=True)

        read_parser = subparsers.add_parser("read", help="Show the tags stored in audio files")
        _ = read_parser.add_argument("paths", nargs="+", metavar="PATH", help="Audio files")
        ArgumentParser._add_output_flags(read_parser)

        write_parser = subparsers.add_parser(
            "write",
            help="Change selected tags of one file (empty text or 0 removes a field)",
        )
        _ = write_parser.add_argument("path", metavar="PATH", help="Audio file to modify")
        for dest in TEXT_OPTIONS:
            _ = write_parser.add_argument(
                f"--{dest.replace('_', '-')}", dest=dest, type=str, metavar="TEXT"
            )
        for dest in NUMBER_OPTIONS:
            _ = write_parser.add_argument(
                f"--{dest.replace('_', '-')}", dest=dest, type=_non_negative, metavar="N"
            )
        ArgumentParser._add_output_flags(write_parser)

        cover_parser = subparsers.add_parser("cover", help="Manage the embedded cover image")
        cover_actions = cover_parser.add_subparsers(dest="action", required=True)

        extract_parser = cover_actions.add_parser("extract", help="Save the embedded cover")
        _ = extract_parser.add_argument("path", metavar="PATH", help="Audio file")
        _ = extract_parser.add_argument("output", metavar="OUT", help="Image file to write")
        ArgumentParser._add_output_flags(extract_parser)

        set_parser = cover_actions.add_parser("set", help="Replace the embedded cover")
        _ = set_parser.add_argument("path", metavar="PATH", help="Audio file")
        _ = set_parser.add_argument("image", metavar="IMAGE", help="PNG or JPEG image")
        _ = set_parser.add_argument(
            "--mime", type=str, help="MIME type of IMAGE (sniffed when omitted)"
        )
        ArgumentParser._add_output_flags(set_parser)

        clear_parser = cover_actions.add_parser("clear", help="Remove every embedded image")
        _ = clear_parser.add_argument("path", metavar="PATH", help="Audio file")
        ArgumentParser._add_output_flags(clear_parser)

        search_parser = subparsers.add_parser("search", help="Search MusicBrainz recordings")
        _ = search_parser.add_argument("--artist", required=True, help="Artist name")
        _ = search_parser.add_argument("--title", required=True, help="Recording title")
        _ = search_parser.add_argument("--album", help="Restrict to a release title")
        _ = search_parser.add_argument(
            "--files",
            type=_non_negative,
            default=0,
            metavar="N",
            help="Rank releases by how closely their track count matches N local files",
        )
        ArgumentParser._add_catalog_flags(search_parser)

        apply_parser = subparsers.add_parser(
            "apply", help="Apply a MusicBrainz release to local files"
        )
        _ = apply_parser.add_argument("files", nargs="+", metavar="FILE", help="Audio files")
        _ = apply_parser.add_argument(
            "--recording", required=True, help="MusicBrainz recording id"
        )
        _ = apply_parser.add_argument(
            "--release", default="", help="MusicBrainz release id (resolved when omitted)"
        )
        _ = apply_parser.add_argument(
            "--album",
            action="store_true",
            help="Match every file (or the directory of a single file) to the release",
        )
        ArgumentParser._add_catalog_flags(apply_parser)

        return parser

    @staticmethod
    def process_args(args_list: Sequence[str] | None = None) -> CLIArgs:
        """Process command line arguments.

        Args:
            args_list: List of command line arguments (for testing).

        Returns:
            CLIArgs: Processed command line arguments.

        Raises:
            SystemExit: If required paths don't exist or other validation fails.
        """
        parser = ArgumentParser.create_parser()
        parsed_args = parser.parse_args(args_list)

        is_quiet = bool(getattr(parsed_args, "quiet", False))
        is_verbose = bool(getattr(parsed_args, "verbose", False))

        if is_quiet:
            log_level = logging.ERROR
        elif is_verbose:
            log_level = logging.DEBUG
        else:
            log_level = logging.INFO

        configuration = Config.load()
        log_file_path = configuration.log_file or DEFAULT_LOG_FILE
        _ = setup_logger(log_file=log_file_path, console_level=log_level)

        command: str = parsed_args.command

        if command == "read":
            return ReadArgs(
                command="read",
                paths=[ArgumentParser._existing(path) for path in parsed_args.paths],
                verbose=is_verbose,
                quiet=is_quiet,
            )

        if command == "write":
            return ArgumentParser._process_write(parsed_args, is_verbose, is_quiet)

        if command == "cover":
            return ArgumentParser._process_cover(parsed_args, is_verbose, is_quiet)

        if command == "search":
            return SearchArgs(
                command="search",
                artist=parsed_args.artist,
                title=parsed_args.title,
                album=parsed_args.album or None,
                target_track_count=parsed_args.files,
                contact=parsed_args.contact,
                verbose=is_verbose,
                quiet=is_quiet,
            )

        if command == "apply":
            return ApplyArgs(
                command="apply",
                recording_id=parsed_args.recording,
                release_id=parsed_args.release,
                album_mode=parsed_args.album,
                files=[ArgumentParser._existing(path) for path in parsed_args.files],
                contact=parsed_args.contact,
                verbose=is_verbose,
                quiet=is_quiet,
            )

        logger.error("Unsupported command: %s", command)
        sys.exit(1)

    @staticmethod
    def _add_output_flags(parser: argparse.ArgumentParser) -> None:
        _ = parser.add_argument(
            "--verbose",
            action="store_true",
            help="Show detailed processing information",
        )
        _ = parser.add_argument(
            "--quiet",
            action="store_true",
            help="Suppress all output except errors",
        )

    @staticmethod
    def _add_catalog_flags(parser: argparse.ArgumentParser) -> None:
        _ = parser.add_argument(
            "--contact",
            help="Contact URL or e-mail sent in the MusicBrainz User-Agent",
        )
        ArgumentParser._add_output_flags(parser)

    @staticmethod
    def _existing(raw: str) -> Path:
        path = Path(raw)
        if not path.exists():
            logger.error("Path does not exist: %s", path)
            sys.exit(1)
        return path

    @staticmethod
    def _process_write(
        parsed_args: argparse.Namespace, verbose: bool, quiet: bool
    ) -> WriteArgs:
        changes: dict[str, str | int] = {}
        for dest, field_name in TEXT_OPTIONS.items():
            value = getattr(parsed_args, dest)
            if value is not None:
                changes[field_name] = value
        for dest, field_name in NUMBER_OPTIONS.items():
            value = getattr(parsed_args, dest)
            if value is not None:
                changes[field_name] = value

        if not changes:
            logger.error("Nothing to write; pass at least one field option")
            sys.exit(1)

        return WriteArgs(
            command="write",
            path=ArgumentParser._existing(parsed_args.path),
            changes=changes,
            verbose=verbose,
            quiet=quiet,
        )

    @staticmethod
    def _process_cover(parsed_args: argparse.Namespace, verbose: bool, quiet: bool) -> CoverArgs:
        action = parsed_args.action
        path = ArgumentParser._existing(parsed_args.path)
        if action == "extract":
            return CoverArgs(
                command="cover",
                action="extract",
                path=path,
                output=Path(parsed_args.output),
                verbose=verbose,
                quiet=quiet,
            )
        if action == "set":
            return CoverArgs(
                command="cover",
                action="set",
                path=path,
                image=ArgumentParser._existing(parsed_args.image),
                mime=parsed_args.mime,
                verbose=verbose,
                quiet=quiet,
            )
        return CoverArgs(command="cover", action="clear", path=path, verbose=verbose, quiet=quiet)
