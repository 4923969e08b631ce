"""src/tagbridge/ui/cli/cli.py
What: Dispatch parsed arguments to commands and map outcomes to exit codes.
Why: One place decides how errors and interrupts end the process.
"""

import sys
from typing import final

from tagbridge.platform.logging import logger
from tagbridge.shared.errors import TagBridgeError
from tagbridge.ui.cli.args import ArgumentParser
from tagbridge.ui.cli.args.options import (
    ApplyArgs,
    CLIArgs,
    CoverArgs,
    ReadArgs,
    SearchArgs,
    WriteArgs,
)
from tagbridge.ui.cli.commands import (
    ApplyCommand,
    CoverCommand,
    ReadCommand,
    SearchCommand,
    WriteCommand,
)


@final
class CommandProcessor:
    """Command line interface processor."""

    @staticmethod
    def process_command(args_list: list[str] | None = None) -> None:
        """Process command line arguments.

        Exits with 1 on errors, 2 when a match needs manual confirmation and
        130 when interrupted.

        Args:
            args_list: List of command line arguments (for testing).
        """
        try:
            args: CLIArgs = ArgumentParser.process_args(args_list)
            exit_code = CommandProcessor._dispatch(args)
            if exit_code:
                sys.exit(exit_code)
            return

        except KeyboardInterrupt:
            logger.info("\nOperation cancelled by user")
            sys.exit(130)
        except TagBridgeError as e:
            logger.error("%s", str(e))
            sys.exit(1)
        except Exception as e:
            logger.error("An unexpected error occurred: %s", str(e))
            sys.exit(1)

    @staticmethod
    def _dispatch(args: CLIArgs) -> int:
        if isinstance(args, ReadArgs):
            return ReadCommand(args).execute()
        if isinstance(args, WriteArgs):
            return WriteCommand(args).execute()
        if isinstance(args, CoverArgs):
            return CoverCommand(args).execute()
        if isinstance(args, SearchArgs):
            return SearchCommand(args).execute()
        assert isinstance(args, ApplyArgs)
        return ApplyCommand(args).execute()


def main() -> int:
    """Main entry point.

    Returns:
        int: Process exit code (0 on success). Underlying command processing
        calls ``sys.exit(...)`` for every other code, so this return is only
        reached when processing completes successfully.
    """
    CommandProcessor.process_command()
    return 0
