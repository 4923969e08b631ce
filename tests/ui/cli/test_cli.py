"""Exit codes of the CLI entry point."""

from __future__ import annotations

from pathlib import Path

import pytest
from pytest_mock import MockerFixture

from tagbridge.shared.errors import TagIOError
from tagbridge.ui.cli import CommandProcessor, main
from tagbridge.ui.cli.args.options import ApplyArgs, ReadArgs

READ = ReadArgs(command="read", paths=[Path("a.mp3")], verbose=False, quiet=False)
APPLY = ApplyArgs(command="apply", recording_id="r", release_id="", album_mode=True)


def _parse_to(mocker: MockerFixture, args: object) -> None:
    _ = mocker.patch("tagbridge.ui.cli.cli.ArgumentParser.process_args", return_value=args)


def test_success_returns_normally(mocker: MockerFixture) -> None:
    _parse_to(mocker, READ)
    read = mocker.patch("tagbridge.ui.cli.cli.ReadCommand")
    read.return_value.execute.return_value = 0

    CommandProcessor.process_command([])

    read.assert_called_once_with(READ)


def test_main_returns_zero(mocker: MockerFixture) -> None:
    _ = mocker.patch("tagbridge.ui.cli.cli.CommandProcessor.process_command")
    assert main() == 0


@pytest.mark.parametrize("code", [1, 2])
def test_nonzero_command_codes_exit(mocker: MockerFixture, code: int) -> None:
    _parse_to(mocker, APPLY)
    apply = mocker.patch("tagbridge.ui.cli.cli.ApplyCommand")
    apply.return_value.execute.return_value = code

    with pytest.raises(SystemExit) as excinfo:
        CommandProcessor.process_command([])
    assert excinfo.value.code == code


def test_keyboard_interrupt_exits_130(mocker: MockerFixture) -> None:
    _parse_to(mocker, READ)
    read = mocker.patch("tagbridge.ui.cli.cli.ReadCommand")
    read.return_value.execute.side_effect = KeyboardInterrupt

    with pytest.raises(SystemExit) as excinfo:
        CommandProcessor.process_command([])
    assert excinfo.value.code == 130


@pytest.mark.parametrize("error", [TagIOError("disk full"), RuntimeError("bug")])
def test_errors_exit_1(mocker: MockerFixture, error: Exception) -> None:
    _parse_to(mocker, READ)
    read = mocker.patch("tagbridge.ui.cli.cli.ReadCommand")
    read.return_value.execute.side_effect = error

    with pytest.raises(SystemExit) as excinfo:
        CommandProcessor.process_command([])
    assert excinfo.value.code == 1
