"""Argument parsing for every subcommand."""

from __future__ import annotations

import logging
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from pytest_mock import MockerFixture

from tagbridge.ui.cli.args import ArgumentParser
from tagbridge.ui.cli.args.options import (
    ApplyArgs,
    CoverArgs,
    ReadArgs,
    SearchArgs,
    WriteArgs,
)


@pytest.fixture
def setup_logger(mocker: MockerFixture) -> MagicMock:
    """Keep parsing from touching real configuration and log files."""

    config = mocker.patch("tagbridge.ui.cli.args.parser.Config")
    config.load.return_value.log_file = None
    return mocker.patch("tagbridge.ui.cli.args.parser.setup_logger")


@pytest.fixture
def audio(tmp_path: Path) -> Path:
    path = tmp_path / "song.mp3"
    _ = path.write_bytes(b"")
    return path


def test_read_collects_paths(setup_logger: MagicMock, audio: Path) -> None:
    args = ArgumentParser.process_args(["read", str(audio), str(audio), "--verbose"])

    assert isinstance(args, ReadArgs)
    assert args.paths == [audio, audio]
    assert args.verbose
    assert setup_logger.call_args.kwargs["console_level"] == logging.DEBUG


def test_quiet_lowers_console_level(setup_logger: MagicMock, audio: Path) -> None:
    _ = ArgumentParser.process_args(["read", str(audio), "--quiet"])
    assert setup_logger.call_args.kwargs["console_level"] == logging.ERROR


def test_missing_path_exits(setup_logger: MagicMock, tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        _ = ArgumentParser.process_args(["read", str(tmp_path / "absent.mp3")])
    assert excinfo.value.code == 1


def test_write_maps_options_to_fields(setup_logger: MagicMock, audio: Path) -> None:
    args = ArgumentParser.process_args(
        ["write", str(audio), "--title", "New", "--album-id", "", "--track", "4", "--disc-total", "0"]
    )

    assert isinstance(args, WriteArgs)
    assert args.changes == {
        "title": "New",
        "external_album_id": "",
        "track": 4,
        "disc_total": 0,
    }


def test_write_without_changes_exits(setup_logger: MagicMock, audio: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        _ = ArgumentParser.process_args(["write", str(audio)])
    assert excinfo.value.code == 1


def test_write_rejects_negative_numbers(setup_logger: MagicMock, audio: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        _ = ArgumentParser.process_args(["write", str(audio), "--year", "-1"])
    assert excinfo.value.code == 2


def test_cover_actions(setup_logger: MagicMock, audio: Path, tmp_path: Path) -> None:
    image = tmp_path / "front.png"
    _ = image.write_bytes(b"")

    extract = ArgumentParser.process_args(["cover", "extract", str(audio), str(tmp_path / "o.jpg")])
    change = ArgumentParser.process_args(["cover", "set", str(audio), str(image), "--mime", "image/png"])
    clear = ArgumentParser.process_args(["cover", "clear", str(audio)])

    assert isinstance(extract, CoverArgs)
    assert extract.output == tmp_path / "o.jpg"
    assert isinstance(change, CoverArgs)
    assert (change.action, change.image, change.mime) == ("set", image, "image/png")
    assert isinstance(clear, CoverArgs)
    assert clear.action == "clear"


def test_search_options(setup_logger: MagicMock) -> None:
    args = ArgumentParser.process_args(
        ["search", "--artist", "Björk", "--title", "Joga", "--files", "10", "--contact", "me@x"]
    )

    assert isinstance(args, SearchArgs)
    assert (args.artist, args.title, args.album) == ("Björk", "Joga", None)
    assert args.target_track_count == 10
    assert args.contact == "me@x"


def test_apply_options(setup_logger: MagicMock, audio: Path) -> None:
    args = ArgumentParser.process_args(
        ["apply", str(audio), "--recording", "rec-1", "--album"]
    )

    assert isinstance(args, ApplyArgs)
    assert args.files == [audio]
    assert (args.recording_id, args.release_id, args.album_mode) == ("rec-1", "", True)


def test_apply_requires_recording(setup_logger: MagicMock, audio: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        _ = ArgumentParser.process_args(["apply", str(audio)])
    assert excinfo.value.code == 2
