from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

from tagbridge.platform.logging.config import LOGGER_NAME, setup_logger
from tagbridge.platform.logging.handlers import TagBridgeRichHandler


def _record(message: str = "msg", **extra: object) -> logging.LogRecord:
    record = logging.LogRecord(LOGGER_NAME, logging.INFO, __file__, 1, message, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_tag_event_renders_truncated_path() -> None:
    handler = TagBridgeRichHandler()
    rendered = handler.render_message(
        _record(tag_event="tags.write", path="/music/Artist/Album/Disc 1/01 Song.flac"),
        "Wrote tags",
    )

    assert str(rendered).endswith(" Wrote tags …/Album/Disc 1/01 Song.flac")


def test_short_paths_keep_anchor_and_details() -> None:
    handler = TagBridgeRichHandler()
    rendered = handler.render_message(
        _record(
            tag_event="reconcile.applied",
            path="/music/a.mp3",
            release_id="rel-1",
            written=3,
            failed=["b.mp3", "c.mp3"],
        ),
        "ignored",
    )

    assert str(rendered).endswith(
        "Applied release /music/a.mp3 [release_id=rel-1, written=3, failed=b.mp3,c.mp3]"
    )


def test_windows_paths_use_backslashes() -> None:
    handler = TagBridgeRichHandler()
    rendered = handler.render_message(
        _record(tag_event="tags.read", path="C:\\Music\\a.mp3"), "ignored"
    )
    assert str(rendered).endswith(" Read tags C:\\Music\\a.mp3")


def test_plain_records_use_default_rendering() -> None:
    handler = TagBridgeRichHandler()
    rendered = handler.render_message(_record("plain message"), "plain message")
    assert str(rendered) == "plain message"


@pytest.fixture
def restore_logger() -> Iterator[None]:
    yield
    _ = setup_logger(log_file=None)


@pytest.mark.usefixtures("restore_logger")
def test_setup_logger_adds_rotating_file(tmp_path: Path) -> None:
    log_file = tmp_path / "logs" / "tagbridge.log"

    logger = setup_logger(log_file=log_file, console_level=logging.WARNING)
    logger.debug("file only", extra={"tag_event": "remote.request", "url": "https://x"})
    for handler in logger.handlers:
        handler.flush()

    assert logger.name == LOGGER_NAME
    assert [type(handler).__name__ for handler in logger.handlers] == [
        "TagBridgeRichHandler",
        "RotatingFileHandler",
    ]
    assert logger.handlers[0].level == logging.WARNING
    assert "file only" in log_file.read_text(encoding="utf-8")


@pytest.mark.usefixtures("restore_logger")
def test_setup_logger_is_idempotent() -> None:
    _ = setup_logger(log_file=None)
    logger = setup_logger(log_file=None)
    assert len(logger.handlers) == 1
