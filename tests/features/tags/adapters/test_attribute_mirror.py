from __future__ import annotations

import errno
import os
from pathlib import Path

import pytest

from tagbridge.features.tags.adapters import attribute_mirror
from tagbridge.features.tags.adapters.attribute_mirror import (
    ATTRIBUTE_NAMES,
    NullMirror,
    XattrMirror,
    default_mirror,
)
from tagbridge.shared.tag_record import TagRecord


def _oserror(code: int) -> OSError:
    return OSError(code, os.strerror(code))


def test_sets_present_and_removes_absent(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    written: dict[str, bytes] = {}
    removed: list[str] = []

    def fake_set(path: Path, name: str, value: bytes) -> None:
        written[name] = value

    def fake_remove(path: Path, name: str) -> None:
        removed.append(name)
        raise _oserror(errno.ENODATA)

    monkeypatch.setattr(attribute_mirror.os, "setxattr", fake_set, raising=False)
    monkeypatch.setattr(attribute_mirror.os, "removexattr", fake_remove, raising=False)

    ok = XattrMirror().mirror(tmp_path / "a.mp3", TagRecord(title="Song", year=2001))

    assert ok is True
    assert written == {"user.Media:Title": b"Song", "user.Media:Year": b"2001"}
    assert len(removed) == len(ATTRIBUTE_NAMES) - 2


def test_unsupported_filesystem_stops_early(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[str] = []

    def fake_set(path: Path, name: str, value: bytes) -> None:
        calls.append(name)
        raise _oserror(errno.ENOTSUP)

    monkeypatch.setattr(attribute_mirror.os, "setxattr", fake_set, raising=False)

    assert XattrMirror().mirror(tmp_path / "a.mp3", TagRecord(title="Song")) is False
    assert calls == ["user.Media:Title"]


def test_other_errors_continue_but_report(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_set(path: Path, name: str, value: bytes) -> None:
        if name == "user.Media:Title":
            raise _oserror(errno.E2BIG)

    def fake_remove(path: Path, name: str) -> None:
        return None

    monkeypatch.setattr(attribute_mirror.os, "setxattr", fake_set, raising=False)
    monkeypatch.setattr(attribute_mirror.os, "removexattr", fake_remove, raising=False)

    assert XattrMirror().mirror(tmp_path / "a.mp3", TagRecord(title="x", artist="y")) is False


def test_default_mirror_respects_switch() -> None:
    assert isinstance(default_mirror(False), NullMirror)
    assert NullMirror().mirror(Path("a.mp3"), TagRecord()) is False
