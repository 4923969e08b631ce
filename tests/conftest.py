"""Shared pytest fixtures: portable config roots and synthesised audio files."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

# MPEG-1 Layer III, 128 kbps, 44.1 kHz, stereo, no padding: 417 byte frames.
_MPEG_FRAME_HEADER = b"\xff\xfb\x90\x00"
_MPEG_FRAME_SIZE = 417
_MPEG_FRAME_COUNT = 16

# 44.1 kHz, stereo, 16 bit, 441000 samples (10 seconds), no audio frames.
_STREAMINFO_FIELDS = (44100 << 44) | (1 << 41) | (15 << 36) | 441000


def _mpeg_bytes() -> bytes:
    frame = _MPEG_FRAME_HEADER + b"\x00" * (_MPEG_FRAME_SIZE - len(_MPEG_FRAME_HEADER))
    return frame * _MPEG_FRAME_COUNT


def _flac_bytes() -> bytes:
    streaminfo = (
        (4096).to_bytes(2, "big") * 2
        + b"\x00" * 6
        + _STREAMINFO_FIELDS.to_bytes(8, "big")
        + b"\x00" * 16
    )
    header = bytes([0x80]) + len(streaminfo).to_bytes(3, "big")
    return b"fLaC" + header + streaminfo


@pytest.fixture
def make_mp3(tmp_path: Path) -> Callable[[str], Path]:
    """Create an untagged ``.mp3`` holding a short run of silent MPEG frames."""

    def _make(name: str = "track.mp3") -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        _ = path.write_bytes(_mpeg_bytes())
        return path

    return _make


@pytest.fixture
def make_flac(tmp_path: Path) -> Callable[[str], Path]:
    """Create a FLAC file holding only a STREAMINFO block."""

    def _make(name: str = "track.flac") -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        _ = path.write_bytes(_flac_bytes())
        return path

    return _make


@pytest.fixture
def portable_repo_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Provide a temporary repository root for portable path detection."""

    _ = (tmp_path / "pyproject.toml").write_text("[project]\nname='tmp'\n")

    import tagbridge.config.paths as paths

    def _fake_detect_repo_root(_start: Path | None = None) -> Path:
        return tmp_path

    monkeypatch.delenv("TAGBRIDGE_CONFIG", raising=False)
    monkeypatch.setattr(paths, "_detect_repo_root", _fake_detect_repo_root, raising=True)
    return tmp_path


@pytest.fixture
def config_runtime_env(portable_repo_root: Path) -> Iterator[Path]:
    """Reset configuration singletons around a test run."""

    import tagbridge.config.config as config_module

    original_instance = config_module.Config._instance  # pyright: ignore[reportPrivateUsage]
    original_loaded_from = config_module.Config._loaded_from  # pyright: ignore[reportPrivateUsage]
    original_config = config_module.config

    config_module.Config._instance = None  # pyright: ignore[reportPrivateUsage]
    config_module.Config._loaded_from = None  # pyright: ignore[reportPrivateUsage]

    try:
        yield portable_repo_root
    finally:
        config_module.Config._instance = original_instance  # pyright: ignore[reportPrivateUsage]
        config_module.Config._loaded_from = original_loaded_from  # pyright: ignore[reportPrivateUsage]
        config_module.config = original_config
