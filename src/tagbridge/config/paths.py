"""Where: src/tagbridge/config/paths.py
What: Locate the config file and the log file relative to the project checkout.
Why: Keep the tool portable; nothing is written under the user's home by default.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Final

CONFIG_ENV_VAR: Final[str] = "TAGBRIDGE_CONFIG"
_ROOT_MARKERS: Final[tuple[str, ...]] = ("pyproject.toml", ".git")


def _detect_repo_root(start: Path | None = None) -> Path:
    """Return the nearest ancestor holding a project marker, else the working directory."""

    origin = (start or Path(__file__).resolve()).parent
    for candidate in (origin, *origin.parents):
        if any((candidate / marker).exists() for marker in _ROOT_MARKERS):
            return candidate
    return Path.cwd()


def default_config_path(env: Mapping[str, str] | None = None) -> Path:
    """``$TAGBRIDGE_CONFIG`` when set and non-blank, else ``<root>/config/config.toml``."""

    override = (env if env is not None else os.environ).get(CONFIG_ENV_VAR, "").strip()
    if override:
        return Path(override).expanduser().resolve()
    return (_detect_repo_root() / "config" / "config.toml").resolve()


def default_log_file() -> Path:
    return (_detect_repo_root() / "logs" / "tagbridge.log").resolve()


__all__ = ["CONFIG_ENV_VAR", "default_config_path", "default_log_file"]
