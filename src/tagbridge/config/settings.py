"""Where: src/tagbridge/config/settings.py
What: Derived runtime settings sourced from persisted configuration.
Why: Expose validated constants to feature layers without file I/O.
"""

from __future__ import annotations

from tagbridge.config.config import (
    COVER_SIZE_DEFAULT,
    DURATION_TOLERANCE_SECONDS_DEFAULT,
    POLL_INTERVAL_SECONDS_DEFAULT,
    QUERY_TIMEOUT_SECONDS_DEFAULT,
    RATE_LIMIT_SECONDS_DEFAULT,
    SEARCH_ATTEMPTS_DEFAULT,
    config as app_config,
)


def _positive(value: object, default: float) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    return float(value) if value > 0 else default


# MusicBrainz application identity ------------------------------------------

# MusicBrainz recommends a User-Agent of the form:
#   "AppName/AppVersion (contact-url-or-email)"
# See: https://musicbrainz.org/doc/MusicBrainz_API/Best_Practices#User-Agent

MB_APP_NAME: str = app_config.mb_app_name or "tagbridge"
MB_APP_VERSION: str = app_config.mb_app_version or "0.1.0"
MB_CONTACT: str = app_config.mb_contact or ""


# Remote call pacing ---------------------------------------------------------

MB_RATE_LIMIT_SECONDS: float = _positive(app_config.rate_limit_seconds, RATE_LIMIT_SECONDS_DEFAULT)
MB_QUERY_TIMEOUT_SECONDS: float = _positive(
    app_config.query_timeout_seconds, QUERY_TIMEOUT_SECONDS_DEFAULT
)
MB_POLL_INTERVAL_SECONDS: float = _positive(
    app_config.poll_interval_seconds, POLL_INTERVAL_SECONDS_DEFAULT
)
MB_SEARCH_ATTEMPTS: int = int(_positive(app_config.search_attempts, SEARCH_ATTEMPTS_DEFAULT))


# Reconciliation ---------------------------------------------------------------

COVER_SIZE: int = int(_positive(app_config.cover_size, COVER_SIZE_DEFAULT))
DURATION_TOLERANCE_SECONDS: int = int(
    _positive(app_config.duration_tolerance_seconds, DURATION_TOLERANCE_SECONDS_DEFAULT)
)

MIRROR_ATTRIBUTES: bool = bool(app_config.mirror_attributes)


__all__ = [
    "COVER_SIZE",
    "DURATION_TOLERANCE_SECONDS",
    "MB_APP_NAME",
    "MB_APP_VERSION",
    "MB_CONTACT",
    "MB_POLL_INTERVAL_SECONDS",
    "MB_QUERY_TIMEOUT_SECONDS",
    "MB_RATE_LIMIT_SECONDS",
    "MB_SEARCH_ATTEMPTS",
    "MIRROR_ATTRIBUTES",
]
