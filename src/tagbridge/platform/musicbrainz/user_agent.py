"""Where: src/tagbridge/platform/musicbrainz/user_agent.py
What: Compose the identification string sent with catalog and cover requests.
Why: MusicBrainz rejects anonymous clients; keep the etiquette in one place.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Final

from tagbridge.config.settings import MB_APP_NAME, MB_APP_VERSION, MB_CONTACT

USER_AGENT_ENV: Final[str] = "TAGBRIDGE_USER_AGENT"


def format_user_agent(app_name: str, app_version: str, contact: str) -> str:
    """Return ``App/Version (contact)`` when contact information is available."""

    stripped = contact.strip()
    if stripped:
        return f"{app_name}/{app_version} ({stripped})"
    return f"{app_name}/{app_version}"


def resolve_user_agent(
    contact: str | None = None,
    *,
    env: Mapping[str, str] | None = None,
) -> str:
    """Pick the user agent for a new client.

    An explicit ``contact`` wins over the configured one; the
    ``TAGBRIDGE_USER_AGENT`` environment variable replaces the whole string.
    """

    mapping = env if env is not None else os.environ
    override = (mapping.get(USER_AGENT_ENV) or "").strip()
    if override:
        return override
    return format_user_agent(
        MB_APP_NAME,
        MB_APP_VERSION,
        contact if contact is not None else MB_CONTACT,
    )


__all__ = ["USER_AGENT_ENV", "format_user_agent", "resolve_user_agent"]
