"""MusicBrainz and Cover Art Archive access.

Rate-limited, deadline-bounded and cancellable remote calls returning the
shared ``RemoteHit``/``RemoteRelease``/``ArtworkBlob`` value types.
"""

from __future__ import annotations

from .bounded import BoundedCall
from .client import CoverDownload, MusicBrainzClient, cover_url
from .http_client import HTTPClient, HTTPResult, RequestsHTTPClient
from .rate_limit import RateLimiter
from .user_agent import format_user_agent, resolve_user_agent

__all__ = [
    "BoundedCall",
    "CoverDownload",
    "HTTPClient",
    "HTTPResult",
    "MusicBrainzClient",
    "RateLimiter",
    "RequestsHTTPClient",
    "cover_url",
    "format_user_agent",
    "resolve_user_agent",
]
