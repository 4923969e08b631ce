"""Where: src/tagbridge/platform/musicbrainz/client.py
What: Remote metadata client for MusicBrainz WS2 and the Cover Art Archive.
Why: Give the reconciliation engine one rate-limited, cancellable catalog facade.

Collaborators:
- ``rate_limit`` spaces requests per client instance
- ``bounded`` runs each request on a worker with a deadline and cancellation
- ``http_client`` wraps ``requests``
- ``parsing`` maps WS2 JSON onto shared value types
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Final
from urllib.parse import urljoin

from tagbridge.config.settings import (
    MB_POLL_INTERVAL_SECONDS,
    MB_QUERY_TIMEOUT_SECONDS,
    MB_RATE_LIMIT_SECONDS,
    MB_SEARCH_ATTEMPTS,
)
from tagbridge.platform.logging import logger
from tagbridge.shared.cancellation import CancelCheck, is_cancelled
from tagbridge.shared.errors import NetworkError, NetworkTimeoutError, RemoteError
from tagbridge.shared.remote import RemoteHit, RemoteRelease
from tagbridge.shared.tag_record import ArtworkBlob

from .bounded import BoundedCall
from .http_client import HTTPClient, HTTPResult, RequestsHTTPClient
from .parsing import (
    build_recording_query,
    extract_recording_hits,
    first_release_id,
    parse_release,
)
from .rate_limit import RateLimiter
from .user_agent import resolve_user_agent

MB_BASE_URL: Final[str] = "https://musicbrainz.org/ws/2"
COVER_ART_BASE_URL: Final[str] = "https://coverartarchive.org"
RELEASE_INCLUDES: Final[str] = "recordings media artist-credits release-groups"
MAX_REDIRECTS: Final[int] = 5
REDIRECT_STATUSES: Final[frozenset[int]] = frozenset({301, 302, 307})
_BACKOFF_STEPS: Final[int] = 10


@dataclass(slots=True, frozen=True)
class CoverDownload:
    """Outcome of one cover request chain.

    ``status`` is the last HTTP status the server sent (408 for a local timeout).
    ``blob`` is set only for a 200 with a non-empty body.
    """

    status: int
    blob: ArtworkBlob | None = None

    @property
    def ok(self) -> bool:
        return self.status == 200 and self.blob is not None


def cover_url(entity_id: str, size_hint: int = 0, is_release_group: bool = False) -> str:
    """Cover Art Archive front image URL; sized variants exist for releases only."""

    entity = "release-group" if is_release_group else "release"
    if size_hint > 0 and not is_release_group:
        return f"{COVER_ART_BASE_URL}/{entity}/{entity_id}/front-{size_hint}"
    return f"{COVER_ART_BASE_URL}/{entity}/{entity_id}/front"


class MusicBrainzClient:
    """Rate-limited, cancellable catalog client.

    Every public call accepts a ``cancel`` predicate. Cancellation returns an
    empty value, never an error. Only :meth:`download_cover` exposes failure
    details, as an HTTP status.
    """

    def __init__(
        self,
        contact: str | None = None,
        *,
        http: HTTPClient | None = None,
        rate_limiter: RateLimiter | None = None,
        timeout_seconds: float = MB_QUERY_TIMEOUT_SECONDS,
        poll_interval_seconds: float = MB_POLL_INTERVAL_SECONDS,
        search_attempts: int = MB_SEARCH_ATTEMPTS,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.user_agent: str = resolve_user_agent(contact)
        self.rate_limiter: RateLimiter = rate_limiter or RateLimiter(MB_RATE_LIMIT_SECONDS)
        self._poll_interval: float = poll_interval_seconds
        self._search_attempts: int = max(1, search_attempts)
        self._sleep: Callable[[float], None] = sleep
        self.bounded: BoundedCall = BoundedCall(
            timeout_seconds, poll_interval_seconds, name="musicbrainz"
        )
        self._http: HTTPClient = http or RequestsHTTPClient(self.user_agent)
        self._lock: Final[threading.Lock] = threading.Lock()

    def _call(
        self,
        request: Callable[[float, threading.Event], HTTPResult],
        url: str,
        cancel: CancelCheck | None,
    ) -> HTTPResult | None:
        """Wait for the rate limiter, then run ``request`` under the bounded wait.

        ``request`` receives the time budget and the abort event. Calls never
        overlap: a worker abandoned by an earlier call is awaited first.

        Returns ``None`` when cancelled. Raises ``NetworkTimeoutError`` at the
        ceiling and re-raises whatever the transport raised.
        """

        with self._lock:
            if not self.bounded.settle(cancel):
                return None
            self.rate_limiter.respect()
            logger.debug("GET %s", url, extra={"tag_event": "remote.request", "url": url})
            timeout = self.bounded.timeout_seconds
            return self.bounded.run(lambda abort: request(timeout, abort), cancel)

    # Catalog queries ---------------------------------------------------------

    def search_recording(
        self,
        artist: str,
        title: str,
        album: str | None = None,
        cancel: CancelCheck | None = None,
    ) -> list[RemoteHit]:
        """Search recordings by artist and title, optionally narrowed by album.

        Transient failures are retried; after the last attempt the result is an
        empty list. Nothing is raised past this call.
        """

        query = build_recording_query(artist, title, album)
        logger.debug("MusicBrainz search query: %s", query)

        for attempt in range(1, self._search_attempts + 1):
            if is_cancelled(cancel):
                return []
            url = f"{MB_BASE_URL}/recording"
            params = {"query": query, "fmt": "json"}
            try:
                result = self._call(
                    lambda timeout, abort: self._http.get_json(url, params, timeout, abort),
                    url,
                    cancel,
                )
            except RemoteError as exc:
                logger.warning(
                    "MusicBrainz search failed (attempt %d/%d): %s",
                    attempt,
                    self._search_attempts,
                    exc,
                    extra={"tag_event": "remote.retry", "attempt": attempt},
                )
                if attempt == self._search_attempts:
                    break
                if not self._backoff(cancel):
                    return []
                continue

            if result is None or result.data is None:
                return []
            return extract_recording_hits(result.data)

        return []

    def get_release_details(
        self,
        release_id: str,
        cancel: CancelCheck | None = None,
    ) -> RemoteRelease:
        """Fetch album, credits, release group and the full track list.

        Any failure yields a release carrying only its id; check ``is_empty``.
        """

        empty = RemoteRelease(release_id=release_id)
        if not release_id or is_cancelled(cancel):
            return empty
        url = f"{MB_BASE_URL}/release/{release_id}"
        params = {"inc": RELEASE_INCLUDES, "fmt": "json"}
        try:
            result = self._call(
                lambda timeout, abort: self._http.get_json(url, params, timeout, abort),
                url,
                cancel,
            )
        except RemoteError as exc:
            logger.warning("MusicBrainz release lookup failed for %s: %s", release_id, exc)
            return empty
        if result is None or result.data is None:
            return empty
        return parse_release(release_id, result.data)

    def best_release_for_recording(
        self,
        recording_id: str,
        cancel: CancelCheck | None = None,
    ) -> str:
        """Return the first release id attached to the recording, or ``""``."""

        if not recording_id or is_cancelled(cancel):
            return ""
        url = f"{MB_BASE_URL}/recording/{recording_id}"
        params = {"inc": "releases", "fmt": "json"}
        try:
            result = self._call(
                lambda timeout, abort: self._http.get_json(url, params, timeout, abort),
                url,
                cancel,
            )
        except RemoteError as exc:
            logger.warning("MusicBrainz recording lookup failed for %s: %s", recording_id, exc)
            return ""
        if result is None or result.data is None:
            return ""
        return first_release_id(result.data)

    # Cover art ---------------------------------------------------------------

    def download_cover(
        self,
        entity_id: str,
        size_hint: int = 0,
        is_release_group: bool = False,
        cancel: CancelCheck | None = None,
    ) -> CoverDownload | None:
        """Fetch a front cover, following redirects.

        A 404 on a sized release variant is retried once unsized. A timeout is
        reported as status 408.

        Returns:
            The final status and image, or ``None`` when cancelled.
        """

        if is_cancelled(cancel):
            return None
        url = cover_url(entity_id, size_hint, is_release_group)
        outcome = self._fetch_url(url, cancel, MAX_REDIRECTS)
        if outcome is None or outcome.ok:
            return outcome
        if outcome.status == 404 and size_hint > 0 and not is_release_group:
            logger.debug("Sized cover missing for %s, retrying unsized", entity_id)
            return self.download_cover(entity_id, 0, is_release_group, cancel)
        logger.info("No cover for %s (HTTP %d)", entity_id, outcome.status)
        return outcome

    def fetch_cover(
        self,
        entity_id: str,
        size_hint: int = 0,
        is_release_group: bool = False,
        cancel: CancelCheck | None = None,
    ) -> ArtworkBlob | None:
        """Convenience wrapper returning only the image, or ``None``."""

        outcome = self.download_cover(entity_id, size_hint, is_release_group, cancel)
        if outcome is None or not outcome.ok:
            return None
        return outcome.blob

    def _fetch_url(
        self,
        url: str,
        cancel: CancelCheck | None,
        redirects_left: int,
    ) -> CoverDownload | None:
        if redirects_left < 0:
            logger.warning("Too many redirects fetching %s", url)
            return CoverDownload(status=301)

        try:
            result = self._call(
                lambda timeout, abort: self._http.get_bytes(url, timeout, abort),
                url,
                cancel,
            )
        except NetworkTimeoutError:
            return CoverDownload(status=NetworkTimeoutError.status)
        except NetworkError as exc:
            logger.warning("Cover request failed for %s: %s", url, exc)
            return CoverDownload(status=exc.status)
        if result is None:
            return None

        if result.status in REDIRECT_STATUSES:
            location = result.header("Location")
            if location:
                return self._fetch_url(urljoin(url, location), cancel, redirects_left - 1)
            return CoverDownload(status=result.status)

        if result.status != 200:
            return CoverDownload(status=result.status)
        if not result.content:
            logger.warning("Cover response for %s had an empty body", url)
            return CoverDownload(status=result.status)

        mime = result.header("Content-Type").split(";", 1)[0].strip()
        return CoverDownload(status=200, blob=ArtworkBlob(result.content, mime=mime))

    def _backoff(self, cancel: CancelCheck | None) -> bool:
        """Sleep between search attempts; ``False`` when cancelled meanwhile."""

        for _ in range(_BACKOFF_STEPS):
            if is_cancelled(cancel):
                return False
            self._sleep(self._poll_interval)
        return not is_cancelled(cancel)


__all__ = [
    "COVER_ART_BASE_URL",
    "MB_BASE_URL",
    "CoverDownload",
    "MusicBrainzClient",
    "cover_url",
]
