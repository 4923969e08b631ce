"""MusicBrainzClient behaviour against a scripted transport."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from typing import Any

import pytest

from tagbridge.platform.musicbrainz import HTTPResult, MusicBrainzClient, RateLimiter, cover_url
from tagbridge.platform.musicbrainz.client import COVER_ART_BASE_URL, MAX_REDIRECTS
from tagbridge.shared.errors import NetworkError, NetworkTimeoutError

Step = HTTPResult | Exception


class ScriptedHTTP:
    """Replay prepared results and record every requested URL."""

    def __init__(self, *steps: Step) -> None:
        self.steps: list[Step] = list(steps)
        self.urls: list[str] = []

    def _next(self, url: str) -> HTTPResult:
        self.urls.append(url)
        step = self.steps.pop(0)
        if isinstance(step, Exception):
            raise step
        return step

    def get_json(
        self,
        url: str,
        params: dict[str, str],
        timeout: float,
        abort: threading.Event | None = None,
    ) -> HTTPResult:
        return self._next(url)

    def get_bytes(
        self, url: str, timeout: float, abort: threading.Event | None = None
    ) -> HTTPResult:
        return self._next(url)


def _client(
    http: ScriptedHTTP,
    *,
    attempts: int = 3,
    sleep: Callable[[float], None] | None = None,
) -> MusicBrainzClient:
    return MusicBrainzClient(
        "tests@example.org",
        http=http,
        rate_limiter=RateLimiter(0.0),
        timeout_seconds=2.0,
        poll_interval_seconds=0.01,
        search_attempts=attempts,
        sleep=sleep or (lambda _seconds: None),
    )


def _json(data: dict[str, Any]) -> HTTPResult:
    return HTTPResult(status=200, data=data)


SEARCH_DOC = {
    "recordings": [
        {
            "id": "rec-1",
            "title": "Song",
            "artist-credit": [{"artist": {"name": "Band"}}],
            "releases": [{"id": "rel-1", "title": "Album"}],
        }
    ]
}


def test_search_retries_then_succeeds() -> None:
    http = ScriptedHTTP(NetworkError("HTTP 503", status=503), _json(SEARCH_DOC))
    hits = _client(http).search_recording("Band", "Song")

    assert [hit.release_id for hit in hits] == ["rel-1"]
    assert len(http.urls) == 2


def test_search_gives_up_after_last_attempt() -> None:
    http = ScriptedHTTP(*(NetworkError("down") for _ in range(3)))
    assert _client(http).search_recording("Band", "Song") == []
    assert len(http.urls) == 3


def test_search_cancelled_during_backoff() -> None:
    cancelled = False

    def sleep(_seconds: float) -> None:
        nonlocal cancelled
        cancelled = True

    http = ScriptedHTTP(NetworkError("down"), _json(SEARCH_DOC))
    hits = _client(http, sleep=sleep).search_recording("Band", "Song", cancel=lambda: cancelled)

    assert hits == []
    assert len(http.urls) == 1


def test_release_details_parsed() -> None:
    doc = {
        "id": "rel-1",
        "title": "Album",
        "artist-credit": [{"artist": {"name": "Band"}}],
        "media": [{"position": 1, "tracks": [{"position": 1, "recording": {"id": "r"}}]}],
    }
    http = ScriptedHTTP(_json(doc))
    release = _client(http).get_release_details("rel-1")

    assert release.album == "Album"
    assert not release.is_empty
    assert http.urls == ["https://musicbrainz.org/ws/2/release/rel-1"]


def test_release_failure_yields_empty_release() -> None:
    http = ScriptedHTTP(NetworkError("HTTP 404", status=404))
    release = _client(http).get_release_details("rel-9")
    assert release.release_id == "rel-9"
    assert release.is_empty


def test_best_release_for_recording() -> None:
    http = ScriptedHTTP(_json({"releases": [{"id": "rel-7"}]}))
    assert _client(http).best_release_for_recording("rec-7") == "rel-7"
    assert _client(ScriptedHTTP()).best_release_for_recording("") == ""


def test_cover_redirect_is_followed() -> None:
    http = ScriptedHTTP(
        HTTPResult(status=307, headers={"location": "https://archive.example/img.jpg"}),
        HTTPResult(status=200, headers={"Content-Type": "image/jpeg"}, content=b"\xff\xd8data"),
    )
    outcome = _client(http).download_cover("rel-1", 500)

    assert outcome is not None
    assert outcome.ok
    assert outcome.blob is not None
    assert outcome.blob.mime == "image/jpeg"
    assert http.urls == [
        f"{COVER_ART_BASE_URL}/release/rel-1/front-500",
        "https://archive.example/img.jpg",
    ]


def test_sized_cover_404_retries_unsized() -> None:
    http = ScriptedHTTP(
        HTTPResult(status=404),
        HTTPResult(status=200, content=b"\x89PNGdata", headers={"content-type": "image/png"}),
    )
    blob = _client(http).fetch_cover("rel-1", 500)

    assert blob is not None
    assert blob.mime == "image/png"
    assert http.urls[1] == f"{COVER_ART_BASE_URL}/release/rel-1/front"


def test_release_group_cover_has_no_sized_variant() -> None:
    http = ScriptedHTTP(HTTPResult(status=404))
    outcome = _client(http).download_cover("group-1", 500, is_release_group=True)

    assert outcome is not None
    assert outcome.status == 404
    assert http.urls == [f"{COVER_ART_BASE_URL}/release-group/group-1/front"]


def test_cover_timeout_reports_408() -> None:
    http = ScriptedHTTP(NetworkTimeoutError("slow"))
    outcome = _client(http).download_cover("rel-1")
    assert outcome is not None
    assert outcome.status == 408


def test_too_many_redirects() -> None:
    loop = HTTPResult(status=302, headers={"Location": "/release/rel-1/front"})
    http = ScriptedHTTP(*(loop for _ in range(MAX_REDIRECTS + 1)))
    outcome = _client(http).download_cover("rel-1")

    assert outcome is not None
    assert not outcome.ok
    assert len(http.urls) == MAX_REDIRECTS + 1


def test_empty_body_keeps_server_status() -> None:
    http = ScriptedHTTP(HTTPResult(status=200, content=b""))
    outcome = _client(http).download_cover("rel-1")
    assert outcome is not None
    assert outcome.status == 200
    assert outcome.blob is None
    assert not outcome.ok


def test_cancelled_calls_return_empty_values() -> None:
    http = ScriptedHTTP()
    client = _client(http)

    def cancel() -> bool:
        return True

    assert client.search_recording("a", "b", cancel=cancel) == []
    assert client.get_release_details("rel", cancel=cancel).is_empty
    assert client.download_cover("rel", cancel=cancel) is None
    assert http.urls == []


@pytest.mark.parametrize(
    ("size", "group", "expected"),
    [
        (0, False, f"{COVER_ART_BASE_URL}/release/x/front"),
        (250, False, f"{COVER_ART_BASE_URL}/release/x/front-250"),
        (250, True, f"{COVER_ART_BASE_URL}/release-group/x/front"),
    ],
)
def test_cover_url(size: int, group: bool, expected: str) -> None:
    assert cover_url("x", size, group) == expected


class SlowHTTP:
    """Transport whose requests block; tracks how many run at once."""

    def __init__(self, *, seconds: float, honour_abort: bool) -> None:
        self.seconds: float = seconds
        self.honour_abort: bool = honour_abort
        self.active: int = 0
        self.peak: int = 0
        self.started: int = 0
        self.aborted: int = 0
        self._lock: threading.Lock = threading.Lock()

    def get_json(
        self,
        url: str,
        params: dict[str, str],
        timeout: float,
        abort: threading.Event | None = None,
    ) -> HTTPResult:
        with self._lock:
            self.active += 1
            self.started += 1
            self.peak = max(self.peak, self.active)
        try:
            if self.honour_abort and abort is not None:
                if abort.wait(self.seconds):
                    with self._lock:
                        self.aborted += 1
            else:
                time.sleep(self.seconds)
            raise NetworkError("aborted")
        finally:
            with self._lock:
                self.active -= 1

    def get_bytes(
        self, url: str, timeout: float, abort: threading.Event | None = None
    ) -> HTTPResult:
        return self.get_json(url, {}, timeout, abort)


def _slow_client(http: SlowHTTP, timeout: float) -> MusicBrainzClient:
    return MusicBrainzClient(
        "tests@example.org",
        http=http,
        rate_limiter=RateLimiter(0.0),
        timeout_seconds=timeout,
        poll_interval_seconds=0.05,
        search_attempts=3,
        sleep=lambda _seconds: None,
    )


def test_timed_out_requests_are_aborted_and_never_overlap() -> None:
    http = SlowHTTP(seconds=5.0, honour_abort=True)

    started = time.monotonic()
    hits = _slow_client(http, 0.2).search_recording("Band", "Song")

    assert hits == []
    assert time.monotonic() - started < 3.0
    assert http.started == 3
    assert http.peak == 1
    assert http.aborted == 3
    assert http.active == 0


def test_stuck_worker_blocks_the_next_request() -> None:
    http = SlowHTTP(seconds=1.5, honour_abort=False)
    client = _slow_client(http, 0.2)

    hits = client.search_recording("Band", "Song")

    assert hits == []
    assert http.peak == 1
    assert http.started == 1
    assert client.bounded.busy
