"""Where: src/tagbridge/platform/musicbrainz/http_client.py
What: Synchronous ``requests`` transport for JSON and binary GETs.
Why: Keep HTTP details out of catalog parsing; pacing and deadlines live in the client.
"""

from __future__ import annotations

import json
import threading
import time
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any, Final, Protocol, cast, runtime_checkable

import requests

from tagbridge.shared.errors import NetworkError, NetworkTimeoutError

_CONNECT_TIMEOUT_SECONDS: Final[float] = 5.0
_CHUNK_SIZE: Final[int] = 64 * 1024


@dataclass(slots=True)
class HTTPResult:
    """HTTP response fields relevant to the catalog client."""

    status: int
    headers: dict[str, str] = field(default_factory=dict)
    data: dict[str, Any] | None = None
    content: bytes = b""

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def header(self, name: str) -> str:
        """Case-insensitive header lookup returning ``""`` when absent."""

        wanted = name.lower()
        for key, value in self.headers.items():
            if key.lower() == wanted:
                return value
        return ""


@runtime_checkable
class HTTPClient(Protocol):
    """Blocking transport used by :class:`MusicBrainzClient` worker threads.

    ``timeout`` is the total budget for the request; ``abort`` is set by the
    caller once it stops waiting, and the transport should return soon after.
    """

    def get_json(
        self,
        url: str,
        params: dict[str, str],
        timeout: float,
        abort: threading.Event | None = None,
    ) -> HTTPResult: ...

    def get_bytes(
        self,
        url: str,
        timeout: float,
        abort: threading.Event | None = None,
    ) -> HTTPResult: ...


class RequestsHTTPClient:
    """Perform GET requests through a shared ``requests.Session``.

    Bodies are streamed in chunks so an abort or the total deadline is noticed
    between socket reads; each read is itself bounded by the read timeout.
    """

    def __init__(self, user_agent: str, session: requests.Session | None = None) -> None:
        self._session: requests.Session = session or requests.Session()
        self._session.headers["User-Agent"] = user_agent

    @property
    def user_agent(self) -> str:
        return str(self._session.headers["User-Agent"])

    def get_json(
        self,
        url: str,
        params: dict[str, str],
        timeout: float,
        abort: threading.Event | None = None,
    ) -> HTTPResult:
        """GET a JSON document.

        Raises:
            NetworkError: Transport failure, abort, non-2xx status, or an unparsable body.
            NetworkTimeoutError: The socket or the total deadline timed out.
        """

        deadline = time.monotonic() + timeout
        response = self._send(url, params=params, accept="application/json", timeout=timeout)
        result = HTTPResult(status=int(response.status_code), headers=_headers(response))
        if not result.ok:
            response.close()
            raise NetworkError(f"GET {url} returned HTTP {result.status}", status=result.status)
        body = _read_body(response, url, deadline, abort)
        try:
            result.data = cast(dict[str, Any], json.loads(body))
        except ValueError as exc:
            raise NetworkError(
                f"GET {url} returned invalid JSON: {exc}", status=result.status
            ) from exc
        return result

    def get_bytes(
        self,
        url: str,
        timeout: float,
        abort: threading.Event | None = None,
    ) -> HTTPResult:
        """GET a binary payload without following redirects.

        Any HTTP status is returned as-is so the caller can follow ``Location``;
        only a 200 body is downloaded.

        Raises:
            NetworkError: Transport failure or abort.
            NetworkTimeoutError: The socket or the total deadline timed out.
        """

        deadline = time.monotonic() + timeout
        response = self._send(url, params=None, accept="image/*", timeout=timeout)
        result = HTTPResult(status=int(response.status_code), headers=_headers(response))
        if result.status != 200:
            response.close()
            return result
        result.content = _read_body(response, url, deadline, abort)
        return result

    def _send(
        self,
        url: str,
        *,
        params: dict[str, str] | None,
        accept: str,
        timeout: float,
    ) -> requests.Response:
        try:
            return self._session.get(
                url,
                params=params,
                headers={"Accept": accept},
                timeout=(min(_CONNECT_TIMEOUT_SECONDS, timeout), timeout),
                allow_redirects=False,
                stream=True,
            )
        except requests.Timeout as exc:
            raise NetworkTimeoutError(f"GET {url} timed out: {exc}") from exc
        except requests.RequestException as exc:
            raise NetworkError(f"GET {url} failed: {exc}") from exc


def _read_body(
    response: requests.Response,
    url: str,
    deadline: float,
    abort: threading.Event | None,
) -> bytes:
    chunks: list[bytes] = []
    try:
        for chunk in response.iter_content(chunk_size=_CHUNK_SIZE):
            if abort is not None and abort.is_set():
                raise NetworkError(f"GET {url} aborted by caller")
            if time.monotonic() > deadline:
                raise NetworkTimeoutError(f"GET {url} exceeded its deadline")
            chunks.append(chunk)
    except requests.Timeout as exc:
        raise NetworkTimeoutError(f"GET {url} timed out: {exc}") from exc
    except requests.RequestException as exc:
        raise NetworkError(f"GET {url} failed: {exc}") from exc
    finally:
        response.close()
    return b"".join(chunks)


def _headers(response: requests.Response) -> dict[str, str]:
    header_items = cast(Iterable[tuple[str, str]], response.headers.items())
    return {str(key): str(value) for key, value in header_items}


__all__ = ["HTTPClient", "HTTPResult", "RequestsHTTPClient"]
