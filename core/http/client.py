"""
HTTP Client

Minimal requests-based transport for talking to a file holder. Only
the calls the verifier makes are supported: GET and JSON POST against
paths under one base URL.
"""

from __future__ import annotations

import json as jsonlib
import logging
import time
from dataclasses import dataclass
from typing import Any, Optional

import requests


logger = logging.getLogger(__name__)


class HttpError(Exception):
    """Transport failure, or a non-2xx reply once raise_for_status() is called."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response: Optional["HttpResponse"] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.response = response


@dataclass(frozen=True)
class HttpResponse:
    """Status and body of one reply; the holder's headers are not needed."""
    status_code: int
    content: bytes
    url: str = ""
    elapsed_ms: float = 0.0

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def text(self) -> str:
        return self.content.decode("utf-8", errors="replace")

    def json(self) -> Any:
        return jsonlib.loads(self.content)

    def raise_for_status(self) -> None:
        if self.ok:
            return
        raise HttpError(
            f"{self.url} answered {self.status_code}: {self.text[:200]}",
            status_code=self.status_code,
            response=self,
        )


class HttpClient:
    """
    Sends requests to one file holder.

    A requests.Session is created on first use and closed by close().
    Any object with a requests-compatible ``request()`` method can be
    supplied as ``session`` instead (tests pass a FastAPI TestClient);
    a supplied session belongs to the caller and is never closed here.

    Usage:
        with HttpClient(base_url="http://localhost:8000") as http:
            http.get("/files").raise_for_status()
    """

    def __init__(
        self,
        *,
        base_url: str = "",
        timeout: float = 30.0,
        session: Optional[Any] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session
        self._owns_session = session is None

    def _url(self, path: str) -> str:
        if path.startswith(("http://", "https://")):
            return path
        return f"{self.base_url}/{path.lstrip('/')}"

    def _send(self, method: str, path: str, body: Optional[Any] = None) -> HttpResponse:
        if self._session is None:
            self._session = requests.Session()

        url = self._url(path)
        started = time.monotonic()
        try:
            reply = self._session.request(method, url, json=body, timeout=self.timeout)
        except requests.RequestException as e:
            raise HttpError(f"{method} {url} failed: {e}") from e

        elapsed_ms = (time.monotonic() - started) * 1000
        logger.debug(f"{method} {url} -> {reply.status_code} in {elapsed_ms:.1f}ms")
        return HttpResponse(
            status_code=reply.status_code,
            content=reply.content,
            url=url,
            elapsed_ms=elapsed_ms,
        )

    def get(self, path: str) -> HttpResponse:
        return self._send("GET", path)

    def post(self, path: str, *, json: Any) -> HttpResponse:
        return self._send("POST", path, json)

    def close(self) -> None:
        if self._owns_session and self._session is not None:
            self._session.close()
            self._session = None

    def __enter__(self) -> "HttpClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
