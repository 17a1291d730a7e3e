"""HTTP client abstraction for the GitHub API.

This module provides:
- HttpClient: Protocol for HTTP operations (injectable for tests)
- RealHttpClient: Real implementation using urllib
- MockHttpClient: Mock implementation for testing

Unlike a typical "raise for status" client, any HTTP response (including
4xx/5xx) is returned as ``Ok(HttpResponse)``. Release reconciliation needs
to branch on 404 and 422, and asset upload needs the JSON error body, so
only transport failures (no response at all) become ``Err(HttpError)``.
"""

from __future__ import annotations

import json
import re
import ssl
import urllib.error
import urllib.request
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from ghr import __version__
from ghr.core.result import Err, Ok, Result

__all__ = [
    "HttpClient",
    "HttpError",
    "HttpResponse",
    "MockHttpClient",
    "RealHttpClient",
]

_LINK_NEXT = re.compile(r'<([^>]+)>\s*;\s*rel="?next"?')


@dataclass(frozen=True, slots=True)
class HttpError:
    """Transport failure details.

    Attributes:
        url: The URL that failed
        status: HTTP status code (0 when no response was received)
        message: Human-readable error message
    """

    url: str
    status: int
    message: str

    def __str__(self) -> str:
        if self.status:
            return f"HTTP {self.status}: {self.message} ({self.url})"
        return f"{self.message} ({self.url})"


@dataclass(frozen=True, slots=True)
class HttpResponse:
    """A received HTTP response, whatever its status."""

    status: int
    body: bytes = b""
    headers: Mapping[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def json(self) -> object:
        """Parse the body as JSON; empty or malformed bodies yield ``{}``."""
        if not self.body:
            return {}
        try:
            return json.loads(self.body.decode("utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError):
            return {}

    def header(self, name: str) -> str | None:
        lowered = name.lower()
        for key, value in self.headers.items():
            if key.lower() == lowered:
                return value
        return None

    def link_next(self) -> str | None:
        """URL of the next page from the ``Link`` header, if any."""
        link = self.header("Link")
        if not link:
            return None
        for part in link.split(","):
            match = _LINK_NEXT.search(part)
            if match:
                return match.group(1)
        return None


@runtime_checkable
class HttpClient(Protocol):
    """Protocol for HTTP operations.

    This abstraction allows injecting mock clients for testing,
    avoiding real network calls in unit tests.
    """

    def request(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        body: bytes | None = None,
    ) -> Result[HttpResponse, HttpError]:
        """Send a request.

        Args:
            method: HTTP method (GET, POST, PATCH, DELETE)
            url: Absolute URL
            headers: Extra request headers
            body: Raw request body

        Returns:
            Ok with the response (any status), or Err when nothing was received
        """
        ...


class RealHttpClient:
    """Real HTTP client using urllib.

    Handles:
    - HTTPS with system certificates
    - Non-2xx responses returned as values
    - Timeout handling
    """

    def __init__(self, timeout: float = 300.0, user_agent: str = f"ghr/{__version__}") -> None:
        """Initialize HTTP client.

        Args:
            timeout: Request timeout in seconds (uploads can be large)
            user_agent: User-Agent header value
        """
        self.timeout = timeout
        self.user_agent = user_agent
        # Use system certificates
        self._ssl_context = ssl.create_default_context()

    def request(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        body: bytes | None = None,
    ) -> Result[HttpResponse, HttpError]:
        all_headers = {"User-Agent": self.user_agent}
        if headers:
            all_headers.update(headers)

        try:
            req = urllib.request.Request(url, data=body, headers=all_headers, method=method)
            with urllib.request.urlopen(
                req,
                timeout=self.timeout,
                context=self._ssl_context,
            ) as response:
                return Ok(
                    HttpResponse(
                        status=int(response.status),
                        body=response.read(),
                        headers=dict(response.headers.items()),
                    )
                )
        except urllib.error.HTTPError as e:
            # A response was received; let the caller interpret the status.
            payload = e.read() if e.fp is not None else b""
            return Ok(
                HttpResponse(
                    status=int(e.code),
                    body=payload,
                    headers=dict(e.headers.items()) if e.headers else {},
                )
            )
        except urllib.error.URLError as e:
            return Err(HttpError(url=url, status=0, message=str(e.reason)))
        except TimeoutError:
            return Err(HttpError(url=url, status=0, message="Request timed out"))
        except ValueError as e:
            return Err(HttpError(url=url, status=0, message=str(e)))
        except OSError as e:
            return Err(HttpError(url=url, status=0, message=str(e)))


@dataclass(frozen=True, slots=True)
class RecordedCall:
    method: str
    url: str
    headers: Mapping[str, str]
    body: bytes | None


class MockHttpClient:
    """Mock HTTP client for testing.

    Responses are queued per ``(method, url)`` and consumed in order; the
    last queued response for a key is reused once the queue runs dry.
    Unknown requests get a 404 with a GitHub-style JSON body.

    Usage:
        client = MockHttpClient()
        client.add("GET", "https://api.github.com/repos/o/r/releases/tags/v1", 200, {"id": 1})
        result = client.request("GET", "https://api.github.com/repos/o/r/releases/tags/v1")
        assert isinstance(result, Ok) and result.value.status == 200
    """

    def __init__(self) -> None:
        self._responses: dict[tuple[str, str], list[HttpResponse | HttpError]] = {}
        self.calls: list[RecordedCall] = []

    def add(
        self,
        method: str,
        url: str,
        status: int,
        payload: object = None,
        *,
        headers: Mapping[str, str] | None = None,
    ) -> None:
        """Queue a JSON response (``payload=None`` means an empty body)."""
        body = b"" if payload is None else json.dumps(payload).encode("utf-8")
        self._responses.setdefault((method, url), []).append(
            HttpResponse(status=status, body=body, headers=dict(headers or {}))
        )

    def add_error(self, method: str, url: str, error: HttpError) -> None:
        """Queue a transport failure."""
        self._responses.setdefault((method, url), []).append(error)

    def request(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        body: bytes | None = None,
    ) -> Result[HttpResponse, HttpError]:
        self.calls.append(RecordedCall(method=method, url=url, headers=dict(headers or {}), body=body))

        queue = self._responses.get((method, url))
        if not queue:
            return Ok(HttpResponse(status=404, body=b'{"message": "Not Found"}'))

        response = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(response, HttpError):
            return Err(response)
        return Ok(response)

    def calls_to(self, method: str) -> list[RecordedCall]:
        return [c for c in self.calls if c.method == method]
