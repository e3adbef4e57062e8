"""HTTP client abstraction for provider REST APIs.

This module provides:
- HttpClient: Protocol for JSON requests (injectable for tests)
- RealHttpClient: Real implementation using urllib
- MockHttpClient: Mock implementation for testing
"""

from __future__ import annotations

import json
import ssl
import urllib.error
import urllib.request
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from gitflow import __version__
from gitflow.core.result import Err, Ok, Result

__all__ = [
    "DEFAULT_TIMEOUT_SECONDS",
    "HttpClient",
    "HttpError",
    "MockHttpClient",
    "RealHttpClient",
]

DEFAULT_TIMEOUT_SECONDS = 20.0


@dataclass(frozen=True, slots=True)
class HttpError:
    """HTTP error details.

    Attributes:
        url: The URL that failed
        status: HTTP status code (0 for network errors)
        message: Response body or transport error text
    """

    url: str
    status: int
    message: str

    def __str__(self) -> str:
        if self.status:
            return f"HTTP {self.status}: {self.message} ({self.url})"
        return f"{self.message} ({self.url})"


@runtime_checkable
class HttpClient(Protocol):
    """Protocol for JSON-over-HTTP requests."""

    def request_json(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: object | None = None,
    ) -> Result[object, HttpError]:
        """Send a request and decode the JSON response.

        Args:
            method: HTTP method ("GET", "POST", "PATCH", "PUT")
            url: Absolute URL
            headers: Extra request headers (auth, accept)
            body: JSON-serializable payload, or None for no body

        Returns:
            Ok with the decoded document (None for an empty body), or Err with HttpError
        """
        ...


class RealHttpClient:
    """Real HTTP client using urllib.

    One bounded timeout per request and no retries.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        user_agent: str = f"gitflow/{__version__}",
    ) -> None:
        self.timeout = timeout
        self.user_agent = user_agent
        self._ssl_context = ssl.create_default_context()

    def request_json(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: object | None = None,
    ) -> Result[object, HttpError]:
        all_headers = {"User-Agent": self.user_agent, **headers}
        data: bytes | None = None
        if body is not None:
            data = json.dumps(body).encode("utf-8")
            all_headers["Content-Type"] = "application/json"

        try:
            req = urllib.request.Request(url, data=data, headers=all_headers, method=method)
            with urllib.request.urlopen(
                req,
                timeout=self.timeout,
                context=self._ssl_context,
            ) as response:
                raw: bytes = response.read()
        except urllib.error.HTTPError as e:
            detail = _read_error_body(e) or str(e.reason)
            return Err(HttpError(url=url, status=e.code, message=detail))
        except urllib.error.URLError as e:
            return Err(HttpError(url=url, status=0, message=str(e.reason)))
        except TimeoutError:
            return Err(HttpError(url=url, status=0, message="Request timed out"))
        except ValueError as e:
            return Err(HttpError(url=url, status=0, message=str(e)))
        except OSError as e:
            return Err(HttpError(url=url, status=0, message=str(e)))

        if not raw.strip():
            return Ok(None)
        try:
            return Ok(json.loads(raw.decode("utf-8")))
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            return Err(HttpError(url=url, status=0, message=f"JSON parse error: {e}"))


def _read_error_body(error: urllib.error.HTTPError) -> str:
    try:
        return error.read().decode("utf-8", errors="replace").strip()
    except OSError:
        return ""


class MockHttpClient:
    """Mock HTTP client for testing.

    Responses are keyed by ``(method, url)``; unknown requests get a 404.

    Usage:
        client = MockHttpClient()
        client.set_json("GET", "https://api.example.com/repos/o/r", {"default_branch": "main"})
        result = client.request_json("GET", "https://api.example.com/repos/o/r", {})
        assert result == Ok({"default_branch": "main"})
    """

    def __init__(self) -> None:
        self._responses: dict[tuple[str, str], object | HttpError] = {}
        self.calls: list[tuple[str, str, object | None]] = []
        self.headers: list[dict[str, str]] = []

    def set_json(self, method: str, url: str, response: object | HttpError) -> None:
        self._responses[(method.upper(), url)] = response

    def request_json(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: object | None = None,
    ) -> Result[object, HttpError]:
        self.calls.append((method.upper(), url, body))
        self.headers.append(dict(headers))

        key = (method.upper(), url)
        if key not in self._responses:
            return Err(HttpError(url=url, status=404, message="Not found (mock)"))

        response = self._responses[key]
        if isinstance(response, HttpError):
            return Err(response)
        return Ok(response)
