"""HTTP client abstraction used by the network steps.

This module provides:
- HttpClient: Protocol for HTTP operations (injectable for tests)
- RealHttpClient: Real implementation using urllib
- MockHttpClient: Mock implementation for testing
"""

from __future__ import annotations

import http.client
import json
import os
import ssl
import tempfile
import urllib.error
import urllib.request
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol, cast, runtime_checkable

from workflows import USER_AGENT
from workflows.core.config import DEFAULT_HTTP_TIMEOUT
from workflows.core.result import Err, Ok, Result
from workflows.core.structured import as_str_dict

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

__all__ = [
    "HttpClient",
    "HttpError",
    "HttpResponse",
    "RealHttpClient",
    "MockHttpClient",
]


@dataclass(frozen=True, slots=True)
class HttpError:
    """HTTP error details.

    Attributes:
        url: The URL that failed
        status: HTTP status code (0 for network errors)
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
    """A completed HTTP exchange, whatever its status."""

    status: int
    body: bytes
    headers: dict[str, str] = field(default_factory=dict[str, str])

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")


@runtime_checkable
class HttpClient(Protocol):
    """Protocol for HTTP operations.

    Steps receive an HttpClient so tests can swap in MockHttpClient and
    never touch the network.
    """

    def request(
        self,
        method: str,
        url: str,
        *,
        body: bytes | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Result[HttpResponse, HttpError]:
        """Send a request.

        Non-2xx responses are returned as Ok; only transport failures are Err.
        """
        ...

    def get_json(self, url: str) -> Result[dict[str, Any], HttpError]:
        """GET a URL and parse a JSON object. Non-2xx is an Err."""
        ...

    def post_json(
        self,
        url: str,
        payload: Mapping[str, object],
        *,
        headers: Mapping[str, str] | None = None,
    ) -> Result[dict[str, Any], HttpError]:
        """POST a JSON body and parse a JSON object reply. Non-2xx is an Err."""
        ...

    def download(
        self,
        url: str,
        dest: Path,
        progress: Callable[[int, int], None] | None = None,
    ) -> Result[Path, HttpError]:
        """Download URL to ``dest``; ``progress(downloaded, total)`` is optional."""
        ...


def _parse_json_object(url: str, response: HttpResponse) -> Result[dict[str, Any], HttpError]:
    if not response.ok:
        return Err(HttpError(url=url, status=response.status, message=_status_message(response)))
    try:
        data_obj: object = json.loads(response.body.decode("utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        return Err(HttpError(url=url, status=0, message=f"JSON parse error: {e}"))
    data = as_str_dict(data_obj)
    if data is None:
        return Err(HttpError(url=url, status=0, message="Expected JSON object"))
    return Ok(cast(dict[str, Any], data))


def _status_message(response: HttpResponse) -> str:
    text = response.text().strip()
    if not text:
        return "Request failed"
    # API errors usually carry a JSON "message"
    try:
        data = as_str_dict(json.loads(text))
    except json.JSONDecodeError:
        data = None
    if data is not None and isinstance(data.get("message"), str):
        return cast(str, data["message"])
    return text[:200]


class RealHttpClient:
    """Real HTTP client using urllib.

    Handles:
    - HTTPS with system certificates
    - Arbitrary methods with optional body
    - JSON helpers
    - Streaming downloads with progress callback
    """

    def __init__(
        self, timeout: float = DEFAULT_HTTP_TIMEOUT, user_agent: str = USER_AGENT
    ) -> None:
        self.timeout = timeout
        self.user_agent = user_agent
        self._ssl_context = ssl.create_default_context()

    def _build(
        self,
        method: str,
        url: str,
        body: bytes | None,
        headers: Mapping[str, str] | None,
    ) -> urllib.request.Request:
        merged = {"User-Agent": self.user_agent}
        if headers:
            merged.update(headers)
        return urllib.request.Request(url, data=body, headers=merged, method=method)

    def request(
        self,
        method: str,
        url: str,
        *,
        body: bytes | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Result[HttpResponse, HttpError]:
        try:
            req = self._build(method, url, body, headers)
            with urllib.request.urlopen(
                req,
                timeout=self.timeout,
                context=self._ssl_context,
            ) as response:
                return Ok(
                    HttpResponse(
                        status=response.status,
                        body=response.read(),
                        headers=dict(response.headers.items()),
                    )
                )
        except urllib.error.HTTPError as e:
            # urllib raises for 4xx/5xx; those still are responses for callers
            try:
                payload = e.read()
            finally:
                e.close()
            return Ok(
                HttpResponse(
                    status=e.code,
                    body=payload or b"",
                    headers=dict(e.headers.items()) if e.headers else {},
                )
            )
        except urllib.error.URLError as e:
            return Err(HttpError(url=url, status=0, message=str(e.reason)))
        except http.client.HTTPException as e:
            # Malformed status line, truncated body, oversized header...
            return Err(HttpError(url=url, status=0, message=str(e) or type(e).__name__))
        except TimeoutError:
            return Err(HttpError(url=url, status=0, message="Request timed out"))
        except ValueError as e:
            return Err(HttpError(url=url, status=0, message=str(e)))
        except OSError as e:
            return Err(HttpError(url=url, status=0, message=str(e)))

    def get_json(self, url: str) -> Result[dict[str, Any], HttpError]:
        result = self.request("GET", url, headers={"Accept": "application/json"})
        if isinstance(result, Err):
            return result
        return _parse_json_object(url, result.value)

    def post_json(
        self,
        url: str,
        payload: Mapping[str, object],
        *,
        headers: Mapping[str, str] | None = None,
    ) -> Result[dict[str, Any], HttpError]:
        merged = {"Content-Type": "application/json", "Accept": "application/json"}
        if headers:
            merged.update(headers)
        body = json.dumps(payload).encode("utf-8")
        result = self.request("POST", url, body=body, headers=merged)
        if isinstance(result, Err):
            return result
        return _parse_json_object(url, result.value)

    def download(
        self,
        url: str,
        dest: Path,
        progress: Callable[[int, int], None] | None = None,
    ) -> Result[Path, HttpError]:
        """Stream to a temp file next to ``dest`` and move it into place."""
        tmp_path: Path | None = None
        try:
            req = self._build("GET", url, None, None)
            with urllib.request.urlopen(
                req,
                timeout=self.timeout,
                context=self._ssl_context,
            ) as response:
                total = int(response.headers.get("Content-Length", 0) or 0)
                downloaded = 0
                chunk_size = 8192

                dest.parent.mkdir(parents=True, exist_ok=True)
                fd, tmp_name = tempfile.mkstemp(
                    prefix=f".{dest.name}.", suffix=".part", dir=str(dest.parent)
                )
                tmp_path = Path(tmp_name)

                with os.fdopen(fd, "wb") as f:
                    while True:
                        chunk = response.read(chunk_size)
                        if not chunk:
                            break
                        f.write(chunk)
                        downloaded += len(chunk)
                        if progress:
                            progress(downloaded, total)

            # read(amt) returns b"" on a short body instead of raising
            if total and downloaded < total:
                return Err(
                    HttpError(
                        url=url,
                        status=0,
                        message=f"Incomplete download ({downloaded} of {total} bytes)",
                    )
                )

            os.replace(tmp_path, dest)
            tmp_path = None
            return Ok(dest)

        except urllib.error.HTTPError as e:
            return Err(HttpError(url=url, status=e.code, message=str(e.reason)))
        except urllib.error.URLError as e:
            return Err(HttpError(url=url, status=0, message=str(e.reason)))
        except http.client.HTTPException as e:
            return Err(HttpError(url=url, status=0, message=str(e) or type(e).__name__))
        except TimeoutError:
            return Err(HttpError(url=url, status=0, message="Download timed out"))
        except ValueError as e:
            return Err(HttpError(url=url, status=0, message=str(e)))
        except OSError as e:
            return Err(HttpError(url=url, status=0, message=str(e)))
        finally:
            if tmp_path is not None:
                tmp_path.unlink(missing_ok=True)


@dataclass(frozen=True, slots=True)
class RecordedRequest:
    method: str
    url: str
    body: bytes | None
    headers: dict[str, str]

    def json(self) -> object:
        return json.loads(self.body or b"null")


class MockHttpClient:
    """Mock HTTP client for testing.

    Responses are registered per (method, URL). Unknown requests get a 404.

    Usage:
        client = MockHttpClient()
        client.set_response("GET", "https://example.com", HttpResponse(200, b"hi"))
        client.set_json("POST", "https://api.github.com/gists", {"id": "1"}, status=201)
    """

    def __init__(self) -> None:
        self._responses: dict[tuple[str, str], HttpResponse | HttpError] = {}
        self._downloads: dict[str, bytes | HttpError] = {}
        self.requests: list[RecordedRequest] = []

    def set_response(self, method: str, url: str, response: HttpResponse | HttpError) -> None:
        self._responses[(method.upper(), url)] = response

    def set_json(self, method: str, url: str, data: object, *, status: int = 200) -> None:
        body = json.dumps(data).encode("utf-8")
        self.set_response(method, url, HttpResponse(status=status, body=body))

    def set_download(self, url: str, response: bytes | HttpError) -> None:
        self._downloads[url] = response

    def request(
        self,
        method: str,
        url: str,
        *,
        body: bytes | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Result[HttpResponse, HttpError]:
        self.requests.append(
            RecordedRequest(method=method, url=url, body=body, headers=dict(headers or {}))
        )
        response = self._responses.get((method.upper(), url))
        if response is None:
            return Ok(HttpResponse(status=404, body=b"Not found (mock)"))
        if isinstance(response, HttpError):
            return Err(response)
        return Ok(response)

    def get_json(self, url: str) -> Result[dict[str, Any], HttpError]:
        result = self.request("GET", url)
        if isinstance(result, Err):
            return result
        return _parse_json_object(url, result.value)

    def post_json(
        self,
        url: str,
        payload: Mapping[str, object],
        *,
        headers: Mapping[str, str] | None = None,
    ) -> Result[dict[str, Any], HttpError]:
        body = json.dumps(payload).encode("utf-8")
        result = self.request("POST", url, body=body, headers=headers)
        if isinstance(result, Err):
            return result
        return _parse_json_object(url, result.value)

    def download(
        self,
        url: str,
        dest: Path,
        progress: Callable[[int, int], None] | None = None,
    ) -> Result[Path, HttpError]:
        self.requests.append(RecordedRequest(method="GET", url=url, body=None, headers={}))

        if url not in self._downloads:
            return Err(HttpError(url=url, status=404, message="Not found (mock)"))

        response = self._downloads[url]
        if isinstance(response, HttpError):
            return Err(response)

        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_bytes(response)
        if progress:
            progress(len(response), len(response))
        return Ok(dest)
