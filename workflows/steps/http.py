"""HTTP request step."""

from __future__ import annotations

import re

from workflows.core.result import Err, Ok, Result
from workflows.net.http import HttpClient
from workflows.steps.base import Payload, Step, StepError

__all__ = ["Http"]

# RFC 9110 token characters
_METHOD_RE = re.compile(r"^[!#$%&'*+.^_`|~0-9A-Z-]+$")


class Http(Step):
    """Send a request and expose the status code and body text.

    A non-2xx status is reported through ``status_code``, not as a failure,
    so a later step can react to it.
    """

    name = "http"
    description = "Send an HTTP request"
    parameters = ("url", "method")
    outputs = ("status_code", "text")

    def __init__(self, http: HttpClient) -> None:
        self._http = http

    def execute(self, payload: Payload) -> Result[Payload, StepError]:
        url = payload.parameter("url").strip()
        if not url:
            return self.fail("'url' is required")
        method = payload.parameter("method").strip().upper() or "GET"
        if not _METHOD_RE.match(method):
            return self.fail(f"invalid method '{method}'")

        result = self._http.request(method, url)
        if isinstance(result, Err):
            return self.fail(str(result.error), kind="network")

        response = result.value
        return Ok(self.emit({"status_code": str(response.status), "text": response.text()}))
