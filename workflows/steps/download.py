"""Download a URL to a local file."""

from __future__ import annotations

from pathlib import Path
from urllib.parse import unquote, urlparse

from workflows.core.result import Err, Ok, Result
from workflows.net.http import HttpClient
from workflows.steps.base import Payload, Step, StepError

__all__ = ["Download", "filename_from_url"]


def filename_from_url(url: str) -> str:
    """Last path segment of ``url`` ("download" if there is none)."""
    name = Path(unquote(urlparse(url).path)).name
    return name or "download"


class Download(Step):
    """Fetch ``url`` into ``path``.

    ``path`` defaults to the URL's file name in the current directory; an
    existing directory receives the file under that name. The body goes to a
    temporary file first, so a failed download never leaves a partial file.
    """

    name = "download"
    description = "Download a URL to a file"
    parameters = ("url", "path")
    outputs = ("path", "size")

    def __init__(self, http: HttpClient) -> None:
        self._http = http

    def _destination(self, url: str, raw: str) -> Path:
        if not raw.strip():
            return Path.cwd() / filename_from_url(url)
        dest = Path(raw).expanduser()
        if dest.is_dir():
            return dest / filename_from_url(url)
        return dest

    def execute(self, payload: Payload) -> Result[Payload, StepError]:
        url = payload.parameter("url").strip()
        if not url:
            return self.fail("'url' is required")

        dest = self._destination(url, payload.parameter("path"))
        result = self._http.download(url, dest)
        if isinstance(result, Err):
            return self.fail(str(result.error), kind="network")

        try:
            size = dest.stat().st_size
        except OSError as e:
            return self.fail(f"cannot stat {dest}: {e}", kind="io")
        return Ok(self.emit({"path": str(dest), "size": str(size)}))
