"""Publish text as a GitHub gist."""

from __future__ import annotations

from workflows.core.result import Err, Ok, Result
from workflows.net.http import HttpClient
from workflows.steps.base import Payload, Step, StepError

__all__ = ["Gist", "GISTS_URL"]

GISTS_URL = "https://api.github.com/gists"
DEFAULT_FILENAME = "workflows.txt"


class Gist(Step):
    """Create a gist holding ``content`` as ``filename``.

    ``token`` is a GitHub token with the gist scope; reference it from the
    environment (``token: ${env.GITHUB_TOKEN}``) rather than writing it into
    the pipeline file.
    """

    name = "gist"
    description = "Create a GitHub gist"
    parameters = ("token", "filename", "content", "description", "public")
    outputs = ("id", "url")

    def __init__(self, http: HttpClient) -> None:
        self._http = http

    def execute(self, payload: Payload) -> Result[Payload, StepError]:
        token = payload.parameter("token").strip()
        if not token:
            return self.fail("'token' is required")
        content = payload.parameter("content")
        if not content:
            return self.fail("'content' is required")

        filename = payload.parameter("filename").strip() or DEFAULT_FILENAME
        body: dict[str, object] = {
            "description": payload.parameter("description"),
            "public": payload.flag("public"),
            "files": {filename: {"content": content}},
        }
        result = self._http.post_json(
            GISTS_URL,
            body,
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
            },
        )
        if isinstance(result, Err):
            return self.fail(str(result.error), kind="network")

        data = result.value
        gist_id = data.get("id")
        html_url = data.get("html_url")
        if not isinstance(gist_id, str) or not isinstance(html_url, str):
            return self.fail("unexpected response from GitHub (missing id or html_url)")
        return Ok(self.emit({"id": gist_id, "url": html_url}))
