"""Tests for the http, gist and wechat steps."""

from __future__ import annotations

import json

from workflows.core.result import Err, Ok
from workflows.net.http import HttpError, HttpResponse, MockHttpClient
from workflows.steps.base import Payload
from workflows.steps.gist import GISTS_URL, Gist
from workflows.steps.http import Http
from workflows.steps.wechat import WEBHOOK_URL, WeChat, webhook_url


class TestHttpStep:
    def test_get_defaults(self) -> None:
        client = MockHttpClient()
        client.set_response("GET", "https://example.com", HttpResponse(200, b"hello"))

        result = Http(client).execute(Payload({"url": "https://example.com"}))

        assert result == Ok(Payload({"status_code": "200", "text": "hello"}))
        assert client.requests[0].method == "GET"

    def test_method_uppercased(self) -> None:
        client = MockHttpClient()
        client.set_response("POST", "https://example.com", HttpResponse(201, b""))

        result = Http(client).execute(Payload({"url": "https://example.com", "method": "post"}))

        assert isinstance(result, Ok)
        assert result.value.parameter("status_code") == "201"

    def test_error_status_is_output(self) -> None:
        client = MockHttpClient()

        result = Http(client).execute(Payload({"url": "https://example.com/missing"}))

        assert isinstance(result, Ok)
        assert result.value.parameter("status_code") == "404"

    def test_invalid_method(self) -> None:
        result = Http(MockHttpClient()).execute(
            Payload({"url": "https://example.com", "method": "GE T"})
        )

        assert isinstance(result, Err)
        assert "invalid method" in result.error.message

    def test_missing_url(self) -> None:
        assert isinstance(Http(MockHttpClient()).execute(Payload()), Err)

    def test_network_failure(self) -> None:
        client = MockHttpClient()
        client.set_response(
            "GET", "https://down.example", HttpError("https://down.example", 0, "refused")
        )

        result = Http(client).execute(Payload({"url": "https://down.example"}))

        assert isinstance(result, Err)
        assert result.error.kind == "network"


class TestGistStep:
    def _payload(self, **extra: str) -> Payload:
        values = {"token": "t0k", "content": "report", **extra}
        return Payload(values)

    def test_creates_gist(self) -> None:
        client = MockHttpClient()
        client.set_json(
            "POST", GISTS_URL, {"id": "abc", "html_url": "https://gist.github.com/abc"}, status=201
        )

        result = Gist(client).execute(
            self._payload(filename="out.md", description="d", public="true")
        )

        assert result == Ok(Payload({"id": "abc", "url": "https://gist.github.com/abc"}))
        sent = client.requests[0]
        assert sent.headers["Authorization"] == "Bearer t0k"
        assert sent.json() == {
            "description": "d",
            "public": True,
            "files": {"out.md": {"content": "report"}},
        }

    def test_default_filename_and_private(self) -> None:
        client = MockHttpClient()
        client.set_json("POST", GISTS_URL, {"id": "1", "html_url": "u"}, status=201)

        Gist(client).execute(self._payload())

        body = client.requests[0].json()
        assert isinstance(body, dict)
        assert body["public"] is False
        assert list(body["files"]) == ["workflows.txt"]

    def test_missing_token(self) -> None:
        result = Gist(MockHttpClient()).execute(Payload({"content": "x"}))

        assert isinstance(result, Err)
        assert "token" in result.error.message

    def test_api_error(self) -> None:
        client = MockHttpClient()
        client.set_json("POST", GISTS_URL, {"message": "Bad credentials"}, status=401)

        result = Gist(client).execute(self._payload())

        assert isinstance(result, Err)
        assert "Bad credentials" in result.error.message
        assert result.error.kind == "network"

    def test_unexpected_response(self) -> None:
        client = MockHttpClient()
        client.set_json("POST", GISTS_URL, {"nothing": True}, status=201)

        assert isinstance(Gist(client).execute(self._payload()), Err)


class TestWeChatStep:
    def test_webhook_url(self) -> None:
        assert webhook_url("k3y") == WEBHOOK_URL + "k3y"
        assert webhook_url("https://hook.example/x") == "https://hook.example/x"

    def test_sends_text(self) -> None:
        client = MockHttpClient()
        client.set_json("POST", WEBHOOK_URL + "k3y", {"errcode": 0, "errmsg": "ok"})

        result = WeChat(client).execute(
            Payload({"webhook": "k3y", "content": "deployed", "mentioned": "alice, @all"})
        )

        assert result == Ok(Payload({"errcode": "0", "errmsg": "ok"}))
        assert json.loads(client.requests[0].body or b"") == {
            "msgtype": "text",
            "text": {"content": "deployed", "mentioned_list": ["alice", "@all"]},
        }

    def test_rejected(self) -> None:
        client = MockHttpClient()
        client.set_json("POST", WEBHOOK_URL + "k3y", {"errcode": 93000, "errmsg": "invalid key"})

        result = WeChat(client).execute(Payload({"webhook": "k3y", "content": "x"}))

        assert isinstance(result, Err)
        assert "93000" in result.error.message

    def test_missing_content(self) -> None:
        result = WeChat(MockHttpClient()).execute(Payload({"webhook": "k3y"}))

        assert isinstance(result, Err)
