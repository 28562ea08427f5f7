"""Send a text message to a WeCom (WeChat Work) group robot."""

from __future__ import annotations

from workflows.core.result import Err, Ok, Result
from workflows.net.http import HttpClient
from workflows.steps.base import Payload, Step, StepError

__all__ = ["WeChat", "WEBHOOK_URL"]

WEBHOOK_URL = "https://qyapi.weixin.qq.com/cgi-bin/webhook/send?key="


def webhook_url(webhook: str) -> str:
    """Accept either the full robot URL or just its key."""
    if webhook.startswith(("http://", "https://")):
        return webhook
    return WEBHOOK_URL + webhook


class WeChat(Step):
    """Post ``content`` to the robot identified by ``webhook``.

    ``mentioned`` is a comma separated list of user ids ("@all" works too).
    The API answers 200 even on failure, so ``errcode`` is checked.
    """

    name = "wechat"
    description = "Send a WeCom group robot message"
    parameters = ("webhook", "content", "mentioned")
    outputs = ("errcode", "errmsg")

    def __init__(self, http: HttpClient) -> None:
        self._http = http

    def execute(self, payload: Payload) -> Result[Payload, StepError]:
        webhook = payload.parameter("webhook").strip()
        if not webhook:
            return self.fail("'webhook' is required")
        content = payload.parameter("content")
        if not content:
            return self.fail("'content' is required")

        text: dict[str, object] = {"content": content}
        mentioned = [m.strip() for m in payload.parameter("mentioned").split(",") if m.strip()]
        if mentioned:
            text["mentioned_list"] = mentioned

        result = self._http.post_json(webhook_url(webhook), {"msgtype": "text", "text": text})
        if isinstance(result, Err):
            return self.fail(str(result.error), kind="network")

        data = result.value
        errcode = data.get("errcode")
        errmsg = str(data.get("errmsg", ""))
        if errcode != 0:
            return self.fail(f"robot rejected message (errcode {errcode}): {errmsg}")
        return Ok(self.emit({"errcode": "0", "errmsg": errmsg}))
