"""Echo step: print a line and pass it on."""

from __future__ import annotations

from workflows.core.result import Ok, Result
from workflows.output.console import ConsoleProtocol
from workflows.steps.base import Payload, Step, StepError

__all__ = ["Echo"]


class Echo(Step):
    name = "echo"
    description = "Print text to stdout"
    parameters = ("text",)
    outputs = ("text",)

    def __init__(self, console: ConsoleProtocol) -> None:
        self._console = console

    def execute(self, payload: Payload) -> Result[Payload, StepError]:
        text = payload.parameter("text")
        self._console.print(text)
        return Ok(self.emit({"text": text}))
