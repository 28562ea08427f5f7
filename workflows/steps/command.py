"""Run an external program."""

from __future__ import annotations

import shlex

from workflows.core.result import Err, Ok, Result
from workflows.platform.process import spawn
from workflows.steps.base import Payload, Step, StepError

__all__ = ["Command"]


class Command(Step):
    """Spawn ``program`` with optional shell-style ``args``.

    Output is discarded unless ``inherit_io`` is true. A ``daemon`` process
    is left running and its exit code is not checked.
    """

    name = "command"
    description = "Run an external program"
    parameters = ("program", "args", "daemon", "inherit_io")
    outputs = ("pid", "exit_code")

    def execute(self, payload: Payload) -> Result[Payload, StepError]:
        program = payload.parameter("program").strip()
        if not program:
            return self.fail("'program' is required")
        try:
            args = shlex.split(payload.parameter("args"))
        except ValueError as e:
            return self.fail(f"invalid args: {e}")

        daemon = payload.flag("daemon")
        result = spawn(
            program,
            args,
            inherit_io=payload.flag("inherit_io"),
            wait=not daemon,
        )
        if isinstance(result, Err):
            return self.fail(str(result.error))

        outcome = result.value
        exit_code = "" if outcome.returncode is None else str(outcome.returncode)
        return Ok(self.emit({"pid": str(outcome.pid), "exit_code": exit_code}))
