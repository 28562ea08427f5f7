"""Step abstraction.

A step declares the parameter names it reads and the output names it
produces. The runner resolves only declared parameters and hands the
step's outputs to the next step as its ``input`` scope.

Example:
    class Echo(Step):
        name = "echo"
        parameters = ("text",)
        outputs = ("text",)

        def execute(self, payload: Payload) -> Result[Payload, StepError]:
            print(payload.parameter("text"))
            return Ok(Payload({"text": payload.parameter("text")}))
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TypeAlias

from workflows.core.result import Err, Result

__all__ = ["Payload", "Step", "StepError", "StepFailure"]


@dataclass(frozen=True, slots=True)
class Payload:
    """String key/value bag passed into and out of a step."""

    values: dict[str, str] = field(default_factory=dict[str, str])

    def parameter(self, key: str) -> str:
        """Value for ``key``, or an empty string when absent."""
        return self.values.get(key, "")

    def flag(self, key: str) -> bool:
        """Parse a boolean parameter; anything but "true" is False."""
        return self.parameter(key).strip().lower() == "true"

    def as_dict(self) -> dict[str, str]:
        return dict(self.values)


@dataclass(frozen=True, slots=True)
class StepError:
    """A step failed.

    Attributes:
        step: Step type name
        message: Human-readable reason
        kind: "step", "network" or "io"; the CLI maps it to an exit code
    """

    step: str
    message: str
    kind: str = "step"

    def __str__(self) -> str:
        return f"{self.step}: {self.message}"


StepFailure: TypeAlias = Err[StepError]


class Step(ABC):
    """Base class for pipeline steps."""

    name: str
    description: str = ""
    parameters: tuple[str, ...] = ()
    outputs: tuple[str, ...] = ()

    @abstractmethod
    def execute(self, payload: Payload) -> Result[Payload, StepError]:
        """Run the step with resolved parameters.

        Returns:
            Ok with a payload holding exactly the names in ``outputs``,
            or Err with StepError.
        """
        ...

    def fail(self, message: str, *, kind: str = "step") -> StepFailure:
        return Err(StepError(step=self.name, message=message, kind=kind))

    def emit(self, values: Mapping[str, str]) -> Payload:
        """Build an output payload restricted to the declared outputs."""
        return Payload({key: values.get(key, "") for key in self.outputs})
