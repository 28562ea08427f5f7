"""Values visible to parameter templates while a pipeline runs."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field

__all__ = ["Context"]


@dataclass(frozen=True, slots=True)
class Context:
    """Template scopes for the step about to run.

    Attributes:
        env: Process environment captured when the run started
        input: Outputs of the previous step (empty before the first step)
    """

    env: dict[str, str] = field(default_factory=dict[str, str])
    input: dict[str, str] = field(default_factory=dict[str, str])

    @classmethod
    def from_environ(cls, environ: Mapping[str, str] | None = None) -> Context:
        source = os.environ if environ is None else environ
        return cls(env=dict(source), input={})

    def advance(self, outputs: Mapping[str, str]) -> Context:
        """Context for the next step: same env, input replaced by ``outputs``."""
        return Context(env=self.env, input=dict(outputs))

    def scope(self, name: str) -> Mapping[str, str] | None:
        match name:
            case "env":
                return self.env
            case "input":
                return self.input
            case _:
                return None
