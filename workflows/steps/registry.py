"""Supported step types, keyed by lowercase name."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from workflows.net.http import HttpClient
from workflows.output.console import ConsoleProtocol
from workflows.steps.base import Step
from workflows.steps.command import Command
from workflows.steps.decompress import Decompress
from workflows.steps.download import Download
from workflows.steps.echo import Echo
from workflows.steps.gist import Gist
from workflows.steps.http import Http
from workflows.steps.wechat import WeChat

__all__ = ["StepRegistry", "build_registry"]


class StepRegistry:
    """Lookup table from step type name to Step instance."""

    def __init__(self, steps: Iterable[Step]) -> None:
        self._steps: dict[str, Step] = {}
        for step in steps:
            key = step.name.lower()
            if key in self._steps:
                raise ValueError(f"duplicate step type: {step.name}")
            self._steps[key] = step

    def lookup(self, step_type: str) -> Step | None:
        """Find a step by type name, ignoring case and surrounding spaces."""
        return self._steps.get(step_type.strip().lower())

    @property
    def names(self) -> list[str]:
        return sorted(self._steps)

    def __iter__(self) -> Iterator[Step]:
        return iter(self._steps[name] for name in self.names)

    def __len__(self) -> int:
        return len(self._steps)

    def __contains__(self, step_type: object) -> bool:
        return isinstance(step_type, str) and self.lookup(step_type) is not None


def build_registry(http: HttpClient, console: ConsoleProtocol) -> StepRegistry:
    """Registry with every built-in step wired to ``http`` and ``console``."""
    return StepRegistry(
        [
            Http(http),
            Echo(console),
            WeChat(http),
            Gist(http),
            Command(),
            Download(http),
            Decompress(),
        ]
    )
