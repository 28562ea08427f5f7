"""Pipeline execution.

Steps run one after another. Before each step its declared parameters are
resolved against the context; after it the context's ``input`` scope is
replaced by the step's outputs. The first failure stops the run.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from workflows.core.config import PipelineConfig, StepConfig
from workflows.core.context import Context
from workflows.core.result import Err, Ok, Result
from workflows.core.template import fulfill, placeholders
from workflows.output.console import ConsoleProtocol, Style
from workflows.steps.base import Payload, Step
from workflows.steps.registry import StepRegistry

__all__ = [
    "RunError",
    "StepOutcome",
    "RunReport",
    "Issue",
    "make_step",
    "plan_step",
    "run_pipeline",
    "check_pipeline",
]


@dataclass(frozen=True, slots=True)
class RunError:
    """Why a run stopped.

    Attributes:
        index: Zero-based position of the failing step
        step_type: Type name as written in the pipeline
        message: Human-readable reason
        kind: "unknown_step", "template", "step", "network" or "io"
    """

    index: int
    step_type: str
    message: str
    kind: str

    def __str__(self) -> str:
        return f"step {self.index + 1} ({self.step_type}): {self.message}"


@dataclass(frozen=True, slots=True)
class StepOutcome:
    index: int
    step_type: str
    outputs: dict[str, str]


def _empty_outcomes() -> list[StepOutcome]:
    return []


@dataclass(slots=True)
class RunReport:
    """Completed steps, in order."""

    steps: list[StepOutcome] = field(default_factory=_empty_outcomes)

    @property
    def last_outputs(self) -> dict[str, str]:
        return self.steps[-1].outputs if self.steps else {}


def make_step(
    config: StepConfig,
    registry: StepRegistry,
    context: Context,
    *,
    index: int = 0,
) -> Result[tuple[Step, Payload], RunError]:
    """Look up the step and resolve the parameters it declares.

    Parameters the step does not declare are ignored, and so are their
    templates.
    """
    step = registry.lookup(config.type)
    if step is None:
        return Err(
            RunError(
                index=index,
                step_type=config.type,
                message=f"Workflow {config.type} is not found.",
                kind="unknown_step",
            )
        )

    resolved: dict[str, str] = {}
    for key in step.parameters:
        if key not in config.parameters:
            continue
        result = fulfill(config.parameters[key], context)
        if isinstance(result, Err):
            return Err(
                RunError(
                    index=index,
                    step_type=config.type,
                    message=f"parameter '{key}': {result.error}",
                    kind="template",
                )
            )
        resolved[key] = result.value
    return Ok((step, Payload(resolved)))


def plan_step(
    config: StepConfig,
    registry: StepRegistry,
    context: Context,
    *,
    index: int = 0,
) -> Result[tuple[Step, Payload], RunError]:
    """Resolve a step for a dry run.

    ``${input.X}`` is rendered as a ``<input.X>`` marker since the previous
    step never ran.
    """
    step = registry.lookup(config.type)
    if step is None:
        return make_step(config, registry, context, index=index)
    markers = {name: f"<input.{name}>" for name in _referenced_inputs(config, step)}
    return make_step(config, registry, Context(env=context.env, input=markers), index=index)


def _referenced_inputs(config: StepConfig, step: Step) -> set[str]:
    names: set[str] = set()
    for key in step.parameters:
        refs = placeholders(config.parameters.get(key, ""))
        if isinstance(refs, Ok):
            names.update(ref.name for ref in refs.value if ref.scope == "input")
    return names


def run_pipeline(
    config: PipelineConfig,
    registry: StepRegistry,
    context: Context,
    console: ConsoleProtocol,
) -> Result[RunReport, RunError]:
    """Run every step in order, stopping at the first failure."""
    report = RunReport()
    total = len(config.steps)

    for index, step_config in enumerate(config.steps):
        made = make_step(step_config, registry, context, index=index)
        if isinstance(made, Err):
            return made
        step, payload = made.value

        console.print(f"[{index + 1}/{total}] {step.name}", Style.DIM)
        result = step.execute(payload)
        if isinstance(result, Err):
            error = result.error
            return Err(
                RunError(
                    index=index,
                    step_type=step_config.type,
                    message=error.message,
                    kind=error.kind,
                )
            )

        outputs = result.value.as_dict()
        report.steps.append(StepOutcome(index=index, step_type=step.name, outputs=outputs))
        context = context.advance(outputs)

    return Ok(report)


@dataclass(frozen=True, slots=True)
class Issue:
    """A problem found by check_pipeline."""

    index: int
    step_type: str
    message: str
    severity: str = "error"

    @property
    def is_error(self) -> bool:
        return self.severity == "error"

    def __str__(self) -> str:
        return f"step {self.index + 1} ({self.step_type}): {self.message}"


def check_pipeline(config: PipelineConfig, registry: StepRegistry) -> list[Issue]:
    """Validate a pipeline without running it.

    Errors: unknown step types, malformed templates, and ``${input.X}``
    names the previous step does not output.
    Warnings: undeclared parameters and an empty pipeline.
    """
    issues: list[Issue] = []
    if not config.steps:
        issues.append(Issue(0, "-", "pipeline has no steps", "warning"))

    previous_outputs: tuple[str, ...] | None = ()
    for index, step_config in enumerate(config.steps):
        step = registry.lookup(step_config.type)
        if step is None:
            issues.append(
                Issue(index, step_config.type, f"Workflow {step_config.type} is not found.")
            )
            previous_outputs = None
            continue

        for key, template in step_config.parameters.items():
            if key not in step.parameters:
                issues.append(
                    Issue(
                        index,
                        step_config.type,
                        f"parameter '{key}' is not used by {step.name}",
                        "warning",
                    )
                )
                continue

            refs = placeholders(template)
            if isinstance(refs, Err):
                issues.append(Issue(index, step_config.type, f"parameter '{key}': {refs.error}"))
                continue

            for ref in refs.value:
                if ref.scope != "input" or previous_outputs is None:
                    continue
                if ref.name not in previous_outputs:
                    reason = "is not provided by the previous step" if index else "has no source"
                    issues.append(
                        Issue(
                            index,
                            step_config.type,
                            f"parameter '{key}': ${{input.{ref.name}}} {reason}",
                        )
                    )

        previous_outputs = step.outputs

    return issues
