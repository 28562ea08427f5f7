"""Run command - execute a pipeline file."""

from __future__ import annotations

from pathlib import Path

import typer

from workflows.cli.context import (
    CLIContext,
    build_context,
    load_pipeline_or_exit,
    no_color_requested,
)
from workflows.core.context import Context
from workflows.core.errors import ErrorCode
from workflows.core.result import Err
from workflows.output.console import Style
from workflows.runner import RunError, plan_step, run_pipeline

_EXIT_CODES: dict[str, ErrorCode] = {
    "unknown_step": ErrorCode.USER_ERROR,
    "template": ErrorCode.USER_ERROR,
    "step": ErrorCode.STEP_ERROR,
    "network": ErrorCode.NETWORK_ERROR,
    "io": ErrorCode.IO_ERROR,
}


def exit_code_for(error: RunError) -> ErrorCode:
    return _EXIT_CODES.get(error.kind, ErrorCode.STEP_ERROR)


def _dry_run(ctx: CLIContext, path: Path) -> None:
    pipeline = load_pipeline_or_exit(ctx, path)
    context = Context.from_environ()
    ctx.console.header(f"Plan for {path} ({len(pipeline.steps)} steps)")
    for index, step_config in enumerate(pipeline.steps):
        planned = plan_step(step_config, ctx.registry, context, index=index)
        if isinstance(planned, Err):
            ctx.console.error(str(planned.error))
            raise typer.Exit(code=int(exit_code_for(planned.error)))
        step, payload = planned.value
        ctx.console.print(f"{index + 1}. {step.name}", Style.INFO)
        for key, value in payload.values.items():
            ctx.console.print(f"     {key} = {value}", Style.DIM)


def run(
    ctx: typer.Context,
    config: Path = typer.Argument(..., help="Pipeline YAML file"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show resolved steps without running"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only print step output and errors"),
) -> None:
    """Run the steps of a pipeline file in order."""
    cli = build_context(quiet=quiet, no_color=no_color_requested(ctx))
    if dry_run:
        _dry_run(cli, config)
        return

    pipeline = load_pipeline_or_exit(cli, config)
    result = run_pipeline(pipeline, cli.registry, Context.from_environ(), cli.console)
    if isinstance(result, Err):
        cli.console.error(str(result.error))
        raise typer.Exit(code=int(exit_code_for(result.error)))

    cli.console.success(f"{len(result.value.steps)} steps completed")
