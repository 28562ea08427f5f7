"""Check command - validate a pipeline without running it."""

from __future__ import annotations

from pathlib import Path

import typer

from workflows.cli.context import build_context, load_pipeline_or_exit, no_color_requested
from workflows.core.errors import ErrorCode
from workflows.runner import check_pipeline


def check(
    ctx: typer.Context,
    config: Path = typer.Argument(..., help="Pipeline YAML file"),
    strict: bool = typer.Option(False, "--strict", help="Treat warnings as errors"),
) -> None:
    """Validate step types, parameters and templates."""
    cli = build_context(no_color=no_color_requested(ctx))
    pipeline = load_pipeline_or_exit(cli, config)

    issues = check_pipeline(pipeline, cli.registry)
    errors = [i for i in issues if i.is_error]
    warnings = [i for i in issues if not i.is_error]

    for issue in errors:
        cli.console.error(str(issue))
    for issue in warnings:
        cli.console.warning(str(issue))

    if errors or (strict and warnings):
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    cli.console.success(f"{config}: {len(pipeline.steps)} steps, {len(warnings)} warnings")
