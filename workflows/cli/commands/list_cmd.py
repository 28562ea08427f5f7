"""List command - show the available step types."""

from __future__ import annotations

import typer
from rich.console import Console
from rich.table import Table

from workflows.cli.context import build_context, no_color_requested
from workflows.steps.registry import StepRegistry


def steps_table(registry: StepRegistry) -> Table:
    table = Table(title="Step types", show_lines=False)
    table.add_column("type", style="cyan bold")
    table.add_column("parameters")
    table.add_column("outputs")
    table.add_column("description", style="dim")
    for step in registry:
        table.add_row(
            step.name,
            ", ".join(step.parameters) or "-",
            ", ".join(step.outputs) or "-",
            step.description,
        )
    return table


def list_steps(ctx: typer.Context) -> None:
    """List step types with their parameters and outputs."""
    cli = build_context(no_color=no_color_requested(ctx))
    Console(no_color=cli.no_color).print(steps_table(cli.registry))
