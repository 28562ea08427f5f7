from __future__ import annotations

import typer

from workflows import __version__
from workflows.cli.commands.check_cmd import check
from workflows.cli.commands.list_cmd import list_steps
from workflows.cli.commands.run_cmd import run


app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
    help="Run YAML-defined chains of automation steps.",
)


# Commands
app.command()(run)
app.command()(check)
app.command("list")(list_steps)


@app.callback(invoke_without_command=True)
def _main(  # pyright: ignore[reportUnusedFunction]
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", help="Show version and exit."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable colored output."),
) -> None:
    # --no-color is read by the subcommands from ctx.find_root().params
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=0)

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(code=0)


def main() -> None:
    app()
