from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import typer

from workflows.core.config import PipelineConfig, http_timeout, load_config
from workflows.core.errors import ErrorCode
from workflows.core.result import Err
from workflows.net.http import HttpClient, RealHttpClient
from workflows.output.console import ConsoleProtocol, RichConsole
from workflows.steps.registry import StepRegistry, build_registry


@dataclass(frozen=True, slots=True)
class CLIContext:
    console: ConsoleProtocol
    http: HttpClient
    registry: StepRegistry
    no_color: bool = False


def no_color_requested(ctx: typer.Context) -> bool:
    """Whether ``--no-color`` was given on the root command."""
    return bool(ctx.find_root().params.get("no_color", False))


def build_context(*, quiet: bool = False, no_color: bool = False) -> CLIContext:
    console = RichConsole(quiet=quiet, no_color=no_color)
    http = RealHttpClient(timeout=http_timeout())
    return CLIContext(
        console=console,
        http=http,
        registry=build_registry(http, console),
        no_color=no_color,
    )


def load_pipeline_or_exit(ctx: CLIContext, path: Path) -> PipelineConfig:
    result = load_config(path)
    if isinstance(result, Err):
        ctx.console.error(str(result.error))
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))
    return result.value
