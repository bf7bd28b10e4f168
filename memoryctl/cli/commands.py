"""CLI commands for memoryctl.

The CLI is the single entry point: each dispatcher verb is a top-level
command, plus `simulate` (local engine) and the `config` group.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Callable

import typer
from loguru import logger
from rich.console import Console
from rich.text import Text

from memoryctl import __logo__, __version__
from memoryctl.cli.command_groups.config_commands import register_config_commands
from memoryctl.cli.shared.logging_utils import configure_logging
from memoryctl.config.access import get_config, with_overrides
from memoryctl.config.schema import Config
from memoryctl.dispatch.dispatcher import DispatchResult, Dispatcher
from memoryctl.rpc.endpoints import EndpointTarget
from memoryctl.simulation.engine import run_simulation
from memoryctl.utils.exceptions import (
    InvalidArgumentError,
    MemoryctlError,
    PayloadNotFoundError,
    RemoteError,
    format_error,
)

app = typer.Typer(
    name="memoryctl",
    help=f"{__logo__} memoryctl - drive the MEMORY_P code-intelligence service over JSON-RPC",
    no_args_is_help=True,
)

console = Console()
err_console = Console(stderr=True)


def version_callback(value: bool):
    if value:
        console.print(f"{__logo__} memoryctl v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        None, "--version", "-v", callback=version_callback, is_eager=True
    ),
    config_path: Path = typer.Option(None, "--config", "-c", help="Config file (default ~/.memoryctl/config.json)"),
    primary_url: str = typer.Option(None, "--primary-url", help="Override the primary service URL"),
    simulation_url: str = typer.Option(None, "--simulation-url", help="Override the simulation service URL"),
    timeout: float = typer.Option(None, "--timeout", "-t", help="HTTP timeout in seconds"),
    bank_dir: str = typer.Option(None, "--bank", "-b", help="Payload bank directory"),
    fail_on_remote_error: bool = typer.Option(
        None,
        "--fail-on-remote-error/--no-fail-on-remote-error",
        help="Exit non-zero when the service returns a JSON-RPC error",
    ),
    strict_tool_names: bool = typer.Option(
        None,
        "--strict-tool-names/--no-strict-tool-names",
        help="Check payload tool names against the target's tool list before sending",
    ),
    logs: bool = typer.Option(False, "--logs/--no-logs", help="Show memoryctl runtime logs"),
    debug: bool = typer.Option(False, "--debug", "-d", help="Debug logging to stderr"),
):
    """memoryctl - MEMORY_P service dispatcher."""
    configure_logging(logs=logs, debug=debug)
    ctx.obj = {
        "config_path": config_path,
        "overrides": {
            "primary_url": primary_url,
            "simulation_url": simulation_url,
            "timeout": timeout,
            "bank_dir": bank_dir,
            "fail_on_remote_error": fail_on_remote_error,
            "strict_tool_names": strict_tool_names,
        },
    }


# ============================================================================
# Helpers
# ============================================================================


def _load_config(ctx: typer.Context) -> Config:
    obj = ctx.obj or {}
    try:
        config = get_config(config_path=obj.get("config_path"))
    except ValueError as exc:
        err_console.print(Text(f"Error [CONFIG_ERROR] {exc}", style="red"), soft_wrap=True)
        raise typer.Exit(1)
    return with_overrides(config, **obj.get("overrides", {}))


def _print_error(exc: Exception) -> None:
    if isinstance(exc, MemoryctlError):
        logger.debug("Command failed: {}", exc.to_dict())
    err_console.print(Text(format_error(exc), style="red"), soft_wrap=True)


def _render(result: DispatchResult) -> None:
    for block in result.blocks:
        if block.kind == "text":
            console.print(Text(block.text), soft_wrap=True)
        else:
            console.print(Text(json.dumps(block.raw, ensure_ascii=False), style="dim"), soft_wrap=True)
    for line in result.lines:
        console.print(Text(line), soft_wrap=True)


def _execute(ctx: typer.Context, action: Callable[[Dispatcher], DispatchResult]) -> DispatchResult | None:
    """Run one dispatcher action and map failures to a single error line and exit code."""
    config = _load_config(ctx)
    dispatcher = Dispatcher(config)
    try:
        result = action(dispatcher)
    except RemoteError as exc:
        _print_error(exc)
        if config.dispatch.fail_on_remote_error:
            raise typer.Exit(1)
        return None
    except PayloadNotFoundError as exc:
        _print_error(exc)
        if exc.available:
            err_console.print(Text(f"Available payloads: {', '.join(exc.available)}"), soft_wrap=True)
        else:
            err_console.print(Text(f"No payloads in {dispatcher.bank.directory}"), soft_wrap=True)
        raise typer.Exit(1)
    except MemoryctlError as exc:
        _print_error(exc)
        raise typer.Exit(1)
    _render(result)
    return result


# ============================================================================
# Ad-hoc tool verbs
# ============================================================================


@app.command()
def status(ctx: typer.Context):
    """Project overview from the primary service."""
    _execute(ctx, lambda d: d.status())


@app.command()
def analyze(
    ctx: typer.Context,
    path: str = typer.Argument(None, help="Project path"),
    extension: str = typer.Option(None, "--extension", "-e", help="File extension to scan"),
    max_threads: int = typer.Option(None, "--max-threads", help="Remote worker threads"),
):
    """Parallel analysis of a project."""
    _execute(ctx, lambda d: d.analyze(path, extension=extension, max_threads=max_threads))


@app.command()
def repair(
    ctx: typer.Context,
    path: str = typer.Argument(None, help="Project path"),
    extension: str = typer.Option(None, "--extension", "-e", help="File extension to scan"),
):
    """Parallel repair of a project."""
    _execute(ctx, lambda d: d.repair(path, extension=extension))


@app.command()
def search(
    ctx: typer.Context,
    path: str = typer.Argument(None, help="Project path"),
    pattern: str = typer.Argument(None, help="Regex pattern"),
    extension: str = typer.Option(None, "--extension", "-e", help="File extension to scan"),
):
    """Regex search across a project."""
    _execute(ctx, lambda d: d.search(path, pattern, extension=extension))


@app.command()
def tools(
    ctx: typer.Context,
    target: str = typer.Option("primary", "--target", help="primary or simulation"),
):
    """List tools exposed by a service."""
    try:
        endpoint = EndpointTarget(target)
    except ValueError:
        _print_error(InvalidArgumentError(f"unknown target: {target}", field="target"))
        raise typer.Exit(1)
    _execute(ctx, lambda d: d.tools(endpoint))


# ============================================================================
# Payload bank verbs
# ============================================================================


@app.command()
def run(ctx: typer.Context, payload: str = typer.Argument(None, help="Payload name (with or without .json)")):
    """Replay a stored payload on the primary service."""
    _execute(ctx, lambda d: d.run(payload))


@app.command()
def edit(ctx: typer.Context, payload: str = typer.Argument(None, help="Payload name (with or without .json)")):
    """Replay a stored edit payload."""
    _execute(ctx, lambda d: d.edit(payload))


@app.command()
def workflow(ctx: typer.Context, payload: str = typer.Argument(None, help="Payload name (with or without .json)")):
    """Replay a stored multi-step workflow."""
    _execute(ctx, lambda d: d.workflow(payload))


@app.command()
def simulation(ctx: typer.Context, payload: str = typer.Argument(None, help="Payload name (with or without .json)")):
    """Replay a stored payload on the simulation service (sent verbatim)."""
    _execute(ctx, lambda d: d.simulation(payload))


@app.command("list")
def list_payloads(ctx: typer.Context):
    """List payloads in the bank."""
    result = _execute(ctx, lambda d: d.list_payloads())
    if result is not None and not result.lines:
        config = _load_config(ctx)
        console.print(f"[dim]No payloads in {config.bank_path}[/dim]")


@app.command("help")
def help_command(ctx: typer.Context):
    """Show the verb table."""
    _execute(ctx, lambda d: d.help())


# ============================================================================
# Local simulation engine
# ============================================================================


@app.command()
def simulate(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Simulation name"),
    iterations: int = typer.Argument(..., help="Iteration count (>= 1)"),
    workers: int = typer.Option(None, "--workers", "-w", help="Worker processes (default: all CPUs)"),
    ordered: bool = typer.Option(None, "--ordered/--parallel", help="Sequential fold for bit-exact totals"),
):
    """Run the parallel simulation locally and print one JSON line."""
    config = _load_config(ctx)
    max_workers = workers if workers is not None else config.simulation.max_workers
    try:
        result = run_simulation(
            name,
            iterations,
            max_workers=max_workers or None,
            ordered=config.simulation.ordered if ordered is None else ordered,
        )
    except MemoryctlError as exc:
        _print_error(exc)
        raise typer.Exit(1)
    typer.echo(result.to_json())


register_config_commands(app=app, console=console)
