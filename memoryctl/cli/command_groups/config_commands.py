"""Config command group (init/show/get/set/unset)."""

from __future__ import annotations

import json
from pathlib import Path

import typer
from rich.console import Console
from rich.text import Text

from memoryctl.cli.shared.config_utils import (
    deep_get,
    deep_set,
    deep_unset,
    load_config_json,
    parse_value,
    save_config_json,
)
from memoryctl.config.access import clear_config_cache
from memoryctl.config.loader import convert_keys, get_config_path, load_config, save_config
from memoryctl.config.schema import Config


def _config_path(ctx: typer.Context) -> Path:
    obj = ctx.obj or {}
    return obj.get("config_path") or get_config_path()


def _read_raw(console: Console, path: Path) -> dict:
    try:
        return load_config_json(path)
    except ValueError as exc:
        console.print(Text(str(exc), style="red"), soft_wrap=True)
        raise typer.Exit(1)


def register_config_commands(app: typer.Typer, console: Console) -> None:
    """Register the `config` command group."""
    config_app = typer.Typer(help="Config helpers (init/show/get/set/unset)")
    app.add_typer(config_app, name="config")

    @config_app.command("init")
    def config_init(
        ctx: typer.Context,
        force: bool = typer.Option(False, "--force", help="Overwrite an existing config with defaults"),
    ) -> None:
        """Write a config file with default values."""
        path = _config_path(ctx)
        if path.exists() and not force:
            console.print(f"[yellow]Config already exists at {path}[/yellow] (use --force to overwrite)")
            raise typer.Exit(1)
        save_config(Config(), path)
        clear_config_cache(config_path=path)
        console.print(f"[green]✓[/green] Created config at {path}")

    @config_app.command("show")
    def config_show(ctx: typer.Context) -> None:
        """Print the effective configuration (file + env + defaults)."""
        path = _config_path(ctx)
        try:
            cfg = load_config(path)
        except ValueError as exc:
            console.print(Text(str(exc), style="red"), soft_wrap=True)
            raise typer.Exit(1)
        console.print(Text(json.dumps(cfg.model_dump(), indent=2)), soft_wrap=True)

    @config_app.command("get")
    def config_get(
        ctx: typer.Context,
        key: str = typer.Argument(..., help="Dotted key path, e.g. endpoints.primaryPort"),
    ) -> None:
        data = _read_raw(console, _config_path(ctx))
        try:
            value = deep_get(data, key)
        except KeyError:
            console.print(f"[red]Key not found:[/red] {key}")
            raise typer.Exit(1)
        console.print(Text(json.dumps(value, indent=2, ensure_ascii=False)), soft_wrap=True)

    @config_app.command("set")
    def config_set(
        ctx: typer.Context,
        key: str = typer.Argument(..., help="Dotted key path"),
        value: str = typer.Argument(..., help="JSON value or plain string"),
    ) -> None:
        path = _config_path(ctx)
        data = _read_raw(console, path)
        try:
            deep_set(data, key, parse_value(value))
            Config(**convert_keys(data))
        except (KeyError, ValueError) as exc:
            console.print(f"[red]Rejected {key}:[/red]")
            console.print(Text(str(exc)), soft_wrap=True)
            raise typer.Exit(1)
        save_config_json(data, path)
        clear_config_cache(config_path=path)
        console.print(f"[green]✓[/green] Set {key}")

    @config_app.command("unset")
    def config_unset(
        ctx: typer.Context,
        key: str = typer.Argument(..., help="Dotted key path"),
    ) -> None:
        path = _config_path(ctx)
        data = _read_raw(console, path)
        try:
            removed = deep_unset(data, key)
        except KeyError:
            removed = False
        if not removed:
            console.print(f"[yellow]Key not found:[/yellow] {key}")
            raise typer.Exit(1)
        save_config_json(data, path)
        clear_config_cache(config_path=path)
        console.print(f"[green]✓[/green] Unset {key}")
