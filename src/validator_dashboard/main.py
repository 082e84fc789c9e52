"""CLI entrypoint for the validator dashboard."""

from __future__ import annotations

import asyncio
import json
import os
from pathlib import Path
from typing import Annotated, Any

import typer

from .errors import RegistryError
from .logger import setup_logging
from .settings import CONFIG_ENV_VAR, DashboardSettings
from .state import AppState

app = typer.Typer(
    add_completion=False,
    no_args_is_help=False,
    add_help_option=True,
    pretty_exceptions_enable=True,
    pretty_exceptions_short=True,
    pretty_exceptions_show_locals=False,
    rich_markup_mode="rich",
    help="Aggregate validator stake, commission, rank and revenue as JSON.",
)


@app.command()
def dashboard(
    network_id: Annotated[
        str | None,
        typer.Argument(help="Print only this network instead of the full aggregation."),
    ] = None,
    config_path: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to a TOML config file (can include [validator_dashboard] table).",
        ),
    ] = None,
    networks: Annotated[
        list[str] | None,
        typer.Option(
            "--network",
            "-n",
            help="Restrict the registry to this network id (repeatable).",
        ),
    ] = None,
    registry_path: Annotated[
        Path | None,
        typer.Option("--registry", help="TOML file with [[networks]] entries."),
    ] = None,
    adapter_timeout_seconds: Annotated[
        float | None,
        typer.Option("--adapter-timeout-seconds", help="Per-network fetch timeout."),
    ] = None,
    global_timeout_seconds: Annotated[
        float | None,
        typer.Option(
            "--global-timeout-seconds",
            help="Upper bound for the whole aggregation (0 disables it).",
        ),
    ] = None,
    log_level: Annotated[
        str | None,
        typer.Option(
            "--log-level",
            help="Override logging verbosity (TRACE, DEBUG, INFO, WARNING, ERROR, CRITICAL).",
        ),
    ] = None,
    compact: Annotated[
        bool,
        typer.Option("--compact", help="Print JSON on a single line."),
    ] = False,
    show_config: Annotated[
        bool,
        typer.Option(
            "--show-config",
            help="Print effective config (with secrets redacted) and exit.",
        ),
    ] = False,
):
    """Run one aggregation cycle and print the result as JSON.

    Per-network failures are part of the output (``errors``); the command
    only fails when the network registry cannot be loaded.
    """
    if config_path:
        os.environ[CONFIG_ENV_VAR] = str(config_path)

    init_kwargs: dict[str, Any] = {}
    if networks:
        init_kwargs["networks"] = networks
    if registry_path is not None:
        init_kwargs["registry_path"] = registry_path
    if adapter_timeout_seconds is not None:
        init_kwargs["adapter_timeout_seconds"] = adapter_timeout_seconds
    if global_timeout_seconds is not None:
        init_kwargs["global_timeout_seconds"] = global_timeout_seconds
    if log_level is not None:
        init_kwargs["log_level"] = log_level.upper()

    settings = DashboardSettings(**init_kwargs)

    setup_logging(settings.log_level)
    state = AppState.from_settings(settings)
    indent = None if compact else 2

    if show_config:
        typer.echo(json.dumps(settings.as_safe_dict(), indent=indent))
        raise typer.Exit(code=0)

    from .service import DashboardService

    service = DashboardService(state)
    try:
        result = asyncio.run(service.get_current_aggregation())
    except RegistryError as e:
        typer.echo(f"Registry error: {e}", err=True)
        raise typer.Exit(code=2) from e

    if network_id is None:
        typer.echo(json.dumps(result.to_dict(), indent=indent))
        return

    data = result.to_dict()
    match = next((n for n in data["networks"] if n["network"]["id"] == network_id), None)
    if match is None:
        raise typer.BadParameter(
            f"Unknown network '{network_id}'", param_hint="network_id"
        )
    match["errors"] = [e for e in data["errors"] if e["network_id"] == network_id]
    typer.echo(json.dumps(match, indent=indent))


def run() -> None:
    """Entrypoint used by the console script."""
    app()


if __name__ == "__main__":
    run()
