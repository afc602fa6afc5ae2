"""Bot Manager CLI actor implemented with Typer."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

import typer
from pydantic import ValidationError

from packages.botmanager_shared.config import BotManagerSettings, load_settings
from packages.botmanager_shared.http import run_app
from packages.botmanager_shared.logging import configure_logging
from resources.adapters.telegram import (
    BotBackend,
    HttpTelegramBackend,
    TelegramAdapterError,
)
from services.action.bot_manager import (
    BotManagerError,
    InboundRequest,
    OutputBuffer,
    RequestRouter,
)
from services.action.bot_manager.http_ingress import create_ingress_app

SUCCESS_EXIT_CODE = 0
CONFIG_ERROR_EXIT_CODE = 2
DOMAIN_ERROR_EXIT_CODE = 3
TRANSPORT_ERROR_EXIT_CODE = 4


@dataclass(frozen=True)
class CliConfig:
    """Global CLI options shared by every command."""

    config_path: Path | None
    log_level: str | None


def _echo_output(text: str) -> None:
    """Stream run output to stdout as it is produced."""
    typer.echo(text, nl=False)


def _build_backend(settings: BotManagerSettings) -> BotBackend:
    """Return the default Bot API backend for loaded settings."""
    return HttpTelegramBackend.from_settings(settings=settings)


def _load(cfg: CliConfig) -> BotManagerSettings:
    """Load settings and configure logging, exiting on invalid configuration."""
    cli_params = {"logging": {"level": cfg.log_level.upper()}} if cfg.log_level else None
    try:
        settings = load_settings(cli_params=cli_params, config_path=cfg.config_path)
    except (ValidationError, ValueError) as exc:
        typer.echo(f"error: invalid configuration: {exc}", err=True)
        raise typer.Exit(code=CONFIG_ERROR_EXIT_CODE) from exc

    configure_logging(
        level=settings.logging.level,
        json_output=settings.logging.json_output,
        service=settings.logging.service,
        environment=settings.logging.environment,
        stream=sys.stderr,
    )
    return settings


def _run_guarded(invoke: Callable[[], None]) -> None:
    """Execute one run and map failures to process exit codes."""
    try:
        invoke()
    except BotManagerError as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=DOMAIN_ERROR_EXIT_CODE) from exc
    except TelegramAdapterError as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=TRANSPORT_ERROR_EXIT_CODE) from exc


def _require_config(ctx: typer.Context) -> CliConfig:
    """Return required CLI config from Typer context."""
    config = ctx.obj
    if not isinstance(config, CliConfig):
        raise RuntimeError("CLI configuration not initialized")
    return config


app = typer.Typer(no_args_is_help=True, help="Telegram bot manager command-line interface")


@app.callback()
def main(
    ctx: typer.Context,
    config: Path | None = typer.Option(
        None,
        "--config",
        envvar="BOTMANAGER_CONFIG_PATH",
        help="YAML settings file (defaults to ~/.config/botmanager/botmanager.yaml)",
    ),
    log_level: str | None = typer.Option(None, help="Override logging.level"),
) -> None:
    """Store global options for all commands."""
    ctx.obj = CliConfig(config_path=config, log_level=log_level)


@app.command("run")
def run_command(
    ctx: typer.Context,
    action: str = typer.Option(
        "handle", "--action", "-a", help="One of set, unset, reset, handle"
    ),
    secret: str | None = typer.Option(None, "--secret", "-s", help="Secret echo"),
    loop: str | None = typer.Option(
        None,
        "--loop",
        "-l",
        help="Seconds to keep polling; pass an empty value for seven days",
    ),
    interval: str | None = typer.Option(
        None, "--interval", "-i", help="Seconds between polls (default 2, min 1)"
    ),
    force_secret: bool = typer.Option(
        False, "--force-secret", help="Validate the secret even from the CLI"
    ),
) -> None:
    """Run one webhook admin action or a handle (poll) cycle."""
    cfg = _require_config(ctx)
    settings = _load(cfg)
    backend = _build_backend(settings)
    request = InboundRequest(
        action=action,
        secret_echo=secret,
        loop_duration=loop,
        loop_interval=interval,
        unattended=True,
    )

    def invoke() -> None:
        router = RequestRouter(
            settings=settings,
            backend=backend,
            request=request,
            output=OutputBuffer(echo=_echo_output),
        )
        router.run(force_secret=force_secret)

    try:
        _run_guarded(invoke)
    finally:
        backend.close()
    raise typer.Exit(code=SUCCESS_EXIT_CODE)


@app.command("serve")
def serve_command(
    ctx: typer.Context,
    host: str = typer.Option("127.0.0.1", help="Bind host"),
    port: int = typer.Option(8000, min=1, max=65535, help="Bind port"),
) -> None:
    """Serve webhook deliveries and admin actions over HTTP."""
    cfg = _require_config(ctx)
    settings = _load(cfg)
    backend = _build_backend(settings)
    ingress = create_ingress_app(settings=settings, backend=backend)
    try:
        run_app(ingress, host=host, port=port, log_level=settings.logging.level.lower())
    finally:
        backend.close()


if __name__ == "__main__":
    app()
