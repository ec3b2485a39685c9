"""Mini README: Entry point CLI for launching the relief ledger service.

This script exposes a Typer CLI that starts the FastAPI wrapper with
configurable host, port, and production flags. Settings come from
``RELIEFLEDGER_*`` environment variables when options are omitted.
"""

from __future__ import annotations

import typer
import uvicorn

from reliefledger.configuration import get_settings
from reliefledger.logging_utils import configure_root_logger

cli = typer.Typer(help="Launch and manage the relief ledger service.")


@cli.command()
def run(
    host: str = typer.Option(None, help="Host interface to bind."),
    port: int = typer.Option(None, help="Port to listen on."),
    production: bool = typer.Option(
        False, help="Use production server settings (disable auto-reload)."
    ),
) -> None:
    """Start the FastAPI application using uvicorn."""

    settings = get_settings()
    effective_host = host or settings.interface_host
    effective_port = port or settings.interface_port
    configure_root_logger(settings.log_level)

    # 0.0.0.0 is a bind address only; browsers need a routable host.
    browser_host = "127.0.0.1" if effective_host in {"0.0.0.0", "::"} else effective_host
    typer.echo(
        f"Starting relief ledger for owner '{settings.owner_identity}' on "
        f"{effective_host}:{effective_port}.\n"
        f"API docs at http://{browser_host}:{effective_port}/docs"
    )
    uvicorn.run(
        "reliefledger.interface.web_app:create_application",
        host=effective_host,
        port=effective_port,
        factory=True,
        reload=not production,
    )


@cli.command("settings")
def show_settings() -> None:
    """Print the effective configuration."""

    for key, value in get_settings().model_dump().items():
        typer.echo(f"{key}: {value}")


if __name__ == "__main__":
    cli()
