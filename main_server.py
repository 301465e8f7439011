"""Mini README: Entry point CLI for launching the expense ledger service.

This script exposes a Typer CLI that starts the FastAPI application with
configurable host, port, and production flags. Settings fall back to
``EXPENSELEDGER_*`` environment variables when options are omitted.
"""

from __future__ import annotations

import typer
import uvicorn

from expenseledger.configuration import get_settings
from expenseledger.logging_utils import configure_logging

cli = typer.Typer(help="Launch and manage the expense ledger HTTP service.")


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
    configure_logging(settings)

    # Browsers cannot open the 0.0.0.0 / :: wildcard, so print a loopback URL.
    browser_host = "127.0.0.1" if effective_host in {"0.0.0.0", "::"} else effective_host
    typer.echo(
        f"Starting expense ledger on {effective_host}:{effective_port} "
        f"({settings.storage_backend} storage).\n"
        f"Expenses are served at http://{browser_host}:{effective_port}{settings.api_path}"
    )
    if settings.storage_backend == "memory":
        typer.echo("In-memory storage: expenses are lost whenever the server restarts.")
    uvicorn.run(
        "expenseledger.interface.web_app:create_application",
        host=effective_host,
        port=effective_port,
        factory=True,
        reload=not production,
    )


if __name__ == "__main__":
    cli()
