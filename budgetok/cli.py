"""Mini README: Command line entry point for the Budget OK service.

Commands:
    * run - serve the FastAPI application with uvicorn.
    * sync-bank-ok - import Bank OK expenses once into the configured store.

Both commands read ``BUDGETOK_`` environment variables through
``get_settings``. ``sync-bank-ok`` is only meaningful with the sql storage
backend, since an in-memory store starts empty in every process.
"""

from __future__ import annotations

from typing import Optional

import typer
import uvicorn

from budgetok.bank_ok import BankOkClient, BankOkError, BankOkSync
from budgetok.configuration import get_settings
from budgetok.envelopes import EnvelopeLedger
from budgetok.logging_utils import configure_root_logger
from budgetok.storage import REGISTRY

cli = typer.Typer(help="Run and maintain the Budget OK envelope tracker.")


@cli.command()
def run(
    host: Optional[str] = typer.Option(None, help="Host interface to bind."),
    port: Optional[int] = typer.Option(None, help="Port to listen on."),
    production: bool = typer.Option(
        False, help="Use production server settings (disable auto-reload)."
    ),
) -> None:
    """Start the FastAPI application using uvicorn."""

    settings = get_settings()
    effective_host = host or settings.interface_host
    effective_port = port or settings.interface_port
    configure_root_logger(settings.log_level)

    # 0.0.0.0 and :: are bind addresses, not browsable ones.
    browser_host = "127.0.0.1" if effective_host in {"0.0.0.0", "::"} else effective_host
    typer.echo(
        f"Starting Budget OK on {effective_host}:{effective_port} "
        f"with {settings.storage_backend} storage.\n"
        f"Envelope overview: http://{browser_host}:{effective_port}/envelopes"
    )
    uvicorn.run(
        "budgetok.interface.web_app:create_application",
        host=effective_host,
        port=effective_port,
        factory=True,
        reload=not production,
    )


@cli.command("sync-bank-ok")
def sync_bank_ok() -> None:
    """Import new Bank OK expenses into their envelopes and print a summary."""

    settings = get_settings()
    configure_root_logger(settings.log_level)
    ledger = EnvelopeLedger(REGISTRY.create(settings.storage_backend, settings))
    job = BankOkSync(ledger, BankOkClient.from_settings(settings))
    try:
        report = job.sync()
    except BankOkError as error:
        typer.echo(f"Bank OK sync failed: {error}", err=True)
        raise typer.Exit(code=1) from error
    typer.echo(
        f"Imported {report.imported}, skipped {report.duplicates} already imported,"
        f" {report.unmatched} without a matching envelope, {report.rejected} rejected."
    )


if __name__ == "__main__":
    cli()
