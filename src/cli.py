#!/usr/bin/env python3
"""Command Line Interface for the timeline database provisioner.

Requires: pip install -e .

Usage:
    cd src
    python cli.py provision          # Create schema and seed vendor timelines
    python cli.py check-connection   # Only verify the database answers
    python cli.py show-config        # Show the (redacted) database configuration
"""
from __future__ import annotations

import typer

from core.config import get_settings, load_database_config
from core.exceptions import ConfigurationError
from core.logging_config import get_logger, setup_logging

LOGGER = get_logger(__name__)

app = typer.Typer(help="Vendor timeline database provisioner")


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose output"),
    json_logs: bool = typer.Option(False, "--json-logs", help="Emit JSON log lines"),
) -> None:
    """Create and seed the vendor timeline database."""
    try:
        settings = get_settings()
    except Exception as e:
        LOGGER.critical("Fatal error: %s", e)
        typer.secho(f"✗ Invalid configuration: {e}", fg="red")
        raise typer.Exit(1)
    log_level = "DEBUG" if verbose else settings.log_level
    setup_logging(level=log_level, json_format=json_logs or settings.json_logs)


@app.command("provision")
def provision_cmd() -> None:
    """Create missing tables and insert the reference vendor timelines."""
    from provisioning.provisioner import run_provisioning

    try:
        result = run_provisioning(get_settings())
    except Exception as e:
        LOGGER.critical("Fatal error: %s", e)
        typer.secho(f"✗ Provisioning failed: {e}", fg="red")
        raise typer.Exit(1)

    typer.secho("✓ Database provisioned", fg="green")
    typer.echo(f"  Connection attempts: {result.attempts}")
    typer.echo(f"  Tables created: {', '.join(result.tables_created) or '-'}")
    typer.echo(f"  Tables already present: {', '.join(result.tables_existing) or '-'}")
    typer.echo(f"  Timelines inserted: {result.rows_inserted}")
    typer.echo(f"  Timelines skipped: {result.rows_skipped}")


@app.command("check-connection")
def check_connection_cmd() -> None:
    """Verify the database is reachable, retrying like `provision` does."""
    from provisioning.provisioner import check_database

    try:
        server_time = check_database(load_database_config(get_settings()))
    except Exception as e:
        typer.secho(f"✗ {e}", fg="red")
        raise typer.Exit(1)
    typer.secho(f"✓ Connected (server time: {server_time})", fg="green")


@app.command("show-config")
def show_config() -> None:
    """Show database configuration with the password redacted."""
    try:
        config = load_database_config(get_settings())
    except ConfigurationError as e:
        typer.secho(f"✗ {e}", fg="red")
        raise typer.Exit(1)

    typer.echo("Database configuration:")
    for key, value in config.describe().items():
        typer.echo(f"  {key}: {value}")


if __name__ == "__main__":
    app()
