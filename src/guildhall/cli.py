#!/usr/bin/env python3
"""
Main CLI entry point for Guildhall backend server.
"""

import asyncio
import os
import sys

import click
import uvicorn

from guildhall import __version__
from guildhall.logging import configure_logging, get_logger

logger = get_logger(__name__)


@click.group()
@click.version_option(version=__version__, prog_name="guildhall")
def cli() -> None:
    """Guildhall CLI - run the API server and manage the database."""
    pass


@cli.command()
@click.option("--host", default="0.0.0.0", help="Host to bind to (default: 0.0.0.0)")
@click.option("--port", default=8088, type=int, help="Port to bind to (default: 8088)")
@click.option("--reload", is_flag=True, default=False, help="Enable auto-reload for development")
@click.option(
    "--log-level",
    default="info",
    type=click.Choice(["debug", "info", "warning", "error"]),
    help="Log level (default: info)",
)
def serve(host: str, port: int, reload: bool, log_level: str) -> None:
    """Start the Guildhall API server."""
    configure_logging(debug=(log_level == "debug"), level=log_level)

    logger.info("Starting Guildhall API server", host=host, port=port, reload=reload)

    # The app reads these at import time
    if log_level == "debug":
        os.environ["GUILDHALL_DEBUG"] = "true"
        os.environ["GUILDHALL_LOG_LEVEL"] = "debug"
    else:
        os.environ.setdefault("GUILDHALL_DEBUG", "false")
        os.environ.setdefault("GUILDHALL_LOG_LEVEL", log_level)

    try:
        uvicorn.run(
            "guildhall.api.app:app",
            host=host,
            port=port,
            reload=reload,
            log_level=log_level,
            access_log=True,
        )
    except KeyboardInterrupt:
        logger.info("Server shutdown requested by user")
    except Exception as e:
        logger.error("Server startup failed", error=str(e))
        sys.exit(1)


@cli.command("init-db")
@click.option("--drop", is_flag=True, default=False, help="Drop existing tables first")
def init_db(drop: bool) -> None:
    """Create the database tables."""
    from guildhall.database.connection import create_all, drop_all, init_database

    configure_logging()

    async def do_init():
        init_database()
        if drop:
            await drop_all()
        await create_all()

    try:
        asyncio.run(do_init())
        click.echo("✓ Database tables created")
    except Exception as e:
        logger.error("Failed to initialize database", error=str(e))
        click.echo(f"✗ Error initializing database: {e}", err=True)
        sys.exit(1)


@cli.command("issue-token")
@click.option("--email", required=True, help="Email claim identifying the profile")
@click.option("--subject", default=None, help="Subject claim (defaults to the email)")
@click.option("--name", default=None, help="Display name claim")
def issue_token(email: str, subject: str | None, name: str | None) -> None:
    """Issue a token from the configured auth adapter (for local testing)."""
    from guildhall.auth.factory import get_auth_adapter

    configure_logging()

    claims = {"email": email}
    if name:
        claims["name"] = name

    try:
        adapter = get_auth_adapter()
        token = asyncio.run(adapter.issue_token(subject=subject or email, claims=claims))
    except Exception as e:
        click.echo(f"✗ Error issuing token: {e}", err=True)
        sys.exit(1)

    click.echo(token)


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    cli()
