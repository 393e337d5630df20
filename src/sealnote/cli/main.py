"""SealNote CLI — run the server and poke at it locally.

Usage:
    sealnote serve                      # Run the API with uvicorn
    sealnote init-db                    # Create tables (dev; prod uses alembic)
    sealnote issue-token <uuid>         # Sign a gateway token for local testing
"""

from __future__ import annotations

import asyncio
import uuid

import click

from sealnote.config import settings


@click.group()
def cli():
    """SealNote — password-gated project messages."""


@cli.command()
@click.option("--host", default=None, help="Bind address (default: SEALNOTE_HOST).")
@click.option("--port", default=None, type=int, help="Port (default: SEALNOTE_PORT).")
@click.option("--reload", is_flag=True, help="Auto-reload on code changes.")
def serve(host: str | None, port: int | None, reload: bool):
    """Run the HTTP API."""
    import uvicorn

    uvicorn.run(
        "sealnote.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
    )


@cli.command("init-db")
def init_db_command():
    """Create all tables in SEALNOTE_DATABASE_URL."""
    from sealnote.db.engine import init_db

    asyncio.run(init_db())
    click.echo("Database tables created.")


@cli.command("issue-token")
@click.argument("user_uuid")
@click.option(
    "--expires-minutes",
    default=None,
    type=int,
    help="Lifetime (default: SEALNOTE_TOKEN_EXPIRE_MINUTES).",
)
def issue_token(user_uuid: str, expires_minutes: int | None):
    """Sign a token the way the gateway would, for USER_UUID."""
    from sealnote.auth.jwt import create_token

    try:
        uuid.UUID(user_uuid)
    except ValueError:
        raise click.BadParameter("must be a UUID", param_hint="USER_UUID")

    if settings.environment == "production":
        raise click.UsageError("issue-token is disabled in production")

    click.echo(create_token(user_uuid, expires_minutes=expires_minutes))
    click.echo(f"# send it as the '{settings.auth_header_name}' header", err=True)
