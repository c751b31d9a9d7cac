"""Database CLI commands."""

import os
from pathlib import Path

import click
from loguru import logger

from vinylshelf.core.data.database import get_db_path, init_database


@click.group(name="database")
def database():
    """Database management commands for vinylshelf."""
    pass


@database.command(name="init", help="Initialize a new database")
@click.option(
    "--force/--no-force",
    default=False,
    help="Recreate the database even if one already exists",
)
@click.option(
    "--path",
    type=click.Path(),
    help="Custom SQLite database path (default: DATABASE_URL or app data directory)",
)
def init_db(force: bool, path: str | None) -> None:
    """Initialize the vinylshelf database.

    Args:
        force: Whether to delete an existing SQLite database first
        path: Optional custom database path
    """
    if path is None and os.getenv("DATABASE_URL"):
        init_database()
        click.secho("Database schema created.", fg="green")
        return

    db_path = Path(path) if path else get_db_path()

    if db_path.exists():
        if not force:
            click.secho(f"Database already exists at {db_path}", fg="yellow")
            if not click.confirm("Do you want to reinitialize the database? All data will be lost."):
                click.echo("Database initialization cancelled.")
                return

        click.echo(f"Removing existing database at {db_path}")
        for suffix in ("", "-wal", "-shm", "-journal"):
            candidate = db_path.with_name(f"{db_path.name}{suffix}")
            if candidate.exists():
                os.remove(candidate)

    init_database(db_path)
    logger.success(f"Database initialized at {db_path}")
    click.secho(f"Database initialized at {db_path}", fg="green")
