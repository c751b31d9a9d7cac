"""Main CLI entry point for vinylshelf."""

import click

from vinylshelf.cli.database import database
from vinylshelf.cli.discogs import discogs
from vinylshelf.cli.records import records
from vinylshelf.core.utils.logging import configure_logging


@click.group()
@click.version_option(package_name="vinylshelf")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """vinylshelf - a personal vinyl collection synced with Discogs."""
    configure_logging(verbose)


# Add subcommands
cli.add_command(database)
cli.add_command(discogs)
cli.add_command(records)


if __name__ == "__main__":
    cli()
