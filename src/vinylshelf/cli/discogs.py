"""Discogs CLI commands."""

import click
from loguru import logger

from vinylshelf.config.config_manager import DiscogsSettings, load_discogs_settings, sync_readiness
from vinylshelf.core.data.database import init_database
from vinylshelf.core.data.exceptions import DuplicateKeyError
from vinylshelf.core.data.repositories.record_repository import RecordRepository
from vinylshelf.core.platform.discogs.api_client import DiscogsApiClient
from vinylshelf.core.platform.discogs.exceptions import DiscogsApiError, DiscogsConfigError
from vinylshelf.core.platform.discogs.models import DiscogsSearchResult
from vinylshelf.core.platform.discogs.release_import import (
    fetch_release_into_collection,
    refresh_record_from_discogs,
)
from vinylshelf.core.sync.progress_stream import sync_event_stream
from vinylshelf.core.sync.sync_engine import SyncEngine, SyncProgress


def _create_client(settings: DiscogsSettings) -> DiscogsApiClient:
    # One client per command so every request shares one rate limiter
    return DiscogsApiClient(user_agent=settings.user_agent, token=settings.token)


def _open_repository() -> RecordRepository:
    init_database()
    return RecordRepository()


def _print_search_results(results: list[DiscogsSearchResult]) -> None:
    if not results:
        click.secho("No vinyl releases found.", fg="yellow")
        return

    click.echo(f"Found {len(results)} vinyl releases:")
    for result in results:
        details = ", ".join(part for part in (result.year, result.catno) if part)
        suffix = f" ({details})" if details else ""
        click.echo(f"  [{result.id}] {result.title}{suffix}")


@click.group(name="discogs")
def discogs():
    """Discogs commands for vinylshelf."""
    pass


@discogs.command(name="status", help="Check whether Discogs sync is configured")
def check_discogs_status() -> None:
    """Report which Discogs settings are missing for sync."""
    settings = load_discogs_settings()
    readiness = sync_readiness(settings)

    if readiness["ready"]:
        click.secho("Discogs sync is configured.", fg="green")
        click.echo(f"Username: {settings.username}")
    else:
        click.secho("Discogs sync is not configured.", fg="yellow")
        click.echo(f"Missing: {', '.join(readiness['missing'])}")
        click.echo("Set them in your environment or in a .env file.")

    auth = "token" if settings.token else "anonymous"
    click.echo(f"User agent: {settings.user_agent} ({auth})")


@discogs.command(name="sync", help="Sync the local collection with your Discogs collection")
@click.option(
    "--json",
    "as_json",
    is_flag=True,
    default=False,
    help="Print progress as server-sent events instead of text",
)
def sync_collection(as_json: bool) -> None:
    """Pull the Discogs collection into the local store, then push local additions.

    Args:
        as_json: Whether to print SSE frames
    """
    settings = load_discogs_settings()
    engine = SyncEngine(_create_client(settings), _open_repository(), settings.username)

    if as_json:
        for frame in sync_event_stream(engine):
            click.echo(frame, nl=False)
        return

    def report(progress: SyncProgress) -> None:
        click.echo(
            f"[{progress.phase.value}] pulled={progress.pulled} pushed={progress.pushed} "
            f"skipped={progress.skipped} errors={len(progress.errors)} "
            f"remote={progress.total_remote_items}"
        )

    try:
        final = engine.run(on_progress=report)
    except DiscogsConfigError as e:
        click.secho(f"Cannot sync: {e}", fg="red")
        raise SystemExit(1) from e

    if final.has_errors:
        click.secho(f"Sync finished with {len(final.errors)} errors:", fg="yellow")
        for error in final.errors:
            click.echo(f"  {error}")
    else:
        click.secho("Sync finished.", fg="green")


@discogs.command(name="search", help="Search Discogs for vinyl releases")
@click.option("--catno", help="Catalog number")
@click.option("--barcode", help="UPC/EAN barcode")
@click.option("--artist", help="Artist name (use with --title)")
@click.option("--title", help="Release title (use with --artist)")
def search_releases(
    catno: str | None, barcode: str | None, artist: str | None, title: str | None
) -> None:
    """Search vinyl releases by catalog number, barcode, or artist and title."""
    client = _create_client(load_discogs_settings())

    try:
        if catno:
            results = client.search_by_catalog_number(catno)
        elif barcode:
            results = client.search_by_upc(barcode)
        elif artist and title:
            results = client.search_by_artist_and_title(artist, title)
        else:
            raise click.UsageError("Provide --catno, --barcode, or both --artist and --title")
    except DiscogsApiError as e:
        click.secho(f"Search failed: {e}", fg="red")
        raise SystemExit(1) from e

    _print_search_results(results)


@discogs.command(name="fetch", help="Add a Discogs release to the local collection")
@click.argument("release_id", type=int)
def fetch_release(release_id: int) -> None:
    """Fetch a release by ID and store it locally.

    Args:
        release_id: Discogs release ID
    """
    client = _create_client(load_discogs_settings())
    repo = _open_repository()

    try:
        record = fetch_release_into_collection(client, repo, release_id)
    except DuplicateKeyError:
        click.secho(f"Release {release_id} is already in your collection.", fg="yellow")
        return
    except DiscogsApiError as e:
        logger.error(f"Failed to fetch release {release_id}: {e}")
        click.secho(f"Could not fetch release {release_id}: {e}", fg="red")
        raise SystemExit(1) from e

    click.secho(f"Added {record.artist_name} - {record.album_title}", fg="green")
    click.echo(f"Record ID: {record.record_id}")


@discogs.command(name="refresh", help="Refresh a local record from Discogs")
@click.argument("record_id")
@click.option("--discogs-id", help="Take data from this release instead of the linked one")
def refresh_record(record_id: str, discogs_id: str | None) -> None:
    """Overwrite the Discogs-sourced fields of a record with fresh data.

    Args:
        record_id: Local record ID
        discogs_id: Optional release ID to take data from
    """
    client = _create_client(load_discogs_settings())
    repo = _open_repository()

    try:
        record = refresh_record_from_discogs(client, repo, record_id, discogs_id)
    except ValueError as e:
        click.secho(str(e), fg="red")
        raise SystemExit(1) from e
    except DiscogsApiError as e:
        click.secho(f"Could not refresh record {record_id}: {e}", fg="red")
        raise SystemExit(1) from e

    if record is None:
        click.secho(f"Record {record_id} not found.", fg="red")
        raise SystemExit(1)

    click.secho(f"Refreshed {record.artist_name} - {record.album_title}", fg="green")
