"""Local record collection CLI commands."""

import click

from vinylshelf.core.data.database import init_database
from vinylshelf.core.data.exceptions import RecordStoreError
from vinylshelf.core.data.models.db import Record
from vinylshelf.core.data.repositories.record_repository import RecordRepository
from vinylshelf.core.utils.alpha_buckets import artist_sort_key, compute_buckets


def _open_repository() -> RecordRepository:
    init_database()
    return RecordRepository()


def _sorted_records(repo: RecordRepository) -> list[Record]:
    return sorted(
        repo.get_all(),
        key=lambda r: (artist_sort_key(r.artist_name).lower(), r.album_title.lower()),
    )


def _format_record(record: Record) -> str:
    year = f" ({record.year_released})" if record.year_released else ""
    extras = ", ".join(part for part in (record.record_size, record.vinyl_color) if part)
    extras = f" [{extras}]" if extras else ""
    synced = "*" if record.is_synced_with_discogs else " "
    return f"{synced} {record.record_id}  {record.artist_name} - {record.album_title}{year}{extras}"


@click.group(name="records")
def records():
    """Browse and edit the local record collection."""
    pass


@records.command(name="list", help="List records sorted by artist")
@click.option("--bucket", "bucket_label", help="Only show one alphabetical page, e.g. 'A' or 'Ba–Bm'")
@click.option("--search", "query", help="Filter by artist, title, label or catalog number")
def list_records(bucket_label: str | None, query: str | None) -> None:
    """List records, optionally restricted to one bucket or a search query."""
    repo = _open_repository()

    if query:
        matches, total = repo.search(query, limit=1000)
        click.echo(f"{total} records match '{query}'")
        for record in matches:
            click.echo(_format_record(record))
        return

    all_records = _sorted_records(repo)
    if bucket_label:
        buckets = compute_buckets((r.record_id, r.artist_name) for r in all_records)
        bucket = next((b for b in buckets if b.label == bucket_label), None)
        if bucket is None:
            labels = ", ".join(b.label for b in buckets)
            raise click.BadParameter(f"Unknown bucket. Available: {labels}", param_hint="--bucket")
        wanted = set(bucket.record_ids)
        all_records = [r for r in all_records if r.record_id in wanted]

    for record in all_records:
        click.echo(_format_record(record))
    click.echo(f"{len(all_records)} records")


@records.command(name="buckets", help="Show the alphabetical pages of the collection")
@click.option("--max-size", default=50, show_default=True, help="Maximum records per page")
def show_buckets(max_size: int) -> None:
    """Print each alphabetical page with its record count."""
    repo = _open_repository()
    buckets = compute_buckets(
        ((r.record_id, r.artist_name) for r in _sorted_records(repo)), max_size=max_size
    )

    if not buckets:
        click.echo("The collection is empty.")
        return

    for bucket in buckets:
        click.echo(f"{bucket.label:>8}  {len(bucket.record_ids)}")


@records.command(name="add", help="Add a record manually")
@click.option("--artist", required=True, help="Artist name")
@click.option("--title", required=True, help="Album title")
@click.option("--year", type=int, help="Release year")
@click.option("--label", help="Label name")
@click.option("--catno", help="Catalog number")
@click.option("--discogs-id", help="Discogs release ID, pushed to Discogs on the next sync")
def add_record(
    artist: str,
    title: str,
    year: int | None,
    label: str | None,
    catno: str | None,
    discogs_id: str | None,
) -> None:
    """Create a manual record."""
    repo = _open_repository()

    try:
        record = repo.create(
            {
                "artist_name": artist,
                "album_title": title,
                "year_released": year,
                "label_name": label,
                "catalog_number": catno,
                "discogs_id": discogs_id,
            }
        )
    except RecordStoreError as e:
        click.secho(f"Could not add record: {e}", fg="red")
        raise SystemExit(1) from e

    click.secho(f"Added {record.artist_name} - {record.album_title}", fg="green")
    click.echo(f"Record ID: {record.record_id}")


@records.command(name="delete", help="Delete a record from the local collection")
@click.argument("record_id")
@click.option("--yes", is_flag=True, default=False, help="Don't ask for confirmation")
def delete_record(record_id: str, yes: bool) -> None:
    """Delete a local record. The Discogs collection is left untouched."""
    repo = _open_repository()
    record = repo.get_by_id(record_id)
    if record is None:
        click.secho(f"Record {record_id} not found.", fg="red")
        raise SystemExit(1)

    if not yes and not click.confirm(f"Delete {record.artist_name} - {record.album_title}?"):
        click.echo("Cancelled.")
        return

    repo.delete(record_id)
    click.secho("Record deleted.", fg="green")
