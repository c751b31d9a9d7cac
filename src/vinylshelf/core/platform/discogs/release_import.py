"""Conversion of Discogs releases into local records.

The helpers take the shared :class:`DiscogsApiClient` as a parameter; they
never build their own client, so every call made during one operation goes
through the same rate limiter.
"""

from typing import Any

from loguru import logger

from vinylshelf.core.data.models.db import DataSource, Record
from vinylshelf.core.data.repositories.record_repository import RecordRepository
from vinylshelf.core.platform.discogs.api_client import DiscogsApiClient
from vinylshelf.core.platform.discogs.models import DiscogsRelease
from vinylshelf.core.platform.discogs.vinyl_metadata import (
    extract_record_size,
    extract_vinyl_color,
    is_shaped_vinyl,
)


def release_to_record_data(release: DiscogsRelease) -> dict[str, Any]:
    """Build the Discogs-sourced fields of a record from a release.

    Args:
        release: Release details or collection ``basic_information``

    Returns:
        Dictionary of record fields (without sync flag or provenance)
    """
    return {
        "artist_name": release.artist,
        "album_title": release.title,
        "year_released": release.year,
        "label_name": release.label,
        "catalog_number": release.catno,
        "discogs_uri": release.uri,
        "thumbnail_url": release.thumb_url,
        "cover_image_url": release.cover_url,
        "genres": list(release.genres),
        "styles": list(release.styles),
        "record_size": extract_record_size(release.formats),
        "vinyl_color": extract_vinyl_color(release.formats),
        "is_shaped_vinyl": is_shaped_vinyl(release.formats),
    }


def new_record_data(release: DiscogsRelease, synced: bool = False) -> dict[str, Any]:
    """Build a full insertable record from a release."""
    record_data = release_to_record_data(release)
    record_data.update(
        discogs_id=str(release.id),
        upc_code=release.barcode,
        data_source=DataSource.DISCOGS,
        is_synced_with_discogs=synced,
    )
    return record_data


def fetch_release_into_collection(
    client: DiscogsApiClient, repo: RecordRepository, release_id: int | str
) -> Record:
    """Fetch a release from Discogs and store it as a new record.

    Args:
        client: Shared Discogs client
        repo: Record repository
        release_id: Discogs release ID

    Returns:
        The stored record

    Raises:
        DiscogsApiError: If the release can't be fetched
        DuplicateKeyError: If the release is already in the local collection
    """
    release = client.get_release(release_id)
    record = repo.insert_record(new_record_data(release))
    logger.info(f"Imported Discogs release {release.id}: {release.artist} - {release.title}")
    return record


def refresh_record_from_discogs(
    client: DiscogsApiClient, repo: RecordRepository, record_id: str, discogs_id: str | None = None
) -> Record | None:
    """Refresh every Discogs-sourced field of an existing record.

    Args:
        client: Shared Discogs client
        repo: Record repository
        record_id: Local record UUID
        discogs_id: Release to pull data from (defaults to the record's own discogs_id)

    Returns:
        The updated record, or None if the record doesn't exist

    Raises:
        ValueError: If no Discogs ID is known for the record
        DiscogsApiError: If the release can't be fetched
    """
    record = repo.get_by_id(record_id)
    if record is None:
        return None

    release_id = discogs_id or record.discogs_id
    if not release_id:
        raise ValueError(f"Record {record_id} has no Discogs ID to refresh from")

    release = client.get_release(release_id)
    updated = repo.update(record_id, release_to_record_data(release))
    logger.info(f"Refreshed record {record_id} from Discogs release {release.id}")
    return updated
