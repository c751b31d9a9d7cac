"""Record repository for database operations."""

from collections.abc import Iterable
from typing import Any

from loguru import logger
from sqlalchemy import or_, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from vinylshelf.core.data.database import get_session, utc_now
from vinylshelf.core.data.exceptions import DuplicateKeyError, RecordStoreError
from vinylshelf.core.data.models.db import DataSource, Record
from vinylshelf.core.data.types import SyncCandidate

# Bound on the number of ids in a single IN (...) clause
SYNC_FLAG_BATCH_SIZE = 500

# Fields a caller may set through create/update
RECORD_FIELDS = frozenset(
    {
        "artist_name",
        "album_title",
        "year_released",
        "label_name",
        "catalog_number",
        "discogs_id",
        "discogs_uri",
        "is_synced_with_discogs",
        "thumbnail_url",
        "cover_image_url",
        "genres",
        "styles",
        "upc_code",
        "record_size",
        "vinyl_color",
        "is_shaped_vinyl",
        "data_source",
    }
)


class RecordRepository:
    """Repository for record-related database operations."""

    def __init__(self, session: Session | None = None, batch_size: int = SYNC_FLAG_BATCH_SIZE) -> None:
        """Initialize the repository with a database session.

        Args:
            session: SQLAlchemy session (creates a new one if not provided)
            batch_size: Maximum number of ids per batched update
        """
        self.session = session or get_session()
        self.batch_size = batch_size

    # === Lookups ===

    def get_by_id(self, record_id: str) -> Record | None:
        """Get a record by its ID.

        Args:
            record_id: The record UUID

        Returns:
            The record if found, None otherwise
        """
        return self.session.get(Record, record_id)

    def get_by_discogs_id(self, discogs_id: str) -> Record | None:
        """Get a record by its Discogs release ID.

        Args:
            discogs_id: The Discogs release ID

        Returns:
            The record if found, None otherwise
        """
        return self.session.scalars(
            select(Record).where(Record.discogs_id == str(discogs_id))
        ).first()

    def get_all(self) -> list[Record]:
        """Get all records, oldest first."""
        return list(self.session.scalars(select(Record).order_by(Record.created_at)))

    def search(self, query: str, limit: int = 50, offset: int = 0) -> tuple[list[Record], int]:
        """Search records by artist, title, label or catalog number.

        Args:
            query: The search query
            limit: Maximum number of results to return
            offset: Number of results to skip

        Returns:
            Tuple of (list of records, total count)
        """
        search_term = f"%{query}%"
        condition = or_(
            Record.artist_name.ilike(search_term),
            Record.album_title.ilike(search_term),
            Record.label_name.ilike(search_term),
            Record.catalog_number.ilike(search_term),
        )

        matches = list(
            self.session.scalars(
                select(Record).where(condition).order_by(Record.artist_name, Record.album_title)
            )
        )
        return matches[offset : offset + limit], len(matches)

    # === Writes ===

    def insert_record(self, record_data: dict[str, Any]) -> Record:
        """Insert a new record.

        Args:
            record_data: Dictionary with record fields (snake_case)

        Returns:
            The created record

        Raises:
            DuplicateKeyError: If a record with the same discogs_id exists
            RecordStoreError: On any other write failure
        """
        unknown = set(record_data) - RECORD_FIELDS
        if unknown:
            raise RecordStoreError(f"Unknown record fields: {sorted(unknown)}")

        now = utc_now()
        record = Record(**record_data)
        record.genres = list(record_data.get("genres") or [])
        record.styles = list(record_data.get("styles") or [])
        record.created_at = now
        record.updated_at = now

        try:
            self.session.add(record)
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            discogs_id = record_data.get("discogs_id")
            # Re-check instead of parsing driver messages
            if discogs_id is not None and self.get_by_discogs_id(discogs_id) is not None:
                raise DuplicateKeyError(
                    f"Record with discogs_id {discogs_id} already exists"
                ) from e
            raise RecordStoreError(f"Failed to insert record: {e.orig}") from e
        except SQLAlchemyError as e:
            self.session.rollback()
            raise RecordStoreError(f"Failed to insert record: {e}") from e

        return record

    def create(self, record_data: dict[str, Any]) -> Record:
        """Create a manually entered record.

        Args:
            record_data: Dictionary with record fields

        Returns:
            The created record
        """
        return self.insert_record({"data_source": DataSource.MANUAL, **record_data})

    def update(self, record_id: str, record_data: dict[str, Any]) -> Record | None:
        """Update an existing record and stamp ``updated_at``.

        Args:
            record_id: The record UUID
            record_data: Dictionary with updated fields

        Returns:
            The updated record if found, None otherwise

        Raises:
            DuplicateKeyError: If another record already holds the new discogs_id
            RecordStoreError: On any other write failure
        """
        unknown = set(record_data) - RECORD_FIELDS
        if unknown:
            raise RecordStoreError(f"Unknown record fields: {sorted(unknown)}")

        record = self.get_by_id(record_id)
        if not record:
            return None

        for key, value in record_data.items():
            setattr(record, key, value)
        record.updated_at = utc_now()

        try:
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            discogs_id = record_data.get("discogs_id")
            if discogs_id is not None:
                holder = self.get_by_discogs_id(discogs_id)
                if holder is not None and holder.record_id != record_id:
                    raise DuplicateKeyError(f"discogs_id {discogs_id} already in use") from e
            raise RecordStoreError(f"Failed to update record {record_id}: {e.orig}") from e
        except SQLAlchemyError as e:
            self.session.rollback()
            raise RecordStoreError(f"Failed to update record {record_id}: {e}") from e
        return record

    def delete(self, record_id: str) -> bool:
        """Delete a record by its ID.

        Args:
            record_id: The record UUID

        Returns:
            True if deleted, False if not found
        """
        record = self.get_by_id(record_id)
        if not record:
            return False

        self.session.delete(record)
        self.session.commit()
        return True

    # === Sync support ===

    def find_all_discogs_ids(self) -> set[str]:
        """Get every non-null discogs_id in one query."""
        return set(
            self.session.scalars(select(Record.discogs_id).where(Record.discogs_id.is_not(None)))
        )

    def find_records_with_discogs_id(self) -> list[SyncCandidate]:
        """Get the sync view of every record that has a discogs_id."""
        rows = self.session.execute(
            select(Record.record_id, Record.discogs_id, Record.is_synced_with_discogs)
            .where(Record.discogs_id.is_not(None))
            .order_by(Record.created_at)
        )
        return [
            SyncCandidate(record_id=row[0], discogs_id=row[1], is_synced_with_discogs=bool(row[2]))
            for row in rows
        ]

    def update_synced_flag(self, discogs_ids: Iterable[str], synced: bool = True) -> int:
        """Set ``is_synced_with_discogs`` for records with the given Discogs IDs.

        Args:
            discogs_ids: Discogs release IDs
            synced: Flag value to set

        Returns:
            Number of rows updated
        """
        ids = sorted(set(discogs_ids))
        updated = 0
        now = utc_now()

        try:
            for start in range(0, len(ids), self.batch_size):
                chunk = ids[start : start + self.batch_size]
                result = self.session.execute(
                    update(Record)
                    .where(Record.discogs_id.in_(chunk))
                    .values(is_synced_with_discogs=synced, updated_at=now)
                )
                updated += result.rowcount or 0
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            raise RecordStoreError(f"Failed to update sync flags: {e}") from e

        logger.debug(f"Marked {updated} records as synced={synced}")
        return updated

    def mark_record_synced(self, record_id: str) -> None:
        """Flag a single record as present in the Discogs collection.

        Args:
            record_id: The record UUID
        """
        try:
            self.session.execute(
                update(Record)
                .where(Record.record_id == record_id)
                .values(is_synced_with_discogs=True, updated_at=utc_now())
            )
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            raise RecordStoreError(f"Failed to mark record {record_id} synced: {e}") from e
