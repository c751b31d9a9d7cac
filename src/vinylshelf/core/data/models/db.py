"""Core database models for vinylshelf."""

import uuid
from datetime import datetime
from enum import Enum
from typing import Any

from sqlalchemy import JSON, Boolean, DateTime, Integer, String, Text
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column

from vinylshelf.core.data.database import Base, utc_now


class DataSource(str, Enum):
    """Where a record's data came from."""

    DISCOGS = "discogs"
    MANUAL = "manual"


def new_record_id() -> str:
    return str(uuid.uuid4())


class Record(Base):
    """A vinyl record in the collection.

    ``discogs_id`` is the join key between the local collection and the remote
    Discogs collection and is unique when present. Text columns store arbitrary
    Unicode (Björk, Motörhead, 坂本龍一) untouched.
    """

    __tablename__ = "records"

    record_id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_record_id)

    artist_name: Mapped[str] = mapped_column(Text, nullable=False)
    album_title: Mapped[str] = mapped_column(Text, nullable=False)

    year_released: Mapped[int | None] = mapped_column(Integer, nullable=True)
    label_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    catalog_number: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Discogs-specific data
    discogs_id: Mapped[str | None] = mapped_column(String(32), nullable=True, unique=True)
    discogs_uri: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Last observation of the sync engine, display only
    is_synced_with_discogs: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # Album artwork
    thumbnail_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    cover_image_url: Mapped[str | None] = mapped_column(Text, nullable=True)

    genres: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    styles: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    upc_code: Mapped[str | None] = mapped_column(String(64), nullable=True)

    # Vinyl-specific information, e.g. '12"', 'Blue Marble'
    record_size: Mapped[str | None] = mapped_column(String(64), nullable=True)
    vinyl_color: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_shaped_vinyl: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    data_source: Mapped[DataSource] = mapped_column(
        SQLEnum(DataSource, values_callable=lambda e: [m.value for m in e], name="data_source"),
        default=DataSource.DISCOGS,
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now)

    def __repr__(self) -> str:
        """String representation of Record."""
        return f"<Record {self.record_id}: {self.artist_name} - {self.album_title} (Discogs ID: {self.discogs_id})>"

    def to_dict(self) -> dict[str, Any]:
        """Serialize the record with camelCase keys for JSON output."""
        return {
            "recordId": self.record_id,
            "artistName": self.artist_name,
            "albumTitle": self.album_title,
            "yearReleased": self.year_released,
            "labelName": self.label_name,
            "catalogNumber": self.catalog_number,
            "discogsId": self.discogs_id,
            "discogsUri": self.discogs_uri,
            "isSyncedWithDiscogs": self.is_synced_with_discogs,
            "thumbnailUrl": self.thumbnail_url,
            "coverImageUrl": self.cover_image_url,
            "genres": list(self.genres or []),
            "styles": list(self.styles or []),
            "upcCode": self.upc_code,
            "recordSize": self.record_size,
            "vinylColor": self.vinyl_color,
            "isShapedVinyl": self.is_shaped_vinyl,
            "dataSource": self.data_source.value if self.data_source else None,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }
