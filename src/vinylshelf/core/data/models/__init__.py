"""Database models for vinylshelf."""

from vinylshelf.core.data.models.db import DataSource, Record

__all__ = [
    "DataSource",
    "Record",
]
