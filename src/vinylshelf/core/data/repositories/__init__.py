"""Repository package for database access."""

from vinylshelf.core.data.repositories.record_repository import RecordRepository

__all__ = [
    "RecordRepository",
]
