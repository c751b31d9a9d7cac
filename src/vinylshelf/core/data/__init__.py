"""Data management module for vinylshelf."""

from vinylshelf.core.data.database import get_engine, get_session, init_database, session_scope
from vinylshelf.core.data.exceptions import DuplicateKeyError, RecordStoreError, StoreErrorKind
from vinylshelf.core.data.repositories.record_repository import RecordRepository
from vinylshelf.core.data.types import RecordStore, SyncCandidate

__all__ = [
    "get_engine",
    "get_session",
    "init_database",
    "session_scope",
    "DuplicateKeyError",
    "RecordStoreError",
    "StoreErrorKind",
    "RecordRepository",
    "RecordStore",
    "SyncCandidate",
]
