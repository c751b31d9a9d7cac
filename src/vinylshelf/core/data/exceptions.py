"""Errors raised by the record store."""

from enum import Enum


class StoreErrorKind(Enum):
    """Classification of a failed store write."""

    DUPLICATE_KEY = "duplicate_key"
    OTHER = "other"


class RecordStoreError(Exception):
    """A record store operation failed."""

    kind = StoreErrorKind.OTHER

    @property
    def is_duplicate_key(self) -> bool:
        return self.kind is StoreErrorKind.DUPLICATE_KEY


class DuplicateKeyError(RecordStoreError):
    """A write violated the uniqueness of ``discogs_id``."""

    kind = StoreErrorKind.DUPLICATE_KEY
