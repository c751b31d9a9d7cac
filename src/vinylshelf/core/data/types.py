"""Type definitions shared between the record store and its consumers."""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from vinylshelf.core.data.models.db import Record


@dataclass(frozen=True)
class SyncCandidate:
    """Minimal view of a local record considered for pushing to Discogs."""

    record_id: str
    discogs_id: str
    is_synced_with_discogs: bool


@runtime_checkable
class RecordStore(Protocol):
    """Persistence operations the sync engine depends on.

    ``insert_record`` must raise
    :class:`~vinylshelf.core.data.exceptions.DuplicateKeyError` when the
    record's ``discogs_id`` is already taken, and
    :class:`~vinylshelf.core.data.exceptions.RecordStoreError` for any other
    write failure.
    """

    def find_all_discogs_ids(self) -> set[str]: ...

    def insert_record(self, record_data: dict[str, Any]) -> Record: ...

    def update_synced_flag(self, discogs_ids: Iterable[str], synced: bool = True) -> int: ...

    def find_records_with_discogs_id(self) -> list[SyncCandidate]: ...

    def mark_record_synced(self, record_id: str) -> None: ...
