"""Discogs collection synchronization."""

from vinylshelf.core.sync.progress_stream import format_sse, sync_event_stream
from vinylshelf.core.sync.sync_engine import SyncEngine, SyncPhase, SyncProgress

__all__ = [
    "SyncEngine",
    "SyncPhase",
    "SyncProgress",
    "format_sse",
    "sync_event_stream",
]
