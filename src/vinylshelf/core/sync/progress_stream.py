"""Server-sent-event framing for sync progress."""

import json
import threading
from collections.abc import Iterator
from typing import Any

from loguru import logger

from vinylshelf.core.platform.discogs.exceptions import DiscogsConfigError
from vinylshelf.core.sync.sync_engine import SyncEngine, SyncPhase, SyncProgress


def format_sse(payload: SyncProgress | dict[str, Any]) -> str:
    """Frame a progress snapshot as one server-sent event.

    Args:
        payload: Snapshot or already-serialized snapshot

    Returns:
        ``data: <json>`` followed by a blank line
    """
    if isinstance(payload, SyncProgress):
        payload = payload.to_dict()
    return f"data: {json.dumps(payload, ensure_ascii=False)}\n\n"


def fatal_progress(message: str) -> SyncProgress:
    """Build the terminal snapshot reported when a run could not start."""
    return SyncProgress(phase=SyncPhase.DONE, errors=[message])


def sync_event_stream(
    engine: SyncEngine, cancel_event: threading.Event | None = None
) -> Iterator[str]:
    """Run a sync and yield each snapshot as a server-sent event.

    A consumer always receives a terminal ``done`` event when the run could
    not start (e.g. missing username); the error message is carried in
    ``errors``.

    Args:
        engine: Configured sync engine
        cancel_event: Optional cancellation flag passed to the engine

    Yields:
        SSE frames
    """
    try:
        snapshots = engine.iter_progress(cancel_event)
    except DiscogsConfigError as e:
        logger.error(f"Sync could not start: {e}")
        yield format_sse(fatal_progress(str(e)))
        return

    for snapshot in snapshots:
        yield format_sse(snapshot)
