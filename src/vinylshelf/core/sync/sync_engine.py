"""Two-way synchronization between the local collection and a Discogs collection.

A run has two sequential phases:

* **pull**: page through the remote collection and insert every release that
  is not yet stored locally;
* **push**: add every local record with a Discogs ID that the remote
  collection did not contain to the user's Discogs collection.

Nothing is ever deleted on either side. Per-item failures are collected into
the progress ``errors`` list; only a missing username aborts the run.

Concurrent runs against the same store are not serialized here. Callers that
can trigger several syncs at once must run them one at a time.
"""

import threading
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

from loguru import logger

from vinylshelf.core.data.exceptions import RecordStoreError
from vinylshelf.core.data.types import RecordStore, SyncCandidate
from vinylshelf.core.platform.discogs.api_client import DiscogsApiClient
from vinylshelf.core.platform.discogs.exceptions import DiscogsApiError, DiscogsConfigError
from vinylshelf.core.platform.discogs.models import DiscogsCollectionItem
from vinylshelf.core.platform.discogs.release_import import new_record_data

__all__ = [
    "SyncEngine",
    "SyncPhase",
    "SyncProgress",
    "collection_item_to_record_data",
]

DEFAULT_PAGE_SIZE = 100


class SyncPhase(str, Enum):
    """Phase of a sync run. Phases only ever move forward."""

    PULL = "pull"
    PUSH = "push"
    DONE = "done"


@dataclass
class SyncProgress:
    """Counters and errors of a sync run."""

    phase: SyncPhase = SyncPhase.PULL
    pulled: int = 0
    pushed: int = 0
    skipped: int = 0
    errors: list[str] = field(default_factory=list)
    total_remote_items: int = 0

    @property
    def is_done(self) -> bool:
        return self.phase is SyncPhase.DONE

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    def snapshot(self) -> "SyncProgress":
        """Return an independent copy safe to hand to consumers."""
        return replace(self, errors=list(self.errors))

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the progress wire shape."""
        return {
            "phase": self.phase.value,
            "pulled": self.pulled,
            "pushed": self.pushed,
            "skipped": self.skipped,
            "errors": list(self.errors),
            "totalRemoteItems": self.total_remote_items,
        }


def collection_item_to_record_data(item: DiscogsCollectionItem) -> dict[str, Any]:
    """Convert a remote collection entry into an insertable record.

    Args:
        item: Entry of the user's Discogs collection

    Returns:
        Record fields with ``data_source=discogs`` and the synced flag set
    """
    return new_record_data(item.release, synced=True)


class SyncEngine:
    """Reconciles a local record store with a user's Discogs collection."""

    def __init__(
        self,
        client: DiscogsApiClient,
        store: RecordStore,
        username: str | None,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        """Initialize the sync engine.

        Args:
            client: The single Discogs client used for the whole run
            store: Local record store
            username: Discogs username owning the remote collection
            page_size: Collection page size (Discogs max is 100)
        """
        self.client = client
        self.store = store
        self.username = username
        self.page_size = page_size

    def run(
        self,
        on_progress: Callable[[SyncProgress], None] | None = None,
        cancel_event: threading.Event | None = None,
    ) -> SyncProgress:
        """Run a full sync, reporting each progress snapshot to a callback.

        Args:
            on_progress: Called with every snapshot, in order
            cancel_event: When set, no further remote calls are made

        Returns:
            The last snapshot; its phase is ``done`` unless the run was cancelled

        Raises:
            DiscogsConfigError: If no username is configured
        """
        final = SyncProgress()
        for snapshot in self.iter_progress(cancel_event):
            if on_progress is not None:
                on_progress(snapshot)
            final = snapshot
        return final

    def iter_progress(self, cancel_event: threading.Event | None = None) -> Iterator[SyncProgress]:
        """Start a sync run and return its stream of progress snapshots.

        The stream is finite and can only be consumed once. The username is
        checked eagerly, before any remote call and before the stream starts.

        Args:
            cancel_event: When set, the run stops before its next remote call

        Returns:
            Iterator of snapshots: ``pull`` events, then ``push`` events, then one ``done``

        Raises:
            DiscogsConfigError: If no username is configured
        """
        if not self.username:
            raise DiscogsConfigError("DISCOGS_USERNAME is required for sync")
        return self._run(self.username, cancel_event or threading.Event())

    def _run(self, username: str, cancel_event: threading.Event) -> Iterator[SyncProgress]:
        progress = SyncProgress()
        seen_remote: set[str] = set()

        logger.info(f"Starting Discogs sync for {username}")
        yield progress.snapshot()

        # --- Pull phase: Discogs -> local store ---
        for snapshot in self._pull(username, progress, seen_remote, cancel_event):
            yield snapshot
        if cancel_event.is_set():
            logger.warning("Sync cancelled during pull phase")
            return

        # --- Push phase: local store -> Discogs ---
        progress.phase = SyncPhase.PUSH
        logger.info(f"Pull complete: {progress.pulled} pulled, {progress.skipped} skipped")
        yield progress.snapshot()

        for snapshot in self._push(username, progress, seen_remote, cancel_event):
            yield snapshot
        if cancel_event.is_set():
            logger.warning("Sync cancelled during push phase")
            return

        progress.phase = SyncPhase.DONE
        logger.info(
            f"Sync finished: {progress.pulled} pulled, {progress.pushed} pushed, "
            f"{progress.skipped} skipped, {len(progress.errors)} errors"
        )
        yield progress.snapshot()

    def _record_error(self, progress: SyncProgress, message: str) -> None:
        logger.warning(message)
        progress.errors.append(message)

    def _pull(
        self,
        username: str,
        progress: SyncProgress,
        seen_remote: set[str],
        cancel_event: threading.Event,
    ) -> Iterator[SyncProgress]:
        try:
            known_ids = set(self.store.find_all_discogs_ids())
        except Exception as e:
            # Inserts still run; duplicates then surface as skips
            self._record_error(progress, f"Pull: failed to load local Discogs IDs: {e}")
            known_ids = set()

        page = 1
        total_pages = 1
        while page <= total_pages:
            if cancel_event.is_set():
                return

            try:
                collection_page = self.client.get_user_collection(username, page, self.page_size)
            except Exception as e:
                # Without this page the remaining page count is unknown
                self._record_error(progress, f"Pull page {page}: {e}")
                yield progress.snapshot()
                break

            total_pages = collection_page.pagination.pages
            progress.total_remote_items = collection_page.pagination.items
            logger.debug(
                f"Fetched collection page {page}/{total_pages} "
                f"({len(collection_page.items)} items)"
            )

            for item in collection_page.items:
                self._pull_item(item, progress, known_ids, seen_remote)
            for position, reason in collection_page.malformed_items:
                self._record_error(progress, f"Pull page {page} item {position}: {reason}")

            yield progress.snapshot()
            page += 1

        if seen_remote:
            try:
                self.store.update_synced_flag(seen_remote, True)
            except Exception as e:
                self._record_error(progress, f"Pull: failed to update sync flags: {e}")

    def _pull_item(
        self,
        item: DiscogsCollectionItem,
        progress: SyncProgress,
        known_ids: set[str],
        seen_remote: set[str],
    ) -> None:
        discogs_id = item.release_id
        seen_remote.add(discogs_id)

        if discogs_id in known_ids:
            progress.skipped += 1
            return

        try:
            self.store.insert_record(collection_item_to_record_data(item))
        except RecordStoreError as e:
            if e.is_duplicate_key:
                progress.skipped += 1
                known_ids.add(discogs_id)
            else:
                self._record_error(progress, f"Pull {discogs_id}: {e}")
            return
        except Exception as e:
            self._record_error(progress, f"Pull {discogs_id}: {e}")
            return

        progress.pulled += 1
        known_ids.add(discogs_id)

    def _push(
        self,
        username: str,
        progress: SyncProgress,
        seen_remote: set[str],
        cancel_event: threading.Event,
    ) -> Iterator[SyncProgress]:
        try:
            candidates = self.store.find_records_with_discogs_id()
        except Exception as e:
            self._record_error(progress, f"Push: failed to load local records: {e}")
            return

        to_push = [
            candidate
            for candidate in candidates
            if not candidate.is_synced_with_discogs and candidate.discogs_id not in seen_remote
        ]
        logger.info(f"{len(to_push)} local records to push to Discogs")

        for candidate in to_push:
            if cancel_event.is_set():
                return
            self._push_record(username, candidate, progress)
            yield progress.snapshot()

    def _push_record(self, username: str, candidate: SyncCandidate, progress: SyncProgress) -> None:
        try:
            self.client.add_to_collection(username, candidate.discogs_id)
        except DiscogsApiError as e:
            if not e.is_conflict:
                self._record_error(progress, f"Push {candidate.discogs_id}: {e}")
                return
            # 409: the release is already in the remote collection
            logger.debug(f"Release {candidate.discogs_id} already in Discogs collection")
        except Exception as e:
            self._record_error(progress, f"Push {candidate.discogs_id}: {e}")
            return

        try:
            self.store.mark_record_synced(candidate.record_id)
        except Exception as e:
            self._record_error(progress, f"Push {candidate.discogs_id}: {e}")
            return

        progress.pushed += 1
