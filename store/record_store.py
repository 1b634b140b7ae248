"""
Record store for application records.

The store is the single owned copy of the user's applications. It is
mutated only through the entry points below (load, optimistic status
writes and their resolution, removal, invalidation), so the
optimistic-update and revert discipline stays auditable.
"""

import logging
from typing import Dict, Iterable, List, Optional, Union

from models.application import ApplicationRecord
from models.status import ApplicationStatus

logger = logging.getLogger(__name__)


class RecordStore:
    """
    Ordered, id-indexed cache of application records.

    ``stale`` is set by ``invalidate()`` and cleared by ``load()``; readers
    call ``ensure_fresh`` (see ``store.session``) before deriving views.

    Pending optimistic statuses are kept as overlays. They are applied to
    the cached record immediately and re-applied on top of freshly loaded
    records until the move that wrote them resolves, so a refresh never
    rolls back an in-flight move.
    """

    def __init__(self, records: Optional[Iterable[ApplicationRecord]] = None):
        self._records: Dict[str, ApplicationRecord] = {}
        self._overlays: Dict[str, Union[ApplicationStatus, str]] = {}
        self.stale = True
        self.version = 0
        if records is not None:
            self.load(records)

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, record_id: str) -> bool:
        return record_id in self._records

    def records(self) -> List[ApplicationRecord]:
        """Snapshot of all records, in load order."""
        return list(self._records.values())

    def get(self, record_id: str) -> Optional[ApplicationRecord]:
        return self._records.get(record_id)

    def load(self, records: Iterable[ApplicationRecord]) -> None:
        """Replace the cached records with a fresh fetch and clear ``stale``."""
        fresh: Dict[str, ApplicationRecord] = {}
        for record in records:
            overlay = self._overlays.get(record.id)
            if overlay is not None:
                record = record.with_status(overlay)
            fresh[record.id] = record
        self._records = fresh
        self.stale = False
        self._bump()
        logger.debug(f"Record store loaded {len(fresh)} records")

    def upsert(self, record: ApplicationRecord) -> None:
        """Insert or replace one record (e.g. after a create or full update)."""
        overlay = self._overlays.get(record.id)
        if overlay is not None:
            record = record.with_status(overlay)
        self._records[record.id] = record
        self._bump()

    def remove(self, record_id: str) -> Optional[ApplicationRecord]:
        """Drop a record (deleted here or by another session)."""
        self._overlays.pop(record_id, None)
        removed = self._records.pop(record_id, None)
        if removed is not None:
            self._bump()
        return removed

    def invalidate(self) -> None:
        """Mark the cache stale so the next read re-fetches from the backend."""
        self.stale = True

    def write_optimistic(
        self, record_id: str, status: Union[ApplicationStatus, str]
    ) -> Optional[ApplicationRecord]:
        """
        Write ``status`` into the cached record ahead of server confirmation.

        Returns:
            The record as it was before the write, or None if it is not cached
        """
        previous = self._records.get(record_id)
        if previous is None:
            return None
        self._overlays[record_id] = status
        self._records[record_id] = previous.with_status(status)
        self._bump()
        return previous

    def settle(self, record_id: str) -> None:
        """Drop the overlay for a resolved move, keeping the cached status."""
        self._overlays.pop(record_id, None)

    def revert(self, record_id: str, status: Union[ApplicationStatus, str]) -> bool:
        """
        Restore ``status`` on a record whose move failed.

        Returns:
            False when the record is no longer cached (nothing to revert)
        """
        self._overlays.pop(record_id, None)
        current = self._records.get(record_id)
        if current is None:
            return False
        self._records[record_id] = current.with_status(status)
        self._bump()
        return True

    def _bump(self) -> None:
        self.version += 1
