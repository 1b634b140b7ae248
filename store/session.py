"""
View session for one signed-in user.

Owns the record store, the status mover and the session-scoped UI state
(list criteria, board filters, per-column reveal counts), and derives the
list and board views from them.
"""

import logging
from datetime import date
from typing import Any, Dict, Optional

from config import get_config
from models.application import ApplicationRecord, wire_fields
from models.criteria import FilterCriteria
from models.errors import ErrorCode, ToolError
from models.status import ALL, BOARD_STATUSES, STATUS_LABELS, status_value
from store.record_store import RecordStore
from store.status_mover import StatusMover
from utils.analytics import summarize
from utils.filtering import filter_records, sort_records
from utils.pagination import ColumnReveal, paginate
from utils.partition import partition_by_status, unbucketed
from utils.validation import validate_record_id, validate_status

logger = logging.getLogger(__name__)


class ViewSession:
    """
    Session-scoped view-model over one record store.

    Usage:
        session = ViewSession(AppsClient())
        await session.ensure_fresh()
        page = session.list_view()
        result = await session.mover.move_status("a1", "INTERVIEW")
    """

    def __init__(
        self,
        client,
        store: Optional[RecordStore] = None,
        show_archived: Optional[bool] = None,
        page_size: Optional[int] = None,
        board_window: Optional[int] = None,
    ):
        """
        Args:
            client: Backend client (see ``api.apps_client.AppsClient``)
            store: Record store to use (a new empty, stale store by default)
            show_archived: User preference for archived visibility
            page_size: List view page size
            board_window: Board reveal window per column
        """
        config = get_config()
        self.client = client
        self.store = store if store is not None else RecordStore()
        self.mover = StatusMover(self.store, client)
        self.show_archived = config.show_archived if show_archived is None else show_archived
        self.page_size = page_size or config.page_size
        self.criteria = FilterCriteria()
        self.board_criteria = FilterCriteria()
        self.reveal = ColumnReveal(BOARD_STATUSES, board_window or config.board_window)

    async def ensure_fresh(self, force: bool = False) -> bool:
        """
        Re-fetch records when the store is stale (or when forced).

        Returns:
            True if a fetch happened
        """
        if not (force or self.store.stale):
            return False
        page = await self.client.list_applications()
        self.store.load(page.content)
        logger.info(f"Fetched {len(page.content)} applications")
        return True

    def update_criteria(self, **changes: Any) -> FilterCriteria:
        """
        Apply list view criteria changes.

        Any change to a filter resets the page to 1 unless a page is given
        explicitly in the same call.
        """
        changes = {k: v for k, v in changes.items() if v is not None}
        updated = self.criteria.model_copy(update=changes)
        if "page" not in changes and not updated.same_filters(self.criteria):
            updated = updated.model_copy(update={"page": 1})
        self.criteria = updated
        return updated

    def update_board_criteria(self, **changes: Any) -> FilterCriteria:
        """Apply board filter changes. Reveal counts are left untouched."""
        self.board_criteria = self.board_criteria.model_copy(update=changes)
        return self.board_criteria

    def clear_filters(self) -> None:
        self.criteria = FilterCriteria()
        self.board_criteria = FilterCriteria()

    def visible_records(self):
        """Records after archived visibility only."""
        return filter_records(self.store.records(), FilterCriteria(), self.show_archived)

    def list_view(
        self,
        sort_by: Optional[str] = None,
        descending: bool = False,
        page_size: Optional[int] = None,
    ) -> Dict[str, Any]:
        """
        Filtered, sorted, paginated list view.

        The served page is written back into the criteria so that the
        session's page number always stays within range.
        """
        filtered = filter_records(self.store.records(), self.criteria, self.show_archived)
        ordered = sort_records(filtered, sort_by, descending)
        result = paginate(ordered, self.criteria.page, page_size or self.page_size)

        if result.page and result.page != self.criteria.page:
            self.criteria = self.criteria.model_copy(update={"page": result.page})

        return {
            "applications": [r.to_output() for r in result.page_items],
            "count": len(result.page_items),
            "total_count": len(filtered),
            "page": result.page,
            "total_pages": result.total_pages,
            "filters_active": self.criteria.is_filtered(),
        }

    def _board_buckets(self, today: Optional[date] = None):
        # Status and priority selectors belong to the list view only
        criteria = self.board_criteria.model_copy(update={"status": ALL, "priority": ALL})
        filtered = filter_records(self.store.records(), criteria, self.show_archived, today)
        return filtered, partition_by_status(filtered, BOARD_STATUSES)

    def _column(self, status, records) -> Dict[str, Any]:
        visible = self.reveal.reveal(status, records)
        return {
            "status": status_value(status),
            "label": STATUS_LABELS.get(status, status_value(status)),
            "total": len(records),
            "visible_count": self.reveal.visible_count(status),
            "has_more": self.reveal.has_more(status, len(records)),
            "applications": [r.to_output() for r in visible],
        }

    def board_view(self, today: Optional[date] = None) -> Dict[str, Any]:
        """Board columns in workflow order, each revealed incrementally."""
        filtered, buckets = self._board_buckets(today)
        return {
            "columns": [self._column(status, records) for status, records in buckets.items()],
            "unrecognized_count": len(unbucketed(filtered, BOARD_STATUSES)),
        }

    def load_more(self, status, today: Optional[date] = None) -> Dict[str, Any]:
        """Reveal another window in one column and return that column."""
        status = validate_status(status)
        self.reveal.load_more(status)
        _, buckets = self._board_buckets(today)
        return self._column(status, buckets[status])

    def analytics(self, today: Optional[date] = None) -> Dict[str, Any]:
        return summarize(self.visible_records(), today)

    async def server_analytics(self) -> Dict[str, Any]:
        """Analytics computed by the backend over all of the user's applications."""
        return await self.client.get_analytics()

    async def fetch(self, record_id: str) -> ApplicationRecord:
        """
        Fetch one record from the backend and refresh its cached copy.

        A NOT_FOUND error drops the cached copy before propagating.
        """
        record_id = validate_record_id(record_id)
        try:
            record = await self.client.get_application(record_id)
        except ToolError as e:
            if e.code == ErrorCode.NOT_FOUND:
                self.store.remove(record_id)
            raise
        self.store.upsert(record)
        return self.store.get(record.id)

    async def create(self, fields: Dict[str, Any]) -> ApplicationRecord:
        """Create a record on the backend and add it to the store."""
        record = await self.client.create_application(wire_fields(fields))
        self.store.upsert(record)
        self.store.invalidate()
        logger.info(f"Created application {record.id}")
        return self.store.get(record.id)

    async def update(self, record_id: str, changes: Dict[str, Any]) -> ApplicationRecord:
        """
        Apply field changes with a full ``PUT /apps/{id}``.

        The body is the current record (fetched first when not cached)
        merged with ``changes``.
        """
        record_id = validate_record_id(record_id)
        current = self.store.get(record_id)
        if current is None:
            current = await self.fetch(record_id)

        merged = ApplicationRecord.model_validate({**current.to_output(), **changes})
        try:
            record = await self.client.update_application(
                record_id, wire_fields(merged.editable_fields())
            )
        except ToolError as e:
            if e.code == ErrorCode.NOT_FOUND:
                self.store.remove(record_id)
            raise
        self.store.upsert(record)
        self.store.invalidate()
        logger.info(f"Updated application {record_id}")
        return self.store.get(record.id)

    async def delete(self, record_id: str) -> None:
        """Delete on the backend, then drop the record locally and invalidate."""
        record_id = validate_record_id(record_id)
        try:
            await self.client.delete_application(record_id)
        except ToolError as e:
            # Already gone on the server: drop the local copy too
            if e.code == ErrorCode.NOT_FOUND:
                self.store.remove(record_id)
            raise
        self.store.remove(record_id)
        self.store.invalidate()
        logger.info(f"Deleted application {record_id}")
