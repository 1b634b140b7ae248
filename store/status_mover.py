"""
Optimistic status moves for the board's drag-and-drop flow.

A move writes the new status into the record store immediately, then sends
``PATCH /apps/{id}/status``. On success the optimistic state stands and the
store is invalidated so the next read picks up server-computed fields. On
failure the record reverts to the status it had before the move and the
error is surfaced; nothing is retried.

Responses may arrive in any order. Every move is tagged with the record id
and a per-record sequence number, and a completion whose sequence number is
not the latest issued for that record is discarded, so a late response can
never overwrite a newer optimistic write.

Lifecycle of one record:
    Idle -> Pending(status, seq) -> Committed | Reverted -> Idle
A new move on a Pending record supersedes the older one.
"""

import logging
from enum import Enum
from typing import Any, Dict, Optional, Union

from models.errors import ErrorCode, ToolError, create_internal_error, create_not_found_error
from models.status import ApplicationStatus, status_value
from store.record_store import RecordStore
from utils.validation import validate_record_id, validate_status

logger = logging.getLogger(__name__)


class MoveOutcome(str, Enum):
    """How a status move resolved."""

    COMMITTED = "committed"
    REVERTED = "reverted"
    SUPERSEDED = "superseded"


class MoveResult:
    """Result of one status move."""

    def __init__(
        self,
        record_id: str,
        outcome: MoveOutcome,
        sequence: int,
        requested_status: Union[ApplicationStatus, str],
        status: Optional[Union[ApplicationStatus, str]] = None,
        error: Optional[ToolError] = None,
    ):
        """
        Initialize a move result.

        Args:
            record_id: Id of the moved record
            outcome: How the move resolved
            sequence: Sequence number issued for this move
            requested_status: Status the move asked for
            status: Status held in the store after resolution (None if removed)
            error: Backend failure, for reverted (and failed superseded) moves
        """
        self.record_id = record_id
        self.outcome = outcome
        self.sequence = sequence
        self.requested_status = requested_status
        self.status = status
        self.error = error

    @property
    def committed(self) -> bool:
        return self.outcome == MoveOutcome.COMMITTED

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to dictionary format."""
        result = {
            "id": self.record_id,
            "outcome": self.outcome.value,
            "sequence": self.sequence,
            "requested_status": status_value(self.requested_status),
            "status": status_value(self.status),
        }
        if self.error is not None:
            result.update(self.error.to_dict())
        return result


class StatusMover:
    """
    Coordinates optimistic status moves against one record store.

    Moves on different records are independent and may be in flight
    together; there is no cross-record locking.
    """

    def __init__(self, store: RecordStore, client):
        """
        Args:
            store: The record store to write optimistic state into
            client: Backend client exposing ``async update_status(id, status)``
        """
        self.store = store
        self.client = client
        self._latest: Dict[str, int] = {}

    def latest_sequence(self, record_id: str) -> int:
        """Latest sequence number issued for ``record_id`` (0 if none)."""
        return self._latest.get(record_id, 0)

    def _is_latest(self, record_id: str, sequence: int) -> bool:
        return self._latest.get(record_id) == sequence

    def begin(self, record_id: str, new_status: Union[ApplicationStatus, str]):
        """
        Validate the move, write it optimistically and issue a sequence number.

        Returns:
            Tuple of (sequence, validated status, status before the move)

        Raises:
            ToolError: VALIDATION_ERROR for a bad id or status, NOT_FOUND if the
                record is not in the store. The store is untouched in both cases.
        """
        record_id = validate_record_id(record_id)
        status = validate_status(new_status)

        previous = self.store.write_optimistic(record_id, status)
        if previous is None:
            raise create_not_found_error(record_id)

        sequence = self._latest.get(record_id, 0) + 1
        self._latest[record_id] = sequence

        logger.info(
            f"Moving {record_id} {previous.status_value} -> {status.value} (seq={sequence})"
        )
        return sequence, status, previous.status

    async def move_status(
        self, record_id: str, new_status: Union[ApplicationStatus, str]
    ) -> MoveResult:
        """
        Move a record to ``new_status``.

        The store reflects ``new_status`` before the backend is contacted.

        Args:
            record_id: Id of the record to move
            new_status: Target status (one of the six workflow stages)

        Returns:
            MoveResult: COMMITTED on success, REVERTED (with ``error``) on
            failure, SUPERSEDED if a newer move on the same record was issued
            before this one resolved

        Raises:
            ToolError: Before any local write, for an invalid request or a
                record that is not in the store
        """
        sequence, status, previous_status = self.begin(record_id, new_status)
        record_id = validate_record_id(record_id)

        try:
            await self.client.update_status(record_id, status)
        except ToolError as e:
            return self.fail(record_id, sequence, status, previous_status, e)
        except Exception as e:
            error = create_internal_error(message=str(e), original_error=e)
            return self.fail(record_id, sequence, status, previous_status, error)

        return self.commit(record_id, sequence, status)

    def commit(
        self, record_id: str, sequence: int, status: Union[ApplicationStatus, str]
    ) -> MoveResult:
        """Resolve a successful move."""
        if not self._is_latest(record_id, sequence):
            logger.info(f"Discarding stale success for {record_id} (seq={sequence})")
            return self._superseded(record_id, sequence, status)

        self.store.settle(record_id)
        self.store.invalidate()

        logger.info(f"Committed {record_id} -> {status_value(status)} (seq={sequence})")
        return MoveResult(
            record_id,
            MoveOutcome.COMMITTED,
            sequence,
            status,
            status=self._current_status(record_id),
        )

    def fail(
        self,
        record_id: str,
        sequence: int,
        status: Union[ApplicationStatus, str],
        previous_status: Union[ApplicationStatus, str],
        error: ToolError,
    ) -> MoveResult:
        """
        Resolve a failed move.

        A NOT_FOUND failure means the record was deleted elsewhere: it is
        removed from the store instead of being reverted.
        """
        if not self._is_latest(record_id, sequence):
            logger.info(
                f"Discarding stale failure for {record_id} (seq={sequence}): {error.message}"
            )
            return self._superseded(record_id, sequence, status, error)

        if error.code == ErrorCode.NOT_FOUND:
            self.store.remove(record_id)
            logger.warning(f"Move of {record_id} failed, record no longer exists; removed")
        elif self.store.revert(record_id, previous_status):
            logger.warning(
                f"Move of {record_id} failed, reverted to {status_value(previous_status)} "
                f"(seq={sequence}): {error.message}"
            )
        else:
            logger.warning(f"Move of {record_id} failed after the record left the store")

        self.store.invalidate()
        return MoveResult(
            record_id,
            MoveOutcome.REVERTED,
            sequence,
            status,
            status=self._current_status(record_id),
            error=error,
        )

    def _superseded(
        self,
        record_id: str,
        sequence: int,
        status: Union[ApplicationStatus, str],
        error: Optional[ToolError] = None,
    ) -> MoveResult:
        return MoveResult(
            record_id,
            MoveOutcome.SUPERSEDED,
            sequence,
            status,
            status=self._current_status(record_id),
            error=error,
        )

    def _current_status(self, record_id: str) -> Optional[Union[ApplicationStatus, str]]:
        record = self.store.get(record_id)
        return record.status if record is not None else None
