"""Pydantic schemas for move_application_status and delete_application tools."""

from __future__ import annotations

from typing import Optional

from schemas.common import RecordIdMixin, StrictIgnoreRequest, StrictResponse


class MoveApplicationStatusRequest(RecordIdMixin, StrictIgnoreRequest):
    """Request schema for move_application_status.

    ``status`` is checked by the status mover so that an invalid target is
    reported before any local write.
    """

    status: str


class MoveApplicationStatusResponse(StrictResponse):
    """Success response schema for move_application_status."""

    id: str
    outcome: str
    sequence: int
    requested_status: str
    status: Optional[str] = None


class DeleteApplicationRequest(RecordIdMixin, StrictIgnoreRequest):
    """Request schema for delete_application."""
