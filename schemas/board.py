"""Pydantic schemas for get_board and load_more_column tools."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import field_validator

from models.status import ApplicationStatus
from schemas.common import StrictIgnoreRequest, StrictResponse
from utils.validation import MAX_DATE_RANGE_DAYS


class GetBoardRequest(StrictIgnoreRequest):
    """Request schema for get_board.

    Omitted fields keep the session's current board filters; an empty
    string clears a text filter and ``date_range_days=0`` clears the range.
    """

    query: Optional[str] = None
    company: Optional[str] = None
    date_range_days: Optional[int] = None
    refresh: bool = False

    @field_validator("query", "company", mode="before")
    @classmethod
    def strip_text(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("date_range_days")
    @classmethod
    def validate_date_range(cls, value: Optional[int]) -> Optional[int]:
        if value is None:
            return None
        if value < 0:
            raise ValueError(f"Invalid date_range_days: {value} cannot be negative")
        if value > MAX_DATE_RANGE_DAYS:
            raise ValueError(
                f"Invalid date_range_days: {value} exceeds maximum of {MAX_DATE_RANGE_DAYS}"
            )
        return value


class LoadMoreColumnRequest(StrictIgnoreRequest):
    """Request schema for load_more_column."""

    status: str

    @field_validator("status")
    @classmethod
    def validate_status(cls, value: str) -> str:
        values = [s.value for s in ApplicationStatus]
        if value not in values:
            raise ValueError(f"Invalid status value: '{value}'. Allowed values are: {', '.join(values)}")
        return value


class BoardColumn(StrictResponse):
    """One board column."""

    status: str
    label: str
    total: int
    visible_count: int
    has_more: bool
    applications: list[dict]


class GetBoardResponse(StrictResponse):
    """Success response schema for get_board."""

    columns: list[BoardColumn]
    unrecognized_count: int
