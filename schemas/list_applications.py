"""Pydantic schemas for list_applications tool."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import field_validator

from schemas.common import StatusSelectorMixin, StrictIgnoreRequest, StrictResponse
from utils.validation import MAX_PAGE_SIZE, MIN_PAGE_SIZE, SORT_KEYS


class ListApplicationsRequest(StatusSelectorMixin, StrictIgnoreRequest):
    """Request schema for list_applications.

    Omitted fields keep the session's current criteria.
    """

    query: Optional[str] = None
    page: Optional[int] = None
    page_size: Optional[int] = None
    sort_by: Optional[str] = None
    descending: bool = False
    refresh: bool = False

    @field_validator("page_size")
    @classmethod
    def validate_page_size(cls, value: Optional[int]) -> Optional[int]:
        if value is None:
            return None
        if value < MIN_PAGE_SIZE:
            raise ValueError(f"Invalid page_size: {value} is below minimum of {MIN_PAGE_SIZE}")
        if value > MAX_PAGE_SIZE:
            raise ValueError(f"Invalid page_size: {value} exceeds maximum of {MAX_PAGE_SIZE}")
        return value

    @field_validator("sort_by")
    @classmethod
    def validate_sort_by(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and value not in SORT_KEYS:
            raise ValueError(f"Invalid sort_by: '{value}'. Allowed values are: {', '.join(SORT_KEYS)}")
        return value

    @field_validator("query", mode="before")
    @classmethod
    def strip_query(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip()
        return value


class ListApplicationsResponse(StrictResponse):
    """Success response schema for list_applications."""

    applications: list[dict]
    count: int
    total_count: int
    page: int
    total_pages: int
    filters_active: bool
