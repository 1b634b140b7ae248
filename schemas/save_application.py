"""Pydantic schemas for get_application, create_application and update_application tools."""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional

from pydantic import field_validator

from models.status import ApplicationStatus, Priority
from schemas.common import RecordIdMixin, StrictIgnoreRequest, StrictResponse


def _check_enum(value: Optional[str], allowed: type, field_name: str) -> Optional[str]:
    if value is None:
        return None
    values = [member.value for member in allowed]
    if value not in values:
        raise ValueError(
            f"Invalid {field_name} value: '{value}'. Allowed values are: {', '.join(values)}"
        )
    return value


def _check_iso_date(value: Optional[str]) -> Optional[str]:
    """Empty string clears the date; anything else must be YYYY-MM-DD."""
    if not value:
        return value
    try:
        date.fromisoformat(value)
    except ValueError:
        raise ValueError(f"Invalid date_applied: '{value}' is not a YYYY-MM-DD date")
    return value


def _check_required_text(value: Optional[str], field_name: str) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    if not value:
        raise ValueError(f"Invalid {field_name}: cannot be empty")
    return value


class GetApplicationRequest(RecordIdMixin, StrictIgnoreRequest):
    """Request schema for get_application."""


class CreateApplicationRequest(StrictIgnoreRequest):
    """Request schema for create_application."""

    company: str
    role: str
    location: Optional[str] = None
    status: str = ApplicationStatus.SAVED.value
    priority: str = Priority.MEDIUM.value
    date_applied: Optional[str] = None
    job_url: Optional[str] = None
    archived: bool = False

    @field_validator("company", "role")
    @classmethod
    def validate_text(cls, value: str, info) -> str:
        return _check_required_text(value, info.field_name)

    @field_validator("status")
    @classmethod
    def validate_status(cls, value: str) -> str:
        return _check_enum(value, ApplicationStatus, "status")

    @field_validator("priority")
    @classmethod
    def validate_priority(cls, value: str) -> str:
        return _check_enum(value, Priority, "priority")

    @field_validator("date_applied")
    @classmethod
    def validate_date_applied(cls, value: Optional[str]) -> Optional[str]:
        return _check_iso_date(value)

    def fields(self) -> Dict[str, Any]:
        """Fields to send, leaving out unset optional ones."""
        return {k: v for k, v in self.model_dump().items() if v is not None and v != ""}


class UpdateApplicationRequest(RecordIdMixin, StrictIgnoreRequest):
    """Request schema for update_application.

    Omitted fields keep their current value; an empty string clears
    ``location``, ``date_applied`` or ``job_url``. Status changes go through
    move_application_status.
    """

    company: Optional[str] = None
    role: Optional[str] = None
    location: Optional[str] = None
    priority: Optional[str] = None
    date_applied: Optional[str] = None
    job_url: Optional[str] = None
    archived: Optional[bool] = None

    @field_validator("company", "role")
    @classmethod
    def validate_text(cls, value: Optional[str], info) -> Optional[str]:
        return _check_required_text(value, info.field_name)

    @field_validator("priority")
    @classmethod
    def validate_priority(cls, value: Optional[str]) -> Optional[str]:
        return _check_enum(value, Priority, "priority")

    @field_validator("date_applied")
    @classmethod
    def validate_date_applied(cls, value: Optional[str]) -> Optional[str]:
        return _check_iso_date(value)

    def changes(self) -> Dict[str, Any]:
        """Fields given in the request, excluding the id."""
        return self.model_dump(exclude={"id"}, exclude_none=True)


class ApplicationResponse(StrictResponse):
    """Success response schema for single-application tools."""

    application: dict
