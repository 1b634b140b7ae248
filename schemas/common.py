"""Shared schema primitives for MCP tool request/response models."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from models.status import ALL, ApplicationStatus, Priority


def validate_optional_non_empty_str(value: Optional[str], field_name: str) -> Optional[str]:
    """Validate optional string fields that cannot be empty/whitespace."""
    if value is None:
        return None
    if not value.strip():
        raise ValueError(f"Invalid {field_name}: cannot be empty")
    return value


def validate_selector(value: Optional[str], allowed: type, field_name: str) -> Optional[str]:
    """Validate an ``ALL``-or-enum selector, leaving None as 'unchanged'."""
    if value is None or value == ALL:
        return value
    values = [member.value for member in allowed]
    if value not in values:
        raise ValueError(
            f"Invalid {field_name} value: '{value}'. Allowed values are: {ALL}, {', '.join(values)}"
        )
    return value


class StrictIgnoreRequest(BaseModel):
    """Request base with strict typing and ignored unknown fields."""

    model_config = ConfigDict(extra="ignore", strict=True)


class StrictResponse(BaseModel):
    """Response/result base with strict typing and forbidden unknown fields."""

    model_config = ConfigDict(extra="forbid")


class RecordIdMixin(BaseModel):
    """Reusable application id field validation."""

    id: str

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("id")
    @classmethod
    def validate_id(cls, value: str) -> str:
        return validate_optional_non_empty_str(value, "id")


class StatusSelectorMixin(BaseModel):
    """Reusable status/priority selector validation."""

    status: Optional[str] = None
    priority: Optional[str] = None

    @field_validator("status")
    @classmethod
    def validate_status(cls, value: Optional[str]) -> Optional[str]:
        return validate_selector(value, ApplicationStatus, "status")

    @field_validator("priority")
    @classmethod
    def validate_priority(cls, value: Optional[str]) -> Optional[str]:
        return validate_selector(value, Priority, "priority")
