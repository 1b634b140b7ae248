"""
Application record schema for the AppTracker view-model.

``ApplicationRecord`` is the single explicit record type shared by the
record store, the filter pipeline, the board partition and the tools.
It accepts the backend's camelCase JSON and keeps ``status``/``priority``
as closed enums, preserving unrecognized values verbatim so that callers
can branch on them instead of failing.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from models.status import ApplicationStatus, Priority, parse_priority, parse_status, status_value


class ApplicationRecord(BaseModel):
    """One job application tracked by the user.

    Instances are immutable; the record store replaces them with
    ``model_copy(update=...)`` when a status changes.
    """

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    id: str
    company: str = ""
    role: str = ""
    location: Optional[str] = None
    status: Union[ApplicationStatus, str] = Field(
        default=ApplicationStatus.SAVED, union_mode="left_to_right"
    )
    date_applied: Optional[date] = Field(default=None, alias="dateApplied")
    job_url: Optional[str] = Field(default=None, alias="jobUrl")
    priority: Union[Priority, str] = Field(default=Priority.MEDIUM, union_mode="left_to_right")
    archived: bool = False
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")

    @model_validator(mode="before")
    @classmethod
    def empty_strings_to_none(cls, data: Any) -> Any:
        """Convert empty-string values to None for optional fields."""
        if isinstance(data, dict):
            optional = {"location", "dateApplied", "date_applied", "jobUrl", "job_url"}
            return {k: (None if v == "" and k in optional else v) for k, v in data.items()}
        return data

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, value: Any) -> Any:
        """Backends may emit numeric ids; the view-model treats ids as opaque strings."""
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("date_applied", mode="before")
    @classmethod
    def applied_calendar_date(cls, value: Any) -> Any:
        """Keep the calendar date of an applied timestamp (``2026-01-15T05:00:00Z`` -> 2026-01-15)."""
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, str) and len(value) > 10 and value[10] in "Tt ":
            return value[:10]
        return value

    @field_validator("created_at", "updated_at")
    @classmethod
    def as_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        """Timestamps are held in UTC; values without an offset are taken as UTC."""
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    @field_validator("status", mode="before")
    @classmethod
    def coerce_status(cls, value: Any) -> Any:
        if isinstance(value, str):
            return parse_status(value)
        return value

    @field_validator("priority", mode="before")
    @classmethod
    def coerce_priority(cls, value: Any) -> Any:
        if isinstance(value, str):
            return parse_priority(value)
        return value

    @property
    def has_known_status(self) -> bool:
        """True when ``status`` is one of the six workflow stages."""
        return isinstance(self.status, ApplicationStatus)

    @property
    def status_value(self) -> str:
        return status_value(self.status)

    @property
    def priority_value(self) -> str:
        return status_value(self.priority)

    def with_status(self, status: Union[ApplicationStatus, str]) -> "ApplicationRecord":
        """Return a copy of this record carrying ``status``."""
        return self.model_copy(update={"status": parse_status(status)})

    def to_output(self) -> dict:
        """JSON-serializable snake_case view used in tool responses."""
        return self.model_dump(mode="json")

    def editable_fields(self) -> Dict[str, Any]:
        """JSON-serializable fields a client may send back on a full update."""
        return self.model_dump(mode="json", exclude=SERVER_FIELDS)


# Assigned by the backend, never sent in a request body
SERVER_FIELDS = {"id", "created_at", "updated_at"}


def wire_fields(fields: Dict[str, Any]) -> Dict[str, Any]:
    """
    Build a camelCase request body from snake_case record fields.

    Server-assigned fields are dropped and the applied date is sent as a
    UTC midnight timestamp. Unknown names raise KeyError.
    """
    body = {}
    for name, value in fields.items():
        if name in SERVER_FIELDS:
            continue
        if name == "date_applied" and value:
            value = f"{str(value)[:10]}T00:00:00Z"
        info = ApplicationRecord.model_fields[name]
        body[info.alias or name] = value
    return body
