"""
Centralized, type-safe status definitions for the AppTracker view-model.

This module is the single source of truth for the enumerated values an
application record can carry. It defines two Enum classes:

- ``ApplicationStatus``: the fixed six-stage workflow shown on the board.
- ``Priority``: the user-assigned priority of an application.

Both Enums inherit from ``(str, Enum)`` so that members are directly
comparable to plain strings and serialize naturally to JSON at API
boundaries, matching the backend's wire values.
"""

from enum import Enum
from typing import Optional, Union

# Filter sentinel meaning "do not filter on this field"
ALL = "ALL"


class ApplicationStatus(str, Enum):
    """Enum for the workflow stage of an application.

    Member order is the left-to-right column order of the board.
    """

    SAVED = "SAVED"
    APPLIED = "APPLIED"
    OA = "OA"
    INTERVIEW = "INTERVIEW"
    OFFER = "OFFER"
    REJECTED = "REJECTED"


class Priority(str, Enum):
    """Enum for the priority assigned to an application."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


# Board columns, in display order
BOARD_STATUSES = list(ApplicationStatus)

# Human readable column labels
STATUS_LABELS = {
    ApplicationStatus.SAVED: "Saved",
    ApplicationStatus.APPLIED: "Applied",
    ApplicationStatus.OA: "Online Assessment",
    ApplicationStatus.INTERVIEW: "Interview",
    ApplicationStatus.OFFER: "Offer",
    ApplicationStatus.REJECTED: "Rejected",
}

# Statuses still moving through the pipeline
IN_PROGRESS_STATUSES = {
    ApplicationStatus.APPLIED,
    ApplicationStatus.OA,
    ApplicationStatus.INTERVIEW,
}


def parse_status(value: Union[str, ApplicationStatus]) -> Union[ApplicationStatus, str]:
    """Return the enum member for a known status, or the raw string otherwise."""
    if isinstance(value, ApplicationStatus):
        return value
    try:
        return ApplicationStatus(value)
    except ValueError:
        return value


def parse_priority(value: Union[str, Priority]) -> Union[Priority, str]:
    """Return the enum member for a known priority, or the raw string otherwise."""
    if isinstance(value, Priority):
        return value
    try:
        return Priority(value)
    except ValueError:
        return value


def status_value(status: Optional[Union[str, Enum]]) -> Optional[str]:
    """Plain string value of a status or priority, whether enum or raw."""
    if isinstance(status, Enum):
        return status.value
    return status
