"""
Input validation utilities for the AppTracker MCP tools.

Validates record ids, status and priority selectors, and paging parameters.
"""

from typing import Optional

from models.errors import create_validation_error
from models.status import ALL, ApplicationStatus, Priority

# Constants for list view paging
DEFAULT_PAGE_SIZE = 12
MIN_PAGE_SIZE = 1
MAX_PAGE_SIZE = 200

# Constants for board column reveal
DEFAULT_BOARD_WINDOW = 5

# Constants for the board date range filter
MAX_DATE_RANGE_DAYS = 3650

SORT_KEYS = ("company", "role", "date_applied", "created_at", "updated_at")


def validate_record_id(record_id) -> str:
    """
    Validate an application id.

    Ids are opaque strings; integers are accepted and converted.

    Args:
        record_id: The id value to validate

    Returns:
        Validated id as string

    Raises:
        ToolError: If record_id is invalid
    """
    # Check for null/None
    if record_id is None:
        raise create_validation_error("Invalid application id: cannot be null")

    # bool is a subclass of int in Python, reject explicitly
    if isinstance(record_id, bool) or not isinstance(record_id, (str, int)):
        raise create_validation_error(
            f"Invalid application id type: expected string, got {type(record_id).__name__}"
        )

    record_id = str(record_id)
    if not record_id.strip():
        raise create_validation_error("Invalid application id: cannot be empty")

    return record_id


def validate_status(status) -> ApplicationStatus:
    """
    Validate a target status for a status move.

    Args:
        status: The status value to validate

    Returns:
        Validated status enum member

    Raises:
        ToolError: If status is invalid
    """
    if status is None:
        raise create_validation_error("Invalid status: cannot be null")

    if isinstance(status, ApplicationStatus):
        return status

    if not isinstance(status, str):
        raise create_validation_error(
            f"Invalid status type: expected string, got {type(status).__name__}"
        )

    if not status:
        raise create_validation_error("Invalid status: cannot be empty")

    # Case-sensitive, matching the backend's wire values
    try:
        return ApplicationStatus(status)
    except ValueError:
        allowed = ", ".join(s.value for s in ApplicationStatus)
        raise create_validation_error(
            f"Invalid status value: '{status}'. Allowed values are: {allowed}"
        )


def validate_status_filter(status: Optional[str]) -> str:
    """
    Validate a status selector: ``ALL`` or one status value.

    Args:
        status: The selector (None means ALL)

    Returns:
        ``ALL`` or the status value

    Raises:
        ToolError: If the selector is not recognized
    """
    if status is None or status == ALL:
        return ALL
    return validate_status(status).value


def validate_priority_filter(priority: Optional[str]) -> str:
    """
    Validate a priority selector: ``ALL`` or one priority value.

    Args:
        priority: The selector (None means ALL)

    Returns:
        ``ALL`` or the priority value

    Raises:
        ToolError: If the selector is not recognized
    """
    if priority is None or priority == ALL:
        return ALL

    if not isinstance(priority, str):
        raise create_validation_error(
            f"Invalid priority type: expected string, got {type(priority).__name__}"
        )

    try:
        return Priority(priority).value
    except ValueError:
        allowed = ", ".join(p.value for p in Priority)
        raise create_validation_error(
            f"Invalid priority value: '{priority}'. Allowed values are: {ALL}, {allowed}"
        )


def validate_page_size(page_size: Optional[int], default: int = DEFAULT_PAGE_SIZE) -> int:
    """
    Validate the page_size parameter.

    Args:
        page_size: The requested page size (None for default)
        default: Value used when page_size is None

    Returns:
        Validated page size

    Raises:
        ToolError: If page_size is invalid
    """
    if page_size is None:
        return default

    if isinstance(page_size, bool) or not isinstance(page_size, int):
        raise create_validation_error(
            f"Invalid page_size type: expected integer, got {type(page_size).__name__}"
        )

    if page_size < MIN_PAGE_SIZE:
        raise create_validation_error(
            f"Invalid page_size: {page_size} is below minimum of {MIN_PAGE_SIZE}"
        )

    if page_size > MAX_PAGE_SIZE:
        raise create_validation_error(
            f"Invalid page_size: {page_size} exceeds maximum of {MAX_PAGE_SIZE}"
        )

    return page_size


def validate_sort_key(sort_by: Optional[str]) -> Optional[str]:
    """
    Validate the sort_by parameter.

    Args:
        sort_by: Field to sort on (None keeps server order)

    Returns:
        Validated sort key or None

    Raises:
        ToolError: If the key is not sortable
    """
    if sort_by is None:
        return None

    if sort_by not in SORT_KEYS:
        raise create_validation_error(
            f"Invalid sort_by: '{sort_by}'. Allowed values are: {', '.join(SORT_KEYS)}"
        )

    return sort_by
