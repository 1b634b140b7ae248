"""
Error model for the AppTracker MCP tools.

Provides structured error codes and sanitized error messages.
"""

from enum import Enum
from typing import Optional
import re


class ErrorCode(str, Enum):
    """Structured error codes for the MCP tools."""
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NETWORK_ERROR = "NETWORK_ERROR"
    SERVER_ERROR = "SERVER_ERROR"
    NOT_FOUND = "NOT_FOUND"
    UNAUTHORIZED = "UNAUTHORIZED"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ToolError(Exception):
    """Base exception for tool errors with structured error information."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        retryable: bool = False,
        original_error: Optional[Exception] = None
    ):
        """
        Initialize a tool error.

        Args:
            code: The error code
            message: Human-readable error message
            retryable: Whether the operation can be retried
            original_error: The original exception if this wraps another error
        """
        self.code = code
        self.message = message
        self.retryable = retryable
        self.original_error = original_error
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert error to dictionary format for MCP response."""
        return {
            "error": {
                "code": self.code.value,
                "message": self.message,
                "retryable": self.retryable
            }
        }


def sanitize_url(url: str) -> str:
    """
    Strip query strings and fragments from a URL.

    Query parameters may carry search text or tokens that should not be
    echoed back in error messages.

    Args:
        url: The URL to sanitize

    Returns:
        URL without query string or fragment
    """
    return re.split(r"[?#]", url, maxsplit=1)[0]


def sanitize_credentials(error_msg: str) -> str:
    """
    Remove bearer tokens and URL query strings from an error message.

    Args:
        error_msg: The original error message

    Returns:
        Sanitized error message
    """
    sanitized = re.sub(r"(?i)bearer\s+[A-Za-z0-9\-._~+/]+=*", "Bearer [redacted]", error_msg)
    sanitized = re.sub(r"(https?://[^\s?'\"]+)\?[^\s'\"]*", r"\1", sanitized)
    return sanitized.strip()


def sanitize_stack_trace(error_msg: str) -> str:
    """
    Remove stack traces from error messages.

    Args:
        error_msg: The original error message

    Returns:
        Error message without stack trace
    """
    # Take only the first line (usually the most relevant)
    lines = error_msg.split('\n')
    if lines:
        return lines[0].strip()
    return error_msg


def create_validation_error(message: str) -> ToolError:
    """
    Create a validation error.

    Args:
        message: Description of the validation failure

    Returns:
        ToolError with VALIDATION_ERROR code
    """
    return ToolError(
        code=ErrorCode.VALIDATION_ERROR,
        message=message,
        retryable=False
    )


def create_not_found_error(entity_id: str, entity_type: str = "Application") -> ToolError:
    """
    Create a not found error for an entity that no longer exists.

    Args:
        entity_id: Identifier of the missing entity
        entity_type: Type of entity (e.g., "Application")

    Returns:
        ToolError with NOT_FOUND code
    """
    return ToolError(
        code=ErrorCode.NOT_FOUND,
        message=f"{entity_type} not found: {entity_id}",
        retryable=False
    )


def create_network_error(message: str, original_error: Optional[Exception] = None) -> ToolError:
    """
    Create a network error (connection failure or timeout).

    Args:
        message: Description of the network failure
        original_error: The original exception

    Returns:
        ToolError with NETWORK_ERROR code
    """
    sanitized_message = sanitize_stack_trace(sanitize_credentials(message))
    return ToolError(
        code=ErrorCode.NETWORK_ERROR,
        message=f"Network error: {sanitized_message}",
        retryable=True,
        original_error=original_error
    )


def create_server_error(
    status_code: int, message: str, original_error: Optional[Exception] = None
) -> ToolError:
    """
    Create a server error for a non-2xx backend response.

    5xx responses are marked retryable; other statuses are not.

    Args:
        status_code: HTTP status code returned by the backend
        message: Error message from the backend payload
        original_error: The original exception

    Returns:
        ToolError with SERVER_ERROR code
    """
    sanitized_message = sanitize_stack_trace(sanitize_credentials(message))
    return ToolError(
        code=ErrorCode.SERVER_ERROR,
        message=f"Server error ({status_code}): {sanitized_message}",
        retryable=status_code >= 500,
        original_error=original_error
    )


def create_unauthorized_error(message: str = "Authentication required") -> ToolError:
    """
    Create an unauthorized error (missing, expired or rejected token).

    Args:
        message: Description of the authentication failure

    Returns:
        ToolError with UNAUTHORIZED code
    """
    return ToolError(
        code=ErrorCode.UNAUTHORIZED,
        message=message,
        retryable=False
    )


def create_internal_error(message: str, original_error: Optional[Exception] = None) -> ToolError:
    """
    Create an internal error for unexpected exceptions.

    Args:
        message: Description of the internal error
        original_error: The original exception

    Returns:
        ToolError with INTERNAL_ERROR code
    """
    sanitized_message = sanitize_stack_trace(sanitize_credentials(message))

    return ToolError(
        code=ErrorCode.INTERNAL_ERROR,
        message=f"Internal error: {sanitized_message}",
        retryable=True,
        original_error=original_error
    )
