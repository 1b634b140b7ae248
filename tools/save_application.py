"""
MCP tool handlers for reading, creating and editing single applications.

Status changes are not handled here; they go through
move_application_status so the board's optimistic flow stays the only
writer of ``status``.
"""

from typing import Dict, Any

from pydantic import ValidationError

from schemas.save_application import (
    ApplicationResponse,
    CreateApplicationRequest,
    GetApplicationRequest,
    UpdateApplicationRequest,
)
from store.session import ViewSession
from utils.pydantic_error_mapper import map_pydantic_validation_error
from models.errors import ToolError, create_internal_error


async def get_application(args: Dict[str, Any], session: ViewSession) -> Dict[str, Any]:
    """
    Fetch one application from the backend.

    Args:
        args: Dictionary containing:
            - id (str): Application id
        session: The user's view session

    Returns:
        {"application": {...}}, or an error dict. A NOT_FOUND error also
        drops the local copy.
    """
    try:
        request = GetApplicationRequest.model_validate(args)
        record = await session.fetch(request.id)
        return ApplicationResponse(application=record.to_output()).model_dump()

    except ValidationError as e:
        return map_pydantic_validation_error(e).to_dict()

    except ToolError as e:
        return e.to_dict()

    except Exception as e:
        internal_error = create_internal_error(message=str(e), original_error=e)
        return internal_error.to_dict()


async def create_application(args: Dict[str, Any], session: ViewSession) -> Dict[str, Any]:
    """
    Create an application.

    Args:
        args: Dictionary containing:
            - company (str): Company name (required)
            - role (str): Role title (required)
            - location (str, optional)
            - status (str, optional): Defaults to SAVED
            - priority (str, optional): Defaults to MEDIUM
            - date_applied (str, optional): YYYY-MM-DD
            - job_url (str, optional)
            - archived (bool, optional)
        session: The user's view session

    Returns:
        {"application": {...}} with the backend-assigned id, or an error dict
    """
    try:
        request = CreateApplicationRequest.model_validate(args)
        record = await session.create(request.fields())
        return ApplicationResponse(application=record.to_output()).model_dump()

    except ValidationError as e:
        return map_pydantic_validation_error(e).to_dict()

    except ToolError as e:
        return e.to_dict()

    except Exception as e:
        internal_error = create_internal_error(message=str(e), original_error=e)
        return internal_error.to_dict()


async def update_application(args: Dict[str, Any], session: ViewSession) -> Dict[str, Any]:
    """
    Edit fields of an existing application.

    Args:
        args: Dictionary containing:
            - id (str): Application id
            - company, role, location, priority, date_applied, job_url,
              archived (optional): New values; omitted fields are kept
        session: The user's view session

    Returns:
        {"application": {...}} as stored by the backend, or an error dict
    """
    try:
        request = UpdateApplicationRequest.model_validate(args)
        record = await session.update(request.id, request.changes())
        return ApplicationResponse(application=record.to_output()).model_dump()

    except ValidationError as e:
        return map_pydantic_validation_error(e).to_dict()

    except ToolError as e:
        return e.to_dict()

    except Exception as e:
        internal_error = create_internal_error(message=str(e), original_error=e)
        return internal_error.to_dict()
