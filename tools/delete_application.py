"""
Main MCP tool handler for delete_application.
"""

from typing import Dict, Any

from pydantic import ValidationError

from schemas.move_application_status import DeleteApplicationRequest
from store.session import ViewSession
from utils.pydantic_error_mapper import map_pydantic_validation_error
from models.errors import ToolError, create_internal_error


async def delete_application(args: Dict[str, Any], session: ViewSession) -> Dict[str, Any]:
    """
    Delete one application on the backend and drop it from the record store.

    Args:
        args: Dictionary containing:
            - id (str): Application id
        session: The user's view session

    Returns:
        {"id": str, "deleted": true}, or an error dict. A NOT_FOUND error
        still removes the local copy.
    """
    try:
        request = DeleteApplicationRequest.model_validate(args)
        await session.delete(request.id)
        return {"id": request.id, "deleted": True}

    except ValidationError as e:
        return map_pydantic_validation_error(e).to_dict()

    except ToolError as e:
        return e.to_dict()

    except Exception as e:
        internal_error = create_internal_error(message=str(e), original_error=e)
        return internal_error.to_dict()
