"""
Main MCP tool handler for move_application_status.

Runs an optimistic status move: the record store reflects the new status
before the backend answers, and reverts if the backend rejects it.
"""

from typing import Dict, Any

from pydantic import ValidationError

from schemas.move_application_status import (
    MoveApplicationStatusRequest,
    MoveApplicationStatusResponse,
)
from store.session import ViewSession
from store.status_mover import MoveOutcome
from utils.pydantic_error_mapper import map_pydantic_validation_error
from models.errors import ToolError, create_internal_error


async def move_application_status(args: Dict[str, Any], session: ViewSession) -> Dict[str, Any]:
    """
    Move one application to a new status.

    Steps:
    1. Validates the request (id, status)
    2. Loads records if the store has never been loaded
    3. Writes the new status into the store immediately
    4. Sends PATCH /apps/{id}/status
    5. Commits, reverts, or discards the completion if a newer move on the
       same record was issued meanwhile

    Args:
        args: Dictionary containing:
            - id (str): Application id
            - status (str): Target status
        session: The user's view session

    Returns:
        Dictionary with structure (committed or superseded):
        {
            "id": str,
            "outcome": "committed" | "superseded",
            "sequence": int,
            "requested_status": str,
            "status": str | None     # Status now held in the store
        }

        Dictionary with structure (reverted):
        {
            "id": str,
            "outcome": "reverted",
            "sequence": int,
            "requested_status": str,
            "status": str | None,    # Status after revert, None if removed
            "error": {"code": str, "message": str, "retryable": bool}
        }

        On request error, returns {"error": {"code", "message", "retryable"}}.
    """
    try:
        request = MoveApplicationStatusRequest.model_validate(args)

        if len(session.store) == 0 and session.store.stale:
            await session.ensure_fresh()

        result = await session.mover.move_status(request.id, request.status)

        if result.outcome == MoveOutcome.REVERTED:
            return result.to_dict()

        body = result.to_dict()
        body.pop("error", None)
        return MoveApplicationStatusResponse(**body).model_dump()

    except ValidationError as e:
        return map_pydantic_validation_error(e).to_dict()

    except ToolError as e:
        return e.to_dict()

    except Exception as e:
        internal_error = create_internal_error(message=str(e), original_error=e)
        return internal_error.to_dict()
