"""
Main MCP tool handlers for the status board.

get_board partitions the filtered records into the six workflow columns;
load_more_column grows one column's reveal count.
"""

from typing import Dict, Any

from pydantic import ValidationError

from schemas.board import BoardColumn, GetBoardRequest, GetBoardResponse, LoadMoreColumnRequest
from store.session import ViewSession
from utils.pydantic_error_mapper import map_pydantic_validation_error
from models.errors import ToolError, create_internal_error


async def get_board(args: Dict[str, Any], session: ViewSession) -> Dict[str, Any]:
    """
    Serve the status board.

    Steps:
    1. Validates board filters (query, company, date_range_days)
    2. Re-fetches records if the store is stale (or refresh=True)
    3. Applies archived visibility and board filters
    4. Partitions into columns in workflow order; records with an
       unrecognized status are counted but not placed in any column
    5. Reveals each column up to its own visible count

    Args:
        args: Dictionary containing optional parameters:
            - query (str): Case-insensitive search on company, role, location
            - company (str): Case-insensitive company substring
            - date_range_days (int): Only records applied within this many days
              (0 clears the range)
            - refresh (bool): Force a re-fetch from the backend
        session: The user's view session

    Returns:
        Dictionary with structure:
        {
            "columns": [
                {
                    "status": str,
                    "label": str,
                    "total": int,
                    "visible_count": int,
                    "has_more": bool,
                    "applications": [...]
                },
                ...
            ],
            "unrecognized_count": int
        }

        On error, returns {"error": {"code", "message", "retryable"}}.
    """
    try:
        request = GetBoardRequest.model_validate(args)

        await session.ensure_fresh(force=request.refresh)

        changes = {}
        if request.query is not None:
            changes["query"] = request.query
        if request.company is not None:
            changes["company"] = request.company
        if request.date_range_days is not None:
            changes["date_range_days"] = request.date_range_days or None
        session.update_board_criteria(**changes)

        return GetBoardResponse(**session.board_view()).model_dump()

    except ValidationError as e:
        return map_pydantic_validation_error(e).to_dict()

    except ToolError as e:
        return e.to_dict()

    except Exception as e:
        internal_error = create_internal_error(message=str(e), original_error=e)
        return internal_error.to_dict()


async def load_more_column(args: Dict[str, Any], session: ViewSession) -> Dict[str, Any]:
    """
    Reveal the next window of one board column.

    Other columns' reveal counts are untouched.

    Args:
        args: Dictionary containing:
            - status (str): Column to grow
        session: The user's view session

    Returns:
        The grown column (same shape as a get_board column), or an error dict
    """
    try:
        request = LoadMoreColumnRequest.model_validate(args)

        await session.ensure_fresh()

        return BoardColumn(**session.load_more(request.status)).model_dump()

    except ValidationError as e:
        return map_pydantic_validation_error(e).to_dict()

    except ToolError as e:
        return e.to_dict()

    except Exception as e:
        internal_error = create_internal_error(message=str(e), original_error=e)
        return internal_error.to_dict()
