"""
Main MCP tool handler for list_applications.

Integrates request validation, record store refresh, the filter pipeline,
sorting and clamped pagination to serve the application list view.
"""

from typing import Dict, Any

from pydantic import ValidationError

from schemas.list_applications import ListApplicationsRequest, ListApplicationsResponse
from store.session import ViewSession
from utils.pydantic_error_mapper import map_pydantic_validation_error
from models.errors import ToolError, create_internal_error


async def list_applications(args: Dict[str, Any], session: ViewSession) -> Dict[str, Any]:
    """
    Serve one page of the filtered application list.

    This is the main entry point for the MCP tool. It orchestrates all components:
    1. Validates the request (selectors, page_size, sort_by)
    2. Re-fetches records if the store is stale (or refresh=True)
    3. Updates session criteria; any filter change resets the page to 1
    4. Filters, sorts and paginates, clamping the page into range
    5. Returns the page with paging metadata

    Args:
        args: Dictionary containing optional parameters:
            - query (str): Case-insensitive search on company, role, location
            - status (str): "ALL" or a status value
            - priority (str): "ALL" or a priority value
            - page (int): 1-based page number (clamped)
            - page_size (int): Items per page (default 12)
            - sort_by (str): company, role, date_applied, created_at, updated_at
            - descending (bool): Reverse sort order
            - refresh (bool): Force a re-fetch from the backend
        session: The user's view session

    Returns:
        Dictionary with structure:
        {
            "applications": [...],   # Records on this page
            "count": int,            # Records on this page
            "total_count": int,      # Records matching the filters
            "page": int,             # Page served (0 when no results)
            "total_pages": int,
            "filters_active": bool   # Whether any filter is set
        }

        On error, returns:
        {
            "error": {
                "code": str,         # VALIDATION_ERROR, NETWORK_ERROR, SERVER_ERROR, ...
                "message": str,
                "retryable": bool
            }
        }
    """
    try:
        request = ListApplicationsRequest.model_validate(args)

        await session.ensure_fresh(force=request.refresh)

        session.update_criteria(
            query=request.query,
            status=request.status,
            priority=request.priority,
            page=request.page,
        )

        result = session.list_view(
            sort_by=request.sort_by,
            descending=request.descending,
            page_size=request.page_size,
        )
        return ListApplicationsResponse(**result).model_dump()

    except ValidationError as e:
        return map_pydantic_validation_error(e).to_dict()

    except ToolError as e:
        # Known tool errors with structured error information
        return e.to_dict()

    except Exception as e:
        # Unexpected errors - wrap in INTERNAL_ERROR
        internal_error = create_internal_error(message=str(e), original_error=e)
        return internal_error.to_dict()


def clear_filters(session: ViewSession) -> Dict[str, Any]:
    """
    Reset list and board filters to their defaults.

    Board reveal counts are kept.

    Returns:
        Dictionary with the reset criteria: {"criteria": {...}}
    """
    session.clear_filters()
    return {"criteria": session.criteria.model_dump()}
