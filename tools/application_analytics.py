"""
Main MCP tool handler for get_application_analytics.
"""

from typing import Dict, Any

from pydantic import ValidationError

from schemas.application_analytics import ApplicationAnalyticsRequest
from store.session import ViewSession
from utils.pydantic_error_mapper import map_pydantic_validation_error
from models.errors import ToolError, create_internal_error


async def get_application_analytics(args: Dict[str, Any], session: ViewSession) -> Dict[str, Any]:
    """
    Summarize applications, either locally or through the backend.

    Args:
        args: Dictionary containing optional parameters:
            - refresh (bool): Force a re-fetch from the backend (local source)
            - source (str): "local" (default) or "server"
        session: The user's view session

    Returns:
        For "local": status/priority counts, conversion rates, average days
        to offer and weekly volume over the visible applications (archived
        ones only if the user shows them). For "server": the backend's
        analytics payload under "analytics". Or an error dict.
    """
    try:
        request = ApplicationAnalyticsRequest.model_validate(args)

        if request.source == "server":
            return {"source": "server", "analytics": await session.server_analytics()}

        await session.ensure_fresh(force=request.refresh)
        return session.analytics()

    except ValidationError as e:
        return map_pydantic_validation_error(e).to_dict()

    except ToolError as e:
        return e.to_dict()

    except Exception as e:
        internal_error = create_internal_error(message=str(e), original_error=e)
        return internal_error.to_dict()
