#!/usr/bin/env python3
"""
MCP Server entry point for the AppTracker application view-model.

This server keeps one signed-in user's application records in a local
record store and exposes the list view, the status board, optimistic
status moves and derived analytics as MCP tools. The backend REST API
(``APPTRACKER_API_URL``) remains the source of truth.

Usage:
    python server.py

The server runs in stdio mode by default, which is the standard transport
for MCP servers that are invoked by LLM agents.
"""

import logging
from typing import Optional

from mcp.server.fastmcp import FastMCP

from api.apps_client import AppsClient
from store.session import ViewSession
from tools.application_analytics import get_application_analytics
from tools.board import get_board, load_more_column
from tools.delete_application import delete_application
from tools.list_applications import clear_filters, list_applications
from tools.move_application_status import move_application_status
from tools.save_application import create_application, get_application, update_application
from config import get_config

# Create FastMCP server instance
config = get_config()
mcp = FastMCP(
    name=config.server_name,
    instructions=(
        "This server provides a view over the user's tracked job applications. "
        "\n\n"
        "READ TOOLS:\n"
        "Use list_applications to search, filter (status, priority), sort and page through applications. "
        "Filters persist between calls; changing any filter returns to page 1. "
        "Use get_board to see applications grouped into the six status columns "
        "(SAVED, APPLIED, OA, INTERVIEW, OFFER, REJECTED); columns show 5 cards at first. "
        "Use load_more_column to reveal 5 more cards in one column. "
        "Use get_application to fetch one application by id. "
        "Use get_application_analytics for counts, conversion rates and weekly volume "
        "(source=\"server\" asks the backend instead of the local view)."
        "\n\n"
        "WRITE TOOLS:\n"
        "Use move_application_status to move an application to another status. "
        "The move is applied locally at once and reverted if the backend rejects it; "
        "it is never retried automatically. "
        "Use create_application to add an application and update_application to edit its fields "
        "(status changes go through move_application_status). "
        "Use delete_application to delete an application. "
        "Use clear_filters to reset list and board filters."
    ),
)

_session: Optional[ViewSession] = None


def get_session() -> ViewSession:
    """
    Get the server's view session, creating it on first use.

    Returns:
        The process-wide ViewSession
    """
    global _session
    if _session is None:
        _session = ViewSession(AppsClient())
    return _session


@mcp.tool(
    name="list_applications",
    description=(
        "List tracked job applications with search, status/priority filters, sorting and paging. "
        "Returns the requested page (clamped into range) with total counts."
    ),
)
async def list_applications_tool(
    query: str | None = None,
    status: str | None = None,
    priority: str | None = None,
    page: int | None = None,
    page_size: int | None = None,
    sort_by: str | None = None,
    descending: bool | None = None,
    refresh: bool | None = None,
) -> dict:
    """
    List applications for the signed-in user.

    Args:
        query: Case-insensitive search on company, role and location ("" clears).
        status: "ALL" or one of SAVED, APPLIED, OA, INTERVIEW, OFFER, REJECTED.
        priority: "ALL" or one of LOW, MEDIUM, HIGH.
        page: 1-based page number; out-of-range pages are clamped.
        page_size: Items per page, 1-200 (default: 12).
        sort_by: company, role, date_applied, created_at or updated_at (default: server order).
        descending: Reverse the sort order.
        refresh: Re-fetch from the backend before listing.

    Returns:
        {"applications": [...], "count", "total_count", "page", "total_pages", "filters_active"}
        or {"error": {"code", "message", "retryable"}}.
    """
    args = {}

    # Only include parameters that were explicitly provided
    if query is not None:
        args["query"] = query
    if status is not None:
        args["status"] = status
    if priority is not None:
        args["priority"] = priority
    if page is not None:
        args["page"] = page
    if page_size is not None:
        args["page_size"] = page_size
    if sort_by is not None:
        args["sort_by"] = sort_by
    if descending is not None:
        args["descending"] = descending
    if refresh is not None:
        args["refresh"] = refresh

    return await list_applications(args, get_session())


@mcp.tool(
    name="get_board",
    description=(
        "Show applications grouped into status columns in workflow order. "
        "Supports search, company and applied-within-days filters."
    ),
)
async def get_board_tool(
    query: str | None = None,
    company: str | None = None,
    date_range_days: int | None = None,
    refresh: bool | None = None,
) -> dict:
    """
    Show the status board.

    Args:
        query: Case-insensitive search on company, role and location ("" clears).
        company: Case-insensitive company filter ("" clears).
        date_range_days: Only applications applied within this many days (0 clears).
        refresh: Re-fetch from the backend first.

    Returns:
        {"columns": [{"status", "label", "total", "visible_count", "has_more", "applications"}],
         "unrecognized_count": int} or an error dict.
    """
    args = {}
    if query is not None:
        args["query"] = query
    if company is not None:
        args["company"] = company
    if date_range_days is not None:
        args["date_range_days"] = date_range_days
    if refresh is not None:
        args["refresh"] = refresh

    return await get_board(args, get_session())


@mcp.tool(
    name="load_more_column",
    description="Reveal the next 5 applications in one board column.",
)
async def load_more_column_tool(status: str) -> dict:
    """
    Grow one board column.

    Args:
        status: Column to grow (SAVED, APPLIED, OA, INTERVIEW, OFFER, REJECTED).

    Returns:
        The grown column, or an error dict.
    """
    return await load_more_column({"status": status}, get_session())


@mcp.tool(
    name="move_application_status",
    description=(
        "Move an application to another status. Applied locally immediately, confirmed with "
        "the backend, and reverted with an error if the backend rejects it."
    ),
)
async def move_application_status_tool(id: str, status: str) -> dict:
    """
    Move an application to a new status.

    Args:
        id: Application id.
        status: Target status (SAVED, APPLIED, OA, INTERVIEW, OFFER, REJECTED).

    Returns:
        {"id", "outcome", "sequence", "requested_status", "status"}; reverted moves also
        carry "error". Request failures return {"error": {...}} only.
    """
    return await move_application_status({"id": id, "status": status}, get_session())


@mcp.tool(
    name="get_application",
    description="Fetch one application from the backend by id and refresh its local copy.",
)
async def get_application_tool(id: str) -> dict:
    """
    Fetch an application.

    Args:
        id: Application id.

    Returns:
        {"application": {...}} or an error dict.
    """
    return await get_application({"id": id}, get_session())


@mcp.tool(
    name="create_application",
    description="Create a tracked job application. Company and role are required.",
)
async def create_application_tool(
    company: str,
    role: str,
    location: str | None = None,
    status: str | None = None,
    priority: str | None = None,
    date_applied: str | None = None,
    job_url: str | None = None,
    archived: bool | None = None,
) -> dict:
    """
    Create an application.

    Args:
        company: Company name.
        role: Role title.
        location: Where the job is.
        status: Starting status (default: SAVED).
        priority: LOW, MEDIUM or HIGH (default: MEDIUM).
        date_applied: YYYY-MM-DD.
        job_url: Link to the posting.
        archived: Create the application already archived.

    Returns:
        {"application": {...}} with the assigned id, or an error dict.
    """
    args = {"company": company, "role": role}

    # Only include parameters that were explicitly provided
    for name, value in (
        ("location", location),
        ("status", status),
        ("priority", priority),
        ("date_applied", date_applied),
        ("job_url", job_url),
        ("archived", archived),
    ):
        if value is not None:
            args[name] = value

    return await create_application(args, get_session())


@mcp.tool(
    name="update_application",
    description=(
        "Edit fields of an application. Omitted fields keep their value; an empty string "
        "clears location, date_applied or job_url. Use move_application_status for status."
    ),
)
async def update_application_tool(
    id: str,
    company: str | None = None,
    role: str | None = None,
    location: str | None = None,
    priority: str | None = None,
    date_applied: str | None = None,
    job_url: str | None = None,
    archived: bool | None = None,
) -> dict:
    """
    Edit an application.

    Args:
        id: Application id.
        company, role, location, priority, date_applied, job_url, archived: New values.

    Returns:
        {"application": {...}} as stored by the backend, or an error dict.
    """
    args = {"id": id}

    # Only include parameters that were explicitly provided
    for name, value in (
        ("company", company),
        ("role", role),
        ("location", location),
        ("priority", priority),
        ("date_applied", date_applied),
        ("job_url", job_url),
        ("archived", archived),
    ):
        if value is not None:
            args[name] = value

    return await update_application(args, get_session())


@mcp.tool(
    name="delete_application",
    description="Delete an application on the backend and remove it from the local view.",
)
async def delete_application_tool(id: str) -> dict:
    """
    Delete an application.

    Args:
        id: Application id.

    Returns:
        {"id": str, "deleted": true} or an error dict.
    """
    return await delete_application({"id": id}, get_session())


@mcp.tool(
    name="get_application_analytics",
    description=(
        "Summarize visible applications: status and priority counts, interview/offer/response "
        "rates, average days to offer and applications per week. With source=\"server\", "
        "return the backend's own analytics instead."
    ),
)
async def get_application_analytics_tool(
    refresh: bool | None = None,
    source: str | None = None,
) -> dict:
    """
    Summarize applications.

    Args:
        refresh: Re-fetch from the backend first (local source only).
        source: "local" (default) or "server".

    Returns:
        Analytics summary dictionary or an error dict.
    """
    args = {}
    if refresh is not None:
        args["refresh"] = refresh
    if source is not None:
        args["source"] = source

    return await get_application_analytics(args, get_session())


@mcp.tool(
    name="clear_filters",
    description="Reset list and board filters to their defaults.",
)
def clear_filters_tool() -> dict:
    """
    Reset filters.

    Returns:
        {"criteria": {...}} with the reset list criteria.
    """
    return clear_filters(get_session())


def main():
    """
    Main entry point for the MCP server.

    Runs the server in stdio mode, which is the standard transport
    for MCP servers that are invoked by LLM agents.
    """
    # Load and setup configuration
    config.setup_logging()

    # Log startup information
    logger = logging.getLogger(__name__)
    logger.info("Starting AppTracker MCP Server")
    logger.info(f"Server name: {config.server_name}")
    logger.info(f"Backend API: {config.api_url}")

    # Validate configuration and log warnings
    warnings = config.validate()
    for warning in warnings:
        logger.warning(warning)

    # Start the server
    logger.info("Server starting in stdio mode")
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
