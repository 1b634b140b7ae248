"""
HTTP client layer for the AppTracker backend REST API.

Provides async access to the ``/api/apps`` resource and the analytics
endpoint, with bearer-token auth and mapping of transport failures and
non-2xx responses onto the project's ToolError contract.
"""

import logging
from typing import Any, Dict, List, NamedTuple, Optional, Union

import httpx
from pydantic import ValidationError

from config import get_config
from models.application import ApplicationRecord
from models.errors import (
    ToolError,
    create_network_error,
    create_not_found_error,
    create_server_error,
    create_unauthorized_error,
    create_validation_error,
    sanitize_url,
)
from models.status import ApplicationStatus, status_value

logger = logging.getLogger(__name__)


class ApplicationsPage(NamedTuple):
    """Result of ``GET /apps`` normalized across list and paged responses."""

    content: List[ApplicationRecord]
    total_elements: int
    total_pages: int


def _error_message(response: httpx.Response) -> str:
    """Pull a human readable message out of a backend error payload."""
    try:
        payload = response.json()
    except ValueError:
        return response.reason_phrase or "Request failed"

    if isinstance(payload, dict):
        for key in ("message", "error", "detail"):
            value = payload.get(key)
            if isinstance(value, str) and value:
                return value
    return response.reason_phrase or "Request failed"


def map_http_error(response: httpx.Response, entity_id: Optional[str] = None) -> ToolError:
    """
    Map a non-2xx backend response onto a ToolError.

    Args:
        response: The failed response
        entity_id: Id of the application the request targeted, if any

    Returns:
        ToolError with NOT_FOUND, UNAUTHORIZED, VALIDATION_ERROR or SERVER_ERROR code
    """
    status = response.status_code
    message = _error_message(response)

    if status == 404:
        return create_not_found_error(entity_id or sanitize_url(str(response.request.url)))
    if status in (401, 403):
        return create_unauthorized_error(message)
    if status in (400, 422):
        return create_validation_error(message)
    return create_server_error(status, message)


def parse_record(payload: Any) -> ApplicationRecord:
    """Validate one backend record, raising a SERVER_ERROR on a malformed payload."""
    try:
        return ApplicationRecord.model_validate(payload)
    except ValidationError as e:
        raise create_server_error(200, f"Malformed application payload: {e}", original_error=e)


def parse_applications(payload: Any) -> ApplicationsPage:
    """
    Normalize a ``GET /apps`` body.

    The backend returns either a bare list or a Spring page object
    ``{content, totalElements, totalPages}``; anything else is treated as empty.
    """
    if isinstance(payload, dict) and "content" in payload:
        items = payload.get("content") or []
        total_elements = payload.get("totalElements", len(items))
        total_pages = payload.get("totalPages", 1 if items else 0)
    elif isinstance(payload, list):
        items = payload
        total_elements = len(items)
        total_pages = 1 if items else 0
    else:
        items, total_elements, total_pages = [], 0, 0

    if not isinstance(items, list):
        items = []

    return ApplicationsPage([parse_record(item) for item in items], total_elements, total_pages)


class AppsClient:
    """
    Async client for the applications resource.

    Usage:
        async with AppsClient() as client:
            page = await client.list_applications()
            updated = await client.update_status("a1", ApplicationStatus.INTERVIEW)
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the client.

        Args:
            base_url: Backend root URL (default: APPTRACKER_API_URL)
            token: Bearer token (default: APPTRACKER_API_TOKEN)
            timeout: Request timeout in seconds (default: APPTRACKER_REQUEST_TIMEOUT)
            transport: Optional httpx transport override
        """
        config = get_config()
        self.base_url = (base_url or config.api_url).rstrip("/")
        self.token = token if token is not None else config.api_token
        self.timeout = timeout if timeout is not None else config.request_timeout

        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"

        self._client = httpx.AsyncClient(
            base_url=f"{self.base_url}/api",
            headers=headers,
            timeout=self.timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "AppsClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(
        self, method: str, path: str, entity_id: Optional[str] = None, **kwargs
    ) -> Any:
        """
        Send one request and return the decoded JSON body (None when empty).

        Raises:
            ToolError: NETWORK_ERROR on timeout or transport failure, or the
                mapped error for a non-2xx response
        """
        logger.debug(f"{method} {path}")
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.TimeoutException as e:
            logger.warning(f"{method} {path} timed out")
            raise create_network_error(f"Request timed out: {method} {path}", original_error=e)
        except httpx.RequestError as e:
            logger.warning(f"{method} {path} failed: {e}")
            raise create_network_error(str(e) or type(e).__name__, original_error=e)

        if response.is_error:
            error = map_http_error(response, entity_id)
            logger.warning(f"{method} {path} returned {response.status_code}: {error.message}")
            raise error

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise create_server_error(
                response.status_code, "Response body is not valid JSON", original_error=e
            )

    async def list_applications(
        self,
        page: Optional[int] = None,
        size: Optional[int] = None,
        status: Optional[Union[str, ApplicationStatus]] = None,
        q: Optional[str] = None,
        from_: Optional[str] = None,
        to: Optional[str] = None,
    ) -> ApplicationsPage:
        """
        Fetch applications, optionally paged and filtered server-side.

        Args:
            page: 0-based page index
            size: Page size
            status: Status filter
            q: Free-text query
            from_: Lower bound on applied date (ISO date)
            to: Upper bound on applied date (ISO date)

        Returns:
            ApplicationsPage with parsed records
        """
        params: Dict[str, Any] = {
            "page": page,
            "size": size,
            "status": status_value(status),
            "q": q,
            "from": from_,
            "to": to,
        }
        params = {k: v for k, v in params.items() if v is not None}
        payload = await self._request("GET", "/apps", params=params)
        return parse_applications(payload)

    async def get_application(self, record_id: str) -> ApplicationRecord:
        payload = await self._request("GET", f"/apps/{record_id}", entity_id=record_id)
        return parse_record(payload)

    async def create_application(self, data: Dict[str, Any]) -> ApplicationRecord:
        payload = await self._request("POST", "/apps", json=data)
        return parse_record(payload)

    async def update_application(self, record_id: str, data: Dict[str, Any]) -> ApplicationRecord:
        payload = await self._request("PUT", f"/apps/{record_id}", entity_id=record_id, json=data)
        return parse_record(payload)

    async def delete_application(self, record_id: str) -> None:
        await self._request("DELETE", f"/apps/{record_id}", entity_id=record_id)

    async def update_status(
        self, record_id: str, status: Union[str, ApplicationStatus]
    ) -> Optional[ApplicationRecord]:
        """
        ``PATCH /apps/{id}/status`` with ``{status}``.

        Returns the updated record, or None when the backend answers without a body.
        """
        payload = await self._request(
            "PATCH",
            f"/apps/{record_id}/status",
            entity_id=record_id,
            json={"status": status_value(status)},
        )
        if payload is None:
            return None
        return parse_record(payload)

    async def get_analytics(self) -> Dict[str, Any]:
        """Server-computed analytics (status counts, weekly volume, conversion rates)."""
        payload = await self._request("GET", "/analytics")
        return payload or {}
