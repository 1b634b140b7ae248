"""
Tests for the backend REST client.

Uses httpx.MockTransport so no network access is needed.
"""

import json
from datetime import date, datetime, timezone

import httpx
import pytest

from api.apps_client import AppsClient, map_http_error, parse_applications
from models.errors import ErrorCode, ToolError
from models.status import ApplicationStatus
from utils.filtering import sort_records


def make_client(handler, token="test-token"):
    return AppsClient(
        base_url="http://backend.test/",
        token=token,
        timeout=5.0,
        transport=httpx.MockTransport(handler),
    )


RECORD = {
    "id": 1,
    "company": "Google",
    "role": "SWE",
    "status": "APPLIED",
    "priority": "HIGH",
    "dateApplied": "2026-01-10",
}

# Timestamps as the backend serializes them: dateApplied is an instant and
# createdAt/updatedAt may or may not carry an offset
SERVER_RECORDS = [
    {
        "id": 11,
        "company": "Shopify",
        "role": "Developer",
        "status": "APPLIED",
        "priority": "MEDIUM",
        "dateApplied": "2026-01-15T05:00:00Z",
        "createdAt": "2026-01-15T07:00:00+02:00",
        "updatedAt": "2026-01-15T05:00:00Z",
    },
    {
        "id": 12,
        "company": "Stripe",
        "role": "SRE",
        "status": "SAVED",
        "priority": "LOW",
        "dateApplied": None,
        "createdAt": "2026-01-14T09:30:00",
        "updatedAt": "2026-01-14T09:30:00",
    },
]


class TestParseApplications:
    """Tests for normalizing GET /apps bodies."""

    def test_bare_list(self):
        page = parse_applications([RECORD])

        assert [r.id for r in page.content] == ["1"]
        assert page.total_elements == 1
        assert page.total_pages == 1

    def test_spring_page(self):
        page = parse_applications({"content": [RECORD], "totalElements": 40, "totalPages": 4})

        assert len(page.content) == 1
        assert page.total_elements == 40
        assert page.total_pages == 4

    def test_empty_or_unexpected(self):
        assert parse_applications(None).content == []
        assert parse_applications({"unexpected": True}).total_pages == 0

    def test_server_timestamps(self):
        """Instant-valued dateApplied parses to its date; timestamps become UTC."""
        page = parse_applications({"content": SERVER_RECORDS, "totalElements": 2, "totalPages": 1})
        shopify, stripe = page.content

        assert shopify.date_applied == date(2026, 1, 15)
        assert shopify.created_at == datetime(2026, 1, 15, 5, 0, tzinfo=timezone.utc)
        assert stripe.date_applied is None
        assert stripe.created_at.tzinfo is not None

    def test_server_records_sort_by_timestamp(self):
        """Records with and without offsets sort together."""
        page = parse_applications(SERVER_RECORDS)
        ordered = sort_records(page.content, "created_at")

        assert [r.id for r in ordered] == ["12", "11"]

    def test_malformed_record(self):
        """A record missing its id is reported as a SERVER_ERROR."""
        with pytest.raises(ToolError) as exc_info:
            parse_applications([{"company": "NoId"}])

        assert exc_info.value.code == ErrorCode.SERVER_ERROR


class TestMapHttpError:
    """Tests for HTTP status to error code mapping."""

    def _response(self, status, body=None):
        request = httpx.Request("GET", "http://backend.test/api/apps/9?q=secret")
        return httpx.Response(status, json=body, request=request)

    def test_404(self):
        error = map_http_error(self._response(404), "9")
        assert error.code == ErrorCode.NOT_FOUND
        assert "9" in error.message

    def test_404_without_id_hides_query(self):
        error = map_http_error(self._response(404))
        assert "secret" not in error.message

    def test_401_and_403(self):
        assert map_http_error(self._response(401)).code == ErrorCode.UNAUTHORIZED
        error = map_http_error(self._response(403, {"message": "Not your application"}))
        assert error.code == ErrorCode.UNAUTHORIZED
        assert error.message == "Not your application"

    def test_400_uses_backend_message(self):
        error = map_http_error(self._response(400, {"message": "Invalid status"}))
        assert error.code == ErrorCode.VALIDATION_ERROR
        assert error.message == "Invalid status"

    def test_500_retryable(self):
        error = map_http_error(self._response(500, {"error": "Internal Server Error"}))
        assert error.code == ErrorCode.SERVER_ERROR
        assert error.retryable is True


class TestAppsClient:
    """Tests for AppsClient requests."""

    @pytest.mark.asyncio
    async def test_list_applications_sends_auth_and_params(self):
        """Bearer token and non-None params are sent to /api/apps."""
        seen = {}

        def handler(request):
            seen["url"] = request.url
            seen["auth"] = request.headers.get("Authorization")
            return httpx.Response(200, json=[RECORD])

        async with make_client(handler) as client:
            page = await client.list_applications(page=0, size=20, status=ApplicationStatus.OA)

        assert seen["url"].path == "/api/apps"
        assert seen["url"].params["status"] == "OA"
        assert seen["url"].params["size"] == "20"
        assert "q" not in seen["url"].params
        assert seen["auth"] == "Bearer test-token"
        assert page.content[0].company == "Google"

    @pytest.mark.asyncio
    async def test_list_applications_server_payload(self):
        def handler(request):
            return httpx.Response(
                200, json={"content": SERVER_RECORDS, "totalElements": 2, "totalPages": 1}
            )

        async with make_client(handler) as client:
            page = await client.list_applications()

        assert [r.date_applied for r in page.content] == [date(2026, 1, 15), None]
        assert page.total_elements == 2

    @pytest.mark.asyncio
    async def test_no_auth_header_without_token(self):
        seen = {}

        def handler(request):
            seen["auth"] = request.headers.get("Authorization")
            return httpx.Response(200, json=[])

        async with make_client(handler, token="") as client:
            await client.list_applications()

        assert seen["auth"] is None

    @pytest.mark.asyncio
    async def test_update_status_patch_body(self):
        """PATCH /apps/{id}/status carries the plain status value."""
        seen = {}

        def handler(request):
            seen["method"] = request.method
            seen["path"] = request.url.path
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={**RECORD, "status": "INTERVIEW"})

        async with make_client(handler) as client:
            updated = await client.update_status("1", ApplicationStatus.INTERVIEW)

        assert seen == {
            "method": "PATCH",
            "path": "/api/apps/1/status",
            "body": {"status": "INTERVIEW"},
        }
        assert updated.status is ApplicationStatus.INTERVIEW

    @pytest.mark.asyncio
    async def test_update_status_empty_body(self):
        async with make_client(lambda request: httpx.Response(204)) as client:
            assert await client.update_status("1", "OFFER") is None

    @pytest.mark.asyncio
    async def test_update_status_not_found(self):
        def handler(request):
            return httpx.Response(404, json={"message": "Application not found"})

        async with make_client(handler) as client:
            with pytest.raises(ToolError) as exc_info:
                await client.update_status("77", "OFFER")

        assert exc_info.value.code == ErrorCode.NOT_FOUND
        assert exc_info.value.message == "Application not found: 77"

    @pytest.mark.asyncio
    async def test_timeout_is_network_error(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        async with make_client(handler) as client:
            with pytest.raises(ToolError) as exc_info:
                await client.list_applications()

        assert exc_info.value.code == ErrorCode.NETWORK_ERROR
        assert exc_info.value.retryable is True

    @pytest.mark.asyncio
    async def test_connection_error_is_network_error(self):
        def handler(request):
            raise httpx.ConnectError("Connection refused", request=request)

        async with make_client(handler) as client:
            with pytest.raises(ToolError) as exc_info:
                await client.delete_application("1")

        assert exc_info.value.code == ErrorCode.NETWORK_ERROR
        assert "Connection refused" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_non_json_success_body(self):
        def handler(request):
            return httpx.Response(200, text="<html>proxy</html>")

        async with make_client(handler) as client:
            with pytest.raises(ToolError) as exc_info:
                await client.get_application("1")

        assert exc_info.value.code == ErrorCode.SERVER_ERROR

    @pytest.mark.asyncio
    async def test_create_and_update(self):
        seen = []

        def handler(request):
            seen.append((request.method, request.url.path, json.loads(request.content)))
            return httpx.Response(200, json={**RECORD, "id": 5})

        async with make_client(handler) as client:
            created = await client.create_application(
                {"company": "Google", "dateApplied": "2026-01-10T00:00:00Z"}
            )
            updated = await client.update_application("5", {"company": "Alphabet"})

        assert created.id == "5"
        assert updated.id == "5"
        assert seen[0][:2] == ("POST", "/api/apps")
        assert seen[0][2]["dateApplied"] == "2026-01-10T00:00:00Z"
        assert seen[1][:2] == ("PUT", "/api/apps/5")

    @pytest.mark.asyncio
    async def test_get_analytics(self):
        def handler(request):
            assert request.url.path == "/api/analytics"
            return httpx.Response(200, json={"total": 3})

        async with make_client(handler) as client:
            assert await client.get_analytics() == {"total": 3}

    def test_base_url_trailing_slash_stripped(self):
        client = make_client(lambda request: httpx.Response(200, json=[]))
        assert client.base_url == "http://backend.test"
