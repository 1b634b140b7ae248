"""
Tests for the view session: list view paging, board columns and
session-scoped criteria.
"""

from datetime import date

import pytest

from models.errors import ErrorCode, ToolError
from models.status import ApplicationStatus
from store.session import ViewSession
from fakes import FakeAppsClient, build_record


def many(count, status="APPLIED", prefix="r"):
    return [build_record(f"{prefix}{i}", status=status, company=f"Co{i:02d}") for i in range(count)]


async def fresh_session(records, **kwargs):
    session = ViewSession(FakeAppsClient(records), show_archived=False, page_size=12, board_window=5, **kwargs)
    await session.ensure_fresh()
    return session


class TestEnsureFresh:
    """Tests for refetching a stale store."""

    @pytest.mark.asyncio
    async def test_fetch_only_when_stale(self, sample_records):
        session = ViewSession(FakeAppsClient(sample_records))

        assert await session.ensure_fresh() is True
        assert await session.ensure_fresh() is False
        assert session.client.list_calls == 1

        session.store.invalidate()
        assert await session.ensure_fresh() is True
        assert session.client.list_calls == 2

    @pytest.mark.asyncio
    async def test_force(self, sample_records):
        session = await fresh_session(sample_records)
        assert await session.ensure_fresh(force=True) is True


class TestListView:
    """Tests for the paged list view."""

    @pytest.mark.asyncio
    async def test_first_page(self):
        session = await fresh_session(many(30))
        view = session.list_view()

        assert view["count"] == 12
        assert view["total_count"] == 30
        assert view["total_pages"] == 3
        assert view["page"] == 1
        assert view["filters_active"] is False

    @pytest.mark.asyncio
    async def test_out_of_range_page_clamped_and_stored(self):
        """A clamped page is written back to the criteria."""
        session = await fresh_session(many(30))
        session.update_criteria(page=99)
        view = session.list_view()

        assert view["page"] == 3
        assert view["count"] == 6
        assert session.criteria.page == 3

    @pytest.mark.asyncio
    async def test_empty_result_page_zero(self):
        session = await fresh_session(many(3))
        session.update_criteria(query="nothing matches")
        view = session.list_view()

        assert view["applications"] == []
        assert view["page"] == 0
        assert view["total_pages"] == 0
        assert view["filters_active"] is True

    @pytest.mark.asyncio
    async def test_filter_change_resets_page(self):
        """Changing any filter returns to page 1."""
        session = await fresh_session(many(30))
        session.update_criteria(page=3)
        assert session.criteria.page == 3

        session.update_criteria(query="co")
        assert session.criteria.page == 1

    @pytest.mark.asyncio
    async def test_unchanged_filter_keeps_page(self):
        session = await fresh_session(many(30))
        session.update_criteria(page=2, status="APPLIED")
        session.update_criteria(status="APPLIED")
        assert session.criteria.page == 2

    @pytest.mark.asyncio
    async def test_sorted_list(self):
        session = await fresh_session(many(5))
        view = session.list_view(sort_by="company", descending=True)
        assert [a["company"] for a in view["applications"]] == ["Co04", "Co03", "Co02", "Co01", "Co00"]

    @pytest.mark.asyncio
    async def test_unknown_status_shown_in_list(self):
        session = await fresh_session([build_record("w", status="WITHDRAWN")])
        view = session.list_view()
        assert view["applications"][0]["status"] == "WITHDRAWN"

    @pytest.mark.asyncio
    async def test_clear_filters(self):
        session = await fresh_session(many(3))
        session.update_criteria(query="x", priority="HIGH")
        session.update_board_criteria(company="acme")
        session.clear_filters()

        assert not session.criteria.is_filtered()
        assert not session.board_criteria.is_filtered()


class TestBoardView:
    """Tests for the status board."""

    @pytest.mark.asyncio
    async def test_six_columns_in_order(self, sample_records):
        session = await fresh_session(sample_records)
        board = session.board_view()

        assert [c["status"] for c in board["columns"]] == [
            "SAVED", "APPLIED", "OA", "INTERVIEW", "OFFER", "REJECTED",
        ]
        # archived a5 is hidden
        assert board["columns"][-1]["total"] == 0

    @pytest.mark.asyncio
    async def test_column_reveal_window(self):
        session = await fresh_session(many(12, status="APPLIED") + many(7, status="SAVED", prefix="s"))
        board = session.board_view()
        applied = board["columns"][1]

        assert applied["total"] == 12
        assert applied["visible_count"] == 5
        assert len(applied["applications"]) == 5
        assert applied["has_more"] is True

    @pytest.mark.asyncio
    async def test_load_more_grows_only_that_column(self):
        session = await fresh_session(many(12, status="APPLIED") + many(7, status="SAVED", prefix="s"))
        column = session.load_more("APPLIED")

        assert column["visible_count"] == 10
        assert len(column["applications"]) == 10

        board = session.board_view()
        assert board["columns"][0]["visible_count"] == 5
        assert len(board["columns"][0]["applications"]) == 5

    @pytest.mark.asyncio
    async def test_reveal_counts_survive_filter_changes(self):
        session = await fresh_session(many(12, status="OFFER"))
        session.load_more(ApplicationStatus.OFFER)
        session.update_board_criteria(query="co0")

        offer = session.board_view()["columns"][4]
        assert offer["visible_count"] == 10
        assert offer["total"] == 10

    @pytest.mark.asyncio
    async def test_unrecognized_status_counted(self):
        session = await fresh_session([build_record("w", status="WITHDRAWN"), build_record("s", status="SAVED")])
        board = session.board_view()

        assert board["unrecognized_count"] == 1
        assert sum(c["total"] for c in board["columns"]) == 1

    @pytest.mark.asyncio
    async def test_board_ignores_list_selectors(self, sample_records):
        """List view status/priority selectors do not narrow the board."""
        session = await fresh_session(sample_records)
        session.update_criteria(status="OFFER", priority="HIGH")
        board = session.board_view()
        assert sum(c["total"] for c in board["columns"]) == 5

    @pytest.mark.asyncio
    async def test_board_date_range(self, sample_records):
        session = await fresh_session(sample_records)
        session.update_board_criteria(date_range_days=14)
        board = session.board_view(today=date(2026, 1, 16))

        assert sum(c["total"] for c in board["columns"]) == 3

    @pytest.mark.asyncio
    async def test_load_more_rejects_unknown_status(self, sample_records):
        session = await fresh_session(sample_records)
        with pytest.raises(ToolError) as exc_info:
            session.load_more("WITHDRAWN")
        assert exc_info.value.code == ErrorCode.VALIDATION_ERROR


class TestDelete:
    """Tests for deleting through the session."""

    @pytest.mark.asyncio
    async def test_delete_removes_and_invalidates(self, sample_records):
        session = await fresh_session(sample_records)
        await session.delete("a1")

        assert "a1" not in session.store
        assert session.store.stale is True
        assert session.client.deleted == ["a1"]

    @pytest.mark.asyncio
    async def test_delete_missing_on_server_drops_local_copy(self, sample_records):
        session = await fresh_session(sample_records)
        session.client.records = [r for r in sample_records if r.id != "a2"]

        with pytest.raises(ToolError) as exc_info:
            await session.delete("a2")

        assert exc_info.value.code == ErrorCode.NOT_FOUND
        assert "a2" not in session.store


class TestSingleRecordWrites:
    """Tests for fetching, creating and editing single records."""

    @pytest.mark.asyncio
    async def test_fetch_refreshes_cached_copy(self, sample_records):
        session = await fresh_session(sample_records)
        session.client.records = [
            r.model_copy(update={"company": "Alphabet"}) if r.id == "a1" else r
            for r in sample_records
        ]

        record = await session.fetch("a1")

        assert record.company == "Alphabet"
        assert session.store.get("a1").company == "Alphabet"

    @pytest.mark.asyncio
    async def test_fetch_missing_drops_local_copy(self, sample_records):
        session = await fresh_session(sample_records)
        session.client.records = [r for r in sample_records if r.id != "a2"]

        with pytest.raises(ToolError) as exc_info:
            await session.fetch("a2")

        assert exc_info.value.code == ErrorCode.NOT_FOUND
        assert "a2" not in session.store

    @pytest.mark.asyncio
    async def test_create_sends_camel_case_body(self, sample_records):
        session = await fresh_session(sample_records)

        record = await session.create(
            {
                "company": "Cohere",
                "role": "MLE",
                "date_applied": "2026-01-18",
                "job_url": "https://x.test",
            }
        )

        assert session.client.sent_bodies == [
            {
                "company": "Cohere",
                "role": "MLE",
                "dateApplied": "2026-01-18T00:00:00Z",
                "jobUrl": "https://x.test",
            }
        ]
        assert record.id == "n7"
        assert record.date_applied == date(2026, 1, 18)
        assert record.id in session.store
        assert session.store.stale is True

    @pytest.mark.asyncio
    async def test_update_sends_full_record(self, sample_records):
        """PUT carries every editable field, with the changes applied."""
        session = await fresh_session(sample_records)

        record = await session.update("a1", {"priority": "LOW", "location": ""})

        assert session.client.sent_bodies == [
            {
                "company": "Google",
                "role": "SWE Intern",
                "location": None,
                "status": "APPLIED",
                "dateApplied": "2026-01-10T00:00:00Z",
                "jobUrl": None,
                "priority": "LOW",
                "archived": False,
            }
        ]
        assert record.priority.value == "LOW"
        assert record.location is None
        assert session.store.get("a1").priority.value == "LOW"
        assert session.store.stale is True

    @pytest.mark.asyncio
    async def test_update_uncached_record_fetches_first(self, sample_records):
        session = ViewSession(FakeAppsClient(sample_records))

        record = await session.update("a4", {"company": "WS"})

        assert record.company == "WS"
        assert session.client.list_calls == 0
        assert session.client.sent_bodies[0]["status"] == "OFFER"

    @pytest.mark.asyncio
    async def test_update_missing_record(self, sample_records):
        session = await fresh_session(sample_records)
        session.client.records = [r for r in sample_records if r.id != "a3"]

        with pytest.raises(ToolError) as exc_info:
            await session.update("a3", {"company": "Gone"})

        assert exc_info.value.code == ErrorCode.NOT_FOUND
        assert "a3" not in session.store

    @pytest.mark.asyncio
    async def test_server_analytics(self, sample_records):
        session = ViewSession(FakeAppsClient(sample_records))
        session.client.analytics = {"total": 6, "offers": 1}

        assert await session.server_analytics() == {"total": 6, "offers": 1}
