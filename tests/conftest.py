"""Shared fixtures for the AppTracker test suite."""

import pytest

from fakes import FakeAppsClient, build_record


@pytest.fixture
def make_record():
    """Factory fixture for ApplicationRecord instances."""
    return build_record


@pytest.fixture
def sample_records():
    """A small mixed record set covering every status and priority."""
    return [
        build_record("a1", company="Google", role="SWE Intern", location="Mountain View, CA",
                     status="APPLIED", priority="HIGH", date_applied="2026-01-10"),
        build_record("a2", company="Shopify", role="Backend Developer", location="Ottawa, ON",
                     status="INTERVIEW", priority="MEDIUM", date_applied="2026-01-02"),
        build_record("a3", company="Stripe", role="Data Engineer", location=None,
                     status="SAVED", priority="LOW"),
        build_record("a4", company="Wealthsimple", role="Platform Engineer", location="Toronto, ON",
                     status="OFFER", priority="HIGH", date_applied="2025-12-01"),
        build_record("a5", company="Google", role="Site Reliability Engineer", location="Waterloo, ON",
                     status="REJECTED", priority="MEDIUM", date_applied="2025-11-20", archived=True),
        build_record("a6", company="Cohere", role="ML Engineer", location="Toronto, ON",
                     status="OA", priority="LOW", date_applied="2026-01-12"),
    ]


@pytest.fixture
def fake_client(sample_records):
    return FakeAppsClient(sample_records)
