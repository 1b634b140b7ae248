"""Pydantic schema for get_application_analytics tool."""

from __future__ import annotations

from pydantic import field_validator

from schemas.common import StrictIgnoreRequest

ANALYTICS_SOURCES = ("local", "server")


class ApplicationAnalyticsRequest(StrictIgnoreRequest):
    """Request schema for get_application_analytics.

    ``local`` summarizes the records the session can see; ``server`` asks
    the backend's ``/analytics`` endpoint, which covers every application.
    """

    refresh: bool = False
    source: str = "local"

    @field_validator("source")
    @classmethod
    def validate_source(cls, value: str) -> str:
        if value not in ANALYTICS_SOURCES:
            raise ValueError(
                f"Invalid source value: '{value}'. Allowed values are: {', '.join(ANALYTICS_SOURCES)}"
            )
        return value
