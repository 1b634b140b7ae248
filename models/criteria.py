"""
Filter criteria for the application list and board views.

Criteria are session-scoped and never persisted. ``ALL`` in the status or
priority selector disables that filter.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from models.status import ALL


class FilterCriteria(BaseModel):
    """Criteria applied by the filter pipeline.

    ``company`` and ``date_range_days`` are only set by the board view.
    """

    model_config = ConfigDict(frozen=True)

    query: str = ""
    status: str = ALL
    priority: str = ALL
    page: int = 1
    company: str = ""
    date_range_days: Optional[int] = Field(default=None, ge=1)

    def is_filtered(self) -> bool:
        """Whether any filter narrows the result (used for 'clear filters')."""
        return bool(
            self.query
            or self.status != ALL
            or self.priority != ALL
            or self.company
            or self.date_range_days
        )

    def same_filters(self, other: "FilterCriteria") -> bool:
        """Compare everything except the page number."""
        return self.model_dump(exclude={"page"}) == other.model_dump(exclude={"page"})
