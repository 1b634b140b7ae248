"""
Filter pipeline for application records.

Pure functions: inputs are never mutated and every call returns a new list
in input order. Steps run in a fixed order:
archived visibility -> text search -> status -> priority -> company -> date range.
"""

from datetime import date, timedelta
from typing import Iterable, List, Optional

from models.application import ApplicationRecord
from models.criteria import FilterCriteria
from models.status import ALL


def _contains(field: Optional[str], needle: str) -> bool:
    return bool(field) and needle in field.lower()


def matches_query(record: ApplicationRecord, query: str) -> bool:
    """Case-insensitive substring match on company, role or location."""
    if not query:
        return True
    needle = query.lower()
    return (
        _contains(record.company, needle)
        or _contains(record.role, needle)
        or _contains(record.location, needle)
    )


def filter_records(
    records: Iterable[ApplicationRecord],
    criteria: FilterCriteria,
    show_archived: bool = False,
    today: Optional[date] = None,
) -> List[ApplicationRecord]:
    """
    Narrow ``records`` to those matching ``criteria``.

    Args:
        records: Records from the record store
        criteria: Active filter criteria (page number is ignored here)
        show_archived: User preference; when False archived records are
            excluded regardless of other filters
        today: Reference date for ``date_range_days`` (defaults to today)

    Returns:
        New list of matching records, in input order
    """
    filtered = list(records)

    if not show_archived:
        filtered = [r for r in filtered if not r.archived]

    if criteria.query:
        filtered = [r for r in filtered if matches_query(r, criteria.query)]

    # Compared on raw values so an unrecognized status only matches itself
    if criteria.status != ALL:
        filtered = [r for r in filtered if r.status_value == criteria.status]

    if criteria.priority != ALL:
        filtered = [r for r in filtered if r.priority_value == criteria.priority]

    if criteria.company:
        company = criteria.company.lower()
        filtered = [r for r in filtered if _contains(r.company, company)]

    if criteria.date_range_days:
        cutoff = (today or date.today()) - timedelta(days=criteria.date_range_days)
        filtered = [
            r for r in filtered if r.date_applied is not None and r.date_applied >= cutoff
        ]

    return filtered


def sort_records(
    records: Iterable[ApplicationRecord], sort_by: Optional[str], descending: bool = False
) -> List[ApplicationRecord]:
    """
    Sort records on one field, keeping records without a value last.

    ``sort_by=None`` keeps the input order. The sort is stable.
    """
    records = list(records)
    if sort_by is None:
        return records

    present = [r for r in records if getattr(r, sort_by) is not None]
    missing = [r for r in records if getattr(r, sort_by) is None]

    def key(record: ApplicationRecord):
        value = getattr(record, sort_by)
        return value.lower() if isinstance(value, str) else value

    return sorted(present, key=key, reverse=descending) + missing
