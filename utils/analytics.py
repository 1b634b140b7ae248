"""
Client-side analytics derived from the visible application records.

Mirrors the dashboard and analytics screens: status/priority distribution,
pipeline conversion rates, time to offer and weekly application volume.
"""

from collections import Counter
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional

from models.application import ApplicationRecord
from models.status import ApplicationStatus, IN_PROGRESS_STATUSES, Priority

# Weekly chart window
WEEKS_SHOWN = 12

_APPLIED_OR_LATER = {
    ApplicationStatus.APPLIED,
    ApplicationStatus.OA,
    ApplicationStatus.INTERVIEW,
    ApplicationStatus.OFFER,
}
_INTERVIEWED = {ApplicationStatus.INTERVIEW, ApplicationStatus.OFFER}
_RESPONDED = {
    ApplicationStatus.OA,
    ApplicationStatus.INTERVIEW,
    ApplicationStatus.OFFER,
    ApplicationStatus.REJECTED,
}


def percent(part: int, whole: int) -> float:
    """Percentage rounded to one decimal, 0.0 when ``whole`` is zero."""
    if whole <= 0:
        return 0.0
    return round(part * 100.0 / whole, 1)


def record_date(record: ApplicationRecord) -> Optional[date]:
    """Date an application counts from: applied date, else creation date."""
    if record.date_applied is not None:
        return record.date_applied
    if record.created_at is not None:
        return record.created_at.date()
    return None


def week_start(day: date) -> date:
    """Sunday on or before ``day``."""
    return day - timedelta(days=(day.weekday() + 1) % 7)


def applications_per_week(
    records: Iterable[ApplicationRecord], today: date, weeks: int = WEEKS_SHOWN
) -> Dict[str, int]:
    """
    Count applications for the current week and the ``weeks`` weeks before it.

    Weeks start on Sunday; keys are the ISO date of each week start, oldest
    first, and every week in the window is present.
    """
    current = week_start(today)
    starts: List[date] = [current - timedelta(weeks=i) for i in range(weeks, -1, -1)]
    counts = {start.isoformat(): 0 for start in starts}

    for record in records:
        day = record_date(record)
        if day is None or day > today:
            continue
        key = week_start(day).isoformat()
        if key in counts:
            counts[key] += 1

    return counts


def average_days_to_offer(records: Iterable[ApplicationRecord], today: date) -> int:
    """Mean age in days of applications currently holding an offer (0 if none)."""
    ages = []
    for record in records:
        if record.status != ApplicationStatus.OFFER:
            continue
        day = record_date(record)
        if day is not None:
            ages.append((today - day).days)
    if not ages:
        return 0
    return round(sum(ages) / len(ages))


def summarize(records: Iterable[ApplicationRecord], today: Optional[date] = None) -> dict:
    """
    Build the analytics summary for ``records``.

    Args:
        records: Records to summarize (usually the archived-visibility filtered set)
        today: Reference date (defaults to today)

    Returns:
        JSON-serializable summary dictionary
    """
    records = list(records)
    today = today or date.today()

    status_counts = Counter(r.status_value for r in records)
    priority_counts = Counter(r.priority_value for r in records)

    total = len(records)
    applied = sum(1 for r in records if r.status in _APPLIED_OR_LATER)
    interviewed = sum(1 for r in records if r.status in _INTERVIEWED)
    offers = status_counts.get(ApplicationStatus.OFFER.value, 0)
    responded = sum(1 for r in records if r.status in _RESPONDED)

    return {
        "total": total,
        "in_progress": sum(1 for r in records if r.status in IN_PROGRESS_STATUSES),
        "offers": offers,
        "status_counts": {
            **{s.value: 0 for s in ApplicationStatus},
            **dict(status_counts),
        },
        "priority_counts": {
            **{p.value: 0 for p in Priority},
            **dict(priority_counts),
        },
        "interview_rate": percent(interviewed, applied),
        "offer_rate": percent(offers, interviewed),
        "overall_success_rate": percent(offers, applied),
        "response_rate": percent(responded, total),
        "average_days_to_offer": average_days_to_offer(records, today),
        "applications_per_week": applications_per_week(records, today),
    }
