"""
Partition application records into per-status buckets for the board view.
"""

from typing import Dict, Iterable, List, Sequence, Union

from models.application import ApplicationRecord
from models.status import ApplicationStatus, BOARD_STATUSES, status_value

StatusKey = Union[ApplicationStatus, str]


def partition_by_status(
    records: Iterable[ApplicationRecord],
    status_list: Sequence[StatusKey] = BOARD_STATUSES,
) -> Dict[StatusKey, List[ApplicationRecord]]:
    """
    Group records into one bucket per status in ``status_list``.

    Every status in ``status_list`` is a key, even when its bucket is empty,
    and buckets keep the input order. Records whose status is not in
    ``status_list`` are left out: the board only shows the fixed workflow,
    while the list view still shows them.

    Args:
        records: Filtered records
        status_list: Bucket keys, in column order

    Returns:
        Mapping of status -> records, ordered like ``status_list``
    """
    buckets: Dict[StatusKey, List[ApplicationRecord]] = {s: [] for s in status_list}
    by_value = {status_value(s): s for s in status_list}

    for record in records:
        key = by_value.get(record.status_value)
        if key is not None:
            buckets[key].append(record)

    return buckets


def unbucketed(
    records: Iterable[ApplicationRecord],
    status_list: Sequence[StatusKey] = BOARD_STATUSES,
) -> List[ApplicationRecord]:
    """Records that ``partition_by_status`` would leave out."""
    known = {status_value(s) for s in status_list}
    return [r for r in records if r.status_value not in known]
