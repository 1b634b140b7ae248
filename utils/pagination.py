"""
Pagination helpers for the application list and board views.

The list view pages globally with clamped page numbers. The board reveals
each column incrementally ("load more"), independently per column.
"""

import math
from typing import Dict, Iterable, List, NamedTuple, Sequence, TypeVar

from models.errors import create_validation_error
from models.status import status_value
from utils.validation import DEFAULT_BOARD_WINDOW

T = TypeVar("T")


class PageResult(NamedTuple):
    """One page of results.

    ``page`` is the page actually served after clamping, 0 when there are no
    pages at all.
    """

    page_items: List
    total_pages: int
    page: int


def compute_total_pages(total_count: int, page_size: int) -> int:
    """Number of pages needed for ``total_count`` items (0 when empty)."""
    if total_count <= 0:
        return 0
    return math.ceil(total_count / page_size)


def clamp_page(page_number: int, total_pages: int) -> int:
    """
    Clamp a requested page number into ``[1, total_pages]``.

    Returns 0 when there are no pages.
    """
    if total_pages <= 0:
        return 0
    return max(1, min(page_number, total_pages))


def paginate(items: Sequence[T], page_number: int, page_size: int) -> PageResult:
    """
    Slice ``items`` into the requested page.

    Out-of-range page numbers are clamped before slicing, so requesting
    page 99 of a 3-page result serves page 3.

    Args:
        items: Full (filtered) list
        page_number: 1-based page number requested
        page_size: Items per page (must be positive)

    Returns:
        PageResult of (page_items, total_pages, page)

    Raises:
        ToolError: If page_size is not positive
    """
    if page_size < 1:
        raise create_validation_error(f"Invalid page_size: {page_size} must be at least 1")

    total_pages = compute_total_pages(len(items), page_size)
    page = clamp_page(page_number, total_pages)
    if page == 0:
        return PageResult([], 0, 0)

    start = (page - 1) * page_size
    return PageResult(list(items[start:start + page_size]), total_pages, page)


class ColumnReveal:
    """
    Per-column visible counts for the board's incremental reveal.

    Each column starts at ``window`` visible items and grows by ``window``
    on ``load_more``. Counts never shrink and are never reset by changes to
    other columns, the filters or the underlying records.
    """

    def __init__(self, columns: Iterable[str], window: int = DEFAULT_BOARD_WINDOW):
        if window < 1:
            raise create_validation_error(f"Invalid board window: {window} must be at least 1")
        self.window = window
        self._visible: Dict[str, int] = {status_value(column): window for column in columns}

    def visible_count(self, column: str) -> int:
        return self._visible.setdefault(status_value(column), self.window)

    def load_more(self, column: str) -> int:
        """Reveal one more window in ``column`` and return the new count."""
        count = self.visible_count(column) + self.window
        self._visible[status_value(column)] = count
        return count

    def reveal(self, column: str, items: Sequence[T]) -> List[T]:
        """The currently visible prefix of ``items`` for ``column``."""
        return list(items[: self.visible_count(column)])

    def has_more(self, column: str, total: int) -> bool:
        return total > self.visible_count(column)

    def snapshot(self) -> Dict[str, int]:
        return dict(self._visible)
