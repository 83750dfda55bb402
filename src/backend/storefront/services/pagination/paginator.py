"""
Paginator

Page boundaries and clamped navigation for listing pages.

Rules:
    - total_pages = max(1, ceil(total_items / items_per_page))
    - current_page is always within [1, total_pages]
    - go_to_page() clamps, it never raises for out-of-range input
    - next_page()/prev_page() stop at the ends, no wraparound
    - when total_items shrinks below the current page, the current page
      snaps to the new last page. Resetting to page 1 after a filter
      change is up to the caller (reset()).
"""

import math
from typing import Any, Dict, List, Optional, Sequence, TypeVar

T = TypeVar("T")


class Paginator:
    """
    Clamped page navigation over a known number of items.

    Usage:
        paginator = Paginator(total_items=25, items_per_page=12)
        paginator.go_to_page(10)
        paginator.current_page   # 3
        paginator.start_index    # 24
        paginator.end_index      # 24
    """

    def __init__(self, total_items: int, items_per_page: int = 12, initial_page: int = 1):
        if items_per_page <= 0:
            raise ValueError(f"items_per_page must be positive, got {items_per_page}")
        if total_items < 0:
            raise ValueError(f"total_items must not be negative, got {total_items}")

        self._total_items = total_items
        self._items_per_page = items_per_page
        self._current_page = self._clamp(initial_page)

    @property
    def total_items(self) -> int:
        return self._total_items

    @property
    def items_per_page(self) -> int:
        return self._items_per_page

    @property
    def current_page(self) -> int:
        return self._current_page

    @property
    def total_pages(self) -> int:
        return max(1, math.ceil(self._total_items / self._items_per_page))

    @property
    def start_index(self) -> int:
        return (self._current_page - 1) * self._items_per_page

    @property
    def end_index(self) -> int:
        """Index of the last item on the page; -1 when there are no items"""
        return min(self.start_index + self._items_per_page - 1, self._total_items - 1)

    @property
    def has_next_page(self) -> bool:
        return self._current_page < self.total_pages

    @property
    def has_previous_page(self) -> bool:
        return self._current_page > 1

    def _clamp(self, page: int) -> int:
        return max(1, min(page, self.total_pages))

    def go_to_page(self, page: int) -> int:
        """Move to page, clamped into [1, total_pages]. Returns the new page."""
        self._current_page = self._clamp(page)
        return self._current_page

    def next_page(self) -> int:
        if self.has_next_page:
            self._current_page += 1
        return self._current_page

    def prev_page(self) -> int:
        if self.has_previous_page:
            self._current_page -= 1
        return self._current_page

    def go_to_first_page(self) -> int:
        self._current_page = 1
        return self._current_page

    def go_to_last_page(self) -> int:
        self._current_page = self.total_pages
        return self._current_page

    def reset(self) -> int:
        """Back to page 1, for callers whose filter spec changed"""
        return self.go_to_first_page()

    def set_total_items(self, total_items: int) -> int:
        """
        Update the item count and re-clamp.

        The current page survives when it still exists; otherwise it snaps
        to the new last page.
        """
        if total_items < 0:
            raise ValueError(f"total_items must not be negative, got {total_items}")
        self._total_items = total_items
        self._current_page = self._clamp(self._current_page)
        return self._current_page

    def set_items_per_page(self, items_per_page: int) -> int:
        if items_per_page <= 0:
            raise ValueError(f"items_per_page must be positive, got {items_per_page}")
        self._items_per_page = items_per_page
        self._current_page = self._clamp(self._current_page)
        return self._current_page

    def slice(self, items: Sequence[T]) -> List[T]:
        """Items of the current page"""
        return list(items[self.start_index:self.end_index + 1])

    def visible_pages(self, delta: int = 2) -> List[Optional[int]]:
        """
        Page-number strip for pagination controls.

        First and last page are always present; pages within delta of the
        current page are listed; None marks a collapsed gap.

        Example (current 6 of 12, delta 2):
            [1, None, 4, 5, 6, 7, 8, None, 12]
        """
        total = self.total_pages
        if total == 1:
            return [1]

        middle = list(range(
            max(2, self._current_page - delta),
            min(total - 1, self._current_page + delta) + 1,
        ))

        pages: List[Optional[int]] = [1]
        if middle and middle[0] > 2:
            pages.append(None)
        pages.extend(middle)
        if middle and middle[-1] < total - 1:
            pages.append(None)
        elif not middle and total > 2:
            pages.append(None)
        pages.append(total)
        return pages

    def to_metadata(self) -> Dict[str, Any]:
        """Pagination block of a CatalogPage"""
        return {
            "current_page": self.current_page,
            "total_pages": self.total_pages,
            "total_items": self.total_items,
            "items_per_page": self.items_per_page,
            "has_next_page": self.has_next_page,
            "has_previous_page": self.has_previous_page,
            "start_index": self.start_index,
            "end_index": self.end_index,
        }

    def __repr__(self) -> str:
        return (
            f"Paginator(current_page={self.current_page}, total_pages={self.total_pages}, "
            f"total_items={self.total_items}, items_per_page={self.items_per_page})"
        )
