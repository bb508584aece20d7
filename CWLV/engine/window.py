"""
Virtualized Window Module - Index math for rendering large lists

Only the slice of a collection intersecting the viewport (plus an overscan
margin) is materialized. Sizes and offsets are in abstract units: pixels in
a browser, rows in a terminal.
"""
from dataclasses import dataclass
from typing import List, Optional, Tuple


@dataclass(frozen=True)
class VirtualItem:
    index: int
    start: int
    size: int

    @property
    def end(self) -> int:
        return self.start + self.size


class VirtualizedWindow:
    """
    Viewport bookkeeping for a fixed-size-row list

    Features:
    - Visible index range with overscan, clamped to the collection
    - Per-item offsets
    - Keyboard "active index" kept in view with scroll_to_index
    - Re-clamping when the collection shrinks (e.g. after filtering)
    """

    def __init__(self, item_count: int = 0, estimated_size: int = 1, overscan: int = 5,
                 viewport_extent: int = 0, scroll_offset: int = 0):
        if estimated_size <= 0:
            raise ValueError("estimated_size must be positive")
        self.item_count = max(0, item_count)
        self.estimated_size = estimated_size
        self.overscan = max(0, overscan)
        self.viewport_extent = max(0, viewport_extent)
        self.scroll_offset = 0
        self.active_index = 0
        self.scroll_to(scroll_offset)

    @property
    def total_size(self) -> int:
        return self.item_count * self.estimated_size

    @property
    def max_scroll_offset(self) -> int:
        return max(0, self.total_size - self.viewport_extent)

    @property
    def is_empty(self) -> bool:
        return self.item_count == 0

    def item_offset(self, index: int) -> int:
        return index * self.estimated_size

    def scroll_to(self, offset: int) -> None:
        """Move the viewport, clamped to the scrollable extent"""
        self.scroll_offset = min(max(0, offset), self.max_scroll_offset)

    def set_viewport(self, extent: Optional[int] = None, offset: Optional[int] = None) -> None:
        if extent is not None:
            self.viewport_extent = max(0, extent)
        self.scroll_to(self.scroll_offset if offset is None else offset)

    def set_item_count(self, item_count: int) -> None:
        """
        Replace the collection size

        The active index and scroll offset are clamped to the new size before
        any later scroll_to_index; an empty collection resets both to 0.
        """
        self.item_count = max(0, item_count)
        if self.item_count == 0:
            self.active_index = 0
        else:
            self.active_index = min(max(0, self.active_index), self.item_count - 1)
        self.scroll_to(self.scroll_offset)

    def visible_range(self) -> Optional[Tuple[int, int]]:
        """
        Inclusive index range to materialize

        Returns:
            (lo, hi) covering every item intersecting
            [scroll_offset, scroll_offset + viewport_extent) widened by the
            overscan, or None when the collection is empty
        """
        if self.item_count == 0:
            return None
        last_index = self.item_count - 1
        first = self.scroll_offset // self.estimated_size
        if self.viewport_extent > 0:
            last = (self.scroll_offset + self.viewport_extent - 1) // self.estimated_size
        else:
            last = first
        lo = min(max(0, first - self.overscan), last_index)
        hi = min(last_index, last + self.overscan)
        return lo, max(lo, hi)

    def virtual_items(self) -> List[VirtualItem]:
        """Materialized items with their offsets"""
        bounds = self.visible_range()
        if bounds is None:
            return []
        lo, hi = bounds
        return [VirtualItem(i, self.item_offset(i), self.estimated_size) for i in range(lo, hi + 1)]

    def scroll_to_index(self, index: int) -> bool:
        """
        Scroll the minimum amount needed to show an item

        Args:
            index: Item to bring into view; clamped to the collection

        Returns:
            False when the window is empty and nothing scrolled
        """
        if self.item_count == 0:
            return False
        index = min(max(0, index), self.item_count - 1)
        start = self.item_offset(index)
        end = start + self.estimated_size
        if start < self.scroll_offset:
            self.scroll_to(start)
        elif end > self.scroll_offset + self.viewport_extent:
            self.scroll_to(end - self.viewport_extent)
        return True

    def set_active_index(self, index: int) -> int:
        """Move the keyboard cursor and keep it visible; returns the clamped index"""
        if self.item_count == 0:
            self.active_index = 0
            return 0
        self.active_index = min(max(0, index), self.item_count - 1)
        self.scroll_to_index(self.active_index)
        return self.active_index

    def move_active(self, delta: int) -> int:
        return self.set_active_index(self.active_index + delta)
