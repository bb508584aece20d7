import pytest

from CWLV.engine.window import VirtualizedWindow


@pytest.fixture
def window():
    return VirtualizedWindow(item_count=1000, estimated_size=40, overscan=5, viewport_extent=400)


class TestVisibleRange:
    def test_top_of_list(self, window):
        assert window.visible_range() == (0, 14)

    def test_middle_of_list(self, window):
        window.scroll_to(20000)
        assert window.visible_range() == (495, 514)

    def test_bottom_is_clamped(self, window):
        window.scroll_to(10 ** 9)
        assert window.scroll_offset == 39600
        assert window.visible_range() == (985, 999)

    def test_range_covers_viewport(self, window):
        for offset in (0, 13, 399, 4020, 39599):
            window.scroll_to(offset)
            lo, hi = window.visible_range()
            first = window.scroll_offset // 40
            last = (window.scroll_offset + 399) // 40
            assert 0 <= lo <= first
            assert last <= hi <= 999

    def test_negative_offset_clamped(self, window):
        window.scroll_to(-100)
        assert window.scroll_offset == 0
        assert window.visible_range()[0] == 0

    def test_empty_collection(self):
        window = VirtualizedWindow(item_count=0, viewport_extent=10)
        assert window.visible_range() is None
        assert window.virtual_items() == []

    def test_collection_smaller_than_viewport(self):
        window = VirtualizedWindow(item_count=3, estimated_size=1, overscan=5, viewport_extent=20)
        assert window.visible_range() == (0, 2)
        assert window.max_scroll_offset == 0

    def test_virtual_items_offsets(self):
        window = VirtualizedWindow(item_count=10, estimated_size=2, overscan=0, viewport_extent=4)
        items = window.virtual_items()
        assert [(i.index, i.start, i.end) for i in items] == [(0, 0, 2), (1, 2, 4)]

    def test_invalid_size_rejected(self):
        with pytest.raises(ValueError):
            VirtualizedWindow(estimated_size=0)


class TestScrollToIndex:
    def test_scrolls_down_minimally(self, window):
        assert window.scroll_to_index(20)
        # Item 20 spans 800..840, so its end aligns with the viewport bottom
        assert window.scroll_offset == 440

    def test_scrolls_up_to_item_start(self, window):
        window.scroll_to(8000)
        window.scroll_to_index(100)
        assert window.scroll_offset == 4000

    def test_visible_item_does_not_scroll(self, window):
        window.scroll_to(400)
        window.scroll_to_index(12)
        assert window.scroll_offset == 400

    def test_empty_window_is_noop(self):
        window = VirtualizedWindow(item_count=0, viewport_extent=10)
        assert window.scroll_to_index(5) is False
        assert window.scroll_offset == 0


class TestActiveIndex:
    def test_move_active_keeps_it_visible(self):
        window = VirtualizedWindow(item_count=100, estimated_size=1, overscan=2, viewport_extent=10)
        for _ in range(15):
            window.move_active(1)
        assert window.active_index == 15
        assert window.scroll_offset == 6

    def test_move_active_clamped(self):
        window = VirtualizedWindow(item_count=5, estimated_size=1, viewport_extent=10)
        assert window.move_active(-3) == 0
        assert window.move_active(50) == 4

    def test_shrinking_collection_clamps_before_scrolling(self):
        window = VirtualizedWindow(item_count=500, estimated_size=1, overscan=5, viewport_extent=10)
        window.set_active_index(450)
        window.set_item_count(20)
        assert window.active_index == 19
        assert window.scroll_offset == 10
        window.scroll_to_index(window.active_index)
        assert window.visible_range() == (5, 19)

    def test_emptied_collection_resets(self):
        window = VirtualizedWindow(item_count=50, estimated_size=1, viewport_extent=10)
        window.set_active_index(30)
        window.set_item_count(0)
        assert window.active_index == 0
        assert window.scroll_offset == 0
        assert window.visible_range() is None
