"""
Tests for civicpulse/services/issues/pagination_services.py
"""

import pytest

from civicpulse.services.issues.pagination_services import count_pages, paginate, visible_page_numbers


class TestCountPages:
    def test_rounds_up(self):
        assert count_pages(25, 12) == 3

    def test_exact_multiple(self):
        assert count_pages(24, 12) == 2

    def test_empty_collection_has_one_page(self):
        assert count_pages(0, 12) == 1

    def test_rejects_non_positive_page_size(self):
        with pytest.raises(ValueError):
            count_pages(10, 0)


class TestPaginate:
    def test_requested_page_past_end_is_clamped(self):
        page = paginate(list(range(25)), 12, 10)
        assert page.total_pages == 3
        assert page.page == 3
        assert page.items == [24]

    def test_middle_page(self):
        page = paginate(list(range(25)), 12, 2)
        assert page.items == list(range(12, 24))
        assert page.has_previous and page.has_next

    def test_page_below_one_is_first_page(self):
        page = paginate(list(range(5)), 12, 0)
        assert page.page == 1
        assert page.items == list(range(5))
        assert not page.has_previous and not page.has_next

    def test_empty_collection(self):
        page = paginate([], 12, 4)
        assert page.page == 1
        assert page.total_pages == 1
        assert page.items == []
        assert page.total == 0

    def test_last_page_holds_remainder(self):
        page = paginate(list(range(13)), 12, 2)
        assert page.items == [12]
        assert not page.has_next


class TestVisiblePageNumbers:
    def test_small_range_shows_everything(self):
        assert visible_page_numbers(2, 3) == [1, 2, 3]

    def test_window_around_current_page(self):
        assert visible_page_numbers(5, 10) == [1, 4, 5, 6, 10]
