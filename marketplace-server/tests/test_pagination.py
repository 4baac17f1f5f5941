"""
PageRequest arithmetic and bounds.
"""

import pytest

from estate_market.modules.common import Page, PageRequest, ValidationError


class TestPageRequest:
    """1-indexed pages translate into offset/limit windows"""

    def test_offsets(self):
        request = PageRequest.build(3, 20)
        assert request.offset == 40
        assert request.limit == 20

    @pytest.mark.parametrize(
        "page, page_size, total, beyond",
        [
            (1, 10, 0, True),
            (1, 10, 1, False),
            (2, 1, 1, True),
            (2, 5, 6, False),
            (3, 5, 10, True),
        ],
    )
    def test_is_beyond(self, page, page_size, total, beyond):
        assert PageRequest.build(page, page_size).is_beyond(total) is beyond

    def test_custom_max_page_size(self):
        assert PageRequest.build(1, 500, max_page_size=500).page_size == 500
        with pytest.raises(ValidationError):
            PageRequest.build(1, 501, max_page_size=500)

    def test_empty_keeps_total(self):
        page = PageRequest.build(4, 10).empty(12)
        assert page.data == []
        assert page.total == 12
        assert page.page == 4


class TestPage:
    def test_map(self):
        page = Page(data=[1, 2, 3], total=7, page=1, page_size=3)
        mapped = page.map(lambda value: value * 10)
        assert mapped.data == [10, 20, 30]
        assert mapped.total == 7
