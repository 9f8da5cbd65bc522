import asyncio

import pytest

from fake_site import FakeSite, RecordingSettle, make_rows

from merchantmap.errors import PaginationReadError
from merchantmap.navigator import PageNavigator
import merchantmap.selectors as selectors


def _searched(pages, **kwargs) -> FakeSite:
    site = FakeSite({"Tokyo": {"Cafe": pages}}, **kwargs)
    site._expand("Tokyo")
    site._toggle("Cafe")
    site._search()
    site.actions.clear()
    return site


def test_current_page_number_reads_selected_control() -> None:
    site = _searched([make_rows("a", 1), make_rows("b", 1)])
    navigator = PageNavigator(site, RecordingSettle())
    assert asyncio.run(navigator.current_page_number()) == 1


def test_current_page_number_rejects_non_numeric_text() -> None:
    site = _searched([make_rows("a", 1)], page_labels=["..."])
    navigator = PageNavigator(site, RecordingSettle())
    with pytest.raises(PaginationReadError):
        asyncio.run(navigator.current_page_number())


def test_current_page_number_without_pager_raises() -> None:
    site = FakeSite({"Tokyo": {"Cafe": [make_rows("a", 1)]}})
    navigator = PageNavigator(site, RecordingSettle())
    with pytest.raises(PaginationReadError) as excinfo:
        asyncio.run(navigator.current_page_number())
    assert excinfo.value.selector == selectors.PAGINATION_CURRENT


def test_has_next_page_follows_next_control() -> None:
    site = _searched([make_rows("a", 1), make_rows("b", 1)])
    navigator = PageNavigator(site, RecordingSettle())
    assert asyncio.run(navigator.has_next_page()) is True
    site.current_page = 2
    assert asyncio.run(navigator.has_next_page()) is False


def test_advance_clicks_next_then_waits_for_result_list() -> None:
    site = _searched([make_rows("a", 1), make_rows("b", 1)])
    navigator = PageNavigator(site, RecordingSettle())
    asyncio.run(navigator.advance_to_next_page())
    assert site.current_page == 2
    assert site.actions == ["next", f"settle:{selectors.RESULT_LIST}"]
