"""Iterate the categories of the currently expanded region."""

from __future__ import annotations

from typing import Any

import merchantmap.selectors as selectors
from merchantmap.errors import SearchSummaryError, SelectionError
from merchantmap.extractors.dom_utils import all_matches, attribute_or_none, first_or_none, text_or_none
from merchantmap.logging_config import get_logger
from merchantmap.models import CategorySelector, CrawlState, Record
from merchantmap.paginator import ResultPaginator
from merchantmap.settle import FixedDelaySettle, SettleStrategy
from merchantmap.storage.repo import CsvRecordWriter

LOGGER = get_logger(__name__)

DEFAULT_PAGE_SIZE = "100"


class CategoryWalker:
    """Search each category of a region in turn and persist its records.

    Categories are handled one after another: the checkboxes live in one shared
    search form, so a category left selected leaks into the next search. Each
    category is deselected before the next one is touched.
    """

    def __init__(
        self,
        writer: CsvRecordWriter,
        *,
        paginator: ResultPaginator | None = None,
        settle: SettleStrategy | None = None,
        page_size: str = DEFAULT_PAGE_SIZE,
    ) -> None:
        self.writer = writer
        self.settle = settle or FixedDelaySettle()
        self.paginator = paginator or ResultPaginator(self.settle)
        self.page_size = str(page_size)

    async def list_categories(self, page: Any, region: str | None = None) -> list[CategorySelector]:
        handles = await all_matches(page, selectors.CATEGORY_ITEMS)
        categories: list[CategorySelector] = []
        for handle in handles:
            categories.append(await self._read_category(handle, region))
        return categories

    async def walk_categories(
        self,
        page: Any,
        region: str,
        state: CrawlState | None = None,
    ) -> list[Record]:
        if state is None:
            state = CrawlState()
            state.enter_region(region)

        total = len(await self.list_categories(page, region))
        if total == 0:
            LOGGER.warning("No categories listed for region=%s", region)
        region_records: list[Record] = []

        for index in range(total):
            category = await self._category_at(page, index, region)
            LOGGER.info("Category: %s region=%s", category.label, region)

            records = await self._search_category(page, region, category, state)
            region_records.extend(records)

            self.writer.write(records, region, category.label)

            await category.toggle.click()
            state.deactivate_category()
            await self.settle.settle(page)

        return region_records

    async def _search_category(
        self,
        page: Any,
        region: str,
        category: CategorySelector,
        state: CrawlState,
    ) -> list[Record]:
        if state.category_active:
            raise SelectionError(
                f"Category {state.category!r} is still selected",
                region=region,
                category=category.label,
            )

        await category.toggle.click()
        state.activate_category(category.label)
        await self.settle.settle(page)

        LOGGER.info("Submitting search region=%s category=%s", region, category.label)
        await page.click(selectors.SEARCH_SUBMIT)
        await self.settle.settle(page, visible=selectors.RESULT_LIST)

        LOGGER.info("Setting page size to %s", self.page_size)
        await page.select_option(selectors.PAGE_SIZE, self.page_size)
        await self.settle.settle(page)

        summary = await text_or_none(page, selectors.SEARCH_SUMMARY)
        if summary is None:
            raise SearchSummaryError(
                region=region,
                category=category.label,
                selector=selectors.SEARCH_SUMMARY,
            )
        LOGGER.info(
            "Search result: %s region=%s category=%s", summary, region, category.label
        )

        return await self.paginator.collect_all(page, category.label, state)

    async def _category_at(self, page: Any, index: int, region: str) -> CategorySelector:
        handles = await all_matches(page, selectors.CATEGORY_ITEMS)
        if index >= len(handles):
            raise SelectionError(
                f"Category #{index} disappeared ({len(handles)} listed)",
                region=region,
                selector=selectors.CATEGORY_ITEMS,
            )
        return await self._read_category(handles[index], region)

    async def _read_category(self, handle: Any, region: str | None) -> CategorySelector:
        label = await attribute_or_none(handle, selectors.CATEGORY_LABEL, selectors.LABEL_ATTRIBUTE)
        if not label:
            raise SelectionError(
                "Category label not found",
                region=region,
                selector=selectors.CATEGORY_LABEL,
            )
        toggle = await first_or_none(handle, selectors.CATEGORY_TOGGLE)
        if toggle is None:
            raise SelectionError(
                "Category toggle not found",
                region=region,
                category=label,
                selector=selectors.CATEGORY_TOGGLE,
            )
        return CategorySelector(handle=handle, toggle=toggle, label=label)


__all__ = ["CategoryWalker", "DEFAULT_PAGE_SIZE"]
