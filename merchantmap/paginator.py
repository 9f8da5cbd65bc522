"""Collect every record of one category's paginated search result."""

from __future__ import annotations

import asyncio
from typing import Any

import merchantmap.selectors as selectors
from merchantmap.errors import PaginationReadError
from merchantmap.extractors.dom_utils import all_matches
from merchantmap.extractors.record import extract
from merchantmap.logging_config import get_logger
from merchantmap.models import CrawlState, Record
from merchantmap.navigator import PageNavigator
from merchantmap.settle import SettleStrategy

LOGGER = get_logger(__name__)


class ResultPaginator:
    """Walk the result pages of the current search.

    The loop ends only when the pager stops offering a "next" control. The
    page number is re-read after every transition and must increase;
    ``max_pages`` optionally caps the walk.
    """

    def __init__(
        self,
        settle: SettleStrategy | None = None,
        *,
        max_pages: int | None = None,
    ) -> None:
        self.settle = settle
        self.max_pages = max_pages if max_pages and max_pages > 0 else None

    async def collect_all(
        self,
        page: Any,
        category: str,
        state: CrawlState | None = None,
    ) -> list[Record]:
        state = state or CrawlState(category=category)
        navigator = PageNavigator(page, self.settle)
        records: list[Record] = []

        while True:
            page_number = await self._read_page_number(navigator, state)
            LOGGER.info(
                "Current page number: %s region=%s category=%s",
                page_number,
                state.region,
                category,
            )

            records.extend(await self._extract_page(page, category, state))

            if not await navigator.has_next_page():
                break

            if self.max_pages is not None and state.pages_visited >= self.max_pages:
                raise PaginationReadError(
                    f"Pagination exceeded max_pages={self.max_pages}",
                    **state.context(),
                )
            await navigator.advance_to_next_page()

        LOGGER.info(
            "Collected %s records over %s pages region=%s category=%s",
            len(records),
            state.pages_visited,
            state.region,
            category,
        )
        return records

    async def _read_page_number(self, navigator: PageNavigator, state: CrawlState) -> int:
        try:
            number = await navigator.current_page_number()
        except PaginationReadError as exc:
            exc.region = exc.region or state.region
            exc.category = exc.category or state.category
            raise

        previous = state.page_number
        if previous is not None and number <= previous:
            raise PaginationReadError(
                f"Pagination did not advance (was {previous}, now {number})",
                **state.context(),
            )
        state.page_number = number
        state.pages_visited += 1
        return number

    async def _extract_page(
        self, page: Any, category: str, state: CrawlState
    ) -> list[Record]:
        rows = await all_matches(page, selectors.RESULT_ROWS)
        LOGGER.debug("Extracting %s rows category=%s", len(rows), category)
        results = await asyncio.gather(
            *(
                extract(row, category, region=state.region, page=state.page_number)
                for row in rows
            ),
            return_exceptions=True,
        )
        # All reads have settled here; raise the first failure in row order.
        for result in results:
            if isinstance(result, BaseException):
                raise result
        return list(results)


__all__ = ["ResultPaginator"]
