"""Pagination controls of the search result list."""

from __future__ import annotations

from typing import Any

import merchantmap.selectors as selectors
from merchantmap.errors import PaginationReadError
from merchantmap.extractors.dom_utils import first_or_none, text_or_none
from merchantmap.logging_config import get_logger
from merchantmap.normalizers import parse_page_number
from merchantmap.settle import FixedDelaySettle, SettleStrategy

LOGGER = get_logger(__name__)


class PageNavigator:
    """Read and move the pager of the page it wraps."""

    def __init__(self, page: Any, settle: SettleStrategy | None = None) -> None:
        self.page = page
        self.settle = settle or FixedDelaySettle()

    async def current_page_number(self) -> int:
        text = await text_or_none(self.page, selectors.PAGINATION_CURRENT)
        number = parse_page_number(text)
        if number is None:
            raise PaginationReadError(
                f"Unreadable page indicator: {text!r}",
                selector=selectors.PAGINATION_CURRENT,
            )
        return number

    async def has_next_page(self) -> bool:
        return await first_or_none(self.page, selectors.PAGINATION_NEXT) is not None

    async def advance_to_next_page(self) -> None:
        """Click "next" and block until the result list has re-rendered."""

        LOGGER.info("Moving to next result page")
        await self.page.click(selectors.PAGINATION_NEXT_LINK)
        await self.settle.settle(self.page, visible=selectors.RESULT_LIST)


__all__ = ["PageNavigator"]
