"""Top level loop over the requested regions."""

from __future__ import annotations

from typing import Any, Sequence

import merchantmap.selectors as selectors
from merchantmap.errors import NavigationError, SelectionError
from merchantmap.extractors.dom_utils import all_matches, attribute_or_none, first_or_none
from merchantmap.logging_config import get_logger
from merchantmap.models import CrawlState, Record, RegionSelector
from merchantmap.settle import FixedDelaySettle, SettleStrategy
from merchantmap.storage.repo import CsvRecordWriter
from merchantmap.walker import CategoryWalker

LOGGER = get_logger(__name__)


class RegionDriver:
    """Crawl each target region and write its aggregate file.

    ``target_regions`` are positions in the region list as the page shows it.
    The list is re-read for every region because expanding one and following
    the next-region link rebuilds that part of the DOM.
    """

    def __init__(
        self,
        walker: CategoryWalker,
        writer: CsvRecordWriter,
        *,
        settle: SettleStrategy | None = None,
        follow_last_region_link: bool = False,
    ) -> None:
        self.walker = walker
        self.writer = writer
        self.settle = settle or FixedDelaySettle()
        self.follow_last_region_link = follow_last_region_link

    async def list_regions(self, page: Any) -> list[RegionSelector]:
        handles = await all_matches(page, selectors.REGION_ITEMS)
        return [await self._read_region(handle, index) for index, handle in enumerate(handles)]

    async def run(
        self,
        page: Any,
        target_regions: Sequence[int],
        state: CrawlState | None = None,
    ) -> dict[str, list[Record]]:
        state = state or CrawlState()
        results: dict[str, list[Record]] = {}

        for position, index in enumerate(target_regions):
            region = await self._region_at(page, index)
            LOGGER.info("Starting merchant map for region=%s", region.label)
            state.enter_region(region.label)

            expand = await first_or_none(region.handle, selectors.REGION_EXPAND)
            if expand is None:
                raise SelectionError(
                    "Region expansion control not found",
                    region=region.label,
                    selector=selectors.REGION_EXPAND,
                )
            await expand.click()
            await self.settle.settle(page)

            records = await self.walker.walk_categories(page, region.label, state)
            self.writer.write_aggregate(records, region.label)
            results[region.label] = records
            LOGGER.info("Region %s complete: %s records", region.label, len(records))

            is_last = position == len(target_regions) - 1
            if is_last and not self.follow_last_region_link:
                continue
            await self._next_region(page, region.label)

        return results

    async def _region_at(self, page: Any, index: int) -> RegionSelector:
        handles = await all_matches(page, selectors.REGION_ITEMS)
        if index < 0 or index >= len(handles):
            raise SelectionError(
                f"Region index {index} out of range ({len(handles)} listed)",
                selector=selectors.REGION_ITEMS,
            )
        return await self._read_region(handles[index], index)

    async def _read_region(self, handle: Any, index: int) -> RegionSelector:
        label = await attribute_or_none(handle, selectors.REGION_LABEL, selectors.LABEL_ATTRIBUTE)
        if not label:
            raise SelectionError(
                f"Region #{index} has no label",
                selector=selectors.REGION_LABEL,
            )
        return RegionSelector(handle=handle, label=label, index=index)

    async def _next_region(self, page: Any, region: str) -> None:
        LOGGER.info("Next region")
        link = await first_or_none(page, selectors.NEXT_REGION_LINK)
        if link is None:
            raise NavigationError(
                "Next region link not found",
                region=region,
                selector=selectors.NEXT_REGION_LINK,
            )
        await link.click()
        await self.settle.settle(page)


__all__ = ["RegionDriver"]
