"""Turn one search result row into a :class:`Record`."""

from __future__ import annotations

from typing import Any

import merchantmap.selectors as selectors
from merchantmap.errors import ExtractionError
from merchantmap.extractors.dom_utils import text_or_none
from merchantmap.models import Record


async def extract(
    row: Any,
    category: str,
    *,
    region: str | None = None,
    page: int | None = None,
) -> Record:
    """Read the title and address of *row* and tag them with *category*.

    Both fields are required. A missing node means the page layout no longer
    matches the selectors, so there is no retry.
    """

    context = {"category": category, "region": region, "page": page}

    name = await text_or_none(row, selectors.ROW_TITLE)
    if not name:
        raise ExtractionError("name", selector=selectors.ROW_TITLE, **context)

    address = await text_or_none(row, selectors.ROW_ADDRESS)
    if address is None:
        raise ExtractionError("address", selector=selectors.ROW_ADDRESS, **context)

    return Record(name=name, address=address, category=category)


__all__ = ["extract"]
