"""Helper utilities for reading values out of element handles."""

from __future__ import annotations

from typing import Any

from merchantmap.normalizers import normalize_text


async def first_or_none(root: Any, selector: str) -> Any | None:
    """Return the first match of *selector* under *root* (page or element)."""

    if root is None or not selector:
        return None
    return await root.query_selector(selector)


async def all_matches(root: Any, selector: str) -> list[Any]:
    if root is None or not selector:
        return []
    return list(await root.query_selector_all(selector))


async def text_or_none(root: Any, selector: str) -> str | None:
    """Return the normalised text content of the first match, or ``None``.

    ``None`` means the node does not exist or has no text content; an empty
    string is returned as-is so callers can tell the two apart.
    """

    node = await first_or_none(root, selector)
    if node is None:
        return None
    return normalize_text(await node.text_content())


async def attribute_or_none(root: Any, selector: str, attribute: str) -> str | None:
    """Return *attribute* of the first match of *selector*, or ``None``."""

    node = await first_or_none(root, selector)
    if node is None:
        return None
    value = await node.get_attribute(attribute)
    if value is None:
        return None
    return value.strip()
