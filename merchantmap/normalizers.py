"""Utility helpers for normalising scraped text values."""

from __future__ import annotations

import re

_UNSAFE_FILENAME_CHARS = re.compile(r"[\\/:*?\"<>|\x00-\x1f]")


def normalize_text(value: str | None) -> str | None:
    """Collapse runs of whitespace and trim; ``None`` stays ``None``."""

    if value is None:
        return None
    return " ".join(value.split())


def parse_page_number(value: str | None) -> int | None:
    """Return the integer shown on a pagination control, if it is one."""

    cleaned = normalize_text(value)
    if not cleaned or not cleaned.isdigit():
        return None
    return int(cleaned)


def safe_filename_part(value: str) -> str:
    """Make a region or category label usable as part of a file name."""

    cleaned = _UNSAFE_FILENAME_CHARS.sub("_", normalize_text(value) or "")
    cleaned = cleaned.strip(" .")
    return cleaned or "_"


__all__ = ["normalize_text", "parse_page_number", "safe_filename_part"]
