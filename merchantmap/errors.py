"""Custom exception types for the merchant map crawler."""

from __future__ import annotations

from typing import Optional


class CrawlError(Exception):
    """Base class for failures that abort the whole crawl."""

    default_message = "Crawl failed."

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        region: Optional[str] = None,
        category: Optional[str] = None,
        page: Optional[int] = None,
        selector: Optional[str] = None,
    ) -> None:
        self.message = message or self.default_message
        self.region = region
        self.category = category
        self.page = page
        self.selector = selector
        super().__init__(self.message)

    def __str__(self) -> str:
        context_parts: list[str] = []
        if self.region:
            context_parts.append(f"region={self.region}")
        if self.category:
            context_parts.append(f"category={self.category}")
        if self.page is not None:
            context_parts.append(f"page={self.page}")
        if self.selector:
            context_parts.append(f"selector={self.selector}")
        context = ", ".join(context_parts)
        return f"{self.message} ({context})" if context else self.message


class ExtractionError(CrawlError):
    """Raised when a result row is missing one of the record fields."""

    default_message = "Failed to extract record field."

    def __init__(self, field: str, message: Optional[str] = None, **context) -> None:
        self.field = field
        super().__init__(message or f"Missing {field} in result row.", **context)


class PaginationReadError(CrawlError):
    """Raised when the pagination indicator cannot be read or stops advancing."""

    default_message = "Failed to read the current page number."


class SearchSummaryError(CrawlError):
    """Raised when the result-count summary text is unavailable."""

    default_message = "Failed to read the search result summary."


class NavigationError(CrawlError):
    """Raised when an expected navigation control is absent."""

    default_message = "Navigation control not found."


class SelectionError(CrawlError):
    """Raised when a region or category selector element does not exist."""

    default_message = "Selector element not found."


class ConfigError(ValueError):
    """Raised when the configuration file or overrides are unusable."""


__all__ = [
    "ConfigError",
    "CrawlError",
    "ExtractionError",
    "NavigationError",
    "PaginationReadError",
    "SearchSummaryError",
    "SelectionError",
]
