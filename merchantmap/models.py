"""Value types shared by the crawl components."""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import Any


@dataclass(frozen=True)
class Record:
    """One merchant entry from the search results.

    ``address`` may be something a geocoder cannot resolve, but the text itself
    is always present.
    """

    name: str
    address: str
    category: str

    def to_dict(self) -> dict[str, str]:
        return asdict(self)

    @classmethod
    def field_names(cls) -> list[str]:
        return [f.name for f in fields(cls)]


@dataclass(frozen=True)
class RegionSelector:
    """A region entry in the prefecture list."""

    handle: Any
    label: str
    index: int


@dataclass(frozen=True)
class CategorySelector:
    """A category checkbox exposed after a region has been expanded."""

    handle: Any
    toggle: Any
    label: str


@dataclass
class CrawlState:
    """Explicit copy of the UI state the crawl depends on.

    The site keeps selection and pagination state in the DOM; mirroring it here
    lets the walker and paginator assert ordering rules instead of trusting
    whatever the page happens to show.
    """

    region: str | None = None
    category: str | None = None
    category_active: bool = False
    page_number: int | None = None
    pages_visited: int = 0

    def enter_region(self, label: str) -> None:
        self.region = label
        self.category = None
        self.category_active = False
        self.reset_pages()

    def activate_category(self, label: str) -> None:
        self.category = label
        self.category_active = True
        self.reset_pages()

    def deactivate_category(self) -> None:
        self.category_active = False

    def reset_pages(self) -> None:
        self.page_number = None
        self.pages_visited = 0

    def context(self) -> dict[str, Any]:
        """Return keyword context for errors raised at the current position."""

        return {
            "region": self.region,
            "category": self.category,
            "page": self.page_number,
        }


__all__ = ["CategorySelector", "CrawlState", "Record", "RegionSelector"]
