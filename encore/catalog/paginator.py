"""Incremental paging over a filtered catalog list.

:class:`Paginator` is the pure page cursor. :class:`CatalogBrowser` is the
stateful screen model around it: it keeps the fetched candidates, the
current filtered list and the cursor, and turns scroll positions into page
loads. Only one load may be in flight; scroll triggers that arrive while a
load is running are dropped.
"""

import asyncio
import logging
from datetime import UTC, date, datetime

from encore.catalog.filters import (
    FilterCriteria,
    filter_by_criteria,
    unique_cities,
    unique_genres,
)
from encore.core.config import settings
from encore.models import CatalogEvent

logger = logging.getLogger(__name__)


class Paginator:
    """Reveals a list one page at a time. Starts with nothing displayed."""

    def __init__(self, items: list, page_size: int = 15, displayed_count: int = 0) -> None:
        if page_size <= 0:
            raise ValueError("page_size must be positive")
        self.items = items
        self.page_size = page_size
        self.displayed_count = min(displayed_count, len(items))

    @property
    def has_more(self) -> bool:
        return self.displayed_count < len(self.items)

    @property
    def visible(self) -> list:
        return self.items[: self.displayed_count]

    def load_more(self) -> bool:
        """Reveal the next page. Returns whether items remain after it."""
        self.displayed_count = min(self.displayed_count + self.page_size, len(self.items))
        return self.has_more


def paginate(items: list, page_size: int = 15, current_count: int = 0) -> tuple[list, bool]:
    """Return the first ``current_count`` items and whether more remain."""
    pager = Paginator(items, page_size, current_count)
    return pager.visible, pager.has_more


class CatalogBrowser:
    """Filter and page state for browsing a locally fetched catalog."""

    def __init__(
        self,
        candidates: list[CatalogEvent],
        page_size: int = settings.catalog_page_size,
        scroll_threshold_px: int = settings.scroll_threshold_px,
        load_delay_seconds: float = 0.0,
        today: date | None = None,
    ) -> None:
        self.candidates = list(candidates)
        self.page_size = page_size
        self.scroll_threshold_px = scroll_threshold_px
        self.load_delay_seconds = load_delay_seconds
        self.today = today or datetime.now(UTC).date()
        self.criteria = FilterCriteria()
        self._loading = False
        self._pager = Paginator([], page_size)
        self._refilter()

    def _refilter(self) -> None:
        filtered = filter_by_criteria(self.candidates, self.criteria, self.today)
        self._pager = Paginator(filtered, self.page_size)
        self._pager.load_more()

    @property
    def filtered(self) -> list[CatalogEvent]:
        return self._pager.items

    @property
    def visible(self) -> list[CatalogEvent]:
        return self._pager.visible

    @property
    def displayed_count(self) -> int:
        return self._pager.displayed_count

    @property
    def has_more(self) -> bool:
        return self._pager.has_more

    @property
    def is_loading(self) -> bool:
        return self._loading

    def apply(self, criteria: FilterCriteria) -> list[CatalogEvent]:
        """Refilter with new criteria and reset to the first page."""
        self.criteria = criteria
        self._refilter()
        return self.visible

    def search(self, term: str) -> list[CatalogEvent]:
        """Change only the search term, keeping the other selections."""
        return self.apply(
            FilterCriteria(
                term=term,
                genres=self.criteria.genres,
                date_range=self.criteria.date_range,
                city=self.criteria.city,
            )
        )

    def clear(self) -> list[CatalogEvent]:
        return self.apply(FilterCriteria())

    def genres(self) -> list[str]:
        return unique_genres(self.candidates)

    def cities(self) -> list[str]:
        return unique_cities(self.candidates)

    async def load_more(self) -> bool:
        """
        Reveal the next page unless a load is already running.

        Returns whether items remain after the call.
        """
        if self._loading or not self._pager.has_more:
            return self._pager.has_more
        self._loading = True
        try:
            if self.load_delay_seconds:
                await asyncio.sleep(self.load_delay_seconds)
            has_more = self._pager.load_more()
        finally:
            self._loading = False
        logger.debug(f"Catalog page loaded: {self.displayed_count}/{len(self.filtered)}")
        return has_more

    def near_end(self, viewport_height: float, offset_y: float, content_height: float) -> bool:
        return viewport_height + offset_y >= content_height - self.scroll_threshold_px

    async def on_scroll(
        self, viewport_height: float, offset_y: float, content_height: float
    ) -> bool:
        """Load the next page when scrolled to within the threshold of the end.

        Returns True if the position triggered a load attempt.
        """
        if not self.near_end(viewport_height, offset_y, content_height):
            return False
        await self.load_more()
        return True
