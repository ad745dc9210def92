"""In-memory catalog search and filtering.

These predicates define what each catalog filter means, independent of
where they run. Every function takes the candidate list and returns a new
list in the candidates' order.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, timedelta
from enum import Enum

from encore.models import CatalogEvent

ALL_CITIES = "all"


class DateRange(str, Enum):
    WEEK = "week"
    MONTH = "month"
    QUARTER = "quarter"
    ALL = "all"


def add_months(day: date, months: int) -> date:
    """Move a date forward by calendar months.

    Days past the end of a shorter target month roll into the next month,
    so Jan 31 + 1 month is Mar 3 (Mar 2 in a leap year).
    """
    month_index = day.month - 1 + months
    year = day.year + month_index // 12
    month = month_index % 12 + 1
    return date(year, month, 1) + timedelta(days=day.day - 1)


def range_end(bucket: DateRange, today: date) -> date | None:
    """Last local date (inclusive) a bucket admits, or None for no limit."""
    if bucket == DateRange.WEEK:
        return today + timedelta(days=7)
    if bucket == DateRange.MONTH:
        return add_months(today, 1)
    if bucket == DateRange.QUARTER:
        return add_months(today, 3)
    return None


@dataclass(frozen=True)
class FilterCriteria:
    """Search term plus the filter-sheet selections. Defaults filter nothing."""

    term: str = ""
    genres: frozenset[str] = field(default_factory=frozenset)
    date_range: DateRange = DateRange.ALL
    city: str = ALL_CITIES

    @property
    def is_active(self) -> bool:
        return bool(
            self.term.strip()
            or self.genres
            or self.date_range != DateRange.ALL
            or self.city != ALL_CITIES
        )


def matches_text(event: CatalogEvent, term: str) -> bool:
    """Case-insensitive substring match on performer, venue, genre or city."""
    needle = term.lower().strip()
    fields = (event.primary_performer, event.venue_name, event.genre_name, event.city_name)
    return any(needle in value.lower() for value in fields if value)


def filter_by_text(candidates: Iterable[CatalogEvent], term: str) -> list[CatalogEvent]:
    if not term.strip():
        return list(candidates)
    return [event for event in candidates if matches_text(event, term)]


def filter_by_criteria(
    candidates: Iterable[CatalogEvent], criteria: FilterCriteria, today: date
) -> list[CatalogEvent]:
    """
    Apply every active criterion; an event must pass all of them.

    - term: see :func:`matches_text`
    - genres: the event's genre must be one of them
    - date_range: the event's local date must be on or before the bucket's
      end; events with no local date are dropped
    - city: the venue city must equal it exactly
    """
    filtered = filter_by_text(candidates, criteria.term)

    if criteria.genres:
        filtered = [e for e in filtered if (e.genre_name or "") in criteria.genres]

    end = range_end(criteria.date_range, today)
    if end is not None:
        filtered = [e for e in filtered if e.local_date is not None and e.local_date <= end]

    if criteria.city != ALL_CITIES:
        filtered = [e for e in filtered if e.city_name == criteria.city]

    return filtered


def unique_genres(candidates: Iterable[CatalogEvent]) -> list[str]:
    return sorted({e.genre_name for e in candidates if e.genre_name})


def unique_cities(candidates: Iterable[CatalogEvent]) -> list[str]:
    return sorted({e.city_name for e in candidates if e.city_name})
