"""Catalog browsing routes."""
from datetime import UTC, datetime

from fastapi import APIRouter, Depends, Query

from encore.catalog.filters import (
    ALL_CITIES,
    DateRange,
    FilterCriteria,
    filter_by_criteria,
    unique_cities,
    unique_genres,
)
from encore.catalog.loader import get_event, load_candidates
from encore.catalog.paginator import paginate
from encore.core.config import settings
from encore.models import CatalogEvent
from encore.routes.deps import get_store
from encore.store import DocumentStore

router = APIRouter(prefix="/catalog", tags=["catalog"])


@router.get("")
async def browse(
    q: str = "",
    genres: list[str] = Query(default=[]),
    date_range: DateRange = DateRange.ALL,
    city: str = ALL_CITIES,
    count: int = Query(default=settings.catalog_page_size, ge=0),
    store: DocumentStore = Depends(get_store),
):
    """
    Search and filter upcoming events.

    Returns the first ``count`` matches; clients ask for a larger count as
    the user scrolls. ``total`` is the number of matches among the fetched
    candidates, not the whole catalog.
    """
    today = datetime.now(UTC).date()
    criteria = FilterCriteria(term=q, genres=frozenset(genres), date_range=date_range, city=city)
    filtered = filter_by_criteria(load_candidates(store, today), criteria, today)
    events, has_more = paginate(filtered, settings.catalog_page_size, count)
    return {"events": events, "hasMore": has_more, "total": len(filtered)}


@router.get("/facets")
async def facets(store: DocumentStore = Depends(get_store)):
    """Genre and city choices for the filter sheet."""
    candidates = load_candidates(store)
    return {"genres": unique_genres(candidates), "cities": unique_cities(candidates)}


@router.get("/events/{event_id}")
async def event_detail(event_id: str, store: DocumentStore = Depends(get_store)) -> CatalogEvent:
    """Fetch one catalog event."""
    return get_event(store, event_id)
