"""Fetch the browsable slice of the catalog from the store."""

import logging
from datetime import UTC, date, datetime

from encore.core.config import settings
from encore.errors import EventNotFoundError
from encore.models import CatalogEvent
from encore.models.event import LOCAL_DATE_FIELD
from encore.store import DocumentStore, where
from encore.store.collections import EVENTS

logger = logging.getLogger(__name__)


def load_candidates(
    store: DocumentStore,
    today: date | None = None,
    limit: int = settings.catalog_fetch_limit,
) -> list[CatalogEvent]:
    """
    Return upcoming events, soonest first.

    Only events dated today or later are fetched, capped at ``limit``;
    everything past the cap is invisible to search and filtering.
    """
    today = today or datetime.now(UTC).date()
    snapshots = store.query(
        EVENTS,
        [where(LOCAL_DATE_FIELD, ">=", today.isoformat())],
        order_by=LOCAL_DATE_FIELD,
        limit=limit,
    )
    logger.debug(f"Loaded {len(snapshots)} catalog events from {today}")
    return [CatalogEvent.from_snapshot(snap) for snap in snapshots]


def get_event(store: DocumentStore, event_id: str) -> CatalogEvent:
    """
    Return one catalog event.

    Raises:
        EventNotFoundError: If the event is not in the catalog.
    """
    snapshot = store.get(EVENTS, event_id)
    if not snapshot.exists:
        raise EventNotFoundError(event_id)
    return CatalogEvent.from_snapshot(snapshot)
