"""Catalog event model.

Events are ingested into the ``events`` collection by an external importer
and are read-only here. The document keeps the importer's nested schema
(``dates.start.localDate``, ``venue.city.name``, ``attractions[]``...), so
the model wraps the raw document and exposes only the fields the engine
filters and sorts on.
"""

from datetime import date
from typing import Any, Self

from pydantic import BaseModel, ConfigDict, computed_field

from encore.store.base import DocumentSnapshot, get_path

LOCAL_DATE_FIELD = "dates.start.localDate"


class CatalogEvent(BaseModel):
    """A read-only view of one catalog event document."""
    model_config = ConfigDict(frozen=True)

    id: str
    data: dict[str, Any]

    @classmethod
    def from_snapshot(cls, snapshot: DocumentSnapshot) -> Self:
        return cls(id=snapshot.id, data=snapshot.data or {})

    def _text(self, path: str) -> str | None:
        value = get_path(self.data, path, None)
        return value if isinstance(value, str) and value else None

    @computed_field
    @property
    def name(self) -> str | None:
        return self._text("name")

    @computed_field
    @property
    def primary_performer(self) -> str | None:
        """First listed attraction, falling back to the event name."""
        attractions = self.data.get("attractions") or []
        if attractions:
            return attractions[0].get("name")
        return self.name

    @computed_field
    @property
    def venue_name(self) -> str | None:
        return self._text("venue.name")

    @computed_field
    @property
    def city_name(self) -> str | None:
        return self._text("venue.city.name")

    @computed_field
    @property
    def genre_name(self) -> str | None:
        return self._text("classification.genre.name")

    @computed_field
    @property
    def local_date(self) -> date | None:
        raw = self._text(LOCAL_DATE_FIELD)
        if raw is None:
            return None
        try:
            return date.fromisoformat(raw)
        except ValueError:
            return None

    @computed_field
    @property
    def image_url(self) -> str | None:
        """First image at least 640px wide, else the first image."""
        images = self.data.get("images") or []
        if not images:
            return None
        for image in images:
            if (image.get("width") or 0) >= 640:
                return image.get("url")
        return images[0].get("url")

    @property
    def seatmap(self) -> str | None:
        return self._text("seatmap")
