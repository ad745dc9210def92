"""Attendance models.

An attendance record states one user's relationship to one event. The
record id is ``{user_id}_{event_id}``, so a user has at most one record per
event by construction. A missing record means the user has no status.

Each event also has a denormalized :class:`AttendanceSummary`, rebuilt from
the full set of records whenever any of them changes.
"""

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from encore.models.base import DocumentModel
from encore.models.event import CatalogEvent


class AttendanceStatus(str, Enum):
    INTERESTED = "interested"
    GOING = "going"


# Summary buckets. "maybe" is never written by this engine but other
# clients of the shared store may still use it.
SUMMARY_STATUSES = ("going", "interested", "maybe")


def attendance_id(user_id: str, event_id: str) -> str:
    return f"{user_id}_{event_id}"


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SeatDetails(_CamelModel):
    """Where a user is sitting. Every part is optional."""

    section: str | None = None
    row: str | None = None
    seat_number: str | None = None


class GoingDetails(_CamelModel):
    """Optional details a user may attach when marking themselves as going."""

    section: str | None = None
    row: str | None = None
    seat_number: str | None = None
    tagged_friends: list[str] = Field(default_factory=list)
    notes: str | None = None


class AttendanceRecord(DocumentModel):
    """A user's status for one event.

    Attributes:
        id: ``{user_id}_{event_id}``.
        user_id: The attending user.
        event_id: The catalog event.
        status: "interested" or "going".
        seat_details: Seat section/row/number; always None for "interested".
        tagged_friends: Free-text names of people the user is going with.
        notes: Free-text notes.
        created_at: When the user first set a status for the event.
        updated_at: When the status was last written.
    """
    user_id: str
    event_id: str
    status: AttendanceStatus
    seat_details: SeatDetails | None = None
    tagged_friends: list[str] = Field(default_factory=list)
    notes: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class AttendeeCounts(_CamelModel):
    going: int = 0
    interested: int = 0
    maybe: int = 0


class AttendeeLists(_CamelModel):
    going: list[str] = Field(default_factory=list)
    interested: list[str] = Field(default_factory=list)
    maybe: list[str] = Field(default_factory=list)


class AttendanceSummary(DocumentModel):
    """Per-event counts and member lists derived from attendance records.

    Attributes:
        id: The event id.
        event_id: The event id, repeated in the body for queries.
        attendee_counts: Number of users per status.
        attendees: User ids per status, in scan order.
        last_updated: When the summary was last recomputed.
    """
    event_id: str
    attendee_counts: AttendeeCounts = Field(default_factory=AttendeeCounts)
    attendees: AttendeeLists = Field(default_factory=AttendeeLists)
    last_updated: datetime = Field(default_factory=lambda: datetime.now(UTC))


class Attendee(_CamelModel):
    """A going user joined to their profile, for friend-scoped views."""

    user_id: str
    name: str
    handle: str
    seat_details: SeatDetails | None = None
    tagged_friends: list[str] = Field(default_factory=list)
    notes: str | None = None


class SectionGroup(_CamelModel):
    """Friends seated in one venue section."""

    name: str
    attendees: list[Attendee] = Field(default_factory=list)


class Show(_CamelModel):
    """An attendance record joined to its catalog event."""

    record: AttendanceRecord
    event: CatalogEvent


class ShowList(_CamelModel):
    """A user's shows split by status, each list in event date order."""

    going: list[Show] = Field(default_factory=list)
    interested: list[Show] = Field(default_factory=list)
