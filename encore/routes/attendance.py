"""Attendance routes: the caller's own status and friend-scoped views."""
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from encore.attendance.manager import AttendanceManager
from encore.catalog.loader import get_event
from encore.models import (
    AttendanceRecord,
    AttendanceStatus,
    AttendanceSummary,
    Attendee,
    GoingDetails,
    SectionGroup,
    ShowList,
)
from encore.notifications import NotificationCenter
from encore.routes.deps import current_user_id, get_notifier, get_store
from encore.social.visibility import VisibilityResolver, describe_attendees, group_by_section
from encore.store import DocumentStore

router = APIRouter(prefix="/attendance", tags=["attendance"])


class AttendanceUpdate(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    status: str
    section: str | None = None
    row: str | None = None
    seat_number: str | None = None
    tagged_friends: list[str] = Field(default_factory=list)
    notes: str | None = None


class FriendsAttending(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    event_id: str
    attendees: list[Attendee]
    description: str


def get_manager(
    store: DocumentStore = Depends(get_store),
    notifier: NotificationCenter = Depends(get_notifier),
) -> AttendanceManager:
    return AttendanceManager(store, notifier)


@router.get("/me")
async def my_statuses(
    user_id: str = Depends(current_user_id),
    manager: AttendanceManager = Depends(get_manager),
) -> dict[str, AttendanceStatus]:
    """Map of event id to the caller's status, for every event they marked."""
    return manager.statuses_for_user(user_id)


@router.get("/friends-going")
async def friends_going(
    user_id: str = Depends(current_user_id),
    store: DocumentStore = Depends(get_store),
) -> dict[str, list[Attendee]]:
    """Friends going to each event, keyed by event id."""
    return VisibilityResolver(store).friend_attendees_by_event(user_id)


@router.get("/users/{profile_id}/shows")
async def user_shows(
    profile_id: str,
    user_id: str = Depends(current_user_id),
    store: DocumentStore = Depends(get_store),
    manager: AttendanceManager = Depends(get_manager),
) -> ShowList:
    """
    A user's going and interested shows.

    Visible to the user themselves and to their friends only.
    """
    if profile_id != user_id and profile_id not in VisibilityResolver(store).friend_ids_of(user_id):
        raise HTTPException(status_code=403, detail="Only friends can see this user's shows")
    return manager.shows_for_user(profile_id)


@router.put("/{event_id}")
async def set_status(
    event_id: str,
    body: AttendanceUpdate,
    user_id: str = Depends(current_user_id),
    store: DocumentStore = Depends(get_store),
    manager: AttendanceManager = Depends(get_manager),
) -> AttendanceRecord:
    """
    Mark the caller as interested in or going to an event.

    Seat details, tagged friends and notes are only kept for "going".
    """
    get_event(store, event_id)
    details = GoingDetails(
        section=body.section,
        row=body.row,
        seat_number=body.seat_number,
        tagged_friends=body.tagged_friends,
        notes=body.notes,
    )
    return manager.set_status(user_id, event_id, body.status, details)


@router.delete("/{event_id}", status_code=204)
async def remove_status(
    event_id: str,
    user_id: str = Depends(current_user_id),
    manager: AttendanceManager = Depends(get_manager),
):
    """Clear the caller's status for an event."""
    manager.remove_status(user_id, event_id)


@router.get("/{event_id}/summary")
async def event_summary(
    event_id: str, manager: AttendanceManager = Depends(get_manager)
) -> AttendanceSummary:
    """Attendee counts and member lists for an event."""
    return manager.summary_for(event_id)


@router.get("/{event_id}/friends")
async def friends_attending(
    event_id: str,
    include_me: bool = False,
    user_id: str = Depends(current_user_id),
    store: DocumentStore = Depends(get_store),
) -> FriendsAttending:
    """Friends going to an event, optionally including the caller."""
    attendees = VisibilityResolver(store).attendees_for(event_id, user_id, include_viewer=include_me)
    return FriendsAttending(
        event_id=event_id,
        attendees=attendees,
        description=describe_attendees(attendees),
    )


@router.get("/{event_id}/sections")
async def friends_by_section(
    event_id: str,
    include_me: bool = True,
    user_id: str = Depends(current_user_id),
    store: DocumentStore = Depends(get_store),
) -> list[SectionGroup]:
    """Friends going to an event, grouped by seat section."""
    attendees = VisibilityResolver(store).attendees_for(event_id, user_id, include_viewer=include_me)
    return group_by_section(attendees)
