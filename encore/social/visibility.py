"""Friend-scoped views over attendance.

Users only ever see which of their friends are going to an event (and,
on their own ticket view, themselves). Friend lookups scan the whole
friendships collection because no index by user id is kept.
"""

from encore.models import Attendee, SeatDetails, SectionGroup
from encore.models.attendance import AttendanceStatus
from encore.store import DocumentSnapshot, DocumentStore, where
from encore.store.collections import FRIENDSHIPS, USER_ATTENDANCE, USERS


class VisibilityResolver:
    """Read-only resolver for "which of my friends are going" queries."""

    def __init__(self, store: DocumentStore) -> None:
        self._store = store

    def friend_ids_of(self, user_id: str) -> set[str]:
        """Return the ids of everyone the user is friends with."""
        friend_ids = set()
        for snapshot in self._store.scan(FRIENDSHIPS):
            user1, user2 = snapshot.get("user1Id"), snapshot.get("user2Id")
            if user1 == user_id:
                friend_ids.add(user2)
            elif user2 == user_id:
                friend_ids.add(user1)
        return friend_ids

    def _attendee(self, record: DocumentSnapshot) -> Attendee | None:
        """Join a going record to its user's profile; None if the user is gone."""
        user = self._store.get(USERS, record.get("userId"))
        if not user.exists:
            return None
        seat = record.get("seatDetails")
        return Attendee(
            user_id=record.get("userId"),
            name=user.get("name") or "Unknown",
            handle=user.get("handle") or "unknown",
            seat_details=SeatDetails.model_validate(seat) if seat else None,
            tagged_friends=record.get("taggedFriends") or [],
            notes=record.get("notes"),
        )

    def attendees_for(
        self, event_id: str, viewer_id: str, include_viewer: bool = False
    ) -> list[Attendee]:
        """
        Return the viewer's friends who are going to the event.

        With ``include_viewer`` the viewer's own record is kept too. Entries
        come back in scan order.
        """
        allowed = self.friend_ids_of(viewer_id)
        if include_viewer:
            allowed.add(viewer_id)

        records = self._store.query(
            USER_ATTENDANCE,
            [
                where("eventId", "==", event_id),
                where("status", "==", AttendanceStatus.GOING.value),
            ],
        )
        attendees = []
        for record in records:
            if record.get("userId") not in allowed:
                continue
            attendee = self._attendee(record)
            if attendee is not None:
                attendees.append(attendee)
        return attendees

    def friend_attendees_by_event(self, viewer_id: str) -> dict[str, list[Attendee]]:
        """Group every friend's going records by event id, from one scan."""
        friend_ids = self.friend_ids_of(viewer_id)
        by_event: dict[str, list[Attendee]] = {}
        records = self._store.query(
            USER_ATTENDANCE, [where("status", "==", AttendanceStatus.GOING.value)]
        )
        for record in records:
            if record.get("userId") not in friend_ids:
                continue
            attendee = self._attendee(record)
            if attendee is not None:
                by_event.setdefault(record.get("eventId"), []).append(attendee)
        return by_event


def group_by_section(attendees: list[Attendee]) -> list[SectionGroup]:
    """
    Group attendees by seat section, trimmed and uppercased.

    Attendees without a section are left out entirely; there is no
    "unspecified" group. Groups are returned in first-seen order.
    """
    groups: dict[str, SectionGroup] = {}
    for attendee in attendees:
        section = attendee.seat_details.section if attendee.seat_details else None
        name = (section or "").strip().upper()
        if not name:
            continue
        groups.setdefault(name, SectionGroup(name=name)).attendees.append(attendee)
    return list(groups.values())


def describe_attendees(attendees: list[Attendee]) -> str:
    """One-line summary of which friends are going."""
    if not attendees:
        return "No friends going yet"
    if len(attendees) == 1:
        return f"{attendees[0].name} is going"
    if len(attendees) == 2:
        return f"{attendees[0].name} and {attendees[1].name} are going"
    others = len(attendees) - 1
    return f"{attendees[0].name} and {others} others are going"
