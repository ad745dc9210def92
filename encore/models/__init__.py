from encore.models.attendance import (
    AttendanceRecord,
    AttendanceStatus,
    AttendanceSummary,
    Attendee,
    AttendeeCounts,
    AttendeeLists,
    GoingDetails,
    SeatDetails,
    SectionGroup,
    Show,
    ShowList,
)
from encore.models.event import CatalogEvent
from encore.models.friendship import (
    FriendEntry,
    FriendRequest,
    Friendship,
    RequestEntry,
    RequestStatus,
    RespondAction,
)
from encore.models.user import User

__all__ = [
    "AttendanceRecord",
    "AttendanceStatus",
    "AttendanceSummary",
    "Attendee",
    "AttendeeCounts",
    "AttendeeLists",
    "CatalogEvent",
    "FriendEntry",
    "FriendRequest",
    "Friendship",
    "GoingDetails",
    "RequestEntry",
    "RequestStatus",
    "RespondAction",
    "SeatDetails",
    "SectionGroup",
    "Show",
    "ShowList",
    "User",
]
