"""Collection names shared with the mobile client."""

USERS = "users"
FRIEND_REQUESTS = "friend_requests"
FRIENDSHIPS = "friendships"
USER_ATTENDANCE = "user_attendance"
EVENT_ATTENDANCE = "event_attendance"
EVENTS = "events"
