"""Friend request and friendship models.

A friendship is a symmetric, mutual-consent relationship between two users.
It is only ever created by accepting a friend request, and a pair of users
has at most one friendship document at a time.
"""

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from encore.models.base import DocumentModel
from encore.models.user import User


class RequestStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"


class RespondAction(str, Enum):
    ACCEPT = "accept"
    DECLINE = "decline"


def pair_key(user_a: str, user_b: str) -> str:
    """Order-independent key for an unordered pair of users."""
    first, second = sorted((user_a, user_b))
    return f"{first}_{second}"


class FriendRequest(DocumentModel):
    """A directional request from one user to another.

    Requests move from ``pending`` to ``accepted`` or ``declined`` and never
    leave those states; a pending request can also be deleted outright by
    its sender. Answered requests are kept as history until the friendship
    between the pair is removed.

    Attributes:
        id: Auto-generated document id.
        from_user_id: The user who sent the request.
        to_user_id: The user who may accept or decline it.
        status: One of "pending", "accepted" or "declined".
        created_at: When the request was sent.
        updated_at: When the request was last answered, if ever.
    """
    from_user_id: str
    to_user_id: str
    status: RequestStatus = RequestStatus.PENDING
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime | None = None

    def is_between(self, user_a: str, user_b: str) -> bool:
        """True if the request links the two users in either direction."""
        return {self.from_user_id, self.to_user_id} == {user_a, user_b}


class Friendship(DocumentModel):
    """An established friendship.

    ``user1_id`` is the user who sent the accepted request and ``user2_id``
    the user who accepted it; neither position means anything else, so
    lookups must always check both.

    Attributes:
        id: Document id, the pair key of the two users.
        user1_id: The original requester.
        user2_id: The responder.
        created_at: When the request was accepted.
    """
    user1_id: str
    user2_id: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    def involves(self, user_id: str) -> bool:
        return user_id in (self.user1_id, self.user2_id)

    def other(self, user_id: str) -> str:
        """Return the counterpart of ``user_id`` in this friendship."""
        return self.user2_id if self.user1_id == user_id else self.user1_id

    def is_between(self, user_a: str, user_b: str) -> bool:
        return {self.user1_id, self.user2_id} == {user_a, user_b}


class FriendEntry(BaseModel):
    """A friendship joined to the friend's profile, as seen by one user."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    friendship_id: str
    friend: User
    created_at: datetime


class RequestEntry(BaseModel):
    """A pending request joined to the profile of the other party."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    request: FriendRequest
    other_user: User
