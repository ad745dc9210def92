"""Tests for the friend request lifecycle."""

import pytest

from encore.errors import (
    AlreadyFriendsError,
    DuplicateRequestError,
    FriendshipNotFoundError,
    ReciprocalPendingConflictError,
    ReciprocalPendingError,
    RequestNotFoundError,
    RequestNotPendingError,
    UserNotFoundError,
    ValidationError,
)
from encore.models import RequestStatus, User
from encore.models.friendship import pair_key
from encore.notifications import NotificationCenter, NotificationType
from encore.social.friendships import FriendshipManager
from encore.store import SqlDocumentStore
from encore.store.collections import FRIEND_REQUESTS, FRIENDSHIPS


@pytest.fixture(name="manager")
def manager_fixture(store: SqlDocumentStore, notifier: NotificationCenter) -> FriendshipManager:
    return FriendshipManager(store, notifier)


def messages(notifier: NotificationCenter, user_id: str) -> list[str]:
    return [n.message for n in notifier.active(user_id)]


class TestSendRequest:
    """Tests for sending friend requests."""

    def test_send(self, manager: FriendshipManager, store: SqlDocumentStore, alice: User, bob: User):
        """Test a request is stored as pending with a generated id."""
        request = manager.send_request("alice", "bob")
        assert request.id
        assert request.status == RequestStatus.PENDING
        stored = store.get(FRIEND_REQUESTS, request.id)
        assert stored.get("fromUserId") == "alice"
        assert stored.get("toUserId") == "bob"
        assert stored.get("status") == "pending"

    def test_send_notifies_sender(
        self, manager: FriendshipManager, notifier: NotificationCenter, alice: User, bob: User
    ):
        """Test the sender is told the request went out."""
        manager.send_request("alice", "bob")
        assert messages(notifier, "alice") == ["Friend request sent!"]

    def test_duplicate(self, manager: FriendshipManager, alice: User, bob: User):
        """Test a second request to the same user is rejected."""
        manager.send_request("alice", "bob")
        with pytest.raises(DuplicateRequestError):
            manager.send_request("alice", "bob")

    def test_reciprocal_pending(self, manager: FriendshipManager, alice: User, bob: User):
        """Test a request back to someone who already asked is rejected."""
        first = manager.send_request("alice", "bob")
        with pytest.raises(ReciprocalPendingError) as exc_info:
            manager.send_request("bob", "alice")
        assert exc_info.value.request_id == first.id

    def test_self_request(self, manager: FriendshipManager, alice: User):
        """Test users cannot befriend themselves."""
        with pytest.raises(ValidationError):
            manager.send_request("alice", "alice")

    def test_unknown_recipient(self, manager: FriendshipManager, alice: User):
        """Test a request to a user without a profile is rejected."""
        with pytest.raises(UserNotFoundError):
            manager.send_request("alice", "ghost")

    def test_failure_notifies_with_reason(
        self, manager: FriendshipManager, notifier: NotificationCenter, alice: User, bob: User
    ):
        """Test a rejected request reports its reason to the sender."""
        manager.send_request("alice", "bob")
        with pytest.raises(DuplicateRequestError):
            manager.send_request("alice", "bob")
        latest = notifier.active("alice")[-1]
        assert latest.type == NotificationType.ERROR
        assert latest.message == "Friend request already sent"

    def test_send_after_decline(self, manager: FriendshipManager, alice: User, bob: User):
        """Test a declined request does not block a new one."""
        request = manager.send_request("alice", "bob")
        manager.respond_to_request(request.id, "decline", "bob")
        again = manager.send_request("alice", "bob")
        assert again.id != request.id


class TestRespondToRequest:
    """Tests for accepting and declining requests."""

    def test_accept_creates_one_friendship(
        self, manager: FriendshipManager, store: SqlDocumentStore, alice: User, bob: User
    ):
        """Test accepting creates exactly one friendship keyed by the pair."""
        request = manager.send_request("alice", "bob")
        answered = manager.respond_to_request(request.id, "accept", "bob")

        assert answered.status == RequestStatus.ACCEPTED
        assert answered.updated_at is not None
        friendships = store.scan(FRIENDSHIPS)
        assert len(friendships) == 1
        assert friendships[0].id == pair_key("alice", "bob")
        assert friendships[0].get("user1Id") == "alice"
        assert friendships[0].get("user2Id") == "bob"
        assert store.get(FRIEND_REQUESTS, request.id).get("status") == "accepted"

    def test_already_friends(self, manager: FriendshipManager, alice: User, bob: User):
        """Test requests between friends are rejected in either direction."""
        request = manager.send_request("alice", "bob")
        manager.respond_to_request(request.id, "accept", "bob")
        with pytest.raises(AlreadyFriendsError):
            manager.send_request("alice", "bob")
        with pytest.raises(AlreadyFriendsError):
            manager.send_request("bob", "alice")

    def test_decline(
        self, manager: FriendshipManager, store: SqlDocumentStore, alice: User, bob: User
    ):
        """Test declining keeps the request as history and creates nothing."""
        request = manager.send_request("alice", "bob")
        answered = manager.respond_to_request(request.id, "decline", "bob")
        assert answered.status == RequestStatus.DECLINED
        assert store.get(FRIEND_REQUESTS, request.id).get("status") == "declined"
        assert store.scan(FRIENDSHIPS) == []

    def test_answered_request_is_final(self, manager: FriendshipManager, alice: User, bob: User):
        """Test a request cannot be answered twice."""
        request = manager.send_request("alice", "bob")
        manager.respond_to_request(request.id, "decline", "bob")
        with pytest.raises(RequestNotPendingError):
            manager.respond_to_request(request.id, "accept", "bob")

    def test_missing_request(self, manager: FriendshipManager, bob: User):
        """Test answering a deleted request."""
        with pytest.raises(RequestNotFoundError):
            manager.respond_to_request("gone", "accept", "bob")

    def test_sender_cannot_accept(
        self, manager: FriendshipManager, store: SqlDocumentStore, alice: User, bob: User
    ):
        """Test the sender cannot answer their own request."""
        request = manager.send_request("alice", "bob")
        with pytest.raises(RequestNotFoundError):
            manager.respond_to_request(request.id, "accept", "alice")
        assert store.scan(FRIENDSHIPS) == []
        assert store.get(FRIEND_REQUESTS, request.id).get("status") == "pending"

    def test_third_user_cannot_accept(
        self, manager: FriendshipManager, store: SqlDocumentStore, alice: User, bob: User, carol: User
    ):
        """Test only the recipient can answer a request."""
        request = manager.send_request("alice", "bob")
        with pytest.raises(RequestNotFoundError):
            manager.respond_to_request(request.id, "accept", "carol")
        with pytest.raises(RequestNotFoundError):
            manager.respond_to_request(request.id, "decline", "carol")
        assert store.scan(FRIENDSHIPS) == []
        assert store.get(FRIEND_REQUESTS, request.id).get("status") == "pending"

    def test_unknown_action(self, manager: FriendshipManager, alice: User, bob: User):
        """Test only accept and decline are valid answers."""
        request = manager.send_request("alice", "bob")
        with pytest.raises(ValidationError):
            manager.respond_to_request(request.id, "maybe", "bob")

    def test_reciprocal_pending_blocks_accept(
        self, manager: FriendshipManager, store: SqlDocumentStore, alice: User, bob: User
    ):
        """Test accepting while a request is pending the other way writes nothing."""
        request = manager.send_request("alice", "bob")
        reverse_id = store.add(
            FRIEND_REQUESTS, {"fromUserId": "bob", "toUserId": "alice", "status": "pending"}
        )

        with pytest.raises(ReciprocalPendingConflictError) as exc_info:
            manager.respond_to_request(request.id, "accept", "bob")

        assert exc_info.value.reciprocal_id == reverse_id
        assert store.scan(FRIENDSHIPS) == []
        assert store.get(FRIEND_REQUESTS, request.id).get("status") == "pending"

    def test_existing_friendship_blocks_accept(
        self, manager: FriendshipManager, store: SqlDocumentStore, alice: User, bob: User
    ):
        """Test the pair key stops a second friendship document."""
        request = manager.send_request("alice", "bob")
        store.create(FRIENDSHIPS, pair_key("alice", "bob"), {"user1Id": "bob", "user2Id": "alice"})

        with pytest.raises(AlreadyFriendsError):
            manager.respond_to_request(request.id, "accept", "bob")
        assert len(store.scan(FRIENDSHIPS)) == 1


class TestCancelAndRemove:
    """Tests for cancelling requests and removing friends."""

    def test_cancel(self, manager: FriendshipManager, store: SqlDocumentStore, alice: User, bob: User):
        """Test cancelling deletes the pending request once."""
        manager.send_request("alice", "bob")
        assert manager.cancel_request("alice", "bob") is True
        assert store.scan(FRIEND_REQUESTS) == []
        assert manager.cancel_request("alice", "bob") is False

    def test_remove_then_request_again(
        self, manager: FriendshipManager, store: SqlDocumentStore, alice: User, bob: User
    ):
        """Test removal clears history so the pair can start over."""
        request = manager.send_request("alice", "bob")
        manager.respond_to_request(request.id, "accept", "bob")

        deleted = manager.remove_friendship(pair_key("alice", "bob"), "bob")

        assert deleted == 1
        assert store.scan(FRIENDSHIPS) == []
        assert store.scan(FRIEND_REQUESTS) == []
        assert manager.send_request("bob", "alice").status == RequestStatus.PENDING

    def test_remove_keeps_other_pairs(
        self, manager: FriendshipManager, store: SqlDocumentStore, alice: User, bob: User, carol: User
    ):
        """Test cleanup only touches requests between the two users."""
        request = manager.send_request("alice", "bob")
        manager.respond_to_request(request.id, "accept", "bob")
        other = manager.send_request("carol", "alice")

        manager.remove_friendship(pair_key("alice", "bob"), "alice")

        assert [snap.id for snap in store.scan(FRIEND_REQUESTS)] == [other.id]

    def test_remove_missing(self, manager: FriendshipManager, alice: User):
        """Test removing a friendship that does not exist."""
        with pytest.raises(FriendshipNotFoundError):
            manager.remove_friendship("nope", "alice")

    def test_remove_friend_by_user(
        self, manager: FriendshipManager, store: SqlDocumentStore, alice: User, bob: User
    ):
        """Test unfriending by the other user's id."""
        request = manager.send_request("alice", "bob")
        manager.respond_to_request(request.id, "accept", "bob")
        manager.remove_friend("alice", "bob")
        assert store.scan(FRIENDSHIPS) == []
        with pytest.raises(FriendshipNotFoundError):
            manager.remove_friend("alice", "bob")


class TestViews:
    """Tests for friend and request listings."""

    def test_list_friends(self, manager: FriendshipManager, alice: User, bob: User, carol: User):
        """Test both sides of a friendship see each other."""
        request = manager.send_request("alice", "bob")
        manager.respond_to_request(request.id, "accept", "bob")

        assert [e.friend.id for e in manager.list_friends("alice")] == ["bob"]
        assert [e.friend.id for e in manager.list_friends("bob")] == ["alice"]
        assert manager.list_friends("carol") == []

    def test_list_friends_skips_deleted_users(
        self, manager: FriendshipManager, store: SqlDocumentStore, alice: User
    ):
        """Test a friend whose profile is gone is left out."""
        store.set(FRIENDSHIPS, pair_key("alice", "ghost"), {"user1Id": "ghost", "user2Id": "alice"})
        assert manager.list_friends("alice") == []

    def test_incoming_and_outgoing(self, manager: FriendshipManager, alice: User, bob: User, carol: User):
        """Test pending requests are listed with the other party's profile."""
        manager.send_request("alice", "bob")
        manager.send_request("carol", "bob")

        incoming = manager.incoming_requests("bob")
        assert sorted(e.other_user.id for e in incoming) == ["alice", "carol"]
        outgoing = manager.outgoing_requests("alice")
        assert [e.other_user.handle for e in outgoing] == ["bobt"]
        assert manager.incoming_requests("alice") == []
