"""Friend request lifecycle and friendship membership.

Per ordered pair of users a request goes ``pending -> accepted`` or
``pending -> declined``; a pending request may also be deleted by its
sender. Accepting creates the pair's single friendship document.

The store offers no transactions. The duplicate and already-friends checks
in :meth:`FriendshipManager.send_request` are scans followed by a write and
can race with a concurrent caller; only friendship creation is enforced by
the store, through a conditional create on the pair key.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, datetime

from encore.errors import (
    AlreadyFriendsError,
    DocumentExistsError,
    DomainError,
    DuplicateRequestError,
    ErrorCode,
    FriendshipNotFoundError,
    ReciprocalPendingConflictError,
    ReciprocalPendingError,
    RequestNotFoundError,
    RequestNotPendingError,
    StoreError,
    UserNotFoundError,
    ValidationError,
)
from encore.models import (
    FriendEntry,
    FriendRequest,
    Friendship,
    RequestEntry,
    RequestStatus,
    RespondAction,
)
from encore.models.friendship import pair_key
from encore.notifications import NotificationCenter
from encore.social.users import UserDirectory
from encore.store import DocumentStore, where
from encore.store.collections import FRIEND_REQUESTS, FRIENDSHIPS

logger = logging.getLogger(__name__)


class FriendshipManager:
    """Owns FriendRequest and Friendship documents."""

    def __init__(
        self, store: DocumentStore, notifier: NotificationCenter | None = None
    ) -> None:
        self._store = store
        self._notifier = notifier
        self._users = UserDirectory(store)

    @contextmanager
    def _reporting(self, user_id: str, failure_message: str) -> Iterator[None]:
        """Send the user an error notification for any failure, then re-raise."""
        try:
            yield
        except StoreError:
            self._notify_error(user_id, failure_message)
            raise
        except DomainError as e:
            self._notify_error(user_id, e.message)
            raise

    def _notify_success(self, user_id: str, message: str) -> None:
        if self._notifier is not None:
            self._notifier.success(user_id, message)

    def _notify_error(self, user_id: str, message: str) -> None:
        if self._notifier is not None:
            self._notifier.error(user_id, message)

    # Lookups

    def _pending(self, from_id: str, to_id: str) -> list[FriendRequest]:
        snapshots = self._store.query(
            FRIEND_REQUESTS,
            [
                where("fromUserId", "==", from_id),
                where("toUserId", "==", to_id),
                where("status", "==", RequestStatus.PENDING.value),
            ],
        )
        return [FriendRequest.from_snapshot(snap) for snap in snapshots]

    def find_friendship(self, user_a: str, user_b: str) -> Friendship | None:
        """Scan every friendship for one linking the two users."""
        for snapshot in self._store.scan(FRIENDSHIPS):
            friendship = Friendship.from_snapshot(snapshot)
            if friendship.is_between(user_a, user_b):
                return friendship
        return None

    def get_request(self, request_id: str) -> FriendRequest:
        snapshot = self._store.get(FRIEND_REQUESTS, request_id)
        if not snapshot.exists:
            raise RequestNotFoundError(request_id)
        return FriendRequest.from_snapshot(snapshot)

    # Operations

    def send_request(self, from_id: str, to_id: str) -> FriendRequest:
        """
        Send a friend request from one user to another.

        Raises:
            ValidationError: If a user tries to befriend themselves.
            UserNotFoundError: If the recipient has no profile.
            AlreadyFriendsError: If the users are already friends.
            DuplicateRequestError: If from_id already has a pending request to to_id.
            ReciprocalPendingError: If to_id already has a pending request to
                from_id; the caller should answer that one instead.
        """
        with self._reporting(from_id, "Failed to send friend request"):
            if from_id == to_id:
                raise ValidationError(
                    ErrorCode.SELF_REQUEST, "You cannot send a friend request to yourself"
                )
            if not self._users.exists(to_id):
                raise UserNotFoundError(to_id)
            if self.find_friendship(from_id, to_id) is not None:
                raise AlreadyFriendsError()
            if self._pending(from_id, to_id):
                raise DuplicateRequestError()
            incoming = self._pending(to_id, from_id)
            if incoming:
                raise ReciprocalPendingError(incoming[0].id)

            request = FriendRequest(from_user_id=from_id, to_user_id=to_id)
            request_id = self._store.add(FRIEND_REQUESTS, request.to_document())
            request = request.model_copy(update={"id": request_id})

        logger.info(f"Friend request {request_id}: {from_id} -> {to_id}")
        self._notify_success(from_id, "Friend request sent!")
        return request

    def respond_to_request(
        self, request_id: str, action: RespondAction | str, responder_id: str
    ) -> FriendRequest:
        """
        Accept or decline a pending request.

        Accepting creates the friendship (requester as user1, responder as
        user2) and then marks the request accepted. A pending request in the
        opposite direction is not resolved automatically; it is reported as
        a conflict and nothing is written.

        Raises:
            ValidationError: If the action is not "accept" or "decline".
            RequestNotFoundError: If the request no longer exists or was not
                sent to the responder.
            RequestNotPendingError: If the request was already answered.
            ReciprocalPendingConflictError: If the responder also has a
                pending request to the requester.
            AlreadyFriendsError: If the pair's friendship already exists.
        """
        with self._reporting(responder_id, "Failed to respond to friend request"):
            try:
                action = RespondAction(action)
            except ValueError:
                raise ValidationError(
                    ErrorCode.INVALID_ACTION, f"Unknown response: {action}"
                ) from None

            request = self.get_request(request_id)
            if request.to_user_id != responder_id:
                # Only the recipient may see or answer a request.
                raise RequestNotFoundError(request_id)
            if request.status != RequestStatus.PENDING:
                raise RequestNotPendingError(request_id, request.status.value)

            now = datetime.now(UTC)
            if action == RespondAction.ACCEPT:
                reciprocal = self._pending(responder_id, request.from_user_id)
                if reciprocal:
                    raise ReciprocalPendingConflictError(request_id, reciprocal[0].id)

                friendship = Friendship(
                    id=pair_key(request.from_user_id, responder_id),
                    user1_id=request.from_user_id,
                    user2_id=responder_id,
                    created_at=now,
                )
                try:
                    self._store.create(FRIENDSHIPS, friendship.id, friendship.to_document())
                except DocumentExistsError:
                    raise AlreadyFriendsError() from None
                status = RequestStatus.ACCEPTED
            else:
                status = RequestStatus.DECLINED

            answered = request.model_copy(update={"status": status, "updated_at": now})
            document = answered.to_document()
            self._store.set(
                FRIEND_REQUESTS,
                request_id,
                {"status": document["status"], "updatedAt": document["updatedAt"]},
                merge=True,
            )

        logger.info(f"Friend request {request_id} {status.value} by {responder_id}")
        if status == RequestStatus.ACCEPTED:
            self._notify_success(responder_id, "Friend request accepted!")
        else:
            self._notify_success(responder_id, "Friend request declined")
        return answered

    def cancel_request(self, from_id: str, to_id: str) -> bool:
        """
        Withdraw the caller's pending request to to_id.

        Returns True if a request was deleted, False if there was none.
        """
        with self._reporting(from_id, "Failed to cancel friend request"):
            pending = self._pending(from_id, to_id)
            if not pending:
                return False
            self._store.delete(FRIEND_REQUESTS, pending[0].id)

        logger.info(f"Friend request {pending[0].id} cancelled by {from_id}")
        self._notify_success(from_id, "Friend request cancelled")
        return True

    def remove_friendship(self, friendship_id: str, caller_id: str) -> int:
        """
        End a friendship and clear the pair's request history.

        Every request between the two users, in either direction and in any
        status, is deleted so that a later request is not blocked by stale
        records. Returns the number of requests deleted.

        Raises:
            FriendshipNotFoundError: If the friendship does not exist.
        """
        with self._reporting(caller_id, "Failed to remove friend"):
            snapshot = self._store.get(FRIENDSHIPS, friendship_id)
            if not snapshot.exists:
                raise FriendshipNotFoundError(friendship_id)
            friendship = Friendship.from_snapshot(snapshot)

            self._store.delete(FRIENDSHIPS, friendship_id)

            stale = [
                snap.id
                for snap in self._store.scan(FRIEND_REQUESTS)
                if FriendRequest.from_snapshot(snap).is_between(
                    friendship.user1_id, friendship.user2_id
                )
            ]
            for request_id in stale:
                self._store.delete(FRIEND_REQUESTS, request_id)

        logger.info(
            f"Friendship {friendship_id} removed by {caller_id}, "
            f"{len(stale)} requests cleaned up"
        )
        self._notify_success(caller_id, "Friend removed")
        return len(stale)

    def remove_friend(self, caller_id: str, friend_id: str) -> int:
        """
        Remove the friendship between the caller and friend_id.

        Raises:
            FriendshipNotFoundError: If the two users are not friends.
        """
        with self._reporting(caller_id, "Failed to remove friend"):
            friendship = self.find_friendship(caller_id, friend_id)
            if friendship is None:
                raise FriendshipNotFoundError()
        return self.remove_friendship(friendship.id, caller_id)

    # Views

    def list_friends(self, user_id: str) -> list[FriendEntry]:
        """Return the user's friends with their profiles, in scan order."""
        entries = []
        for snapshot in self._store.scan(FRIENDSHIPS):
            friendship = Friendship.from_snapshot(snapshot)
            if not friendship.involves(user_id):
                continue
            friend = self._users.find(friendship.other(user_id))
            if friend is None:
                continue
            entries.append(
                FriendEntry(
                    friendship_id=friendship.id,
                    friend=friend,
                    created_at=friendship.created_at,
                )
            )
        return entries

    def _request_entries(self, field: str, user_id: str, outgoing: bool) -> list[RequestEntry]:
        snapshots = self._store.query(
            FRIEND_REQUESTS,
            [where(field, "==", user_id), where("status", "==", RequestStatus.PENDING.value)],
        )
        entries = []
        for snapshot in snapshots:
            request = FriendRequest.from_snapshot(snapshot)
            other = self._users.find(request.to_user_id if outgoing else request.from_user_id)
            if other is None:
                continue
            entries.append(RequestEntry(request=request, other_user=other))
        return entries

    def incoming_requests(self, user_id: str) -> list[RequestEntry]:
        """Pending requests sent to the user, joined to the senders."""
        return self._request_entries("toUserId", user_id, outgoing=False)

    def outgoing_requests(self, user_id: str) -> list[RequestEntry]:
        """Pending requests the user sent, joined to the recipients."""
        return self._request_entries("fromUserId", user_id, outgoing=True)
