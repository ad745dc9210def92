"""Domain errors raised by the social graph and attendance engine.

Every error carries an :class:`ErrorCode` and a user-safe message. The four
kinds (validation, conflict, not-found, store) map one-to-one onto HTTP
status codes in :mod:`encore.routes.deps`.
"""

from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    # Validation
    REQUIRED_FIELD = "REQUIRED_FIELD"
    HANDLE_TOO_SHORT = "HANDLE_TOO_SHORT"
    HANDLE_INVALID = "HANDLE_INVALID"
    PASSWORD_TOO_SHORT = "PASSWORD_TOO_SHORT"
    SELF_REQUEST = "SELF_REQUEST"
    INVALID_STATUS = "INVALID_STATUS"
    INVALID_ACTION = "INVALID_ACTION"

    # Conflict
    ALREADY_FRIENDS = "ALREADY_FRIENDS"
    DUPLICATE_REQUEST = "DUPLICATE_REQUEST"
    RECIPROCAL_PENDING = "RECIPROCAL_PENDING"
    RECIPROCAL_PENDING_CONFLICT = "RECIPROCAL_PENDING_CONFLICT"
    REQUEST_NOT_PENDING = "REQUEST_NOT_PENDING"
    HANDLE_TAKEN = "HANDLE_TAKEN"

    # Not found
    REQUEST_NOT_FOUND = "REQUEST_NOT_FOUND"
    FRIENDSHIP_NOT_FOUND = "FRIENDSHIP_NOT_FOUND"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"

    # Store
    STORE_FAILURE = "STORE_FAILURE"
    DOCUMENT_EXISTS = "DOCUMENT_EXISTS"


class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    def __init__(self, code: ErrorCode, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class ValidationError(DomainError):
    """Raised when an input fails a precondition."""


class ConflictError(DomainError):
    """Raised when an operation would create conflicting relationship state."""


class NotFoundError(DomainError):
    """Raised when a referenced document no longer exists."""


class StoreError(DomainError):
    """Raised when a store call fails. Never retried by the engine."""

    def __init__(self, message: str = "Something went wrong. Please try again.") -> None:
        super().__init__(code=ErrorCode.STORE_FAILURE, message=message)


class DocumentExistsError(StoreError):
    """Raised by a conditional create when the document id is already taken."""

    def __init__(self, collection: str, doc_id: str) -> None:
        DomainError.__init__(
            self,
            code=ErrorCode.DOCUMENT_EXISTS,
            message="Document already exists",
        )
        self.collection = collection
        self.doc_id = doc_id


class AlreadyFriendsError(ConflictError):
    """Raised when the two users are already friends."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.ALREADY_FRIENDS,
            message="You are already friends with this user",
        )


class DuplicateRequestError(ConflictError):
    """Raised when the caller already has a pending request to the user."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.DUPLICATE_REQUEST,
            message="Friend request already sent",
        )


class ReciprocalPendingError(ConflictError):
    """Raised when the other user already sent the caller a pending request."""

    def __init__(self, request_id: str) -> None:
        super().__init__(
            code=ErrorCode.RECIPROCAL_PENDING,
            message="This user has already sent you a friend request. Check your requests tab!",
        )
        self.request_id = request_id


class ReciprocalPendingConflictError(ConflictError):
    """Raised when accepting a request while the responder has one pending the other way."""

    def __init__(self, request_id: str, reciprocal_id: str) -> None:
        super().__init__(
            code=ErrorCode.RECIPROCAL_PENDING_CONFLICT,
            message="Both of you have pending requests to each other. Cancel yours first.",
        )
        self.request_id = request_id
        self.reciprocal_id = reciprocal_id


class RequestNotPendingError(ConflictError):
    """Raised when responding to a request that was already answered."""

    def __init__(self, request_id: str, status: str) -> None:
        super().__init__(
            code=ErrorCode.REQUEST_NOT_PENDING,
            message=f"Friend request was already {status}",
        )
        self.request_id = request_id


class HandleTakenError(ConflictError):
    """Raised when a handle belongs to another user."""

    def __init__(self, handle: str) -> None:
        super().__init__(
            code=ErrorCode.HANDLE_TAKEN,
            message="This username is already taken. Please choose a different one.",
        )
        self.handle = handle


class RequestNotFoundError(NotFoundError):
    """Raised when a friend request is missing."""

    def __init__(self, request_id: str) -> None:
        super().__init__(
            code=ErrorCode.REQUEST_NOT_FOUND,
            message="Friend request not found",
        )
        self.request_id = request_id


class FriendshipNotFoundError(NotFoundError):
    """Raised when a friendship is missing."""

    def __init__(self, friendship_id: str | None = None) -> None:
        super().__init__(
            code=ErrorCode.FRIENDSHIP_NOT_FOUND,
            message="Friendship not found",
        )
        self.friendship_id = friendship_id


class UserNotFoundError(NotFoundError):
    """Raised when a user document is missing."""

    def __init__(self, user_id: str) -> None:
        super().__init__(
            code=ErrorCode.USER_NOT_FOUND,
            message="User not found",
        )
        self.user_id = user_id


class EventNotFoundError(NotFoundError):
    """Raised when a catalog event is missing."""

    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.EVENT_NOT_FOUND,
            message="Event not found",
        )
        self.event_id = event_id
