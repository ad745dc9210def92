"""User profile lookups, handle rules and user search."""

import logging
import re
from datetime import UTC, datetime

from encore.errors import (
    ErrorCode,
    HandleTakenError,
    UserNotFoundError,
    ValidationError,
)
from encore.models import User
from encore.store import DocumentStore, where
from encore.store.collections import USERS

logger = logging.getLogger(__name__)

MIN_HANDLE_LENGTH = 3
MIN_PASSWORD_LENGTH = 6
SEARCH_RESULT_LIMIT = 20

_HANDLE_PATTERN = re.compile(r"^[a-z0-9_]+$")


def normalize_handle(raw: str) -> str:
    """Trim a handle, drop a leading "@" and lowercase it."""
    return raw.strip().removeprefix("@").strip().lower()


def validate_handle(raw: str) -> str:
    """Return the normalized handle or raise ValidationError."""
    handle = normalize_handle(raw)
    if len(handle) < MIN_HANDLE_LENGTH:
        raise ValidationError(
            ErrorCode.HANDLE_TOO_SHORT,
            f"Username must be at least {MIN_HANDLE_LENGTH} characters long",
        )
    if not _HANDLE_PATTERN.match(handle):
        raise ValidationError(
            ErrorCode.HANDLE_INVALID,
            "Username can only contain letters, numbers, and underscores",
        )
    return handle


def validate_password(password: str) -> None:
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            ErrorCode.PASSWORD_TOO_SHORT,
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters long",
        )


def validate_signup(name: str, handle: str, email: str, password: str) -> str:
    """
    Check sign-up form input in the order the form reports problems.

    Required fields first, then password length, then handle rules.
    Returns the normalized handle.
    """
    if not all(value.strip() for value in (name, handle, email, password)):
        raise ValidationError(ErrorCode.REQUIRED_FIELD, "Please fill in all fields")
    validate_password(password)
    return validate_handle(handle)


class UserDirectory:
    """Read access to user profiles plus profile creation for new accounts."""

    def __init__(self, store: DocumentStore) -> None:
        self._store = store

    def find(self, user_id: str) -> User | None:
        snapshot = self._store.get(USERS, user_id)
        if not snapshot.exists:
            return None
        return User.from_snapshot(snapshot)

    def get(self, user_id: str) -> User:
        """
        Return a user's profile.

        Raises:
            UserNotFoundError: If no profile document exists.
        """
        user = self.find(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return user

    def exists(self, user_id: str) -> bool:
        return self._store.get(USERS, user_id).exists

    def handle_taken(self, handle: str, exclude_user_id: str | None = None) -> bool:
        """True if a user other than ``exclude_user_id`` has the handle."""
        owners = self._store.query(USERS, [where("handle", "==", normalize_handle(handle))])
        return any(snap.id != exclude_user_id for snap in owners)

    def create_profile(self, user_id: str, name: str, handle: str, email: str) -> User:
        """
        Write the profile document for a freshly authenticated account.

        Raises:
            ValidationError: If a field is blank or the handle breaks the rules.
            HandleTakenError: If another user already has the handle.
        """
        if not all(value.strip() for value in (name, handle, email)):
            raise ValidationError(ErrorCode.REQUIRED_FIELD, "Please fill in all fields")
        clean_handle = validate_handle(handle)
        if self.handle_taken(clean_handle, exclude_user_id=user_id):
            raise HandleTakenError(clean_handle)

        now = datetime.now(UTC)
        existing = self.find(user_id)
        user = User(
            id=user_id,
            name=name.strip(),
            handle=clean_handle,
            email=email.strip().lower(),
            created_at=existing.created_at if existing else now,
            updated_at=now,
        )
        self._store.set(USERS, user_id, user.to_document())
        logger.info(f"Created profile @{clean_handle} for user {user_id}")
        return user

    def search(self, query: str, viewer_id: str, limit: int = SEARCH_RESULT_LIMIT) -> list[User]:
        """
        Find users whose handle or name contains the query.

        The viewer is never included. Matching is a case-insensitive
        substring test over a scan of every profile.
        """
        term = normalize_handle(query)
        if not term:
            return []

        results = []
        for snapshot in self._store.scan(USERS):
            if snapshot.id == viewer_id:
                continue
            handle = (snapshot.get("handle") or "").lower()
            name = (snapshot.get("name") or "").lower()
            if term in handle or term in name:
                results.append(User.from_snapshot(snapshot))
        return results[:limit]
