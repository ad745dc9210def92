"""Tests for user profiles, handle rules and search."""

import pytest

from encore.errors import (
    ErrorCode,
    HandleTakenError,
    UserNotFoundError,
    ValidationError,
)
from encore.models import User
from encore.social.users import (
    UserDirectory,
    normalize_handle,
    validate_handle,
    validate_signup,
)
from encore.store import SqlDocumentStore
from encore.store.collections import USERS


class TestHandleRules:
    """Tests for handle normalization and validation."""

    def test_normalize(self):
        """Test "@" is dropped and case and whitespace normalized."""
        assert normalize_handle("@BobT ") == "bobt"
        assert normalize_handle("  @bob ") == "bob"

    def test_only_leading_at_dropped(self):
        """Test an "@" inside a handle is kept and then rejected."""
        assert normalize_handle("a@bc") == "a@bc"
        with pytest.raises(ValidationError) as exc_info:
            validate_handle("a@bc")
        assert exc_info.value.code == ErrorCode.HANDLE_INVALID

    def test_too_short(self):
        """Test handles under three characters are rejected."""
        with pytest.raises(ValidationError) as exc_info:
            validate_handle("@ab")
        assert exc_info.value.code == ErrorCode.HANDLE_TOO_SHORT

    def test_bad_characters(self):
        """Test only letters, digits and underscores are allowed."""
        with pytest.raises(ValidationError) as exc_info:
            validate_handle("bob-t")
        assert exc_info.value.code == ErrorCode.HANDLE_INVALID

    def test_signup_checks_required_fields_first(self):
        """Test a blank field is reported before a short password."""
        with pytest.raises(ValidationError) as exc_info:
            validate_signup("", "x", "a@b.c", "123")
        assert exc_info.value.code == ErrorCode.REQUIRED_FIELD

    def test_signup_checks_password_before_handle(self):
        """Test a short password is reported before a bad handle."""
        with pytest.raises(ValidationError) as exc_info:
            validate_signup("Al", "x", "a@b.c", "123")
        assert exc_info.value.code == ErrorCode.PASSWORD_TOO_SHORT

    def test_signup_returns_normalized_handle(self):
        """Test valid input yields the normalized handle."""
        assert validate_signup("Al", "@Al_99", "a@b.c", "secret1") == "al_99"


class TestUserDirectory:
    """Tests for profile lookup, creation and search."""

    def test_get_missing(self, store: SqlDocumentStore):
        """Test a missing profile raises UserNotFoundError."""
        with pytest.raises(UserNotFoundError):
            UserDirectory(store).get("ghost")

    def test_missing_name_falls_back(self, store: SqlDocumentStore):
        """Test null name and handle read back as placeholders."""
        store.set(USERS, "u1", {"name": None, "handle": None})
        user = UserDirectory(store).get("u1")
        assert user.name == "Unknown"
        assert user.handle == "unknown"

    def test_create_profile(self, store: SqlDocumentStore):
        """Test a new profile is stored with a normalized handle."""
        user = UserDirectory(store).create_profile("u1", " Dana ", "@Dana_K", "Dana@Example.com")
        assert user.handle == "dana_k"
        stored = store.get(USERS, "u1")
        assert stored.get("handle") == "dana_k"
        assert stored.get("email") == "dana@example.com"
        assert stored.get("name") == "Dana"

    def test_create_profile_handle_taken(self, store: SqlDocumentStore, alice: User):
        """Test a handle already in use is rejected."""
        with pytest.raises(HandleTakenError):
            UserDirectory(store).create_profile("u2", "Other Alice", "@ALICE", "a2@example.com")

    def test_resubmit_own_handle(self, store: SqlDocumentStore, alice: User):
        """Test a user can save their profile again with their own handle."""
        user = UserDirectory(store).create_profile("alice", "Alice M.", "@alice", "alice@example.com")
        assert user.handle == "alice"
        assert user.created_at == alice.created_at
        assert store.get(USERS, "alice").get("name") == "Alice M."

    def test_search_excludes_viewer(self, store: SqlDocumentStore, alice: User, bob: User):
        """Test the viewer never appears in their own results."""
        results = UserDirectory(store).search("o", viewer_id="bob")
        ids = {user.id for user in results}
        assert "bob" not in ids
        assert "alice" in ids

    def test_search_matches_name_or_handle(
        self, store: SqlDocumentStore, alice: User, bob: User, carol: User
    ):
        """Test the query matches handle or display name, ignoring "@"."""
        directory = UserDirectory(store)
        assert [u.id for u in directory.search("@bobt", viewer_id="alice")] == ["bob"]
        assert [u.id for u in directory.search("singh", viewer_id="alice")] == ["carol"]

    def test_search_blank_query(self, store: SqlDocumentStore, alice: User):
        """Test a blank query returns nothing."""
        assert UserDirectory(store).search("  ", viewer_id="bob") == []

    def test_search_limit(self, store: SqlDocumentStore):
        """Test results are capped."""
        for i in range(5):
            store.set(USERS, f"u{i}", {"name": f"Fan {i}", "handle": f"fan{i}"})
        assert len(UserDirectory(store).search("fan", viewer_id="x", limit=3)) == 3
