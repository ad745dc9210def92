"""User profile model.

Accounts are created by the external identity provider; the profile
document in ``users`` carries the public name and handle that friends see.
"""

from datetime import UTC, datetime

from pydantic import Field, ValidationInfo, field_validator

from encore.models.base import DocumentModel


class User(DocumentModel):
    """A user's public profile.

    Attributes:
        id: The identity provider's user id (also the document id).
        name: Display name, free text.
        handle: Unique username, lowercase letters, digits and underscores.
        email: Sign-in email, stored lowercase.
        created_at: When the profile was created.
        updated_at: When the profile was last changed.
    """
    name: str = "Unknown"
    handle: str = "unknown"
    email: str = ""
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @field_validator("name", "handle", mode="before")
    @classmethod
    def _fill_missing(cls, value, info: ValidationInfo):
        # Older profiles may carry explicit nulls.
        if value is None:
            return "Unknown" if info.field_name == "name" else "unknown"
        return value
