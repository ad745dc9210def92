"""User profile routes."""
from fastapi import APIRouter, Depends
from pydantic import BaseModel

from encore.models import User
from encore.routes.deps import current_user_id, get_store
from encore.social.users import UserDirectory
from encore.store import DocumentStore

router = APIRouter(prefix="/users", tags=["users"])


class ProfileCreate(BaseModel):
    name: str
    handle: str
    email: str


@router.get("/search")
async def search_users(
    q: str = "",
    user_id: str = Depends(current_user_id),
    store: DocumentStore = Depends(get_store),
) -> list[User]:
    """
    Search users by handle or name.

    A leading "@" in the query is ignored. The caller never appears in
    their own results.
    """
    return UserDirectory(store).search(q, viewer_id=user_id)


@router.get("/{profile_id}")
async def get_user(profile_id: str, store: DocumentStore = Depends(get_store)) -> User:
    """Fetch one user's public profile."""
    return UserDirectory(store).get(profile_id)


@router.post("", status_code=201)
async def create_profile(
    body: ProfileCreate,
    user_id: str = Depends(current_user_id),
    store: DocumentStore = Depends(get_store),
) -> User:
    """
    Create the caller's profile after sign-up.

    The handle is normalized (lowercase, "@" dropped) and must be unique.
    """
    return UserDirectory(store).create_profile(user_id, body.name, body.handle, body.email)
