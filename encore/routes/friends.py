"""Friend and friend request routes."""
from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from encore.models import FriendEntry, FriendRequest, RequestEntry, RespondAction
from encore.notifications import NotificationCenter
from encore.routes.deps import current_user_id, get_notifier, get_store
from encore.social.friendships import FriendshipManager
from encore.store import DocumentStore

router = APIRouter(prefix="/friends", tags=["friends"])


class FriendRequestCreate(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    to_user_id: str


class FriendRequestResponse(BaseModel):
    action: RespondAction


def get_manager(
    store: DocumentStore = Depends(get_store),
    notifier: NotificationCenter = Depends(get_notifier),
) -> FriendshipManager:
    return FriendshipManager(store, notifier)


@router.get("")
async def list_friends(
    user_id: str = Depends(current_user_id),
    manager: FriendshipManager = Depends(get_manager),
) -> list[FriendEntry]:
    """List the caller's friends with their profiles."""
    return manager.list_friends(user_id)


@router.get("/requests/incoming")
async def incoming_requests(
    user_id: str = Depends(current_user_id),
    manager: FriendshipManager = Depends(get_manager),
) -> list[RequestEntry]:
    """Pending requests waiting for the caller's answer."""
    return manager.incoming_requests(user_id)


@router.get("/requests/outgoing")
async def outgoing_requests(
    user_id: str = Depends(current_user_id),
    manager: FriendshipManager = Depends(get_manager),
) -> list[RequestEntry]:
    """Pending requests the caller has sent."""
    return manager.outgoing_requests(user_id)


@router.post("/requests", status_code=201)
async def send_request(
    body: FriendRequestCreate,
    user_id: str = Depends(current_user_id),
    manager: FriendshipManager = Depends(get_manager),
) -> FriendRequest:
    """
    Send a friend request.

    Returns 409 if the users are already friends, the caller already has a
    pending request to the user, or the user has a pending request to the
    caller.
    """
    return manager.send_request(user_id, body.to_user_id)


@router.post("/requests/{request_id}/respond")
async def respond_to_request(
    request_id: str,
    body: FriendRequestResponse,
    user_id: str = Depends(current_user_id),
    manager: FriendshipManager = Depends(get_manager),
) -> FriendRequest:
    """Accept or decline a pending request."""
    return manager.respond_to_request(request_id, body.action, user_id)


@router.delete("/requests/to/{to_user_id}")
async def cancel_request(
    to_user_id: str,
    user_id: str = Depends(current_user_id),
    manager: FriendshipManager = Depends(get_manager),
):
    """Withdraw the caller's pending request, if there is one."""
    return {"cancelled": manager.cancel_request(user_id, to_user_id)}


@router.delete("/by-user/{friend_id}")
async def remove_friend(
    friend_id: str,
    user_id: str = Depends(current_user_id),
    manager: FriendshipManager = Depends(get_manager),
):
    """Unfriend a user by their id."""
    return {"removedRequests": manager.remove_friend(user_id, friend_id)}


@router.delete("/{friendship_id}")
async def remove_friendship(
    friendship_id: str,
    user_id: str = Depends(current_user_id),
    manager: FriendshipManager = Depends(get_manager),
):
    """
    Remove a friendship.

    Also deletes every request between the two users so either of them can
    send a new one later.
    """
    return {"removedRequests": manager.remove_friendship(friendship_id, user_id)}
