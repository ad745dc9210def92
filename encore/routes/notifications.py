"""Notification routes for polling clients."""
from fastapi import APIRouter, Depends

from encore.notifications import NotificationCenter
from encore.routes.deps import current_user_id, get_notifier

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("")
async def active_notifications(
    user_id: str = Depends(current_user_id),
    notifier: NotificationCenter = Depends(get_notifier),
):
    """The caller's unexpired notifications, oldest first."""
    return [
        {"id": n.id, "type": n.type.value, "message": n.message}
        for n in notifier.active(user_id)
    ]


@router.delete("/{notification_id}", status_code=204)
async def dismiss(
    notification_id: str,
    user_id: str = Depends(current_user_id),
    notifier: NotificationCenter = Depends(get_notifier),
):
    """Dismiss a notification before it expires."""
    notifier.hide(user_id, notification_id)
