"""
Notification log endpoints.
"""
from fastapi import APIRouter, Depends, HTTPException, Query

from makhzan.dependencies import get_notification_log
from makhzan.schemas.notification import NotificationCreate, NotificationRecord, UnreadCount
from makhzan.services.notification_log import NotificationLog

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=list[NotificationRecord])
async def get_notifications(
    limit: int = Query(50, ge=1, le=500),
    unread_only: bool = Query(False),
    log: NotificationLog = Depends(get_notification_log)
):
    """Get notifications, newest first."""
    return log.list_notifications(unread_only=unread_only, limit=limit)


@router.post("", response_model=NotificationRecord, status_code=201)
async def add_notification(
    notification: NotificationCreate,
    log: NotificationLog = Depends(get_notification_log)
):
    """Append a notification (e.g. a client-side event worth keeping in the log)."""
    return log.add_notification(notification)


@router.get("/count", response_model=UnreadCount)
async def get_unread_count(log: NotificationLog = Depends(get_notification_log)):
    """Get count of unread notifications."""
    return UnreadCount(unread_count=log.get_unread_count())


@router.post("/read-all")
async def mark_all_read(log: NotificationLog = Depends(get_notification_log)):
    """Mark all notifications as read."""
    changed = log.mark_all_as_read()
    return {"status": "all_read", "updated": changed}


@router.post("/{notification_id}/read", response_model=NotificationRecord)
async def mark_notification_read(
    notification_id: str,
    log: NotificationLog = Depends(get_notification_log)
):
    """Mark a notification as read."""
    record = log.mark_as_read(notification_id)
    if not record:
        raise HTTPException(status_code=404, detail="Notification not found")
    return record


@router.delete("/{notification_id}")
async def delete_notification(
    notification_id: str,
    log: NotificationLog = Depends(get_notification_log)
):
    """Remove a notification. Unknown ids are ignored."""
    removed = log.remove_notification(notification_id)
    return {"status": "deleted", "deleted": removed}


@router.delete("")
async def clear_notifications(log: NotificationLog = Depends(get_notification_log)):
    """Remove every notification."""
    log.clear_all_notifications()
    return {"status": "cleared"}
