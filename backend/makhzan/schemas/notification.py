from pydantic import BaseModel
from datetime import datetime
from typing import Literal

NotificationType = Literal["success", "warning", "error", "info"]


class NotificationCreate(BaseModel):
    """A notification before it enters the log; id and timestamp may be preset."""
    title: str
    message: str = ""
    type: NotificationType = "info"
    icon: str | None = None
    play_sound: bool = True
    require_interaction: bool = False
    id: str | None = None
    timestamp: datetime | None = None
    read: bool = False


class NotificationRecord(BaseModel):
    id: str
    title: str
    message: str
    type: NotificationType
    icon: str | None = None
    timestamp: datetime
    read: bool = False
    play_sound: bool = True
    require_interaction: bool = False

    class Config:
        frozen = True


class UnreadCount(BaseModel):
    unread_count: int
