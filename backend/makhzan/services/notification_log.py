"""
Notification Log

In-memory, append-only history of user-visible events. It is independent of the
product list: records mention products by name only and are not persisted
across restarts.
"""
import logging
import uuid
from datetime import datetime, timezone
from typing import Callable, Optional

from makhzan.schemas.notification import NotificationCreate, NotificationRecord
from makhzan.services.events import Signal

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class NotificationLog:
    def __init__(self, clock: Callable[[], datetime] = utc_now):
        self._clock = clock
        self._records: list[NotificationRecord] = []
        # Fired with each new record (toast / browser hooks subscribe here)
        self.notification_added = Signal("notification_added")

    def add_notification(self, notification: NotificationCreate | dict) -> NotificationRecord:
        """Append a notification, assigning id, timestamp and read=False when absent."""
        if isinstance(notification, dict):
            notification = NotificationCreate.model_validate(notification)
        data = notification.model_dump()
        data["id"] = data["id"] or uuid.uuid4().hex
        data["timestamp"] = data["timestamp"] or self._clock()
        record = NotificationRecord(**data)
        self._records.append(record)
        logger.debug(f"Notification added: [{record.type}] {record.title}")
        self.notification_added.send(record)
        return record

    def get(self, notification_id: str) -> Optional[NotificationRecord]:
        return next((r for r in self._records if r.id == notification_id), None)

    def mark_as_read(self, notification_id: str) -> Optional[NotificationRecord]:
        """Set read=True on the matching record. Unknown ids are ignored."""
        for index, record in enumerate(self._records):
            if record.id == notification_id:
                if not record.read:
                    record = record.model_copy(update={"read": True})
                    self._records[index] = record
                return record
        return None

    def mark_all_as_read(self) -> int:
        """Mark every unread record as read. Returns how many changed."""
        changed = 0
        for index, record in enumerate(self._records):
            if not record.read:
                self._records[index] = record.model_copy(update={"read": True})
                changed += 1
        return changed

    def remove_notification(self, notification_id: str) -> bool:
        before = len(self._records)
        self._records = [r for r in self._records if r.id != notification_id]
        return len(self._records) != before

    def clear_all_notifications(self) -> None:
        self._records = []

    def get_unread_count(self) -> int:
        return sum(1 for r in self._records if not r.read)

    def list_notifications(self, unread_only: bool = False, limit: int | None = None) -> list[NotificationRecord]:
        """Records newest first."""
        records = [r for r in reversed(self._records) if not (unread_only and r.read)]
        if limit is not None:
            records = records[:limit]
        return records

    def __len__(self) -> int:
        return len(self._records)
