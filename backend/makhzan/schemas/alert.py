from pydantic import BaseModel
from datetime import datetime

from makhzan.schemas.notification import NotificationRecord


class AlertCheckResponse(BaseModel):
    checked_at: datetime
    count: int
    message: str
    alerts: list[NotificationRecord]


class AlertSummary(BaseModel):
    critical: int  # out of stock
    low_stock: int
    expiring_soon: int
