"""
Stock and expiry alerts.

``evaluate_products`` is the pure scan; ``AlertEvaluator`` runs it against the
store and writes each alert into the notification log. Runs are stateless:
checking twice without a data change reports the same alerts twice.
"""
import logging
import math
from dataclasses import dataclass
from datetime import datetime, time, timedelta, timezone
from enum import Enum
from typing import Callable, Iterable, Optional

from makhzan.schemas.alert import AlertSummary
from makhzan.schemas.notification import NotificationCreate, NotificationRecord
from makhzan.schemas.product import Product
from makhzan.services import messages
from makhzan.services.inventory_store import InventoryStore
from makhzan.services.notification_log import NotificationLog, utc_now

logger = logging.getLogger(__name__)

DEFAULT_EXPIRY_WINDOW_DAYS = 7


class AlertKind(str, Enum):
    CRITICAL_STOCK = "critical_stock"
    LOW_STOCK = "low_stock"
    EXPIRING_SOON = "expiring_soon"


@dataclass(frozen=True)
class AlertCondition:
    kind: AlertKind
    product_id: str
    product_name: str
    quantity: int
    min_quantity: int
    days_until_expiry: Optional[int] = None

    def to_notification(self) -> NotificationCreate:
        if self.kind == AlertKind.CRITICAL_STOCK:
            return messages.critical_stock(self.product_name, self.quantity)
        if self.kind == AlertKind.LOW_STOCK:
            return messages.low_stock(self.product_name, self.quantity, self.min_quantity)
        return messages.expiring_product(self.product_name, self.days_until_expiry)


def expiry_moment(product: Product) -> Optional[datetime]:
    """Expiry dates are taken as midnight UTC of that day."""
    if product.expiry_date is None:
        return None
    return datetime.combine(product.expiry_date, time.min, tzinfo=timezone.utc)


def days_until(moment: datetime, now: datetime) -> int:
    return math.ceil((moment - now) / timedelta(days=1))


def is_expiring_soon(product: Product, now: datetime, window_days: int = DEFAULT_EXPIRY_WINDOW_DAYS) -> bool:
    expiry = expiry_moment(product)
    return expiry is not None and now < expiry <= now + timedelta(days=window_days)


def evaluate_products(
    products: Iterable[Product],
    now: datetime,
    window_days: int = DEFAULT_EXPIRY_WINDOW_DAYS,
    check_stock: bool = True,
    check_expiry: bool = True,
) -> list[AlertCondition]:
    """
    Scan products for alert conditions.

    Zero stock and low stock (quantity <= min_quantity) are exclusive per
    product; an expiring-soon alert is independent of both.
    """
    conditions: list[AlertCondition] = []
    for product in products:
        if check_stock:
            if product.quantity == 0:
                conditions.append(AlertCondition(
                    AlertKind.CRITICAL_STOCK, product.id, product.name, product.quantity, product.min_quantity
                ))
            elif product.quantity <= product.min_quantity:
                conditions.append(AlertCondition(
                    AlertKind.LOW_STOCK, product.id, product.name, product.quantity, product.min_quantity
                ))

        if check_expiry and is_expiring_soon(product, now, window_days):
            conditions.append(AlertCondition(
                AlertKind.EXPIRING_SOON,
                product.id,
                product.name,
                product.quantity,
                product.min_quantity,
                days_until_expiry=days_until(expiry_moment(product), now),
            ))
    return conditions


class AlertEvaluator:
    def __init__(
        self,
        store: InventoryStore,
        notifications: NotificationLog,
        window_days: int = DEFAULT_EXPIRY_WINDOW_DAYS,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._store = store
        self._notifications = notifications
        self._window_days = window_days
        self._clock = clock

    def evaluate(self, now: Optional[datetime] = None) -> list[AlertCondition]:
        """Current alert conditions, honouring the low-stock/expiry notification toggles."""
        preferences = self._store.settings.notifications
        return evaluate_products(
            self._store.products,
            now or self._clock(),
            window_days=self._window_days,
            check_stock=preferences.low_stock,
            check_expiry=preferences.expiry,
        )

    def run_alert_check(self, now: Optional[datetime] = None) -> list[NotificationRecord]:
        """Manual check: log every alert and return the records just created."""
        records = [
            self._notifications.add_notification(condition.to_notification())
            for condition in self.evaluate(now)
        ]
        logger.info(f"Alert check found {len(records)} alert(s)")
        return records

    def check_alerts(self) -> None:
        """Periodic check: only the notification log side effect matters."""
        self.run_alert_check()

    def alert_summary(self, now: Optional[datetime] = None) -> AlertSummary:
        """Counts per alert level, without touching the notification log."""
        now = now or self._clock()
        products = self._store.products
        return AlertSummary(
            critical=sum(1 for p in products if p.quantity == 0),
            low_stock=sum(1 for p in products if 0 < p.quantity <= p.min_quantity),
            expiring_soon=sum(1 for p in products if is_expiring_soon(p, now, self._window_days)),
        )
