"""
Service container and FastAPI dependencies.

The container is built once by the application lifespan and kept on
``app.state.services``; routers reach it through the ``get_*`` dependencies
(tests override ``get_services``).
"""
from dataclasses import dataclass
from fastapi import Depends, Request
from sqlalchemy.orm import sessionmaker

from makhzan.config import Settings
from makhzan.database import SessionLocal
from makhzan.seed import sample_products
from makhzan.services.alerts import AlertEvaluator
from makhzan.services.inventory_store import InventoryStore
from makhzan.services.notification_log import NotificationLog
from makhzan.services.persistence import StateStorage
from makhzan.tasks.scheduler import InventoryScheduler


@dataclass
class Services:
    config: Settings
    notifications: NotificationLog
    store: InventoryStore
    alerts: AlertEvaluator
    scheduler: InventoryScheduler


def build_services(config: Settings, session_factory: sessionmaker = SessionLocal) -> Services:
    """Wire the store, notification log, alert evaluator and scheduler together."""
    notifications = NotificationLog()
    store = InventoryStore(
        StateStorage(config.state_name, session_factory),
        notifications,
        initial_products=sample_products() if config.seed_sample_products else None,
    )
    alerts = AlertEvaluator(store, notifications, window_days=config.expiry_warning_days)
    scheduler = InventoryScheduler(
        store,
        alerts,
        alert_interval_minutes=config.alert_check_interval_minutes,
        alert_check_enabled=config.alert_check_enabled,
        backup_dir=config.backup_dir,
    )
    return Services(
        config=config,
        notifications=notifications,
        store=store,
        alerts=alerts,
        scheduler=scheduler,
    )


def get_services(request: Request) -> Services:
    return request.app.state.services


def get_store(services: Services = Depends(get_services)) -> InventoryStore:
    return services.store


def get_notification_log(services: Services = Depends(get_services)) -> NotificationLog:
    return services.notifications


def get_alert_evaluator(services: Services = Depends(get_services)) -> AlertEvaluator:
    return services.alerts


def get_scheduler(services: Services = Depends(get_services)) -> InventoryScheduler:
    return services.scheduler
