"""
Shared fixtures: an in-memory SQLite database, a controllable clock and a
loaded inventory store wired to a fresh notification log.
"""
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from makhzan.config import Settings
from makhzan.database import init_db
from makhzan.dependencies import build_services
from makhzan.services.alerts import AlertEvaluator
from makhzan.services.inventory_store import InventoryStore
from makhzan.services.notification_log import NotificationLog
from makhzan.services.persistence import StateStorage

START = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    """Returns a fixed instant that moves forward one second per call."""

    def __init__(self, start: datetime = START):
        self.current = start

    def __call__(self) -> datetime:
        value = self.current
        self.current += timedelta(seconds=1)
        return value

    def advance(self, **kwargs):
        self.current += timedelta(**kwargs)


def product_data(**overrides) -> dict:
    data = {
        "name": "قلم حبر",
        "code": "PEN001",
        "category": "tools",
        "quantity": 20,
        "min_quantity": 5,
        "price": "3.50",
        "location": "رف D",
        "supplier": "مكتبة النور",
    }
    data.update(overrides)
    return data


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def storage(session_factory):
    return StateStorage("test-state", session_factory)


@pytest.fixture
def notifications(clock):
    return NotificationLog(clock=clock)


@pytest.fixture
def store(storage, notifications, clock):
    store = InventoryStore(storage, notifications, clock=clock)
    return store.load()


@pytest.fixture
def evaluator(store, notifications):
    return AlertEvaluator(store, notifications, window_days=7, clock=lambda: START)


@pytest.fixture
def config(tmp_path):
    return Settings(
        seed_sample_products=False,
        alert_check_enabled=False,
        backup_dir=str(tmp_path / "backups"),
    )


@pytest.fixture
def services(config, session_factory):
    services = build_services(config, session_factory)
    services.store.load()
    return services


@pytest.fixture
def client(services):
    from makhzan.main import app

    # The lifespan is not run; the services are attached directly
    app.state.services = services
    yield TestClient(app)
    del app.state.services
