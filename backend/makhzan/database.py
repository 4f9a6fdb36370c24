from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from makhzan.config import get_settings

settings = get_settings()

# SQLite needs different config than PostgreSQL
if settings.database_url.startswith("sqlite"):
    engine = create_engine(
        settings.database_url,
        connect_args={"check_same_thread": False}  # Needed for SQLite
    )
else:
    engine = create_engine(
        settings.database_url,
        pool_pre_ping=True,
        pool_size=5,
        max_overflow=10
    )

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def init_db(bind=None):
    """Create the state table if it does not exist."""
    from makhzan.models import PersistedState  # noqa: F401  (registers the table)

    Base.metadata.create_all(bind=bind or engine)
