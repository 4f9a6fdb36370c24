"""
Model for the persisted application state.

The whole inventory (products, settings, language) is stored as a single named
JSON blob, one row per state name.
"""
from sqlalchemy import Column, String, DateTime, JSON
from sqlalchemy.sql import func
from makhzan.database import Base


class PersistedState(Base):
    __tablename__ = "persisted_state"

    name = Column(String(100), primary_key=True)
    payload = Column(JSON, nullable=False)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
