"""
State Storage Service

Reads and writes the named state blob ({products, settings, language}) in the
``persisted_state`` table. Any database failure surfaces as PersistenceError.
"""
import logging
from typing import Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from makhzan.database import SessionLocal
from makhzan.models import PersistedState
from makhzan.services.errors import PersistenceError

logger = logging.getLogger(__name__)


class StateStorage:
    """Single-row key/value storage for one state blob."""

    def __init__(self, name: str, session_factory: sessionmaker = SessionLocal):
        self.name = name
        self._session_factory = session_factory

    def load(self) -> Optional[dict]:
        """Return the stored blob, or None if nothing has been saved yet."""
        db = self._session_factory()
        try:
            row = db.get(PersistedState, self.name)
            if row is None:
                return None
            if not isinstance(row.payload, dict):
                raise PersistenceError(f"Stored state '{self.name}' is not an object")
            return row.payload
        except SQLAlchemyError as e:
            raise PersistenceError(f"Could not load state '{self.name}': {e}") from e
        finally:
            db.close()

    def save(self, blob: dict) -> None:
        """Replace the stored blob."""
        db = self._session_factory()
        try:
            row = db.get(PersistedState, self.name)
            if row is None:
                db.add(PersistedState(name=self.name, payload=blob))
            else:
                row.payload = blob
            db.commit()
            logger.debug(f"Saved state '{self.name}'")
        except SQLAlchemyError as e:
            db.rollback()
            raise PersistenceError(f"Could not save state '{self.name}': {e}") from e
        finally:
            db.close()

