"""SQLAlchemy implementation of the state store."""

from typing import Optional
from sqlalchemy.orm import Session

from bizsplit.storage.base import StateStore
from bizsplit.storage.models import StateSlot, create_session_factory


class SQLAlchemyStateStore(StateStore):
    """SQLAlchemy-based implementation of StateStore interface."""

    def __init__(self, database_url: str):
        """Initialize SQLAlchemy state store.

        Args:
            database_url: SQLAlchemy database URL (e.g., 'sqlite:///path/to.db')
        """
        self.database_url = database_url
        self.session_factory = create_session_factory(database_url)
        self._session: Optional[Session] = None

    def _get_session(self) -> Session:
        """Get current session, creating one if needed."""
        if self._session is None:
            self._session = self.session_factory()
        return self._session

    def connect(self) -> None:
        """Connect to the store."""
        # Connection is lazy, so this is a no-op
        pass

    def disconnect(self) -> None:
        """Disconnect from the store."""
        if self._session is not None:
            self._session.close()
            self._session = None

    def initialize_schema(self) -> None:
        """Initialize storage schema (create tables)."""
        # Schema is created automatically by create_session_factory
        pass

    def read_state(self, key: str) -> Optional[str]:
        """Return the document stored under ``key``."""
        session = self._get_session()
        slot = session.get(StateSlot, key)
        if slot is None:
            return None
        return slot.document

    def write_state(self, key: str, document: str) -> None:
        """Overwrite the document stored under ``key``."""
        session = self._get_session()
        slot = session.get(StateSlot, key)
        if slot is None:
            session.add(StateSlot(key=key, document=document))
        else:
            slot.document = document
        session.commit()

    def delete_state(self, key: str) -> None:
        """Remove the document stored under ``key``."""
        session = self._get_session()
        slot = session.get(StateSlot, key)
        if slot is not None:
            session.delete(slot)
            session.commit()
