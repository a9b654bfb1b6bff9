"""Abstract state store interface."""

from abc import ABC, abstractmethod
from typing import Optional


class StateStore(ABC):
    """Key-value slot store holding serialized state documents."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the store."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the store."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize storage schema (create tables)."""
        pass

    @abstractmethod
    def read_state(self, key: str) -> Optional[str]:
        """Return the document stored under ``key``, or None on first run."""
        pass

    @abstractmethod
    def write_state(self, key: str, document: str) -> None:
        """Overwrite the whole document stored under ``key``."""
        pass

    @abstractmethod
    def delete_state(self, key: str) -> None:
        """Remove the document stored under ``key``, if any."""
        pass
