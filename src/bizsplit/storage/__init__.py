"""Storage layer for bizsplit."""

from bizsplit.storage.base import StateStore
from bizsplit.storage.factories import create_sqlite_store

__all__ = ["StateStore", "create_sqlite_store"]
