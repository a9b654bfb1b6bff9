"""Store factory functions."""

from typing import Optional

from bizsplit.config import get_database_path
from bizsplit.storage.sqlalchemy_store import SQLAlchemyStateStore


def create_sqlite_store(database_path: Optional[str] = None) -> SQLAlchemyStateStore:
    """Create a SQLite-backed state store.

    Args:
        database_path: Path to SQLite database file. If None, checks
            BIZSPLIT_DB_PATH environment variable, then defaults to
            ~/.bizsplit/bizsplit.db

    Returns:
        SQLAlchemyStateStore instance configured for SQLite
    """
    database_url = f"sqlite:///{get_database_path(database_path)}"
    return SQLAlchemyStateStore(database_url)
