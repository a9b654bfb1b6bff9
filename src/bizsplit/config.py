"""Runtime configuration read from the environment."""

import os
from pathlib import Path
from typing import Optional

DB_PATH_ENV = "BIZSPLIT_DB_PATH"
LOG_LEVEL_ENV = "BIZSPLIT_LOG_LEVEL"

DEFAULT_DATA_DIR = ".bizsplit"
DEFAULT_DB_NAME = "bizsplit.db"
DEFAULT_LOG_LEVEL = "WARNING"

# Storage slot holding the whole serialized profile
STATE_KEY = "separador_pj_state_v1"


def get_database_path(database_path: Optional[str] = None) -> str:
    """Resolve the SQLite file path.

    Args:
        database_path: Explicit path. If None, checks BIZSPLIT_DB_PATH
            environment variable, then defaults to ~/.bizsplit/bizsplit.db

    Returns:
        Database file path
    """
    if database_path is None:
        database_path = os.environ.get(DB_PATH_ENV)

    if database_path is None:
        data_dir = Path.home() / DEFAULT_DATA_DIR
        data_dir.mkdir(exist_ok=True)
        database_path = str(data_dir / DEFAULT_DB_NAME)

    return database_path


def get_log_level() -> str:
    """Logging level name from BIZSPLIT_LOG_LEVEL, default WARNING."""
    return os.environ.get(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL).upper()
