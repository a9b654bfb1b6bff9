"""Shared pytest fixtures for bizsplit tests."""

import tempfile
import os
from datetime import datetime, UTC
from decimal import Decimal
import pytest

from bizsplit.domain.entities import Transaction, TransactionKind
from bizsplit.domain.profile import ProfileService
from bizsplit.storage.factories import create_sqlite_store


@pytest.fixture
def temp_store():
    """Create a temporary state store for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    store = create_sqlite_store(database_path=db_path)
    # Store the path for tests that need it
    store.database_path = db_path
    store.connect()
    store.initialize_schema()

    yield store

    store.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def profile_service(temp_store):
    """Create a ProfileService with a temporary store."""
    return ProfileService(temp_store)


@pytest.fixture
def make_transaction():
    """Factory for ledger entries with sensible defaults."""
    counter = {"n": 0}

    def _make(kind, amount, description="entry", commitment_id=None):
        counter["n"] += 1
        return Transaction(
            id=f"txn-{counter['n']}",
            kind=kind,
            amount=Decimal(str(amount)),
            occurred_at=datetime(2026, 3, 1, 12, 0, tzinfo=UTC),
            description=description,
            commitment_id=commitment_id,
        )

    return _make


@pytest.fixture
def sample_ledger(make_transaction):
    """Ledger with one entry of several kinds."""
    return (
        make_transaction(TransactionKind.INCOME, "8000", "Client A"),
        make_transaction(TransactionKind.TAX, "500", "DAS"),
        make_transaction(TransactionKind.SALARY, "3000", "Pro-labore"),
    )


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
