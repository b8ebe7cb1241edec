"""Shared pytest fixtures for spendtrack tests."""

import logging
import tempfile
import os
from datetime import datetime, timezone
import pytest

from spendtrack.database.factories import create_sqlite_database
from spendtrack.domain.tracker import ExpenseTracker


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def tracker():
    """Create an in-memory tracker with the default currencies."""
    return ExpenseTracker()


@pytest.fixture
def db_tracker(temp_db):
    """Create a tracker that saves to a temporary database."""
    return ExpenseTracker.load(temp_db)


@pytest.fixture
def noon():
    """Return a factory for fixed timestamps at noon UTC."""

    def make(year: int, month: int, day: int) -> datetime:
        return datetime(year, month, day, 12, 0, tzinfo=timezone.utc)

    return make


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture(autouse=True)
def reset_cli_logging():
    """Drop handlers installed by CLI runs so they don't outlive the captured streams."""
    yield
    logging.getLogger("spendtrack").handlers.clear()
