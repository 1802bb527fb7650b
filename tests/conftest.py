"""
Pytest fixtures for the shop profitability test suite.

Provides:
- Logging and log-context reset around every test
- A deterministic clock
- An in-memory SQLite store for selector tests
"""

from datetime import UTC, datetime

import pytest

from shop_kernel.db.engine import create_tables, get_session, init_engine_from_url, reset_engine
from shop_kernel.domain.clock import DeterministicClock
from shop_kernel.logging_config import LogContext, reset_logging


@pytest.fixture(autouse=True)
def _clean_logging():
    """Reset logging state between tests."""
    reset_logging()
    LogContext.clear()
    yield
    LogContext.clear()
    reset_logging()


@pytest.fixture
def clock() -> DeterministicClock:
    """Clock pinned to 2024-03-15 so the current month is 2024-03."""
    return DeterministicClock(datetime(2024, 3, 15, 9, 30, tzinfo=UTC))


@pytest.fixture
def db_session():
    """Session on a fresh in-memory SQLite store with the five tables."""
    init_engine_from_url("sqlite://")
    create_tables()
    session = get_session()
    try:
        yield session
    finally:
        session.close()
        reset_engine()
