"""
Pytest configuration and fixtures.
"""

import os

import pytest

# Set test environment
os.environ.setdefault("TESTING", "1")
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("LOG_FORMAT", "text")

# Fixed starting point for MockClock: a device that booted a minute ago
WALL_START_MS = 1_700_000_000_000
UPTIME_START_MS = 60_000


@pytest.fixture
def engine():
    """Fresh in-memory SQLite database with all tables."""
    from tvprovider.database import create_db_engine, init_db

    engine = create_db_engine("sqlite:///:memory:")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    from tvprovider.database import create_session_factory

    return create_session_factory(engine)


@pytest.fixture
def clock():
    from tvprovider.services.retention.clock import MockClock

    return MockClock(wall_millis=WALL_START_MS, uptime_millis=UPTIME_START_MS)


@pytest.fixture
def watermark_store(session_factory):
    from tvprovider.services.retention.watermark import PreferenceWatermarkStore

    return PreferenceWatermarkStore(session_factory)


@pytest.fixture
def row_store(session_factory):
    from tvprovider.services.retention.row_store import SqlTransientRowStore

    return SqlTransientRowStore(session_factory)


@pytest.fixture
def timekeeper(watermark_store, clock):
    from tvprovider.services.retention.timekeeper import DefaultTimekeeper

    return DefaultTimekeeper(watermark_store, clock=clock)


@pytest.fixture
def provider(session_factory, row_store, timekeeper):
    """Provider backed by SQLite and a mock clock, as built for one process."""
    from tvprovider.provider import TvProvider
    from tvprovider.services.retention.guard import TransientRetentionGuard

    return TvProvider(session_factory, TransientRetentionGuard(row_store, timekeeper))
