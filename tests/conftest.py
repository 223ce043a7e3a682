"""
Test configuration and fixtures for IBD Nexus.

- Function-scoped in-memory SQLite engine with the storage table created
- Session factory bound to it (what EntryStore takes in production)
- Entry store with an empty seed so tests control the collection
- Mock journal AI collaborator
"""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from ibd_nexus.database import init_db
from ibd_nexus.services.entry_store import EntryStore


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture
def engine():
    """In-memory SQLite engine shared across connections for one test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def store(db_session_factory) -> EntryStore:
    """Loaded entry store over an empty database with an empty seed."""
    store = EntryStore(db_session_factory, seed_factory=list)
    store.load()
    return store


# =============================================================================
# Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_journal_ai():
    """
    Mock journal AI collaborator.

    Returns a mock service that can be configured per test.
    """
    from tests.fixtures.mocks import MockJournalAI

    return MockJournalAI()
