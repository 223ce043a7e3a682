"""Test fixtures for IBD Nexus."""

from tests.fixtures.mocks import (
    MockJournalAI,
    create_mock_with_error,
)

__all__ = [
    "MockJournalAI",
    "create_mock_with_error",
]
