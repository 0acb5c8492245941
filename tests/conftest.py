"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import pytest
import sys
from datetime import datetime
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from memcurve.core.clock import FixedClock
from memcurve.core.models import Difficulty, MemoryItem


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests (SQLite storage)")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")
    config.addinivalue_line("markers", "slow: Slow tests")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        # Mark based on test file location
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


# Wednesday morning, far from midnight so "today" windows are unambiguous
BASE_TIME = datetime(2024, 3, 6, 9, 0, 0)


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def base_time():
    return BASE_TIME


@pytest.fixture
def clock():
    """Clock pinned at BASE_TIME."""
    return FixedClock(BASE_TIME)


@pytest.fixture
def make_item():
    """Factory for items created at BASE_TIME unless told otherwise."""

    def _make(
        item_id: str = "item-001",
        difficulty: Difficulty | str = Difficulty.MEDIUM,
        created_at: datetime = BASE_TIME,
        category: str = "vocab",
        content: str = "der Apfel - the apple",
        **overrides,
    ) -> MemoryItem:
        item = MemoryItem.create(
            content, category, difficulty, now=created_at, item_id=item_id
        )
        for name, value in overrides.items():
            setattr(item, name, value)
        return item

    return _make


@pytest.fixture
def sample_item(make_item):
    """Provide a fresh medium-difficulty item for testing."""
    return make_item()
