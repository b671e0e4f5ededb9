"""
PantryGuard - Test Fixtures
===========================

Shared fixtures for all tests.
"""

import os
import sys
import tempfile
from datetime import datetime, timezone
from pathlib import Path

import pytest

# Add the repository root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

# Set up test environment before importing modules (the logger opens its
# log directory at import time)
os.environ["TESTING"] = "1"
os.environ.setdefault("PANTRYGUARD_LOG_DIR", tempfile.mkdtemp(prefix="pantryguard-test-logs-"))

from pantryguard.core.config import Config, reset_config  # noqa: E402
from pantryguard.utils.metrics import metrics  # noqa: E402


# Wednesday of ISO week 2026-42
NOW = datetime(2026, 10, 14, 12, 0, 0, tzinfo=timezone.utc)
NOW_WEEK = "2026-42"


@pytest.fixture(autouse=True)
def clean_state():
    """Reset the cached config and metrics around every test."""
    reset_config()
    metrics.clear()
    yield
    reset_config()
    metrics.clear()


@pytest.fixture
def temp_db_path(tmp_path):
    """Create a temporary database path for testing."""
    return tmp_path / "test_pantryguard.db"


@pytest.fixture
def test_db(temp_db_path):
    """Create a fresh test database instance."""
    from pantryguard.core.database import DatabaseManager

    # Reset singleton
    DatabaseManager._instance = None

    db = DatabaseManager(temp_db_path)

    yield db

    # Cleanup
    db.close()
    DatabaseManager._instance = None


@pytest.fixture
def test_config(temp_db_path):
    """Default engine configuration pointing at the temp database."""
    return Config(db_path=temp_db_path)


@pytest.fixture
def abuse_service(test_db, test_config):
    """AbuseTrackingService over the temp database."""
    from pantryguard.services.abuse import AbuseTrackingService
    return AbuseTrackingService(test_db, test_config)


@pytest.fixture
def privacy_service(test_db):
    """PrivacyService over the temp database."""
    from pantryguard.services.privacy import PrivacyService
    return PrivacyService(test_db)


@pytest.fixture
def guard(test_db, test_config):
    """PantryGuard facade over the temp database."""
    from pantryguard import PantryGuard
    return PantryGuard(db=test_db, config=test_config)


@pytest.fixture
def sample_profile():
    """A complete user profile document."""
    return {
        "user_id": "target-1",
        "username": "chef_anna",
        "full_name": "Anna Baker",
        "email": "anna@example.com",
        "avatar_url": "https://example.com/avatar.jpg",
        "country": "US",
        "date_of_birth": "1990-01-01",
        "created_at": "2025-01-01T00:00:00+00:00",
        "is_suspended": False,
        "preferences": {
            "dietary_restrictions": ["vegetarian"],
            "allergies": ["nuts"],
        },
    }
