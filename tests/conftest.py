"""
Pytest configuration and shared fixtures for the personalization and
recommendation tests.
"""
import os
import sys
from unittest.mock import MagicMock, patch

import pytest

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(__file__)), "src"))

# Load environment variables
from dotenv import load_dotenv
load_dotenv(os.path.join(os.path.dirname(os.path.dirname(__file__)), ".env"))


# ============================================================================
# Fixtures: Test Data Factories
# ============================================================================

@pytest.fixture
def sample_session_row() -> dict:
    """Sample meditation_sessions row (from Supabase query)."""
    return {
        "id": "session-001",
        "title": "Napas Pagi",
        "category": "jeda-pagi",
        "duration_minutes": 5,
        "difficulty_level": "beginner",
        "instructor_name": "ayu",
        "completion_count": 120,
        "average_rating": 4.5,
    }


@pytest.fixture
def sample_session_rows(sample_session_row: dict) -> list[dict]:
    """List of sample session rows across categories and difficulties."""
    categories = ["jeda-pagi", "relaksasi", "napas-hiruk", "tidur-dalam", "fokus-kerja"]
    levels = ["beginner", "intermediate", "advanced"]
    rows = []
    for i in range(10):
        row = sample_session_row.copy()
        row["id"] = f"session-{i:03d}"
        row["title"] = f"Sesi {i}"
        row["category"] = categories[i % len(categories)]
        row["difficulty_level"] = levels[i % len(levels)]
        row["completion_count"] = 100 + i * 10
        row["average_rating"] = round(3.5 + (i % 4) * 0.4, 1)
        rows.append(row)
    return rows


@pytest.fixture
def sample_catalog():
    """A small ContentProfile catalog."""
    from recommendations.models import ContentProfile
    return [
        ContentProfile(id="c1", category="jeda-pagi", difficulty="pemula",
                       duration_minutes=5, instructor_id="ayu",
                       completion_count=300, average_rating=4.8),
        ContentProfile(id="c2", category="relaksasi", difficulty="pemula",
                       duration_minutes=10, instructor_id="budi",
                       completion_count=150, average_rating=4.2),
        ContentProfile(id="c3", category="napas-hiruk", difficulty="menengah",
                       duration_minutes=10, instructor_id="ayu",
                       completion_count=80, average_rating=4.0),
        ContentProfile(id="c4", category="tidur-dalam", difficulty="lanjutan",
                       duration_minutes=20, instructor_id="sari",
                       completion_count=40, average_rating=3.9),
        ContentProfile(id="c5", category="jeda-pagi", difficulty="menengah",
                       duration_minutes=8, instructor_id="sari",
                       completion_count=20, average_rating=4.6),
    ]


@pytest.fixture
def test_settings():
    """Settings instance isolated from the environment's .env."""
    from config.settings import get_settings_for_testing
    return get_settings_for_testing()


# ============================================================================
# Fixtures: Mock Services
# ============================================================================

@pytest.fixture
def mock_supabase_client():
    """Mock Supabase client for unit tests."""
    mock_client = MagicMock()

    # Mock table operations
    mock_client.table.return_value.select.return_value.execute.return_value.data = []
    mock_client.table.return_value.insert.return_value.execute.return_value.data = [{"id": "test"}]
    mock_client.table.return_value.upsert.return_value.execute.return_value.data = [{"id": "test"}]

    return mock_client


@pytest.fixture
def mock_supabase(mock_supabase_client, test_settings):
    """Patch Supabase client creation with configured test settings."""
    from config.database import get_supabase_client
    get_supabase_client.cache_clear()
    with patch("config.database.get_settings", return_value=test_settings), \
            patch("config.database.create_client", return_value=mock_supabase_client):
        yield mock_supabase_client
    get_supabase_client.cache_clear()


# ============================================================================
# Markers auto-use
# ============================================================================

def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: marks tests as unit tests")
    config.addinivalue_line("markers", "integration: marks tests as integration tests")
    config.addinivalue_line("markers", "supabase: marks tests that require Supabase")


# ============================================================================
# Skip conditions
# ============================================================================

def pytest_collection_modifyitems(config, items):
    """Auto-skip Supabase tests if no credentials are configured."""
    skip_supabase = pytest.mark.skip(reason="Supabase tests require credentials")

    supabase_url = os.getenv("SUPABASE_URL")

    for item in items:
        if "supabase" in item.keywords and not supabase_url:
            item.add_marker(skip_supabase)
