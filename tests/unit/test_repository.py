"""
Tests for the Supabase-backed content repository.

The Supabase client is a MagicMock; query builders return the mock
itself so filters can be chained in any order.
"""

from unittest.mock import MagicMock

import pytest

from recommendations.models import Difficulty
from recommendations.repository import (
    ContentRepository,
    ContentRepositoryError,
    session_row_to_profile,
)


def _make_client(data=None, error=None) -> MagicMock:
    """Client whose every query chain resolves to ``data`` (or raises ``error``)."""
    client = MagicMock()
    query = MagicMock()
    for method in ("select", "eq", "in_", "order", "limit", "upsert"):
        getattr(query, method).return_value = query
    if error is not None:
        query.execute.side_effect = error
    else:
        query.execute.return_value.data = data if data is not None else []
    client.table.return_value = query
    return client


@pytest.fixture
def repository_factory(test_settings):
    def factory(data=None, error=None):
        client = _make_client(data, error)
        return ContentRepository(client=client, settings=test_settings), client
    return factory


class TestRowMapping:

    def test_session_row(self, sample_session_row):
        mapped = session_row_to_profile(sample_session_row)
        assert mapped["difficulty"] == "beginner"
        assert mapped["instructor_id"] == "ayu"
        assert mapped["duration_minutes"] == 5

    def test_missing_counts_default_to_zero(self):
        mapped = session_row_to_profile({"id": "x", "completion_count": None, "average_rating": None})
        assert mapped["completion_count"] == 0
        assert mapped["average_rating"] == 0.0


class TestFetchContentProfiles:

    def test_maps_rows(self, repository_factory, sample_session_rows):
        repo, client = repository_factory(sample_session_rows)
        profiles = repo.fetch_content_profiles()

        assert len(profiles) == 10
        assert profiles[0].difficulty == Difficulty.PEMULA
        assert profiles[1].difficulty == Difficulty.MENENGAH
        client.table.assert_called_with("meditation_sessions")

    def test_filters_applied(self, repository_factory):
        repo, client = repository_factory([])
        repo.fetch_content_profiles(category="Relaksasi", difficulty="pemula", limit=20)

        query = client.table.return_value
        query.eq.assert_any_call("category", "relaksasi")
        query.eq.assert_any_call("difficulty_level", "beginner")
        query.limit.assert_called_once_with(20)

    def test_invalid_rows_skipped(self, repository_factory, sample_session_row):
        bad = dict(sample_session_row, id="bad", difficulty_level="expert")
        repo, _ = repository_factory([sample_session_row, bad])
        profiles = repo.fetch_content_profiles()
        assert [p.id for p in profiles] == ["session-001"]

    def test_errors_wrapped(self, repository_factory):
        repo, _ = repository_factory(error=RuntimeError("connection reset"))
        with pytest.raises(ContentRepositoryError, match="connection reset"):
            repo.fetch_content_profiles()


class TestProgress:

    def test_fetch_completion_records(self, repository_factory):
        rows = [
            {"user_id": "u1", "content_id": "s1", "completed": True, "completed_at": "2024-03-01T07:00:00Z"},
            {"user_id": "u1", "content_id": "s2", "completed": True, "completed_at": None},
        ]
        repo, client = repository_factory(rows)
        records = repo.fetch_completion_records("u1")

        assert [r.content_id for r in records] == ["s1", "s2"]
        client.table.assert_called_with("user_progress")
        client.table.return_value.eq.assert_any_call("user_id", "u1")

    def test_fetch_completed_content_keeps_record_order(self, repository_factory, sample_session_rows):
        from recommendations.models import CompletionRecord

        repo, client = repository_factory(sample_session_rows[:3])
        records = [
            CompletionRecord(user_id="u1", content_id="session-002", completed=True),
            CompletionRecord(user_id="u1", content_id="session-000", completed=True),
            CompletionRecord(user_id="u1", content_id="session-002", completed=True),
        ]
        content = repo.fetch_completed_content("u1", records)

        assert [c.id for c in content] == ["session-002", "session-000"]
        client.table.return_value.in_.assert_called_once_with("id", ["session-002", "session-000"])

    def test_no_records_skips_content_query(self, repository_factory):
        repo, client = repository_factory([])
        assert repo.fetch_completed_content("u1", []) == []
        client.table.return_value.in_.assert_not_called()

    def test_record_completion_upserts(self, repository_factory):
        repo, client = repository_factory([])
        record = repo.record_completion("u1", "s1", rating=5)

        assert record.completed is True
        assert record.completed_at is not None
        payload = client.table.return_value.upsert.call_args
        assert payload.args[0]["content_id"] == "s1"
        assert payload.kwargs["on_conflict"] == "user_id,content_id"

    def test_record_completion_error_wrapped(self, repository_factory):
        repo, _ = repository_factory(error=RuntimeError("denied"))
        with pytest.raises(ContentRepositoryError):
            repo.record_completion("u1", "s1")


class TestCourses:

    def test_fetch_course_profiles(self, repository_factory):
        rows = [
            {"id": "k1", "title": "Dasar", "category": "relaksasi", "level": "beginner"},
            {"id": "k2", "title": "Lanjut", "category": "relaksasi", "level": "advanced"},
        ]
        repo, client = repository_factory(rows)
        courses = repo.fetch_course_profiles()

        assert [c.difficulty for c in courses] == [Difficulty.PEMULA, Difficulty.LANJUTAN]
        client.table.assert_called_with("courses")


class TestDefaultClient:

    def test_uses_singleton_client(self, mock_supabase, test_settings):
        repo = ContentRepository(settings=test_settings)
        repo.fetch_content_profiles()
        mock_supabase.table.assert_called_with("meditation_sessions")
