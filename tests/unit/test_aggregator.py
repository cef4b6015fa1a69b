"""
Tests for building preference profiles from completion history.
"""

from datetime import datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from personalization.context import TimeOfDay
from recommendations.aggregator import build_preference_profile, most_active_time_of_day
from recommendations.models import Difficulty


def _make_completed(**overrides) -> dict:
    defaults = {
        "id": "c1",
        "category": "relaksasi",
        "difficulty": "pemula",
        "duration_minutes": 10,
        "instructor_id": "ayu",
    }
    defaults.update(overrides)
    return defaults


class TestBuildPreferenceProfile:

    def test_frequency_ordering(self):
        completed = [
            _make_completed(id="a", category="tidur-dalam"),
            _make_completed(id="b", category="relaksasi"),
            _make_completed(id="c", category="relaksasi"),
        ]
        profile = build_preference_profile(completed, catalog_size=10)
        assert profile.preferred_categories == ["relaksasi", "tidur-dalam"]

    def test_ties_keep_first_appearance(self):
        completed = [
            _make_completed(id="a", category="emosi"),
            _make_completed(id="b", category="fokus-kerja"),
        ]
        profile = build_preference_profile(completed, catalog_size=10)
        assert profile.preferred_categories == ["emosi", "fokus-kerja"]

    def test_lists_capped(self):
        completed = [
            _make_completed(id=str(i), category=f"cat-{i}", duration_minutes=i + 1)
            for i in range(8)
        ]
        profile = build_preference_profile(completed, catalog_size=10)
        assert len(profile.preferred_categories) == 5
        assert len(profile.preferred_durations) == 5

    def test_difficulties(self):
        completed = [
            _make_completed(id="a", difficulty="menengah"),
            _make_completed(id="b", difficulty="menengah"),
            _make_completed(id="c", difficulty="beginner"),
        ]
        profile = build_preference_profile(completed, catalog_size=10)
        assert profile.preferred_difficulties == [Difficulty.MENENGAH, Difficulty.PEMULA]

    def test_completion_rate_counts_distinct_sessions(self):
        completed = [_make_completed(id="a"), _make_completed(id="a"), _make_completed(id="b")]
        profile = build_preference_profile(completed, catalog_size=4)
        assert profile.completion_rate == pytest.approx(0.5)

    def test_empty_catalog_rate_is_zero(self):
        profile = build_preference_profile([_make_completed()], catalog_size=0)
        assert profile.completion_rate == 0.0

    def test_no_history_gives_empty_profile(self):
        profile = build_preference_profile([], catalog_size=10)
        assert profile.is_empty
        assert profile.most_active_time_of_day is None

    def test_malformed_rows_skipped(self):
        completed = [_make_completed(id="a"), {"id": "b"}]
        profile = build_preference_profile(completed, catalog_size=10)
        assert profile.preferred_categories == ["relaksasi"]

    def test_missing_instructor_ignored(self):
        profile = build_preference_profile([_make_completed(instructor_id=None)], catalog_size=1)
        assert profile.preferred_instructors == []


class TestMostActiveTimeOfDay:

    def test_from_iso_strings(self):
        stamps = ["2024-03-01T07:15:00Z", "2024-03-02T08:00:00+00:00", "2024-03-02T21:30:00Z"]
        assert most_active_time_of_day(stamps, tz=timezone.utc) == TimeOfDay.MORNING

    def test_utc_timestamps_bucketed_in_local_time(self):
        # 23:30Z and 23:40Z are 06:30 and 06:40 in Jakarta
        stamps = ["2026-01-01T23:30:00Z", "2026-01-02T23:40:00Z"]
        assert most_active_time_of_day(stamps) == TimeOfDay.MORNING

    def test_explicit_timezone(self):
        stamps = ["2026-01-01T23:30:00Z"]
        assert most_active_time_of_day(stamps, tz=ZoneInfo("Asia/Makassar")) == TimeOfDay.MORNING
        assert most_active_time_of_day(stamps, tz=timezone.utc) == TimeOfDay.NIGHT

    def test_offset_timestamps_converted(self):
        # 10:00 WITA is 09:00 WIB
        assert most_active_time_of_day(["2024-03-01T10:00:00+08:00"]) == TimeOfDay.MORNING

    def test_from_datetimes(self):
        stamps = [datetime(2024, 3, 1, 19, 0), datetime(2024, 3, 2, 18, 30)]
        assert most_active_time_of_day(stamps) == TimeOfDay.EVENING

    def test_unparseable_ignored(self):
        assert most_active_time_of_day(["not a date", ""]) is None
        assert most_active_time_of_day(None) is None

    def test_passed_through_profile(self):
        # 22:00Z is 05:00 WIB
        profile = build_preference_profile(
            [_make_completed()], catalog_size=1, completed_at=["2024-03-01T22:00:00Z"]
        )
        assert profile.most_active_time_of_day == TimeOfDay.DAWN

    def test_profile_timezone_override(self):
        profile = build_preference_profile(
            [_make_completed()],
            catalog_size=1,
            completed_at=["2024-03-01T05:00:00Z"],
            tz=timezone.utc,
        )
        assert profile.most_active_time_of_day == TimeOfDay.DAWN
