"""
Build a UserPreferenceProfile from a user's completed sessions.

Frequencies break ties by first appearance, so the most recent history
should come first when recency matters to the caller.
"""

from datetime import datetime, tzinfo
from typing import Any, Iterable, List, Optional, Union
from zoneinfo import ZoneInfo

from pydantic import ValidationError

from core.logging import get_logger
from core.utils import clamp, top_by_frequency
from personalization.context import TimeOfDay, time_of_day_for_hour
from recommendations.models import MAX_PREFERENCES, ContentProfile, UserPreferenceProfile

logger = get_logger(__name__)

MAX_DIFFICULTIES = 3

Timestamp = Union[datetime, str]


def _parse_timestamp(value: Timestamp) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str) and value:
        try:
            # Supabase returns a trailing Z for UTC
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            logger.debug("Ignoring unparseable timestamp", value=value)
    return None


def _default_timezone() -> tzinfo:
    from config.settings import get_settings
    return ZoneInfo(get_settings().user_timezone)


def most_active_time_of_day(
    timestamps: Optional[Iterable[Timestamp]],
    tz: Optional[tzinfo] = None,
) -> Optional[TimeOfDay]:
    """
    Most frequent time-of-day bucket, or ``None`` without usable timestamps.

    Aware timestamps are converted to ``tz`` (default: the configured user
    timezone) before bucketing; naive ones are taken as already local.
    """
    buckets: List[TimeOfDay] = []
    for value in timestamps or ():
        parsed = _parse_timestamp(value)
        if parsed is None:
            continue
        if parsed.tzinfo is not None:
            if tz is None:
                tz = _default_timezone()
            parsed = parsed.astimezone(tz)
        buckets.append(time_of_day_for_hour(parsed.hour))
    top = top_by_frequency(buckets, 1)
    return top[0] if top else None


def build_preference_profile(
    completed: Iterable[Any],
    catalog_size: int,
    completed_at: Optional[Iterable[Timestamp]] = None,
    tz: Optional[tzinfo] = None,
) -> UserPreferenceProfile:
    """
    Aggregate completed sessions into preferences.

    Args:
        completed: completed sessions (ContentProfile or row dicts); repeats
            count towards frequency
        catalog_size: number of sessions available, for the completion rate
        completed_at: completion timestamps, for the most active time of day
        tz: timezone for bucketing aware timestamps (default from settings)

    Returns:
        Profile with top-5 categories, durations and instructors, top-3
        difficulties, and completion rate ``distinct completed / catalog_size``.
    """
    items: List[ContentProfile] = []
    for row in completed or ():
        try:
            items.append(row if isinstance(row, ContentProfile) else ContentProfile.model_validate(row))
        except (ValidationError, ValueError, TypeError) as e:
            logger.warning("Skipping malformed completion", error=str(e))

    distinct = len({item.id for item in items})
    completion_rate = clamp(distinct / catalog_size) if catalog_size > 0 else 0.0

    return UserPreferenceProfile(
        preferred_categories=top_by_frequency([i.category for i in items], MAX_PREFERENCES),
        preferred_difficulties=top_by_frequency([i.difficulty for i in items], MAX_DIFFICULTIES),
        preferred_durations=top_by_frequency([i.duration_minutes for i in items], MAX_PREFERENCES),
        preferred_instructors=top_by_frequency(
            [i.instructor_id for i in items if i.instructor_id], MAX_PREFERENCES
        ),
        completion_rate=completion_rate,
        most_active_time_of_day=most_active_time_of_day(completed_at, tz),
    )
