"""
Pydantic models for recommendation scoring.

Models cover:
- Content facts (sessions and courses) as read from the content store
- The user's preference profile derived from completion history
- Recommendation results
"""

from enum import Enum
from typing import Any, Iterable, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from core.logging import get_logger
from core.utils import clamp, normalize_string_list
from personalization.context import TimeOfDay

logger = get_logger(__name__)

MAX_PREFERENCES = 5


# =============================================================================
# Enums
# =============================================================================

class Difficulty(str, Enum):
    """Difficulty ladder, lowest first."""
    PEMULA = "pemula"
    MENENGAH = "menengah"
    LANJUTAN = "lanjutan"

    @classmethod
    def parse(cls, value: Any) -> "Difficulty":
        """Accept canonical values and English aliases (beginner, ...)."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.lower().strip()
            key = _DIFFICULTY_ALIASES.get(key, key)
            return cls(key)
        raise ValueError(f"unknown difficulty {value!r}")

    def next_rung(self) -> Optional["Difficulty"]:
        ladder = list(Difficulty)
        index = ladder.index(self)
        return ladder[index + 1] if index + 1 < len(ladder) else None


_DIFFICULTY_ALIASES = {
    "beginner": "pemula",
    "intermediate": "menengah",
    "advanced": "lanjutan",
}


class StrategyTag(str, Enum):
    """Which strategy produced a recommendation."""
    TRENDING = "trending"
    SIMILAR = "similar"
    PROGRESSION = "progression"
    MOOD = "mood"
    TIME_BASED = "time-based"


# =============================================================================
# Content
# =============================================================================

class ContentProfile(BaseModel):
    """Read-only facts about one meditation session."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    category: str
    difficulty: Difficulty
    duration_minutes: int = Field(ge=0)
    instructor_id: Optional[str] = None
    completion_count: int = Field(default=0, ge=0)
    average_rating: float = Field(default=0.0, ge=0.0, le=5.0)
    title: Optional[str] = None

    @field_validator("category", mode="before")
    @classmethod
    def normalize_category(cls, v):
        if isinstance(v, str):
            return v.lower().strip()
        return v

    @field_validator("difficulty", mode="before")
    @classmethod
    def parse_difficulty(cls, v):
        return Difficulty.parse(v)


class CourseProfile(BaseModel):
    """Read-only facts about one course (a sequence of sessions)."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    category: str
    difficulty: Difficulty
    title: Optional[str] = None
    enrollment_count: int = Field(default=0, ge=0)
    average_rating: float = Field(default=0.0, ge=0.0, le=5.0)

    @field_validator("category", mode="before")
    @classmethod
    def normalize_category(cls, v):
        if isinstance(v, str):
            return v.lower().strip()
        return v

    @field_validator("difficulty", mode="before")
    @classmethod
    def parse_difficulty(cls, v):
        return Difficulty.parse(v)


class CompletionRecord(BaseModel):
    """One row of a user's session progress."""
    user_id: str
    content_id: str
    completed: bool = False
    completed_at: Optional[str] = None
    rating: Optional[float] = None


# =============================================================================
# User preferences
# =============================================================================

class UserPreferenceProfile(BaseModel):
    """
    Preferences derived from a user's completed sessions.

    Each list is ordered most-frequent first and holds at most
    ``MAX_PREFERENCES`` entries (longer input is truncated).
    """
    preferred_categories: List[str] = Field(default_factory=list)
    preferred_difficulties: List[Difficulty] = Field(default_factory=list)
    preferred_durations: List[int] = Field(default_factory=list)
    preferred_instructors: List[str] = Field(default_factory=list)
    completion_rate: float = Field(default=0.0, ge=0.0, le=1.0)
    most_active_time_of_day: Optional[TimeOfDay] = None

    @field_validator("preferred_categories", mode="before")
    @classmethod
    def normalize_categories(cls, v):
        if isinstance(v, (list, tuple)):
            if not all(isinstance(s, str) for s in v):
                raise ValueError("categories must be strings")
            return normalize_string_list(v)
        return v

    @field_validator("preferred_difficulties", mode="before")
    @classmethod
    def parse_difficulties(cls, v):
        if isinstance(v, (list, tuple)):
            return [Difficulty.parse(d) for d in v]
        return v

    @field_validator(
        "preferred_categories",
        "preferred_difficulties",
        "preferred_durations",
        "preferred_instructors",
    )
    @classmethod
    def cap_length(cls, v):
        return v[:MAX_PREFERENCES]

    @property
    def is_empty(self) -> bool:
        return not (
            self.preferred_categories
            or self.preferred_difficulties
            or self.preferred_durations
            or self.preferred_instructors
        )


class InvalidProfileError(ValueError):
    """A supplied preference profile does not have the expected shape."""
    pass


# =============================================================================
# Results
# =============================================================================

class Recommendation(BaseModel):
    content_id: str
    reason: str
    confidence: float
    strategy: StrategyTag

    @field_validator("confidence", mode="before")
    @classmethod
    def clamp_confidence(cls, v):
        return clamp(float(v))


class CourseRecommendation(BaseModel):
    course_id: str
    reason: str
    confidence: float

    @field_validator("confidence", mode="before")
    @classmethod
    def clamp_confidence(cls, v):
        return clamp(float(v))


# =============================================================================
# Coercion helpers
# =============================================================================

def coerce_profile(obj: Any) -> UserPreferenceProfile:
    """
    Return ``obj`` as a :class:`UserPreferenceProfile`.

    ``None`` becomes the empty profile; mappings are validated.

    Raises:
        InvalidProfileError: if ``obj`` cannot be read as a profile
    """
    if obj is None:
        return UserPreferenceProfile()
    if isinstance(obj, UserPreferenceProfile):
        return obj
    if isinstance(obj, Mapping):
        try:
            return UserPreferenceProfile.model_validate(dict(obj))
        except (ValidationError, ValueError, TypeError, AttributeError) as exc:
            raise InvalidProfileError(str(exc)) from exc
    raise InvalidProfileError(f"expected a preference profile, got {type(obj).__name__}")


def coerce_catalog(rows: Optional[Iterable[Any]]) -> List[ContentProfile]:
    """
    Validate catalog rows, skipping (and logging) the malformed ones.

    Duplicate ids keep their first occurrence.
    """
    catalog: List[ContentProfile] = []
    seen = set()
    for row in rows or ():
        try:
            item = row if isinstance(row, ContentProfile) else ContentProfile.model_validate(row)
        except (ValidationError, ValueError, TypeError) as exc:
            logger.warning(
                "Skipping malformed content item",
                content_id=_row_id(row),
                error=str(exc),
            )
            continue
        if item.id in seen:
            continue
        seen.add(item.id)
        catalog.append(item)
    return catalog


def coerce_courses(rows: Optional[Iterable[Any]]) -> List[CourseProfile]:
    courses: List[CourseProfile] = []
    for row in rows or ():
        try:
            courses.append(row if isinstance(row, CourseProfile) else CourseProfile.model_validate(row))
        except (ValidationError, ValueError, TypeError) as exc:
            logger.warning("Skipping malformed course", course_id=_row_id(row), error=str(exc))
    return courses


def _row_id(row: Any) -> Optional[str]:
    if isinstance(row, Mapping):
        return row.get("id")
    return getattr(row, "id", None)
