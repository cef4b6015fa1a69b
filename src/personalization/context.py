"""
Adaptation context dataclasses.

Defines the snapshot the rule evaluator reads.  The caller builds one per
evaluation (time-of-day already bucketed) and the evaluator never
mutates it.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple


class SpiritualTradition(str, Enum):
    ISLAM = "islam"
    HINDU = "hindu"
    BUDDHA = "buddha"
    KRISTEN = "kristen"
    JAVANESE = "javanese"    # Kejawen
    SECULAR = "secular"
    OTHER = "other"


class CulturalRegion(str, Enum):
    JAKARTA = "jakarta"
    BALI = "bali"
    JAWA_TENGAH = "jawa-tengah"
    JAWA_TIMUR = "jawa-timur"
    SUMATRA = "sumatra"
    KALIMANTAN = "kalimantan"
    SULAWESI = "sulawesi"
    OTHER = "other"


class FamilyContext(str, Enum):
    PRIVATE_ROOM = "private-room"
    SHARED_SPACE = "shared-space"
    LIMITED_PRIVACY = "limited-privacy"
    FAMILY_SUPPORTIVE = "family-supportive"


class MoodType(str, Enum):
    VERY_SAD = "very-sad"
    SAD = "sad"
    ANXIOUS = "anxious"
    NEUTRAL = "neutral"
    HAPPY = "happy"
    VERY_HAPPY = "very-happy"


class TimeOfDay(str, Enum):
    """Six buckets; see :func:`time_of_day_for_hour`."""
    DAWN = "dawn"
    MORNING = "morning"
    MIDDAY = "midday"
    AFTERNOON = "afternoon"
    EVENING = "evening"
    NIGHT = "night"


class SocialContext(str, Enum):
    ALONE = "alone"
    WITH_FAMILY = "with-family"
    IN_PUBLIC = "in-public"


def time_of_day_for_hour(hour: int) -> TimeOfDay:
    """
    Bucket a local hour (0-23) into a :class:`TimeOfDay`.

    Callers do this once, outside the evaluator, so evaluation never
    reads the clock.
    """
    if not 0 <= hour <= 23:
        raise ValueError(f"hour must be in 0..23, got {hour}")
    if 4 <= hour < 6:
        return TimeOfDay.DAWN
    if 6 <= hour < 11:
        return TimeOfDay.MORNING
    if 11 <= hour < 14:
        return TimeOfDay.MIDDAY
    if 14 <= hour < 17:
        return TimeOfDay.AFTERNOON
    if 17 <= hour < 21:
        return TimeOfDay.EVENING
    return TimeOfDay.NIGHT


@dataclass(frozen=True)
class CulturalProfile:
    """Answers from the cultural onboarding step.  All optional."""
    spiritual_tradition: Optional[SpiritualTradition] = None
    region: Optional[CulturalRegion] = None
    family_context: Optional[FamilyContext] = None


@dataclass(frozen=True)
class SessionHistory:
    completed_sessions: int = 0
    preferred_times: Tuple[str, ...] = ()
    successful_techniques: Tuple[str, ...] = ()


@dataclass(frozen=True)
class RealTimeContext:
    is_holiday: Optional[bool] = None
    weather_condition: Optional[str] = None
    social_context: Optional[SocialContext] = None


@dataclass(frozen=True)
class AdaptationContext:
    """
    Complete snapshot for one adaptation evaluation.

    Treated as a value: two contexts with equal fields evaluate to equal
    results.
    """
    time_of_day: TimeOfDay
    cultural: CulturalProfile = field(default_factory=CulturalProfile)
    mood: Optional[MoodType] = None
    history: SessionHistory = field(default_factory=SessionHistory)
    realtime: RealTimeContext = field(default_factory=RealTimeContext)

    @property
    def tradition(self) -> Optional[SpiritualTradition]:
        return self.cultural.spiritual_tradition

    @property
    def region(self) -> Optional[CulturalRegion]:
        return self.cultural.region

    @property
    def family_context(self) -> Optional[FamilyContext]:
        return self.cultural.family_context

    def in_javanese_region(self) -> bool:
        """True for any Java region (jawa-tengah, jawa-timur)."""
        region = getattr(self.region, "value", self.region)
        return isinstance(region, str) and "jawa" in region
