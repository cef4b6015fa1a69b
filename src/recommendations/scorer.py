"""
RecommendationScorer -- ranks meditation sessions for one user.

Four independent strategies each produce a candidate list:

- **Trending**: ``base + min(completions/1000, 0.3) + min((rating-3)/5, 0.1)``
- **Similarity**: additive match on category (0.4), difficulty (0.3),
  duration (0.2) and instructor (0.1)
- **Progression**: the next difficulty rung within preferred categories
- **Mood**: categories suited to the time of day

Lists are merged in strategy order, deduplicated by ``content_id``
(first occurrence wins, so strategy order decides the reason shown),
sorted by confidence and truncated.  Adding a strategy never touches the
merge.

Degrades gracefully:
- Invalid or empty profile -> trending only
- Malformed catalog rows -> skipped
- A strategy that raises -> contributes nothing
- Empty catalog -> ``[]``

Usage::

    from recommendations.scorer import RecommendationScorer

    scorer = RecommendationScorer()
    recs = scorer.score(profile, catalog, exclude_ids=completed, limit=10,
                        time_of_day=TimeOfDay.EVENING)
"""

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence

from core.logging import get_logger
from core.utils import clamp
from personalization.context import TimeOfDay
from recommendations.constants import (
    DEFAULT_TIME_CATEGORIES,
    DEFAULT_TIME_REASON,
    REASON_COURSE_CATEGORY,
    REASON_COURSE_DEFAULT,
    REASON_COURSE_DIFFICULTY,
    REASON_MOOD,
    REASON_NEW_USER,
    REASON_PROGRESSION,
    REASON_SIMILAR_CATEGORY,
    REASON_SIMILAR_DEFAULT,
    REASON_SIMILAR_DIFFICULTY,
    REASON_STARTER,
    REASON_TRENDING,
    STARTER_CATEGORIES,
    TIME_CATEGORIES,
    TIME_DISPLAY_NAMES,
    TIME_REASONS,
    category_display_name,
)
from recommendations.models import (
    ContentProfile,
    CourseProfile,
    CourseRecommendation,
    Difficulty,
    InvalidProfileError,
    Recommendation,
    StrategyTag,
    UserPreferenceProfile,
    coerce_catalog,
    coerce_courses,
    coerce_profile,
)

logger = get_logger(__name__)


# ── Scoring configuration ────────────────────────────────────────

@dataclass
class RecommendationScoringConfig:
    """
    Weights, fixed confidences and per-strategy quotas.

    Similarity weights are additive; they sum to 1.0 so a perfect match
    needs no clamp.
    """

    # Similarity
    category_match: float = 0.4
    difficulty_match: float = 0.3
    duration_match: float = 0.2
    instructor_match: float = 0.1

    # Trending
    trending_base: float = 0.6
    trending_completion_scale: float = 1000.0
    trending_completion_cap: float = 0.3
    trending_rating_pivot: float = 3.0
    trending_rating_scale: float = 5.0
    trending_rating_cap: float = 0.1

    # Fixed confidences
    progression_confidence: float = 0.8
    mood_confidence: float = 0.7
    time_based_confidence: float = 0.75

    # Cold start
    new_user_confidence: float = 0.8
    starter_confidence: float = 0.7
    new_user_top_rated: int = 8
    starter_categories: Sequence[str] = STARTER_CATEGORIES

    # Courses
    course_base: float = 0.5
    course_category_match: float = 0.3
    course_difficulty_match: float = 0.2

    # Share of ``limit`` each strategy may contribute (rounded up)
    strategy_shares: Dict[StrategyTag, float] = field(default_factory=lambda: {
        StrategyTag.TRENDING: 0.3,
        StrategyTag.SIMILAR: 0.3,
        StrategyTag.PROGRESSION: 0.2,
        StrategyTag.MOOD: 0.2,
    })

    def quota(self, tag: StrategyTag, limit: int) -> int:
        share = self.strategy_shares.get(tag, 0.0)
        return max(0, math.ceil(limit * share))


# ── Shared score functions ───────────────────────────────────────

def trending_score(item: ContentProfile, config: Optional[RecommendationScoringConfig] = None) -> float:
    """Popularity score, clamped to ``[0, 1]``."""
    cfg = config or RecommendationScoringConfig()
    completion_bonus = min(item.completion_count / cfg.trending_completion_scale, cfg.trending_completion_cap)
    rating_bonus = min(
        (item.average_rating - cfg.trending_rating_pivot) / cfg.trending_rating_scale,
        cfg.trending_rating_cap,
    )
    return clamp(cfg.trending_base + completion_bonus + rating_bonus)


def similarity_score(
    item: ContentProfile,
    profile: UserPreferenceProfile,
    config: Optional[RecommendationScoringConfig] = None,
) -> float:
    """Additive preference match, clamped to ``[0, 1]``."""
    cfg = config or RecommendationScoringConfig()
    score = 0.0
    if item.category in profile.preferred_categories:
        score += cfg.category_match
    if item.difficulty in profile.preferred_difficulties:
        score += cfg.difficulty_match
    if item.duration_minutes in profile.preferred_durations:
        score += cfg.duration_match
    if item.instructor_id and item.instructor_id in profile.preferred_instructors:
        score += cfg.instructor_match
    return clamp(score)


def next_difficulty(current: Iterable[Difficulty]) -> Optional[Difficulty]:
    """
    The first rung above one the user plays at, unless they already play
    at it too.  ``None`` when the ladder is exhausted or ``current`` is
    empty.
    """
    current = set(current)
    for rung in Difficulty:
        step = rung.next_rung()
        if step is None:
            break
        if rung in current and step not in current:
            return step
    return None


def merge_recommendations(
    lists: Iterable[Iterable[Recommendation]],
    limit: int,
) -> List[Recommendation]:
    """
    Concatenate ``lists``, keep the first occurrence of each
    ``content_id``, sort by confidence (stable) and truncate.
    """
    seen = set()
    unique: List[Recommendation] = []
    for recs in lists:
        for rec in recs:
            if rec.content_id in seen:
                continue
            seen.add(rec.content_id)
            unique.append(rec)
    unique.sort(key=lambda r: r.confidence, reverse=True)
    return unique[:max(0, limit)]


def _by_rating(items: Iterable[ContentProfile]) -> List[ContentProfile]:
    return sorted(items, key=lambda c: c.average_rating, reverse=True)


# ── Strategies ───────────────────────────────────────────────────

@dataclass
class ScoringContext:
    """Everything a strategy needs for one scoring run."""
    profile: UserPreferenceProfile
    candidates: List[ContentProfile]
    time_of_day: Optional[TimeOfDay] = None
    config: RecommendationScoringConfig = field(default_factory=RecommendationScoringConfig)


class ScoringStrategy(ABC):
    """Base class; subclasses set ``tag`` and implement ``generate``."""

    tag: StrategyTag
    requires_preferences: bool = True

    @abstractmethod
    def generate(self, ctx: ScoringContext, limit: int) -> List[Recommendation]:
        """Up to ``limit`` candidates, best first."""


class TrendingStrategy(ScoringStrategy):
    tag = StrategyTag.TRENDING
    requires_preferences = False

    def generate(self, ctx: ScoringContext, limit: int) -> List[Recommendation]:
        scored = [(trending_score(c, ctx.config), c) for c in ctx.candidates]
        scored.sort(key=lambda pair: (pair[0], pair[1].completion_count), reverse=True)
        return [
            Recommendation(
                content_id=c.id,
                reason=REASON_TRENDING.format(count=c.completion_count),
                confidence=score,
                strategy=self.tag,
            )
            for score, c in scored[:limit]
        ]


class SimilarityStrategy(ScoringStrategy):
    tag = StrategyTag.SIMILAR

    def generate(self, ctx: ScoringContext, limit: int) -> List[Recommendation]:
        scored = [(similarity_score(c, ctx.profile, ctx.config), c) for c in ctx.candidates]
        scored = [pair for pair in scored if pair[0] > 0]
        scored.sort(key=lambda pair: pair[0], reverse=True)
        return [
            Recommendation(
                content_id=c.id,
                reason=self._reason(c, ctx.profile),
                confidence=score,
                strategy=self.tag,
            )
            for score, c in scored[:limit]
        ]

    @staticmethod
    def _reason(item: ContentProfile, profile: UserPreferenceProfile) -> str:
        if item.category in profile.preferred_categories:
            return REASON_SIMILAR_CATEGORY.format(category=category_display_name(item.category))
        if item.difficulty in profile.preferred_difficulties:
            return REASON_SIMILAR_DIFFICULTY.format(difficulty=item.difficulty.value)
        return REASON_SIMILAR_DEFAULT


class ProgressionStrategy(ScoringStrategy):
    tag = StrategyTag.PROGRESSION

    def generate(self, ctx: ScoringContext, limit: int) -> List[Recommendation]:
        step = next_difficulty(ctx.profile.preferred_difficulties)
        if step is None:
            return []
        categories = set(ctx.profile.preferred_categories)
        matches = _by_rating(
            c for c in ctx.candidates
            if c.difficulty == step and c.category in categories
        )
        return [
            Recommendation(
                content_id=c.id,
                reason=REASON_PROGRESSION.format(difficulty=step.value),
                confidence=ctx.config.progression_confidence,
                strategy=self.tag,
            )
            for c in matches[:limit]
        ]


class MoodStrategy(ScoringStrategy):
    tag = StrategyTag.MOOD

    def generate(self, ctx: ScoringContext, limit: int) -> List[Recommendation]:
        time_of_day = ctx.time_of_day or ctx.profile.most_active_time_of_day
        if time_of_day is None:
            return []
        categories = TIME_CATEGORIES.get(time_of_day, DEFAULT_TIME_CATEGORIES)
        matches = _by_rating(c for c in ctx.candidates if c.category in categories)
        reason = REASON_MOOD.format(time=TIME_DISPLAY_NAMES.get(time_of_day, time_of_day.value))
        return [
            Recommendation(
                content_id=c.id,
                reason=reason,
                confidence=ctx.config.mood_confidence,
                strategy=self.tag,
            )
            for c in matches[:limit]
        ]


DEFAULT_STRATEGIES: Sequence[ScoringStrategy] = (
    TrendingStrategy(),
    SimilarityStrategy(),
    ProgressionStrategy(),
    MoodStrategy(),
)


# ── Scorer ───────────────────────────────────────────────────────

class RecommendationScorer:
    """
    Orchestrates the recommendation strategies.

    Stateless -- safe to share across threads / reuse across requests.
    Public methods never raise; failures are logged and excluded.
    """

    def __init__(
        self,
        config: Optional[RecommendationScoringConfig] = None,
        strategies: Optional[Sequence[ScoringStrategy]] = None,
    ) -> None:
        self.config = config or RecommendationScoringConfig()
        self.strategies = tuple(strategies) if strategies is not None else tuple(DEFAULT_STRATEGIES)

    def score(
        self,
        profile: Any,
        catalog: Optional[Iterable[Any]],
        exclude_ids: Optional[Iterable[str]] = None,
        limit: int = 10,
        time_of_day: Optional[TimeOfDay] = None,
    ) -> List[Recommendation]:
        """Personalized recommendations, at most ``limit`` of them."""
        if limit <= 0:
            return []

        try:
            prefs = coerce_profile(profile)
        except InvalidProfileError as exc:
            logger.warning("Invalid preference profile, using defaults", error=str(exc))
            prefs = UserPreferenceProfile()

        excluded = set(exclude_ids or ())
        candidates = [c for c in coerce_catalog(catalog) if c.id not in excluded]
        if not candidates:
            return []

        ctx = ScoringContext(
            profile=prefs,
            candidates=candidates,
            time_of_day=time_of_day,
            config=self.config,
        )

        strategy_lists: List[List[Recommendation]] = []
        for strategy in self.strategies:
            if prefs.is_empty and strategy.requires_preferences:
                continue
            quota = self.config.quota(strategy.tag, limit)
            if quota <= 0:
                continue
            try:
                strategy_lists.append(strategy.generate(ctx, quota))
            except Exception as exc:
                logger.warning(
                    "Recommendation strategy failed",
                    strategy=strategy.tag.value,
                    error=str(exc),
                )

        return merge_recommendations(strategy_lists, limit)

    def score_new_user(
        self,
        catalog: Optional[Iterable[Any]],
        limit: int = 10,
    ) -> List[Recommendation]:
        """
        Cold-start recommendations: top-rated beginner sessions, then one
        beginner session per starter category not already chosen.
        """
        if limit <= 0:
            return []
        cfg = self.config
        beginner = _by_rating(c for c in coerce_catalog(catalog) if c.difficulty == Difficulty.PEMULA)
        if not beginner:
            return []

        top_rated = [
            Recommendation(
                content_id=c.id,
                reason=REASON_NEW_USER,
                confidence=cfg.new_user_confidence,
                strategy=StrategyTag.TRENDING,
            )
            for c in beginner[:cfg.new_user_top_rated]
        ]

        chosen = {r.content_id for r in top_rated}
        starters: List[Recommendation] = []
        for category in cfg.starter_categories:
            pick = next((c for c in beginner if c.category == category and c.id not in chosen), None)
            if pick is None:
                continue
            chosen.add(pick.id)
            starters.append(Recommendation(
                content_id=pick.id,
                reason=REASON_STARTER.format(category=category_display_name(category)),
                confidence=cfg.starter_confidence,
                strategy=StrategyTag.SIMILAR,
            ))

        return merge_recommendations([top_rated, starters], limit)

    def score_time_based(
        self,
        catalog: Optional[Iterable[Any]],
        time_of_day: TimeOfDay,
        limit: int = 5,
    ) -> List[Recommendation]:
        """Top-rated sessions in categories suited to ``time_of_day``."""
        if limit <= 0:
            return []
        categories = TIME_CATEGORIES.get(time_of_day, DEFAULT_TIME_CATEGORIES)
        matches = _by_rating(c for c in coerce_catalog(catalog) if c.category in categories)
        reason = TIME_REASONS.get(time_of_day, DEFAULT_TIME_REASON)
        return [
            Recommendation(
                content_id=c.id,
                reason=reason,
                confidence=self.config.time_based_confidence,
                strategy=StrategyTag.TIME_BASED,
            )
            for c in matches[:limit]
        ]

    def score_courses(
        self,
        profile: Any,
        courses: Optional[Iterable[Any]],
        limit: int = 5,
    ) -> List[CourseRecommendation]:
        """Rank courses by category and difficulty match."""
        if limit <= 0:
            return []
        try:
            prefs = coerce_profile(profile)
        except InvalidProfileError as exc:
            logger.warning("Invalid preference profile, using defaults", error=str(exc))
            prefs = UserPreferenceProfile()

        cfg = self.config
        recs: List[CourseRecommendation] = []
        for course in coerce_courses(courses):
            score = cfg.course_base
            if course.category in prefs.preferred_categories:
                score += cfg.course_category_match
            if course.difficulty in prefs.preferred_difficulties:
                score += cfg.course_difficulty_match
            recs.append(CourseRecommendation(
                course_id=course.id,
                reason=self._course_reason(course, prefs),
                confidence=score,
            ))
        recs.sort(key=lambda r: r.confidence, reverse=True)
        return recs[:limit]

    @staticmethod
    def _course_reason(course: CourseProfile, prefs: UserPreferenceProfile) -> str:
        if course.category in prefs.preferred_categories:
            return REASON_COURSE_CATEGORY.format(category=category_display_name(course.category))
        if course.difficulty in prefs.preferred_difficulties:
            return REASON_COURSE_DIFFICULTY.format(difficulty=course.difficulty.value)
        return REASON_COURSE_DEFAULT

    def explain_item(self, item: ContentProfile, profile: UserPreferenceProfile) -> Dict[str, Any]:
        """
        Return detailed breakdown of scoring for debugging / admin UI.
        """
        cfg = self.config
        return {
            "trending": round(trending_score(item, cfg), 4),
            "similarity": round(similarity_score(item, profile, cfg), 4),
            "category_match": item.category in profile.preferred_categories,
            "difficulty_match": item.difficulty in profile.preferred_difficulties,
            "duration_match": item.duration_minutes in profile.preferred_durations,
            "instructor_match": bool(
                item.instructor_id and item.instructor_id in profile.preferred_instructors
            ),
            "progression_target": getattr(
                next_difficulty(profile.preferred_difficulties), "value", None
            ),
        }


# ── Module-level entry points ────────────────────────────────────

_default_scorer = RecommendationScorer()


def score_recommendations(
    profile: Any,
    catalog: Optional[Iterable[Any]],
    exclude_ids: Optional[Iterable[str]] = None,
    limit: int = 10,
    time_of_day: Optional[TimeOfDay] = None,
) -> List[Recommendation]:
    return _default_scorer.score(profile, catalog, exclude_ids, limit, time_of_day)


def score_new_user_recommendations(
    catalog: Optional[Iterable[Any]],
    limit: int = 10,
) -> List[Recommendation]:
    return _default_scorer.score_new_user(catalog, limit)


def score_time_based_recommendations(
    catalog: Optional[Iterable[Any]],
    time_of_day: TimeOfDay,
    limit: int = 5,
) -> List[Recommendation]:
    return _default_scorer.score_time_based(catalog, time_of_day, limit)


def score_course_recommendations(
    profile: Any,
    courses: Optional[Iterable[Any]],
    limit: int = 5,
) -> List[CourseRecommendation]:
    return _default_scorer.score_courses(profile, courses, limit)
