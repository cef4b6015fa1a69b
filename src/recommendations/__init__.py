"""
Recommendations Module.

Scores meditation sessions and courses against a user's preference
profile.

Quick start::

    from recommendations import score_recommendations, score_new_user_recommendations

    recs = score_recommendations(profile, catalog, exclude_ids=completed, limit=10)
"""

from recommendations.models import (
    CompletionRecord,
    ContentProfile,
    CourseProfile,
    CourseRecommendation,
    Difficulty,
    InvalidProfileError,
    Recommendation,
    StrategyTag,
    UserPreferenceProfile,
)
from recommendations.scorer import (
    MoodStrategy,
    ProgressionStrategy,
    RecommendationScorer,
    RecommendationScoringConfig,
    ScoringContext,
    ScoringStrategy,
    SimilarityStrategy,
    TrendingStrategy,
    merge_recommendations,
    score_course_recommendations,
    score_new_user_recommendations,
    score_recommendations,
    score_time_based_recommendations,
)
from recommendations.aggregator import build_preference_profile

__all__ = [
    # Models
    "CompletionRecord",
    "ContentProfile",
    "CourseProfile",
    "CourseRecommendation",
    "Difficulty",
    "InvalidProfileError",
    "Recommendation",
    "StrategyTag",
    "UserPreferenceProfile",
    # Scoring
    "MoodStrategy",
    "ProgressionStrategy",
    "RecommendationScorer",
    "RecommendationScoringConfig",
    "ScoringContext",
    "ScoringStrategy",
    "SimilarityStrategy",
    "TrendingStrategy",
    "merge_recommendations",
    "score_course_recommendations",
    "score_new_user_recommendations",
    "score_recommendations",
    "score_time_based_recommendations",
    # Aggregation
    "build_preference_profile",
]
