"""
Recommendation Service.

Resolves a user's history and the catalog through the repository,
aggregates preferences and hands everything to the scorer.  Database
failures degrade to an empty list so callers can always render.
"""

from typing import List, Optional
from zoneinfo import ZoneInfo

from core.logging import get_logger, log_context
from personalization.context import TimeOfDay
from recommendations.aggregator import build_preference_profile
from recommendations.models import CourseRecommendation, Recommendation
from recommendations.repository import ContentRepository, ContentRepositoryError
from recommendations.scorer import RecommendationScorer

logger = get_logger(__name__)


class RecommendationService:
    """
    Main recommendation service.

    Users without completions get the cold-start list; everyone else
    gets the four-strategy blend with completed sessions excluded.
    """

    def __init__(
        self,
        repository: Optional[ContentRepository] = None,
        scorer: Optional[RecommendationScorer] = None,
        settings=None,
    ):
        if settings is None:
            from config.settings import get_settings
            settings = get_settings()
        self.repository = repository if repository is not None else ContentRepository()
        self.scorer = scorer or RecommendationScorer()
        self.settings = settings

    # =========================================================
    # Sessions
    # =========================================================

    def get_recommendations(
        self,
        user_id: str,
        time_of_day: Optional[TimeOfDay] = None,
        limit: Optional[int] = None,
    ) -> List[Recommendation]:
        if limit is None:
            limit = self.settings.default_recommendation_limit
        with log_context(user_id=user_id):
            return self._recommend(user_id, time_of_day, limit)

    def _recommend(
        self,
        user_id: str,
        time_of_day: Optional[TimeOfDay],
        limit: int,
    ) -> List[Recommendation]:
        try:
            records = self.repository.fetch_completion_records(user_id)
            catalog = self.repository.fetch_content_profiles()
            if not records:
                logger.info("No completions, using cold-start recommendations")
                return self.scorer.score_new_user(catalog, limit)
            completed = self.repository.fetch_completed_content(user_id, records)
        except ContentRepositoryError as e:
            logger.warning("Recommendations unavailable", error=str(e))
            return []

        profile = build_preference_profile(
            completed,
            catalog_size=len(catalog),
            completed_at=[r.completed_at for r in records if r.completed_at],
            tz=ZoneInfo(self.settings.user_timezone),
        )
        recs = self.scorer.score(
            profile,
            catalog,
            exclude_ids={r.content_id for r in records},
            limit=limit,
            time_of_day=time_of_day,
        )
        logger.info(
            "Generated recommendations",
            count=len(recs),
            completed=len(records),
        )
        return recs

    def get_new_user_recommendations(self, limit: Optional[int] = None) -> List[Recommendation]:
        if limit is None:
            limit = self.settings.default_recommendation_limit
        try:
            catalog = self.repository.fetch_content_profiles()
        except ContentRepositoryError as e:
            logger.warning("New-user recommendations unavailable", error=str(e))
            return []
        return self.scorer.score_new_user(catalog, limit)

    def get_time_based_recommendations(
        self,
        time_of_day: TimeOfDay,
        limit: Optional[int] = None,
    ) -> List[Recommendation]:
        if limit is None:
            limit = self.settings.time_based_recommendation_limit
        try:
            catalog = self.repository.fetch_content_profiles()
        except ContentRepositoryError as e:
            logger.warning(
                "Time-based recommendations unavailable",
                time_of_day=time_of_day.value,
                error=str(e),
            )
            return []
        return self.scorer.score_time_based(catalog, time_of_day, limit)

    # =========================================================
    # Courses
    # =========================================================

    def get_course_recommendations(
        self,
        user_id: str,
        limit: Optional[int] = None,
    ) -> List[CourseRecommendation]:
        if limit is None:
            limit = self.settings.course_recommendation_limit
        try:
            completed = self.repository.fetch_completed_content(user_id)
            courses = self.repository.fetch_course_profiles()
        except ContentRepositoryError as e:
            logger.warning("Course recommendations unavailable", user_id=user_id, error=str(e))
            return []

        # Catalog size only feeds completion_rate, which courses ignore
        profile = build_preference_profile(completed, catalog_size=0)
        return self.scorer.score_courses(profile, courses, limit)
