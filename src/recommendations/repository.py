"""
Content repository backed by Supabase.

Reads session and course facts and per-user completion records, and
maps rows onto the recommendation models.  Scoring code never imports
this module; the service layer passes resolved lists in.

Tables (names come from settings):
- meditation_sessions: one row per session
- courses: one row per course
- user_progress: one row per (user, session) with completion state
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from supabase import Client

from core.logging import get_logger
from recommendations.models import (
    CompletionRecord,
    ContentProfile,
    CourseProfile,
    Difficulty,
    coerce_catalog,
    coerce_courses,
)

logger = get_logger(__name__)

# The database stores difficulty in English
_DB_DIFFICULTY = {
    Difficulty.PEMULA: "beginner",
    Difficulty.MENENGAH: "intermediate",
    Difficulty.LANJUTAN: "advanced",
}

SESSION_COLUMNS = (
    "id, title, category, duration_minutes, difficulty_level, "
    "instructor_name, completion_count, average_rating"
)
COURSE_COLUMNS = "id, title, category, level, enrollment_count, average_rating"
PROGRESS_COLUMNS = "user_id, content_id, completed, completed_at, rating"


class ContentRepositoryError(Exception):
    """Raised when the content store cannot be read or written."""
    pass


def session_row_to_profile(row: Dict[str, Any]) -> Dict[str, Any]:
    """Map a meditation_sessions row onto ContentProfile fields."""
    return {
        "id": row.get("id"),
        "title": row.get("title"),
        "category": row.get("category"),
        "difficulty": row.get("difficulty_level") or row.get("difficulty"),
        "duration_minutes": row.get("duration_minutes"),
        "instructor_id": row.get("instructor_name") or row.get("instructor_id"),
        "completion_count": row.get("completion_count") or 0,
        "average_rating": row.get("average_rating") or 0.0,
    }


def course_row_to_profile(row: Dict[str, Any]) -> Dict[str, Any]:
    """Map a courses row onto CourseProfile fields."""
    return {
        "id": row.get("id"),
        "title": row.get("title"),
        "category": row.get("category"),
        "difficulty": row.get("level") or row.get("difficulty"),
        "enrollment_count": row.get("enrollment_count") or 0,
        "average_rating": row.get("average_rating") or 0.0,
    }


class ContentRepository:
    """
    Thin read/write layer over the content tables.

    All methods raise ContentRepositoryError on database failure;
    malformed rows are skipped and logged.
    """

    def __init__(self, client: Optional[Client] = None, settings=None):
        if client is None:
            from config.database import get_supabase_client
            client = get_supabase_client()
        if settings is None:
            from config.settings import get_settings
            settings = get_settings()
        self._supabase = client
        self._sessions_table = settings.sessions_table
        self._courses_table = settings.courses_table
        self._progress_table = settings.user_progress_table

    # =========================================================================
    # Sessions
    # =========================================================================

    def fetch_content_profiles(
        self,
        category: Optional[str] = None,
        difficulty: Optional[Any] = None,
        limit: Optional[int] = None,
    ) -> List[ContentProfile]:
        """Fetch sessions, optionally filtered by category and difficulty."""
        try:
            query = self._supabase.table(self._sessions_table).select(SESSION_COLUMNS)
            if category:
                query = query.eq("category", category.lower().strip())
            if difficulty:
                query = query.eq("difficulty_level", _DB_DIFFICULTY[Difficulty.parse(difficulty)])
            if limit:
                query = query.limit(limit)
            result = query.execute()
        except Exception as e:
            logger.error("Failed to fetch content profiles", category=category, error=str(e))
            raise ContentRepositoryError(f"Failed to fetch content profiles: {e}") from e

        rows = result.data or []
        return coerce_catalog(session_row_to_profile(row) for row in rows)

    def fetch_content_by_ids(self, content_ids: Sequence[str]) -> List[ContentProfile]:
        """Fetch sessions by id, returned in the order of ``content_ids``."""
        if not content_ids:
            return []
        try:
            result = (
                self._supabase.table(self._sessions_table)
                .select(SESSION_COLUMNS)
                .in_("id", list(content_ids))
                .execute()
            )
        except Exception as e:
            logger.error("Failed to fetch content by id", count=len(content_ids), error=str(e))
            raise ContentRepositoryError(f"Failed to fetch content by id: {e}") from e

        by_id = {p.id: p for p in coerce_catalog(session_row_to_profile(r) for r in result.data or [])}
        return [by_id[cid] for cid in content_ids if cid in by_id]

    # =========================================================================
    # Courses
    # =========================================================================

    def fetch_course_profiles(self) -> List[CourseProfile]:
        try:
            result = (
                self._supabase.table(self._courses_table)
                .select(COURSE_COLUMNS)
                .eq("is_active", True)
                .execute()
            )
        except Exception as e:
            logger.error("Failed to fetch courses", error=str(e))
            raise ContentRepositoryError(f"Failed to fetch courses: {e}") from e

        return coerce_courses(course_row_to_profile(row) for row in result.data or [])

    # =========================================================================
    # Progress
    # =========================================================================

    def fetch_completion_records(self, user_id: str) -> List[CompletionRecord]:
        """A user's completed sessions, most recent first."""
        try:
            result = (
                self._supabase.table(self._progress_table)
                .select(PROGRESS_COLUMNS)
                .eq("user_id", user_id)
                .eq("completed", True)
                .order("completed_at", desc=True)
                .execute()
            )
        except Exception as e:
            logger.error("Failed to fetch completion records", user_id=user_id, error=str(e))
            raise ContentRepositoryError(f"Failed to fetch completion records: {e}") from e

        records: List[CompletionRecord] = []
        for row in result.data or []:
            try:
                records.append(CompletionRecord.model_validate(row))
            except ValueError as e:
                logger.warning("Skipping malformed progress row", user_id=user_id, error=str(e))
        return records

    def fetch_completed_content(
        self,
        user_id: str,
        records: Optional[List[CompletionRecord]] = None,
    ) -> List[ContentProfile]:
        """
        Sessions the user has completed, most recent first.

        Pass ``records`` when they have already been fetched.
        """
        if records is None:
            records = self.fetch_completion_records(user_id)
        content_ids: List[str] = []
        for record in records:
            if record.content_id not in content_ids:
                content_ids.append(record.content_id)
        return self.fetch_content_by_ids(content_ids)

    def record_completion(
        self,
        user_id: str,
        content_id: str,
        rating: Optional[float] = None,
    ) -> CompletionRecord:
        """Mark a session completed for a user (upsert on user + content)."""
        record = CompletionRecord(
            user_id=user_id,
            content_id=content_id,
            completed=True,
            completed_at=datetime.now(timezone.utc).isoformat(),
            rating=rating,
        )
        try:
            self._supabase.table(self._progress_table).upsert(
                record.model_dump(),
                on_conflict="user_id,content_id",
            ).execute()
        except Exception as e:
            logger.error(
                "Failed to record completion",
                user_id=user_id,
                content_id=content_id,
                error=str(e),
            )
            raise ContentRepositoryError(f"Failed to record completion: {e}") from e

        logger.info("Recorded completion", user_id=user_id, content_id=content_id)
        return record
