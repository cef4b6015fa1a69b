"""
Tests for progressive onboarding questions.
"""

from dataclasses import replace

from personalization.questions import (
    MAX_QUESTIONS_BEFORE_VALUE,
    QUESTION_CATALOG,
    CollectionTiming,
    PersonalizationLayer,
    build_strategy,
    due_questions,
)

THRESHOLDS = {
    CollectionTiming.AFTER_VALUE: 1,
    CollectionTiming.PROGRESSIVE: 3,
    CollectionTiming.OPTIONAL: 10,
}


def _ids(questions):
    return [q.id for q in questions]


class TestBuildStrategy:

    def test_counts_by_layer(self):
        strategy = build_strategy()
        assert strategy.total_questions == len(QUESTION_CATALOG)
        assert strategy.layer_distribution[PersonalizationLayer.ESSENTIAL] == 3
        assert strategy.layer_distribution[PersonalizationLayer.CULTURAL] == 2
        assert sum(strategy.layer_distribution.values()) == len(QUESTION_CATALOG)

    def test_groups_by_timing(self):
        strategy = build_strategy()
        immediate = strategy.timing_strategy[CollectionTiming.IMMEDIATE]
        assert _ids(immediate) == ["goal", "experience", "time-availability"]
        assert strategy.max_questions_before_value == MAX_QUESTIONS_BEFORE_VALUE

    def test_goal_cannot_be_skipped(self):
        goal = next(q for q in QUESTION_CATALOG if q.id == "goal")
        assert goal.skip_allowed is False


class TestDueQuestions:

    def test_new_user_gets_only_essentials(self):
        due = due_questions([], completed_sessions=0, thresholds=THRESHOLDS)
        assert _ids(due) == ["goal", "experience", "time-availability"]

    def test_cultural_questions_after_first_session(self):
        answered = ["goal", "experience", "time-availability"]
        due = due_questions(answered, completed_sessions=1, thresholds=THRESHOLDS)
        assert _ids(due) == ["spiritual-background", "regional-culture"]

    def test_all_timings_unlocked_for_regulars(self):
        due = due_questions([], completed_sessions=10, thresholds=THRESHOLDS)
        assert len(due) == len(QUESTION_CATALOG)

    def test_answered_questions_excluded(self):
        due = due_questions(["goal", "preferred-time"], completed_sessions=5, thresholds=THRESHOLDS)
        assert "goal" not in _ids(due)
        assert "preferred-time" not in _ids(due)
        assert "family-context" in _ids(due)
        assert "mood-patterns" not in _ids(due)

    def test_thresholds_default_to_settings(self):
        due = due_questions([], completed_sessions=0)
        assert _ids(due) == ["goal", "experience", "time-availability"]

    def test_immediate_cap_skips_answered_questions(self):
        extra = replace(QUESTION_CATALOG[0], id="body-awareness")
        questions = QUESTION_CATALOG[:3] + (extra,)
        assert MAX_QUESTIONS_BEFORE_VALUE == 3

        due = due_questions(["goal"], completed_sessions=0, questions=questions, thresholds=THRESHOLDS)

        assert _ids(due) == ["experience", "time-availability", "body-awareness"]

    def test_immediate_cap_still_applies(self):
        extras = tuple(replace(QUESTION_CATALOG[0], id=f"extra-{i}") for i in range(2))
        questions = QUESTION_CATALOG[:3] + extras

        due = due_questions([], completed_sessions=0, questions=questions, thresholds=THRESHOLDS)

        assert _ids(due) == ["goal", "experience", "time-availability"]
