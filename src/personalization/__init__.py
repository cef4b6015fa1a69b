"""
Cultural Personalization Module.

Rule-based adaptation of UI, content and behavior to a user's cultural
and real-time context.

Quick start::

    from personalization import (
        AdaptationContext, AdaptationEvaluator, AdaptationChangeNotifier,
        CulturalProfile, SpiritualTradition, time_of_day_for_hour,
    )

    ctx = AdaptationContext(
        time_of_day=time_of_day_for_hour(7),
        cultural=CulturalProfile(spiritual_tradition=SpiritualTradition.ISLAM),
    )
    result = AdaptationEvaluator().evaluate(ctx)
    notifier.apply(result)
"""

from personalization.context import (
    AdaptationContext,
    CulturalProfile,
    CulturalRegion,
    FamilyContext,
    MoodType,
    RealTimeContext,
    SessionHistory,
    SocialContext,
    SpiritualTradition,
    TimeOfDay,
    time_of_day_for_hour,
)
from personalization.rules import (
    INDONESIAN_ADAPTATION_RULES,
    AdaptationPatch,
    AdaptationRule,
    DerivedValue,
    LiteralValue,
    validate_catalog,
)
from personalization.evaluator import (
    AdaptationEvaluator,
    AdaptationResult,
    CombinedAdaptation,
    RuleEvaluationError,
    evaluate_adaptations,
)
from personalization.notifier import (
    AdaptationChangeEvent,
    AdaptationChangeNotifier,
    ChangeDetection,
    detect_change,
)
from personalization.questions import (
    QUESTION_CATALOG,
    PersonalizationQuestion,
    PersonalizationStrategy,
    build_strategy,
    due_questions,
)

__all__ = [
    # Context
    "AdaptationContext",
    "CulturalProfile",
    "CulturalRegion",
    "FamilyContext",
    "MoodType",
    "RealTimeContext",
    "SessionHistory",
    "SocialContext",
    "SpiritualTradition",
    "TimeOfDay",
    "time_of_day_for_hour",
    # Rules
    "INDONESIAN_ADAPTATION_RULES",
    "AdaptationPatch",
    "AdaptationRule",
    "DerivedValue",
    "LiteralValue",
    "validate_catalog",
    # Evaluation
    "AdaptationEvaluator",
    "AdaptationResult",
    "CombinedAdaptation",
    "RuleEvaluationError",
    "evaluate_adaptations",
    # Change tracking
    "AdaptationChangeEvent",
    "AdaptationChangeNotifier",
    "ChangeDetection",
    "detect_change",
    # Onboarding
    "QUESTION_CATALOG",
    "PersonalizationQuestion",
    "PersonalizationStrategy",
    "build_strategy",
    "due_questions",
]
