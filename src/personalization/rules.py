"""
Cultural adaptation rule catalog.

Each rule pairs a pure predicate over :class:`AdaptationContext` with a
patch of output fields in three namespaces (``ui_changes``,
``content_changes``, ``behavior_changes``).  Patch leaves are a tagged
variant:

- :class:`LiteralValue` -- a fixed value (str, number, bool, tuple)
- :class:`DerivedValue` -- computed from the context when surfaced

Raw values passed to :class:`AdaptationPatch` are wrapped as literals, so
the catalog below reads as plain data.  Nested mappings
(``audio_preferences``, ``session_recommendations``...) are merged per
leaf by the evaluator.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, ClassVar, Dict, Iterable, Mapping, Sequence, Tuple, Union

from personalization.context import (
    AdaptationContext,
    CulturalRegion,
    FamilyContext,
    MoodType,
    SpiritualTradition,
    TimeOfDay,
)

NAMESPACES: Tuple[str, ...] = ("ui_changes", "content_changes", "behavior_changes")


@dataclass(frozen=True)
class LiteralValue:
    value: Any
    kind: ClassVar[str] = "literal"


@dataclass(frozen=True)
class DerivedValue:
    """Computed from the context; must return a primitive."""
    compute: Callable[[AdaptationContext], Any]
    kind: ClassVar[str] = "derived"


FieldSpec = Union[LiteralValue, DerivedValue, Mapping[str, "FieldSpec"]]


def _freeze(value: Any) -> Any:
    if isinstance(value, (LiteralValue, DerivedValue)):
        return value
    if isinstance(value, Mapping):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, list):
        value = tuple(value)
    return LiteralValue(value)


def _freeze_namespace(fields: Mapping[str, Any]) -> Mapping[str, FieldSpec]:
    return MappingProxyType({k: _freeze(v) for k, v in (fields or {}).items()})


@dataclass(frozen=True)
class AdaptationPatch:
    """Partial output a rule contributes when it matches."""
    ui_changes: Mapping[str, FieldSpec] = field(default_factory=dict)
    content_changes: Mapping[str, FieldSpec] = field(default_factory=dict)
    behavior_changes: Mapping[str, FieldSpec] = field(default_factory=dict)

    def __post_init__(self) -> None:
        for name in NAMESPACES:
            object.__setattr__(self, name, _freeze_namespace(getattr(self, name)))

    def namespace(self, name: str) -> Mapping[str, FieldSpec]:
        return getattr(self, name)


@dataclass(frozen=True)
class AdaptationRule:
    id: str
    priority: int
    condition: Callable[[AdaptationContext], bool]
    patch: AdaptationPatch
    description: str = ""


def validate_catalog(rules: Iterable[AdaptationRule]) -> Tuple[AdaptationRule, ...]:
    """Return ``rules`` as a tuple; raise ``ValueError`` on duplicate ids."""
    rules = tuple(rules)
    seen: Dict[str, int] = {}
    for index, rule in enumerate(rules):
        if rule.id in seen:
            raise ValueError(
                f"duplicate adaptation rule id {rule.id!r} at positions {seen[rule.id]} and {index}"
            )
        seen[rule.id] = index
    return rules


# ── Conditions ────────────────────────────────────────────────────

def _is_islamic(ctx: AdaptationContext) -> bool:
    return ctx.tradition == SpiritualTradition.ISLAM


def _is_javanese(ctx: AdaptationContext) -> bool:
    return ctx.in_javanese_region() or ctx.tradition == SpiritualTradition.JAVANESE


def _is_balinese_hindu(ctx: AdaptationContext) -> bool:
    return ctx.region == CulturalRegion.BALI or ctx.tradition == SpiritualTradition.HINDU


def _is_energetic_morning(ctx: AdaptationContext) -> bool:
    return ctx.time_of_day == TimeOfDay.MORNING and ctx.mood != MoodType.SAD


def _is_wind_down(ctx: AdaptationContext) -> bool:
    return ctx.time_of_day in (TimeOfDay.EVENING, TimeOfDay.NIGHT)


def _is_stressed(ctx: AdaptationContext) -> bool:
    return ctx.mood in (MoodType.ANXIOUS, MoodType.SAD)


def _is_family_supportive(ctx: AdaptationContext) -> bool:
    return ctx.family_context == FamilyContext.FAMILY_SUPPORTIVE


def _has_limited_privacy(ctx: AdaptationContext) -> bool:
    return ctx.family_context == FamilyContext.LIMITED_PRIVACY


def _morning_greeting(ctx: AdaptationContext) -> str:
    if ctx.tradition == SpiritualTradition.ISLAM:
        opener = "Assalamu'alaikum"
    elif ctx.region == CulturalRegion.BALI:
        opener = "Rahajeng semeng"
    elif ctx.in_javanese_region():
        opener = "Sugeng enjing"
    else:
        opener = "Selamat pagi"
    return f"{opener}! Semangat memulai hari dengan hati yang tenang"


# ── Catalog ───────────────────────────────────────────────────────

INDONESIAN_ADAPTATION_RULES: Sequence[AdaptationRule] = validate_catalog([
    AdaptationRule(
        id="islamic-prayer-integration",
        priority=10,
        condition=_is_islamic,
        patch=AdaptationPatch(
            ui_changes={"color_scheme": "warm", "icon_set": "islamic", "typography": "formal"},
            content_changes={
                "language": "formal-id",
                "wisdom_sources": ["Al-Quran", "Hadits", "Kearifan Ulama Nusantara"],
                "greeting": "Assalamu'alaikum, semoga berkah dalam setiap langkah",
                "motivational_messages": [
                    "Setiap dzikir adalah kedekatan dengan Allah SWT",
                    "Ketenangan jiwa adalah anugerah terbesar",
                    "Sabar dan syukur adalah kunci kedamaian",
                ],
                "audio_preferences": {
                    "voice_gender": "male",
                    "background_sounds": "minimal",
                    "guidance_style": "gentle",
                },
            },
            behavior_changes={
                # Short sessions that fit between prayers
                "session_recommendations": {
                    "preferred_duration": 5,
                    "suggested_times": ["05:30", "13:00", "18:30"],
                    "techniques": ["dzikr-meditation", "gratitude-reflection", "breath-awareness"],
                },
                "reminder_settings": {
                    "frequency": "medium",
                    "timing": ["after-fajr", "after-dhuhr", "after-maghrib"],
                    "style": "cultural",
                },
            },
        ),
        description="Islamic users get a prayer-integrated experience",
    ),
    AdaptationRule(
        id="javanese-wisdom-integration",
        priority=8,
        condition=_is_javanese,
        patch=AdaptationPatch(
            ui_changes={
                "color_scheme": "neutral",
                "icon_set": "javanese",
                "typography": "traditional",
                "layout_density": "comfortable",
            },
            content_changes={
                "language": "formal-id",
                "wisdom_sources": ["Serat Centhini", "Primbon", "Kearifan Leluhur Jawa"],
                "greeting": "Sugeng rawuh, semoga panggah lan tentrem",
                "motivational_messages": [
                    "Manunggaling kawulo Gusti - penyatuan diri dengan Yang Maha Kuasa",
                    "Ngudi kasunyatan - mencari kebenaran sejati",
                    "Sepi ing pamrih, rame ing gawe - tanpa pamrih namun aktif berbuat",
                ],
            },
            behavior_changes={
                "session_recommendations": {
                    "preferred_duration": 10,
                    "suggested_times": ["04:00", "18:00", "21:00"],
                    "techniques": ["contemplative-meditation", "ancestor-wisdom", "nature-connection"],
                },
            },
        ),
        description="Javanese users get traditional wisdom and respectful language",
    ),
    AdaptationRule(
        id="balinese-hindu-integration",
        priority=8,
        condition=_is_balinese_hindu,
        patch=AdaptationPatch(
            ui_changes={"color_scheme": "warm", "icon_set": "hindu", "typography": "traditional"},
            content_changes={
                "language": "formal-id",
                "wisdom_sources": ["Bhagavad Gita", "Upanishad", "Kearifan Bali"],
                "greeting": "Om Swastyastu, semoga selalu dalam keharmonisan",
                "motivational_messages": [
                    "Tri Hita Karana - harmoni dengan diri, sesama, dan alam",
                    "Yoga adalah penyatuan jiwa individual dengan jiwa universal",
                    "Dharma adalah jalan kebenaran dan kebajikan",
                ],
            },
            behavior_changes={
                "session_recommendations": {
                    "preferred_duration": 12,
                    "suggested_times": ["05:00", "17:00", "20:00"],
                    "techniques": ["pranayama-breathing", "mantra-meditation", "yoga-nidra"],
                },
            },
        ),
        description="Balinese Hindu users get dharma-based content and yoga integration",
    ),
    AdaptationRule(
        id="morning-energy-adaptation",
        priority=6,
        condition=_is_energetic_morning,
        patch=AdaptationPatch(
            ui_changes={"color_scheme": "warm", "animations": "full"},
            content_changes={
                "greeting": DerivedValue(_morning_greeting),
                "meditation_styles": ["energizing-breath", "morning-gratitude", "intention-setting"],
            },
            behavior_changes={
                "session_recommendations": {
                    "preferred_duration": 8,
                    "techniques": ["morning-energy", "gratitude-practice", "goal-visualization"],
                },
            },
        ),
        description="Morning sessions focus on energy and intention setting",
    ),
    AdaptationRule(
        id="evening-relaxation-adaptation",
        priority=6,
        condition=_is_wind_down,
        patch=AdaptationPatch(
            ui_changes={"color_scheme": "cool", "animations": "reduced"},
            content_changes={
                "greeting": (
                    "Saatnya melepaskan beban hari ini dan mempersiapkan "
                    "istirahat yang berkualitas"
                ),
                "meditation_styles": ["body-scan-relaxation", "gratitude-reflection", "sleep-preparation"],
            },
            behavior_changes={
                "session_recommendations": {
                    "preferred_duration": 12,
                    "techniques": ["progressive-relaxation", "bedtime-meditation", "reflection"],
                },
            },
        ),
        description="Evening sessions focus on relaxation and reflection",
    ),
    AdaptationRule(
        id="stress-relief-adaptation",
        priority=7,
        condition=_is_stressed,
        patch=AdaptationPatch(
            ui_changes={"color_scheme": "cool", "animations": "reduced", "layout_density": "comfortable"},
            content_changes={
                "greeting": "Tidak apa-apa merasa berat. Mari kita temukan ketenangan bersama.",
                "meditation_styles": ["anxiety-relief", "emotional-healing", "self-compassion"],
                "motivational_messages": [
                    "Setiap napas adalah kesempatan untuk memulai lagi",
                    "Kamu lebih kuat dari yang kamu kira",
                    "Ini akan berlalu, seperti awan di langit",
                ],
            },
            behavior_changes={
                "session_recommendations": {
                    "preferred_duration": 6,
                    "techniques": ["gentle-breathing", "body-awareness", "grounding-techniques"],
                },
                "reminder_settings": {"frequency": "low", "style": "gentle"},
            },
        ),
        description="Stressed users get a gentle, supportive experience",
    ),
    AdaptationRule(
        id="family-supportive-adaptation",
        priority=5,
        condition=_is_family_supportive,
        patch=AdaptationPatch(
            ui_changes={"layout_density": "spacious"},
            content_changes={
                "motivational_messages": [
                    "Meditasi bersama keluarga memperkuat ikatan",
                    "Contoh ketenangan dimulai dari diri sendiri",
                    "Berbagi kedamaian adalah berbagi kasih",
                ],
            },
            behavior_changes={
                "social_features": {
                    "community_visibility": True,
                    "sharing_preferences": ["family-progress", "group-sessions"],
                    "family_integration": True,
                },
            },
        ),
        description="Family-supportive users get community and sharing features",
    ),
    AdaptationRule(
        id="limited-privacy-adaptation",
        priority=7,
        condition=_has_limited_privacy,
        patch=AdaptationPatch(
            ui_changes={"animations": "none", "layout_density": "compact"},
            content_changes={
                "audio_preferences": {
                    "voice_gender": "neutral",
                    "background_sounds": "none",
                    "guidance_style": "questioning",
                },
            },
            behavior_changes={
                "session_recommendations": {
                    "preferred_duration": 3,
                    "techniques": ["silent-breathing", "micro-meditation", "mindful-moments"],
                },
                "social_features": {
                    "community_visibility": False,
                    "sharing_preferences": [],
                    "family_integration": False,
                },
            },
        ),
        description="Limited privacy users get discreet, silent meditation options",
    ),
])
