"""
Progressive personalization -- which onboarding questions to ask, and when.

Questions are layered so a new user answers at most three essential
questions before their first session.  Culturally sensitive questions
wait until the user has seen value (a completed session); behavioral and
advanced ones are collected during later use.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

MAX_QUESTIONS_BEFORE_VALUE = 3


class PersonalizationLayer(str, Enum):
    ESSENTIAL = "essential"
    CULTURAL = "cultural"
    BEHAVIORAL = "behavioral"
    ADVANCED = "advanced"


class CollectionTiming(str, Enum):
    IMMEDIATE = "immediate"
    AFTER_VALUE = "after-value"
    PROGRESSIVE = "progressive"
    OPTIONAL = "optional"


@dataclass(frozen=True)
class PersonalizationQuestion:
    id: str
    layer: PersonalizationLayer
    timing: CollectionTiming
    question: str
    impact: str                        # "high", "medium", "low"
    cultural_sensitivity: str          # "none", "low", "medium", "high"
    options: Tuple[str, ...]
    skip_allowed: bool = True


QUESTION_CATALOG: Tuple[PersonalizationQuestion, ...] = (
    PersonalizationQuestion(
        id="goal",
        layer=PersonalizationLayer.ESSENTIAL,
        timing=CollectionTiming.IMMEDIATE,
        question="Apa tujuan utama kamu bermeditasi?",
        impact="high",
        cultural_sensitivity="none",
        options=(
            "Mengurangi stres dan kecemasan",
            "Meningkatkan fokus dan konsentrasi",
            "Tidur lebih nyenyak",
            "Mengeksplorasi mindfulness",
            "Mendekatkan diri pada Tuhan",
            "Mengatur emosi lebih baik",
        ),
        skip_allowed=False,  # drives content recommendation
    ),
    PersonalizationQuestion(
        id="experience",
        layer=PersonalizationLayer.ESSENTIAL,
        timing=CollectionTiming.IMMEDIATE,
        question="Seberapa berpengalaman kamu dengan meditasi?",
        impact="high",
        cultural_sensitivity="none",
        options=(
            "Baru pertama kali (pemula total)",
            "Pernah coba beberapa kali",
            "Sudah praktik secara rutin",
            "Berpengalaman (>1 tahun)",
            "Sangat berpengalaman (mengajar)",
        ),
    ),
    PersonalizationQuestion(
        id="time-availability",
        layer=PersonalizationLayer.ESSENTIAL,
        timing=CollectionTiming.IMMEDIATE,
        question="Berapa lama waktu yang biasanya kamu punya untuk meditasi?",
        impact="high",
        cultural_sensitivity="none",
        options=(
            "3-5 menit (cepat)",
            "5-10 menit (standar)",
            "10-20 menit (nyaman)",
            "20+ menit (mendalam)",
            "Bervariasi setiap hari",
        ),
    ),
    PersonalizationQuestion(
        id="spiritual-background",
        layer=PersonalizationLayer.CULTURAL,
        timing=CollectionTiming.AFTER_VALUE,
        question="Tradisi spiritual mana yang paling dekat dengan kamu?",
        impact="high",
        cultural_sensitivity="high",
        options=(
            "Islam - saya ingin integrasi dengan sholat dan dzikir",
            "Hindu - saya tertarik yoga dan filosofi Vedanta",
            "Buddha - saya ingin memperdalam vipassana dan dharma",
            "Kristen - saya suka meditasi kontemplatif",
            "Kejawen - saya menghargai kebijaksanaan leluhur",
            "Spiritual umum - saya terbuka pada semua ajaran",
            "Belum yakin - saya masih mengeksplorasi",
        ),
    ),
    PersonalizationQuestion(
        id="regional-culture",
        layer=PersonalizationLayer.CULTURAL,
        timing=CollectionTiming.AFTER_VALUE,
        question="Dari daerah mana kamu berasal? (untuk menyesuaikan konten lokal)",
        impact="medium",
        cultural_sensitivity="medium",
        options=(
            "Jakarta & sekitarnya (Betawi)",
            "Bali (Hindu-Bali)",
            "Jawa Tengah (Kejawen)",
            "Jawa Timur",
            "Sumatra (Melayu/Batak)",
            "Kalimantan",
            "Sulawesi",
            "Nusa Tenggara",
            "Lainnya",
        ),
    ),
    PersonalizationQuestion(
        id="preferred-time",
        layer=PersonalizationLayer.BEHAVIORAL,
        timing=CollectionTiming.PROGRESSIVE,
        question="Kapan waktu terbaik kamu untuk bermeditasi?",
        impact="medium",
        cultural_sensitivity="low",
        options=(
            "Pagi hari (04:00-08:00) - setelah subuh/saat fresh",
            "Siang hari (08:00-15:00) - break dari aktivitas",
            "Sore hari (15:00-18:00) - sebelum maghrib/pulang kerja",
            "Malam hari (18:00-22:00) - setelah sholat maghrib/isya",
            "Larut malam (22:00+) - sebelum tidur",
            "Waktu fleksibel - sesuai kebutuhan",
        ),
    ),
    PersonalizationQuestion(
        id="family-context",
        layer=PersonalizationLayer.BEHAVIORAL,
        timing=CollectionTiming.PROGRESSIVE,
        question="Bagaimana situasi lingkungan saat kamu meditasi?",
        impact="medium",
        cultural_sensitivity="medium",
        options=(
            "Ruang pribadi - saya punya tempat tenang",
            "Ruang keluarga - perlu menyesuaikan dengan aktivitas rumah",
            "Keluarga mendukung - mereka ikut praktik mindfulness",
            "Tempat kerja/publik - butuh teknik yang tidak mencolok",
            "Pakai headphone - lingkungan bising tapi bisa adaptasi",
        ),
    ),
    PersonalizationQuestion(
        id="mood-patterns",
        layer=PersonalizationLayer.ADVANCED,
        timing=CollectionTiming.OPTIONAL,
        question="Kapan kamu biasanya merasa paling stres atau cemas?",
        impact="low",
        cultural_sensitivity="low",
        options=(
            "Pagi hari - sebelum mulai aktivitas",
            "Siang hari - saat puncak pekerjaan",
            "Sore hari - pulang kerja/macet",
            "Malam hari - urusan keluarga",
            "Sebelum tidur - pikiran tidak bisa tenang",
            "Tidak ada pola khusus",
        ),
    ),
)

TRUST_BUILDERS: Tuple[str, ...] = (
    "Pertanyaan hanya untuk membuat pengalaman lebih personal",
    "Data kamu aman dan tidak akan dibagikan",
    "Kamu bisa skip pertanyaan yang tidak nyaman",
    "Semakin personal, semakin efektif meditasinya",
)

SKIP_PHRASES: Tuple[str, ...] = (
    "Nanti saja - kamu bisa setting kapan saja",
    "Skip dulu - fokus ke meditasi",
    "Opsional - tidak wajib dijawab",
    "Bisa diatur nanti di pengaturan",
)


@dataclass(frozen=True)
class PersonalizationStrategy:
    total_questions: int
    layer_distribution: Dict[PersonalizationLayer, int]
    timing_strategy: Dict[CollectionTiming, Tuple[PersonalizationQuestion, ...]]
    max_questions_before_value: int = MAX_QUESTIONS_BEFORE_VALUE
    trust_builders: Tuple[str, ...] = field(default=TRUST_BUILDERS)
    skip_phrases: Tuple[str, ...] = field(default=SKIP_PHRASES)


def build_strategy(
    questions: Sequence[PersonalizationQuestion] = QUESTION_CATALOG,
) -> PersonalizationStrategy:
    """Summarize ``questions`` by layer and collection timing."""
    return PersonalizationStrategy(
        total_questions=len(questions),
        layer_distribution={
            layer: sum(1 for q in questions if q.layer == layer)
            for layer in PersonalizationLayer
        },
        timing_strategy={
            timing: tuple(q for q in questions if q.timing == timing)
            for timing in CollectionTiming
        },
    )


def due_questions(
    answered_ids: Iterable[str],
    completed_sessions: int,
    questions: Sequence[PersonalizationQuestion] = QUESTION_CATALOG,
    thresholds: Optional[Dict[CollectionTiming, int]] = None,
) -> List[PersonalizationQuestion]:
    """
    Questions to ask now, in catalog order.

    Unanswered immediate questions are always due (at most
    ``MAX_QUESTIONS_BEFORE_VALUE``); the other timings unlock once the
    user has completed enough sessions.
    """
    if thresholds is None:
        from config.settings import get_settings
        settings = get_settings()
        thresholds = {
            CollectionTiming.AFTER_VALUE: settings.after_value_min_sessions,
            CollectionTiming.PROGRESSIVE: settings.progressive_min_sessions,
            CollectionTiming.OPTIONAL: settings.optional_min_sessions,
        }

    answered = set(answered_ids)
    due: List[PersonalizationQuestion] = []
    immediate_count = 0
    for q in questions:
        if q.id in answered:
            continue
        if q.timing == CollectionTiming.IMMEDIATE:
            # Cap counts unanswered questions only
            if immediate_count >= MAX_QUESTIONS_BEFORE_VALUE:
                continue
            immediate_count += 1
            due.append(q)
        elif completed_sessions >= thresholds.get(q.timing, 0):
            due.append(q)
    return due
