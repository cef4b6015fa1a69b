"""
Category tables and reason copy for the recommendation scorer.

Category slugs match the ``category`` column of the content store.
"""

from typing import Dict, Tuple

from personalization.context import TimeOfDay

CATEGORY_DISPLAY_NAMES: Dict[str, str] = {
    "jeda-pagi": "Jeda Pagi",
    "napas-hiruk": "Napas di Tengah Hiruk",
    "pulang-diri": "Pulang ke Diri",
    "tidur-dalam": "Tidur yang Dalam",
    "fokus-kerja": "Fokus Kerja",
    "relaksasi": "Relaksasi",
    "kecemasan": "Kecemasan",
    "emosi": "Keseimbangan Emosi",
    "spiritual": "Spiritual",
    "siy-attention": "SIY - Perhatian",
    "siy-awareness": "SIY - Kesadaran",
    "siy-regulation": "SIY - Regulasi",
    "siy-empathy": "SIY - Empati",
    "siy-social": "SIY - Sosial",
    "siy-happiness": "SIY - Kebahagiaan",
    "siy-workplace": "SIY - Tempat Kerja",
}


def category_display_name(category: str) -> str:
    return CATEGORY_DISPLAY_NAMES.get(category, category)


# ── Time of day -> eligible categories ────────────────────────────
TIME_CATEGORIES: Dict[TimeOfDay, Tuple[str, ...]] = {
    TimeOfDay.DAWN: ("jeda-pagi", "spiritual"),
    TimeOfDay.MORNING: ("jeda-pagi", "fokus-kerja"),
    TimeOfDay.MIDDAY: ("napas-hiruk", "fokus-kerja", "relaksasi"),
    TimeOfDay.AFTERNOON: ("napas-hiruk", "fokus-kerja", "relaksasi"),
    TimeOfDay.EVENING: ("pulang-diri", "relaksasi", "emosi"),
    TimeOfDay.NIGHT: ("tidur-dalam", "relaksasi", "spiritual"),
}
DEFAULT_TIME_CATEGORIES: Tuple[str, ...] = ("relaksasi",)

TIME_DISPLAY_NAMES: Dict[TimeOfDay, str] = {
    TimeOfDay.DAWN: "subuh",
    TimeOfDay.MORNING: "pagi",
    TimeOfDay.MIDDAY: "siang",
    TimeOfDay.AFTERNOON: "siang",
    TimeOfDay.EVENING: "sore",
    TimeOfDay.NIGHT: "malam",
}

TIME_REASONS: Dict[TimeOfDay, str] = {
    TimeOfDay.DAWN: "Sempurna untuk memulai hari Anda",
    TimeOfDay.MORNING: "Sempurna untuk memulai hari Anda",
    TimeOfDay.MIDDAY: "Ideal untuk jeda siang hari",
    TimeOfDay.AFTERNOON: "Ideal untuk jeda siang hari",
    TimeOfDay.EVENING: "Cocok untuk relaksasi sore",
    TimeOfDay.NIGHT: "Membantu persiapan tidur malam",
}
DEFAULT_TIME_REASON = "Direkomendasikan untuk saat ini"

# ── Cold start ────────────────────────────────────────────────────
STARTER_CATEGORIES: Tuple[str, ...] = ("jeda-pagi", "relaksasi", "napas-hiruk")

# ── Reason copy ───────────────────────────────────────────────────
REASON_TRENDING = "Populer dengan {count} penyelesaian"
REASON_SIMILAR_CATEGORY = "Sesuai dengan minat Anda pada kategori {category}"
REASON_SIMILAR_DIFFICULTY = "Sesuai dengan level {difficulty} yang biasa Anda pilih"
REASON_SIMILAR_DEFAULT = "Direkomendasikan berdasarkan preferensi Anda"
REASON_PROGRESSION = "Tingkatkan ke level {difficulty} dalam kategori yang Anda sukai"
REASON_MOOD = "Cocok untuk waktu {time} ini"
REASON_NEW_USER = "Sesi populer untuk pemula"
REASON_STARTER = "Pengenalan {category}"
REASON_COURSE_CATEGORY = "Kursus {category} yang sesuai dengan minat Anda"
REASON_COURSE_DIFFICULTY = "Kursus level {difficulty} yang sesuai dengan kemampuan Anda"
REASON_COURSE_DEFAULT = "Kursus yang direkomendasikan untuk pengembangan diri"
