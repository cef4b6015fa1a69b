"""
Core Utility Functions.

Common utilities used across the application.
"""

from collections import Counter
from typing import Any, Hashable, Iterable, List, Set, TypeVar

H = TypeVar("H", bound=Hashable)

# Values a derived adaptation field may produce
PRIMITIVE_TYPES = (str, int, float, bool, type(None))


def normalize_string_list(items: Iterable[str]) -> List[str]:
    """
    Normalize strings to lowercase, stripped, de-duplicated values.

    Args:
        items: Strings (may contain None, empty strings)

    Returns:
        Normalized strings in first-seen order
    """
    seen: Set[str] = set()
    out: List[str] = []
    for s in items:
        if not s:
            continue
        key = s.lower().strip()
        if key and key not in seen:
            seen.add(key)
            out.append(key)
    return out


def clamp(value: float, lo: float = 0.0, hi: float = 1.0) -> float:
    """Clamp ``value`` into ``[lo, hi]``."""
    return max(lo, min(hi, value))


def top_by_frequency(values: Iterable[H], n: int) -> List[H]:
    """
    Return the ``n`` most frequent values, most frequent first.

    Ties keep first-appearance order (Counter preserves insertion order
    and most_common sorts stably).
    """
    if n <= 0:
        return []
    return [value for value, _ in Counter(values).most_common(n)]


def is_primitive(value: Any) -> bool:
    """True for str/int/float/bool/None."""
    return isinstance(value, PRIMITIVE_TYPES)
