"""
Change Notifier -- detects when a freshly evaluated adaptation differs
from the one currently applied.

:func:`detect_change` is pure.  :class:`AdaptationChangeNotifier` holds
the applied result and a bounded, in-memory history of change events
(oldest evicted first); persisting that history is the caller's job.
"""

from collections import deque
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Deque, List, Optional, Tuple

from core.logging import LoggerMixin
from personalization.evaluator import AdaptationResult

DEFAULT_HISTORY_SIZE = 10


@dataclass(frozen=True)
class ChangeDetection:
    changed: bool
    newly_active_ids: Tuple[str, ...] = ()


@dataclass(frozen=True)
class AdaptationChangeEvent:
    timestamp: datetime
    rule_id: str
    reason: str


def detect_change(
    previous: Optional[AdaptationResult],
    next: AdaptationResult,
) -> ChangeDetection:
    """
    Compare two evaluation results by value.

    ``previous=None`` (first run) counts as a change in which every active
    rule is new.  Newly active ids keep ``next``'s priority order.
    """
    if previous is None:
        return ChangeDetection(
            changed=True,
            newly_active_ids=next.active_rule_ids,
        )

    changed = (
        previous.combined != next.combined
        or previous.active_rule_ids != next.active_rule_ids
    )
    if not changed:
        return ChangeDetection(changed=False)

    before = set(previous.active_rule_ids)
    return ChangeDetection(
        changed=True,
        newly_active_ids=tuple(rid for rid in next.active_rule_ids if rid not in before),
    )


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AdaptationChangeNotifier(LoggerMixin):
    """
    Tracks the applied adaptation and records what changed.

    Usage::

        notifier = AdaptationChangeNotifier(on_change=render)
        detection = notifier.apply(evaluator.evaluate(ctx))
        if detection.changed:
            ...
    """

    def __init__(
        self,
        history_size: Optional[int] = None,
        on_change: Optional[Callable[[AdaptationResult], None]] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        if history_size is None:
            from config.settings import get_settings
            history_size = get_settings().adaptation_history_size
        self._history: Deque[AdaptationChangeEvent] = deque(maxlen=history_size)
        self._applied: Optional[AdaptationResult] = None
        self._on_change = on_change
        self._clock = clock or _utcnow

    @property
    def applied(self) -> Optional[AdaptationResult]:
        return self._applied

    @property
    def history(self) -> List[AdaptationChangeEvent]:
        """Recorded events, oldest first."""
        return list(self._history)

    def apply(self, result: AdaptationResult) -> ChangeDetection:
        """
        Make ``result`` the applied adaptation if it differs from the
        current one.  One event is recorded per newly active rule.
        """
        detection = detect_change(self._applied, result)
        if not detection.changed:
            return detection

        self._applied = result
        descriptions = {rule.id: rule.description for rule in result.active_rules}
        now = self._clock()
        for rule_id in detection.newly_active_ids:
            self._history.append(AdaptationChangeEvent(
                timestamp=now,
                rule_id=rule_id,
                reason=descriptions.get(rule_id, ""),
            ))

        self.logger.debug(
            "Adaptation changed",
            active=list(result.active_rule_ids),
            newly_active=list(detection.newly_active_ids),
        )

        if self._on_change is not None:
            try:
                self._on_change(result)
            except Exception as exc:
                self.logger.warning("Adaptation listener failed", error=str(exc))

        return detection

    def reset(self) -> None:
        self._applied = None
        self._history.clear()
