"""
Rule Evaluator -- turns an :class:`AdaptationContext` into one combined
adaptation.

Algorithm:
    1. Keep rules whose condition is true for the context.
    2. Sort by priority, highest first.  Ties keep catalog order.
    3. Walk that order, merging each rule's patch until ``max_active``
       rules are active.
    4. Merge is **first-writer-wins per leaf**: a lower-priority rule only
       fills fields no higher-priority rule has set.  Nested mappings are
       merged leaf by leaf; lists are leaves.
    5. Derived fields are computed only when they win their slot.

A rule whose condition or winning derived field raises (or whose derived
field returns a non-primitive) is logged and treated as non-matching;
its partially merged fields are discarded and the next match takes its
slot.  Nothing raises out of :func:`evaluate_adaptations`.

The evaluator reads no clock and keeps no state; equal inputs give equal
outputs.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from core.logging import get_logger
from core.utils import is_primitive
from personalization.context import AdaptationContext
from personalization.rules import (
    INDONESIAN_ADAPTATION_RULES,
    NAMESPACES,
    AdaptationRule,
    DerivedValue,
    FieldSpec,
    LiteralValue,
)

logger = get_logger(__name__)

DEFAULT_MAX_ACTIVE = 5
DEFAULT_GREETING = "Selamat datang di Sembalun"


class RuleEvaluationError(Exception):
    """A rule's condition or derived field failed for a context."""

    def __init__(self, rule_id: str, message: str) -> None:
        super().__init__(f"{rule_id}: {message}")
        self.rule_id = rule_id


@dataclass(frozen=True)
class CombinedAdaptation:
    """Merged output of all active rules."""
    ui_changes: Dict[str, Any] = field(default_factory=dict)
    content_changes: Dict[str, Any] = field(default_factory=dict)
    behavior_changes: Dict[str, Any] = field(default_factory=dict)

    @property
    def greeting(self) -> str:
        return self.content_changes.get("greeting") or DEFAULT_GREETING

    @property
    def is_empty(self) -> bool:
        return not (self.ui_changes or self.content_changes or self.behavior_changes)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ui_changes": _thaw(self.ui_changes),
            "content_changes": _thaw(self.content_changes),
            "behavior_changes": _thaw(self.behavior_changes),
        }


@dataclass(frozen=True)
class AdaptationResult:
    combined: CombinedAdaptation
    active_rules: Tuple[AdaptationRule, ...] = ()

    @property
    def active_rule_ids(self) -> Tuple[str, ...]:
        return tuple(rule.id for rule in self.active_rules)


def _thaw(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: _thaw(v) for k, v in value.items()}
    if isinstance(value, tuple):
        return [_thaw(v) for v in value]
    return value


def _resolve(rule_id: str, spec: FieldSpec, ctx: AdaptationContext) -> Any:
    if isinstance(spec, LiteralValue):
        return spec.value
    if isinstance(spec, DerivedValue):
        try:
            value = spec.compute(ctx)
        except Exception as exc:
            raise RuleEvaluationError(rule_id, f"derived field failed: {exc}") from exc
        if not is_primitive(value):
            raise RuleEvaluationError(
                rule_id, f"derived field returned {type(value).__name__}, expected a primitive"
            )
        return value
    raise RuleEvaluationError(rule_id, f"unsupported field spec {type(spec).__name__}")


def _merge_fields(
    rule_id: str,
    target: Dict[str, Any],
    fields: Mapping[str, FieldSpec],
    ctx: AdaptationContext,
) -> None:
    """Fill unset leaves of ``target`` from ``fields`` (first writer wins)."""
    for name, spec in fields.items():
        if isinstance(spec, Mapping):
            current = target.get(name)
            if current is None:
                current = target[name] = {}
            elif not isinstance(current, dict):
                # A higher-priority rule set this as a leaf
                continue
            _merge_fields(rule_id, current, spec, ctx)
        elif name not in target:
            target[name] = _resolve(rule_id, spec, ctx)


def _copy_namespaces(namespaces: Dict[str, Dict[str, Any]]) -> Dict[str, Dict[str, Any]]:
    def copy(d: Dict[str, Any]) -> Dict[str, Any]:
        return {k: copy(v) if isinstance(v, dict) else v for k, v in d.items()}
    return {name: copy(ns) for name, ns in namespaces.items()}


def _matches(rule: AdaptationRule, ctx: AdaptationContext) -> bool:
    try:
        return bool(rule.condition(ctx))
    except Exception as exc:
        error = RuleEvaluationError(rule.id, f"condition failed: {exc}")
        logger.warning("Adaptation rule skipped", rule_id=rule.id, error=str(error))
        return False


def _drop_empty(d: Dict[str, Any]) -> Dict[str, Any]:
    """Remove nested mappings that ended up empty."""
    out: Dict[str, Any] = {}
    for k, v in d.items():
        if isinstance(v, dict):
            v = _drop_empty(v)
            if not v:
                continue
        out[k] = _freeze_output(v)
    return out


def _freeze_output(value: Any) -> Any:
    if isinstance(value, list):
        return tuple(value)
    return value


def evaluate_adaptations(
    context: AdaptationContext,
    catalog: Sequence[AdaptationRule] = INDONESIAN_ADAPTATION_RULES,
    max_active: int = DEFAULT_MAX_ACTIVE,
) -> AdaptationResult:
    """
    Evaluate ``catalog`` against ``context``.

    Returns the combined adaptation and the active rules, highest
    priority first, at most ``max_active`` of them.
    """
    if max_active <= 0:
        return AdaptationResult(combined=CombinedAdaptation())

    indexed = [(i, rule) for i, rule in enumerate(catalog) if _matches(rule, context)]
    indexed.sort(key=lambda pair: (-pair[1].priority, pair[0]))

    merged: Dict[str, Dict[str, Any]] = {name: {} for name in NAMESPACES}
    active: List[AdaptationRule] = []

    for _, rule in indexed:
        if len(active) >= max_active:
            break
        staged = _copy_namespaces(merged)
        try:
            for name in NAMESPACES:
                _merge_fields(rule.id, staged[name], rule.patch.namespace(name), context)
        except RuleEvaluationError as exc:
            logger.warning("Adaptation rule skipped", rule_id=rule.id, error=str(exc))
            continue
        except Exception as exc:
            logger.warning("Adaptation rule skipped", rule_id=rule.id, error=repr(exc))
            continue
        merged = staged
        active.append(rule)

    combined = CombinedAdaptation(**{name: _drop_empty(merged[name]) for name in NAMESPACES})
    return AdaptationResult(combined=combined, active_rules=tuple(active))


class AdaptationEvaluator:
    """
    Binds a catalog and cap for repeated evaluation.

    Stateless -- safe to share across threads / reuse across requests.
    """

    def __init__(
        self,
        catalog: Sequence[AdaptationRule] = INDONESIAN_ADAPTATION_RULES,
        max_active: Optional[int] = None,
    ) -> None:
        if max_active is None:
            from config.settings import get_settings
            max_active = get_settings().max_active_adaptations
        self._catalog = tuple(catalog)
        self._max_active = max_active

    @property
    def catalog(self) -> Tuple[AdaptationRule, ...]:
        return self._catalog

    @property
    def max_active(self) -> int:
        return self._max_active

    def evaluate(self, context: AdaptationContext) -> AdaptationResult:
        return evaluate_adaptations(context, self._catalog, self._max_active)

    def explain(self, context: AdaptationContext) -> Dict[str, Any]:
        """Breakdown of matching and active rules for debugging / admin UI."""
        result = self.evaluate(context)
        active_ids = set(result.active_rule_ids)
        return {
            "active": [
                {"id": r.id, "priority": r.priority, "description": r.description}
                for r in result.active_rules
            ],
            "matched_inactive": [
                r.id for r in self._catalog
                if r.id not in active_ids and _matches(r, context)
            ],
            "greeting": result.combined.greeting,
        }
