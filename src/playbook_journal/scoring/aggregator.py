"""Checklist aggregation.

Turns a list of weighted checklist items plus a check-state map into a
normalized sub-score and display tallies.  Tallies count items, not weight:
a zero-weight item never moves the sub-score but still shows up as "2/3
followed".
"""

from __future__ import annotations

import math
from collections import Counter
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from ..core.enums import RuleType
from .models import Confluence, Rule, parse_flag

# Primary confluences count 1.2x toward the confluence sub-score.
PRIMARY_MULTIPLIER = 1.2


@dataclass(frozen=True)
class ChecklistItem:
    id: str
    weight: float
    primary: bool = False
    rule_type: RuleType | None = None


@dataclass(frozen=True)
class ChecklistAggregate:
    """Result of aggregating one checklist category."""

    sub_score: float | None
    hit: int = 0
    count: int = 0
    primary_hit: int = 0
    primary_count: int = 0
    type_hits: Mapping[RuleType, int] = field(default_factory=dict)
    type_counts: Mapping[RuleType, int] = field(default_factory=dict)

    def tally(self, rule_type: RuleType) -> tuple[int, int]:
        """(hit, count) for one rule type."""
        return self.type_hits.get(rule_type, 0), self.type_counts.get(rule_type, 0)


def items_from_rules(rules: Iterable[Rule]) -> list[ChecklistItem]:
    return [ChecklistItem(r.id, r.weight, rule_type=r.type) for r in rules]


def items_from_confluences(confluences: Iterable[Confluence]) -> list[ChecklistItem]:
    return [ChecklistItem(c.id, c.weight, primary=c.primary) for c in confluences]


def effective_weight(item: ChecklistItem, primary_multiplier: float = PRIMARY_MULTIPLIER) -> float:
    """Item weight after clamping and the primary multiplier; never negative or NaN."""
    weight = item.weight
    if not isinstance(weight, (int, float)) or not math.isfinite(weight) or weight < 0:
        weight = 0.0
    if item.primary:
        multiplier = primary_multiplier
        if not math.isfinite(multiplier) or multiplier < 0:
            multiplier = 0.0
        weight *= multiplier
    return float(weight)


def is_checked(checked: Mapping[str, Any], item_id: str) -> bool:
    return parse_flag(checked.get(item_id, False))


def aggregate(
    items: Sequence[ChecklistItem],
    checked: Mapping[str, Any],
    *,
    primary_multiplier: float = PRIMARY_MULTIPLIER,
) -> ChecklistAggregate:
    """Weighted compliance of one checklist category.

    ``sub_score`` is ``None`` when there are no items or every effective
    weight is zero.
    """
    total_weight = 0.0
    hit_weight = 0.0
    hit = 0
    primary_hit = 0
    primary_count = 0
    type_hits: Counter[RuleType] = Counter()
    type_counts: Counter[RuleType] = Counter()

    for item in items:
        weight = effective_weight(item, primary_multiplier)
        ticked = is_checked(checked, item.id)

        total_weight += weight
        if ticked:
            hit_weight += weight
            hit += 1

        if item.primary:
            primary_count += 1
            primary_hit += ticked
        if item.rule_type is not None:
            type_counts[item.rule_type] += 1
            type_hits[item.rule_type] += ticked

    sub_score = None
    if total_weight > 0:
        ratio = hit_weight / total_weight
        # inf / inf when weights overflow
        sub_score = min(1.0, max(0.0, ratio)) if math.isfinite(ratio) else 0.0

    return ChecklistAggregate(
        sub_score=sub_score,
        hit=hit,
        count=len(items),
        primary_hit=primary_hit,
        primary_count=primary_count,
        type_hits=dict(type_hits),
        type_counts=dict(type_counts),
    )
