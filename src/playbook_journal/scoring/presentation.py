"""Display helpers for setup scores."""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal

from ..core.enums import GradeTier
from .models import ScoreResult

_TIER_BY_PREFIX: dict[str, GradeTier] = {
    "A": GradeTier.GOOD,
    "B": GradeTier.PASS,
    "C": GradeTier.WARN,
}


def get_grade_color(grade: str) -> GradeTier:
    """Semantic color tier for a grade label, keyed on its first letter."""
    label = (grade or "").strip().upper()
    return _TIER_BY_PREFIX.get(label[:1], GradeTier.FAIL)


def format_score(score: float, decimals: int = 0) -> str:
    """Format a 0..1 score as a percentage, e.g. ``0.955 -> "96%"``."""
    if not isinstance(score, (int, float)) or not math.isfinite(score):
        score = 0.0
    decimals = max(0, int(decimals))
    quantum = Decimal(1).scaleb(-decimals)
    pct = (Decimal(repr(float(score))) * 100).quantize(quantum, rounding=ROUND_HALF_UP)
    return f"{pct}%"


def explain_grade(result: ScoreResult) -> str:
    """One-line summary of what drove a grade."""
    parts = result.parts
    explanations: list[str] = []

    if parts.missed_must:
        explanations.append(
            f"Missed {parts.must_count - parts.must_hit}/{parts.must_count} "
            f"must-rule(s) → penalty applied"
        )
    elif parts.must_count > 0:
        explanations.append("All must-rules followed")

    if parts.should_count > 0:
        explanations.append(f"{parts.should_hit}/{parts.should_count} should-rules followed")

    if parts.optional_count > 0:
        explanations.append(
            f"{parts.optional_hit}/{parts.optional_count} optional rules followed"
        )

    if parts.primary_conf_count > 0:
        explanations.append(
            f"{parts.primary_conf_hit}/{parts.primary_conf_count} primary confluences used"
        )

    if parts.below_min_checks:
        explanations.append(
            f"only {parts.checked_count} item(s) checked → minimum not met"
        )

    if not explanations:
        return "Nothing to score"
    return ", ".join(explanations)
