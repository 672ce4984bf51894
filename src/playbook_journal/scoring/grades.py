"""Grade mapping.

Maps a final 0..1 score onto a rubric's cutoff table.  ``"F"`` is the
implicit grade below every cutoff; it is not a configurable entry.
"""

from __future__ import annotations

import math
from collections.abc import Mapping

FALLBACK_GRADE = "F"


def _safe_cutoff(cutoff: float) -> float:
    if not isinstance(cutoff, (int, float)) or not math.isfinite(cutoff):
        return 0.0
    return float(cutoff)


def ranked_cutoffs(cutoffs: Mapping[str, float]) -> list[tuple[str, float]]:
    """Cutoff entries from highest to lowest, ties kept in declaration order."""
    entries = [(label, _safe_cutoff(cutoff)) for label, cutoff in cutoffs.items()]
    # sorted() is stable, so first-declared wins among equal cutoffs
    return sorted(entries, key=lambda entry: entry[1], reverse=True)


def map_grade(
    score: float,
    cutoffs: Mapping[str, float],
    *,
    fallback: str = FALLBACK_GRADE,
) -> str:
    """Label of the highest cutoff the score reaches, else ``fallback``."""
    if not isinstance(score, (int, float)) or math.isnan(score):
        return fallback
    for label, cutoff in ranked_cutoffs(cutoffs):
        if score >= cutoff:
            return label
    return fallback


def lowest_grade(cutoffs: Mapping[str, float], *, fallback: str = FALLBACK_GRADE) -> str:
    """Lowest-ranked configured grade (smallest cutoff)."""
    ranked = ranked_cutoffs(cutoffs)
    if not ranked:
        return fallback
    return ranked[-1][0]
