"""Playbook setup scoring.

Deterministic grade calculation from rules and confluences compliance.

The same pure function serves two call sites: the playbook editor preview,
which re-scores on every checkbox toggle, and the trade-save flow, which
scores once and freezes the result into the trade record (see
:mod:`playbook_journal.journal.snapshot`).  Nothing here caches, raises or
performs I/O.

Composition::

    composed = weight_rules * rules_pct + weight_confluences * conf_pct
    score    = clamp(composed - must_rule_penalty if a must-rule was missed)

A category with no weighted items contributes nothing and its weight is not
handed to the other category, so a playbook with only confluences tops out
at ``weight_confluences``.

Usage::

    result = score_setup(
        rules=playbook.rules,
        rules_checked={"r1": True},
        confluences=playbook.confluences,
        conf_checked={"c1": True},
        rubric=playbook.rubric,
    )
    print(result.grade)    # "A+"
    print(result.score)    # 1.0
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

from ..core.enums import RuleType
from .aggregator import (
    PRIMARY_MULTIPLIER,
    aggregate,
    items_from_confluences,
    items_from_rules,
)
from .grades import FALLBACK_GRADE, lowest_grade, map_grade, ranked_cutoffs
from .models import Confluence, Rubric, Rule, ScoreInput, ScoreParts, ScoreResult

if TYPE_CHECKING:
    from .playbook import PlaybookDefinition

logger = logging.getLogger(__name__)

# Float noise must not flip a grade exactly at a cutoff (0.8999999999 vs 0.9)
SCORE_PRECISION = 10


def _unit(value: Any) -> float:
    """Sanitize a rubric fraction to a finite value in [0, 1]."""
    if not isinstance(value, (int, float)) or not math.isfinite(value):
        return 0.0
    return min(1.0, max(0.0, float(value)))


def _min_checks(value: Any) -> int:
    if not isinstance(value, (int, float)) or not math.isfinite(value):
        return 0
    return max(0, math.ceil(value))


def _empty_result(fallback: str) -> ScoreResult:
    parts = ScoreParts(
        rules_pct=None,
        conf_pct=None,
        missed_must=False,
        must_hit=0,
        must_count=0,
        should_hit=0,
        should_count=0,
        optional_hit=0,
        optional_count=0,
        primary_conf_hit=0,
        primary_conf_count=0,
    )
    return ScoreResult(score=0.0, grade=fallback, parts=parts)


def score_setup(
    score_input: ScoreInput | None = None,
    *,
    rules: Sequence[Rule] = (),
    rules_checked: Mapping[str, Any] | None = None,
    confluences: Sequence[Confluence] = (),
    conf_checked: Mapping[str, Any] | None = None,
    rubric: Rubric | None = None,
    primary_multiplier: float = PRIMARY_MULTIPLIER,
    fallback: str = FALLBACK_GRADE,
) -> ScoreResult:
    """Score a trade setup against its playbook.

    Accepts either a prepared :class:`ScoreInput` or the same fields as
    keyword arguments, not both: passing a ``ScoreInput`` together with any
    of ``rules``, ``rules_checked``, ``confluences``, ``conf_checked`` or
    ``rubric`` raises ``TypeError``.  Returns a score in [0, 1], a grade
    label and the breakdown.

    ``fallback`` is the grade for a score below every cutoff and for an
    empty playbook.

    When fewer than ``min_checks`` items are checked the grade is forced to
    the lowest configured grade, but only if the score reached some cutoff.
    The guardrail never raises a grade: a score already below every cutoff
    keeps ``fallback``.  The numeric score is left unchanged either way.
    """
    if score_input is not None:
        if (
            rules
            or confluences
            or rules_checked is not None
            or conf_checked is not None
            or rubric is not None
        ):
            raise TypeError("Pass either a ScoreInput or keyword fields, not both")
    else:
        score_input = ScoreInput(
            rules=rules,
            rules_checked=rules_checked or {},
            confluences=confluences,
            conf_checked=conf_checked or {},
            rubric=rubric if rubric is not None else Rubric(),
        )
    rubric = score_input.rubric
    rules_checked = score_input.rules_checked or {}
    conf_checked = score_input.conf_checked or {}

    if not score_input.rules and not score_input.confluences:
        logger.debug("Nothing to score for playbook %s", rubric.playbook_id)
        return _empty_result(fallback)

    rules_agg = aggregate(
        items_from_rules(score_input.rules),
        rules_checked,
        primary_multiplier=primary_multiplier,
    )
    conf_agg = aggregate(
        items_from_confluences(score_input.confluences),
        conf_checked,
        primary_multiplier=primary_multiplier,
    )

    must_hit, must_count = rules_agg.tally(RuleType.MUST)
    should_hit, should_count = rules_agg.tally(RuleType.SHOULD)
    optional_hit, optional_count = rules_agg.tally(RuleType.OPTIONAL)
    missed_must = must_hit < must_count

    composed = 0.0
    if rules_agg.sub_score is not None:
        composed += _unit(rubric.weight_rules) * rules_agg.sub_score
    if conf_agg.sub_score is not None:
        composed += _unit(rubric.weight_confluences) * conf_agg.sub_score
    composed = min(1.0, composed)

    penalty = _unit(rubric.must_rule_penalty) if missed_must else 0.0
    score = round(min(1.0, max(0.0, composed - penalty)), SCORE_PRECISION)

    grade = map_grade(score, rubric.grade_cutoffs, fallback=fallback)

    checked_count = rules_agg.hit + conf_agg.hit
    min_checks = _min_checks(rubric.min_checks)
    below_min_checks = checked_count < min_checks
    # Guardrail only ever lowers: a score below every cutoff keeps the fallback
    if below_min_checks and any(
        score >= cutoff for _, cutoff in ranked_cutoffs(rubric.grade_cutoffs)
    ):
        grade = lowest_grade(rubric.grade_cutoffs, fallback=fallback)

    parts = ScoreParts(
        rules_pct=rules_agg.sub_score,
        conf_pct=conf_agg.sub_score,
        missed_must=missed_must,
        must_hit=must_hit,
        must_count=must_count,
        should_hit=should_hit,
        should_count=should_count,
        optional_hit=optional_hit,
        optional_count=optional_count,
        primary_conf_hit=conf_agg.primary_hit,
        primary_conf_count=conf_agg.primary_count,
        conf_hit=conf_agg.hit,
        conf_count=conf_agg.count,
        checked_count=checked_count,
        composed_score=round(composed, SCORE_PRECISION),
        penalty_applied=penalty,
        below_min_checks=below_min_checks,
    )

    logger.debug(
        "Scored setup playbook=%s score=%.4f grade=%s missed_must=%s checked=%d",
        rubric.playbook_id,
        score,
        grade,
        missed_must,
        checked_count,
    )
    return ScoreResult(score=score, grade=grade, parts=parts)


def score_playbook(
    playbook: PlaybookDefinition,
    rules_checked: Mapping[str, Any],
    conf_checked: Mapping[str, Any],
    *,
    primary_multiplier: float = PRIMARY_MULTIPLIER,
    fallback: str = FALLBACK_GRADE,
) -> ScoreResult:
    """Score a check-state against a loaded playbook definition."""
    return score_setup(
        ScoreInput(
            rules=playbook.rules,
            rules_checked=rules_checked,
            confluences=playbook.confluences,
            conf_checked=conf_checked,
            rubric=playbook.rubric,
        ),
        primary_multiplier=primary_multiplier,
        fallback=fallback,
    )
