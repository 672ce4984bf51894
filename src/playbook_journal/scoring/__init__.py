"""Playbook setup scoring.

Converts a trader's self-reported checklist (which rules and confluences
were present) into a 0..1 quality score and a letter grade, using the
playbook's configurable rubric.

Key components
--------------
Rubric               Per-playbook weights, must-rule penalty, grade cutoffs
validate_rubric      Consistency checks run before a rubric is used or saved
aggregate            Weighted compliance of one checklist category
map_grade            Score to grade label via the rubric's cutoffs
score_setup          Public entry point composing all of the above
PlaybookDefinition   Typed rules/confluences/rubric built from stored rows
"""

from .aggregator import PRIMARY_MULTIPLIER, ChecklistAggregate, ChecklistItem, aggregate
from .engine import score_playbook, score_setup
from .grades import FALLBACK_GRADE, lowest_grade, map_grade
from .models import Confluence, Rubric, Rule, ScoreInput, ScoreParts, ScoreResult
from .playbook import PlaybookDefinition
from .presentation import explain_grade, format_score, get_grade_color
from .rubric import (
    RubricValidation,
    get_default_rubric,
    require_valid_rubric,
    rubric_warnings,
    validate_rubric,
)

__all__ = [
    "PRIMARY_MULTIPLIER",
    "FALLBACK_GRADE",
    "ChecklistAggregate",
    "ChecklistItem",
    "Confluence",
    "PlaybookDefinition",
    "Rubric",
    "RubricValidation",
    "Rule",
    "ScoreInput",
    "ScoreParts",
    "ScoreResult",
    "aggregate",
    "explain_grade",
    "format_score",
    "get_default_rubric",
    "get_grade_color",
    "lowest_grade",
    "map_grade",
    "require_valid_rubric",
    "rubric_warnings",
    "score_playbook",
    "score_setup",
    "validate_rubric",
]
