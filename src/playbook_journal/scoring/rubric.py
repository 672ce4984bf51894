"""Rubric defaults and validation.

``validate_rubric`` is what the playbook editor calls before a rubric is
saved or used: it reports the first problem as a value and never raises.
``require_valid_rubric`` is the raising variant for save flows and the CLI.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from ..core.config import DefaultRubricConfig
from ..core.errors import RubricValidationError
from .models import Rubric

_UNIT_FIELDS: tuple[tuple[str, str], ...] = (
    ("weight_rules", "Rules weight"),
    ("weight_confluences", "Confluences weight"),
    ("weight_checklist", "Checklist weight"),
    ("must_rule_penalty", "Must-rule penalty"),
)


@dataclass(frozen=True)
class RubricValidation:
    valid: bool
    error: str | None = None

    def __bool__(self) -> bool:
        return self.valid


def get_default_rubric(
    playbook_id: str = "", config: DefaultRubricConfig | None = None
) -> Rubric:
    """Rubric used for playbooks that have not saved their own.

    Pass the loaded ``Settings.default_rubric`` to honour a configured default.
    """
    return (config or DefaultRubricConfig()).to_rubric(playbook_id)


def _in_unit_range(value: float) -> bool:
    return 0.0 <= value <= 1.0


def _range_error(name: str, value: float) -> str:
    if not math.isfinite(value):
        return f"{name} must be a number between 0 and 1 (got {value:g})"
    return f"{name} must be between 0 and 1 (got {value:g})"


def validate_rubric(rubric: Rubric) -> RubricValidation:
    """Check a rubric's internal consistency, returning the first failure.

    Weights are not required to sum to 1; see :func:`rubric_warnings`.
    """
    for attr, name in _UNIT_FIELDS:
        value = getattr(rubric, attr)
        if not _in_unit_range(value):
            return RubricValidation(False, _range_error(name, value))

    # NaN and infinities are not integral
    if rubric.min_checks < 0 or not float(rubric.min_checks).is_integer():
        return RubricValidation(
            False,
            f"Minimum checks must be a whole number >= 0 (got {rubric.min_checks:g})",
        )

    if not rubric.grade_cutoffs:
        return RubricValidation(False, "At least one grade cutoff is required")

    for label, cutoff in rubric.grade_cutoffs.items():
        if not _in_unit_range(cutoff):
            return RubricValidation(
                False, _range_error(f"Cutoff for grade {label!r}", cutoff)
            )

    seen: set[str] = set()
    for label in rubric.grade_cutoffs:
        key = label.strip().casefold()
        if not key:
            return RubricValidation(False, "Grade labels cannot be blank")
        if key in seen:
            return RubricValidation(False, f"Duplicate grade label {label.strip()!r}")
        seen.add(key)

    return RubricValidation(True)


def rubric_warnings(rubric: Rubric, tolerance: float = 0.01) -> list[str]:
    """Non-blocking hints for a rubric editor."""
    warnings: list[str] = []

    total = rubric.weight_rules + rubric.weight_confluences + rubric.weight_checklist
    if math.isfinite(total) and abs(total - 1.0) > tolerance:
        warnings.append(
            f"Rule, confluence, and checklist weights sum to {total:.2f}, not 1.00; "
            f"the best achievable score is capped accordingly"
        )

    if rubric.weight_checklist > 0:
        warnings.append(
            "Checklist weight is reserved and does not contribute to the score yet"
        )

    return warnings


def require_valid_rubric(rubric: Rubric) -> Rubric:
    """Return the rubric unchanged, or raise ``RubricValidationError``."""
    result = validate_rubric(rubric)
    if not result.valid:
        raise RubricValidationError(result.error or "invalid rubric", rubric.playbook_id)
    return rubric
