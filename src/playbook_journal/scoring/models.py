"""Playbook scoring models.

Rules, confluences and rubrics arrive as loosely-typed database rows
(``playbook_rules``, ``playbook_confluences``, ``playbook_rubric``).  The
pydantic models below are the single place where those rows are normalized:
missing or non-numeric item weights become ``0.0`` and the rule ``type``
string becomes a :class:`RuleType`.  Rubric numbers are kept as-is when
out of range or non-finite, and an unparsable rubric number becomes ``NaN``,
so :func:`~playbook_journal.scoring.rubric.validate_rubric` can report them.
The engine sanitizes rubric values at scoring time.

Score results are plain frozen dataclasses: they are derived values, only
ever persisted as scalars.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping, Sequence
from dataclasses import asdict, dataclass, field
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from ..core.enums import RuleType

logger = logging.getLogger(__name__)

_TRUTHY_STRINGS = frozenset({"true", "t", "yes", "y", "1", "on"})


def coerce_number(value: Any) -> float:
    """Normalize a loosely-typed numeric column to a finite float.

    ``None``, non-numeric strings, ``NaN`` and infinities all become ``0.0``.
    """
    if value is None or isinstance(value, bool):
        return float(bool(value))
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return 0.0
    else:
        try:
            number = float(value)
        except (TypeError, ValueError):
            return 0.0
    return number if math.isfinite(number) else 0.0


def coerce_rubric_number(value: Any) -> float:
    """Normalize a rubric column without hiding malformed values.

    ``None`` (column not set) becomes ``0.0``.  ``NaN`` and infinities pass
    through, and anything that does not parse as a number becomes ``NaN``.
    """
    if value is None or isinstance(value, bool):
        return float(bool(value))
    if isinstance(value, str):
        value = value.strip()
    try:
        return float(value)
    except (TypeError, ValueError):
        return math.nan


def parse_flag(value: Any) -> bool:
    """Read a stored boolean: ``"false"`` and ``"0"`` are false, ``"yes"`` is true."""
    if isinstance(value, str):
        return value.strip().lower() in _TRUTHY_STRINGS
    return bool(value)


def _coerce_id(value: Any) -> str:
    return "" if value is None else str(value)


class Rule(BaseModel):
    """One typed, weighted entry criterion of a playbook."""

    model_config = ConfigDict(frozen=True)

    id: str
    type: RuleType = RuleType.OPTIONAL
    weight: float = 0.0
    label: str = ""

    @field_validator("id", "label", mode="before")
    @classmethod
    def _text(cls, v: Any) -> str:
        return _coerce_id(v)

    @field_validator("type", mode="before")
    @classmethod
    def _rule_type(cls, v: Any) -> RuleType:
        parsed = RuleType.parse(v)
        if parsed is None:
            logger.warning("Unknown rule type %r, treating as optional", v)
            return RuleType.OPTIONAL
        return parsed

    @field_validator("weight", mode="before")
    @classmethod
    def _weight(cls, v: Any) -> float:
        return coerce_number(v)


class Confluence(BaseModel):
    """A weighted supporting signal; primary confluences carry extra weight."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    weight: float = 0.0
    primary: bool = Field(
        default=False,
        validation_alias=AliasChoices("primary", "primary_confluence"),
    )
    label: str = ""

    @field_validator("id", "label", mode="before")
    @classmethod
    def _text(cls, v: Any) -> str:
        return _coerce_id(v)

    @field_validator("weight", mode="before")
    @classmethod
    def _weight(cls, v: Any) -> float:
        return coerce_number(v)

    @field_validator("primary", mode="before")
    @classmethod
    def _primary(cls, v: Any) -> bool:
        return parse_flag(v)


class Rubric(BaseModel):
    """Per-playbook scoring configuration.

    ``grade_cutoffs`` keeps declaration order, which breaks ties between
    equal cutoffs.
    """

    model_config = ConfigDict(frozen=True)

    playbook_id: str = ""
    weight_rules: float = 0.0
    weight_confluences: float = 0.0
    weight_checklist: float = 0.0
    must_rule_penalty: float = 0.0
    min_checks: float = 0.0
    grade_cutoffs: dict[str, float] = Field(default_factory=dict)

    @field_validator("playbook_id", mode="before")
    @classmethod
    def _playbook_id(cls, v: Any) -> str:
        return _coerce_id(v)

    @field_validator(
        "weight_rules",
        "weight_confluences",
        "weight_checklist",
        "must_rule_penalty",
        "min_checks",
        mode="before",
    )
    @classmethod
    def _number(cls, v: Any) -> float:
        return coerce_rubric_number(v)

    @field_validator("grade_cutoffs", mode="before")
    @classmethod
    def _cutoffs(cls, v: Any) -> dict[str, float]:
        if not isinstance(v, Mapping):
            return {}
        return {str(label): coerce_rubric_number(cutoff) for label, cutoff in v.items()}


# ---------------------------------------------------------------------------
# Scoring input / output
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ScoreInput:
    """Everything one scoring call needs."""

    rules: Sequence[Rule] = ()
    rules_checked: Mapping[str, Any] = field(default_factory=dict)
    confluences: Sequence[Confluence] = ()
    conf_checked: Mapping[str, Any] = field(default_factory=dict)
    rubric: Rubric = field(default_factory=Rubric)


@dataclass(frozen=True)
class ScoreParts:
    """Breakdown behind a setup score.

    ``rules_pct`` / ``conf_pct`` are ``None`` when the category had nothing
    to weigh, which is not the same as scoring 0.
    """

    rules_pct: float | None
    conf_pct: float | None
    missed_must: bool
    must_hit: int
    must_count: int
    should_hit: int
    should_count: int
    optional_hit: int
    optional_count: int
    primary_conf_hit: int
    primary_conf_count: int
    conf_hit: int = 0
    conf_count: int = 0
    checked_count: int = 0
    composed_score: float = 0.0  # Before the must-rule penalty
    penalty_applied: float = 0.0
    below_min_checks: bool = False


@dataclass(frozen=True)
class ScoreResult:
    """Final setup score (0..1) and letter grade."""

    score: float
    grade: str
    parts: ScoreParts

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for JSON/API use."""
        return {
            "score": self.score,
            "grade": self.grade,
            "parts": asdict(self.parts),
        }
