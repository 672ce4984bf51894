"""Frozen setup snapshot: the point-in-time score stored on a trade.

When a trade is saved against a playbook, the check-state the trader ticked
and the score/grade it earned are copied onto the trade record.  From then
on the snapshot is a historical fact: editing the playbook's rules or rubric
changes future scores only.  Reading a stored trade back goes through
:meth:`SetupSnapshot.from_record`, which never re-scores.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any

from ..scoring.aggregator import PRIMARY_MULTIPLIER
from ..scoring.engine import score_playbook
from ..scoring.grades import FALLBACK_GRADE
from ..scoring.models import parse_flag
from ..scoring.playbook import PlaybookDefinition

logger = logging.getLogger(__name__)


def _freeze_checks(checked: Mapping[str, Any] | None) -> Mapping[str, bool]:
    """Detached, read-only copy of a check-state map."""
    return MappingProxyType({str(k): parse_flag(v) for k, v in (checked or {}).items()})


@dataclass(frozen=True)
class SetupSnapshot:
    """Check-state, score and grade written once into a trade record."""

    playbook_id: str
    rules_checked: Mapping[str, bool] = field(default_factory=lambda: MappingProxyType({}))
    confluences_checked: Mapping[str, bool] = field(
        default_factory=lambda: MappingProxyType({})
    )
    setup_score: float | None = None
    setup_grade: str | None = None
    scored_at: datetime | None = None

    @property
    def is_scored(self) -> bool:
        return self.setup_score is not None

    def to_record(self) -> dict[str, Any]:
        """Columns persisted on the trade row."""
        return {
            "playbook_id": self.playbook_id or None,
            "rules_checked": dict(self.rules_checked),
            "confluences_checked": dict(self.confluences_checked),
            "setup_score": self.setup_score,
            "setup_grade": self.setup_grade,
        }

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> SetupSnapshot:
        """Rehydrate from a stored trade row exactly as written."""
        score = record.get("setup_score")
        return cls(
            playbook_id=str(record.get("playbook_id") or ""),
            rules_checked=_freeze_checks(record.get("rules_checked")),
            confluences_checked=_freeze_checks(record.get("confluences_checked")),
            setup_score=float(score) if score is not None else None,
            setup_grade=record.get("setup_grade"),
        )


def freeze_setup(
    playbook: PlaybookDefinition,
    rules_checked: Mapping[str, Any] | None,
    conf_checked: Mapping[str, Any] | None,
    *,
    scored_at: datetime | None = None,
    primary_multiplier: float = PRIMARY_MULTIPLIER,
    fallback: str = FALLBACK_GRADE,
) -> SetupSnapshot:
    """Score once and freeze the result for a trade being saved.

    A playbook with neither rules nor confluences yields an unscored
    snapshot (``setup_score`` and ``setup_grade`` are ``None``).
    """
    rules_snapshot = _freeze_checks(rules_checked)
    conf_snapshot = _freeze_checks(conf_checked)
    stamp = scored_at or datetime.now(timezone.utc)

    if playbook.is_empty:
        logger.info(
            "Playbook %s has no rules or confluences; trade left unscored",
            playbook.playbook_id,
        )
        return SetupSnapshot(
            playbook_id=playbook.playbook_id,
            rules_checked=rules_snapshot,
            confluences_checked=conf_snapshot,
            scored_at=stamp,
        )

    result = score_playbook(
        playbook,
        rules_snapshot,
        conf_snapshot,
        primary_multiplier=primary_multiplier,
        fallback=fallback,
    )
    logger.info(
        "Froze setup score for playbook %s: %.4f (%s)",
        playbook.playbook_id,
        result.score,
        result.grade,
    )
    return SetupSnapshot(
        playbook_id=playbook.playbook_id,
        rules_checked=rules_snapshot,
        confluences_checked=conf_snapshot,
        setup_score=result.score,
        setup_grade=result.grade,
        scored_at=stamp,
    )
