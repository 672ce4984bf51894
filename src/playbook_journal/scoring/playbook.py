"""Playbook definitions built from persisted rows.

The persistence layer hands over raw ``playbook_rules``,
``playbook_confluences`` and ``playbook_rubric`` rows.  This module turns
them into the typed inputs of :func:`~playbook_journal.scoring.engine.score_setup`.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .models import Confluence, Rubric, Rule, coerce_number
from .rubric import get_default_rubric

logger = logging.getLogger(__name__)


def _by_sort(rows: Iterable[Mapping[str, Any]]) -> list[Mapping[str, Any]]:
    # sorted() is stable: rows without a sort column keep their order
    return sorted(rows, key=lambda row: coerce_number(row.get("sort")))


class PlaybookDefinition(BaseModel):
    """Rules, confluences and rubric of one playbook."""

    model_config = ConfigDict(frozen=True)

    playbook_id: str
    rules: tuple[Rule, ...] = ()
    confluences: tuple[Confluence, ...] = ()
    rubric: Rubric = Field(default_factory=Rubric)

    @property
    def is_empty(self) -> bool:
        return not self.rules and not self.confluences

    @classmethod
    def from_rows(
        cls,
        playbook_id: str,
        rule_rows: Iterable[Mapping[str, Any]] = (),
        confluence_rows: Iterable[Mapping[str, Any]] = (),
        rubric_row: Mapping[str, Any] | None = None,
        *,
        default_rubric: Rubric | None = None,
    ) -> PlaybookDefinition:
        """Normalize database rows.

        A missing rubric row means ``default_rubric`` (re-keyed to this
        playbook), or the built-in default when none is given.
        """
        rules = tuple(Rule.model_validate(row) for row in _by_sort(rule_rows))
        confluences = tuple(
            Confluence.model_validate(row) for row in _by_sort(confluence_rows)
        )

        if rubric_row is None:
            logger.debug("No rubric stored for playbook %s, using default", playbook_id)
            if default_rubric is None:
                rubric = get_default_rubric(playbook_id)
            else:
                rubric = default_rubric.model_copy(update={"playbook_id": playbook_id})
        else:
            rubric = Rubric.model_validate({**rubric_row, "playbook_id": playbook_id})

        return cls(
            playbook_id=playbook_id,
            rules=rules,
            confluences=confluences,
            rubric=rubric,
        )

    @classmethod
    def from_dict(
        cls, data: Mapping[str, Any], *, default_rubric: Rubric | None = None
    ) -> PlaybookDefinition:
        """Build from the exported JSON shape ``{playbook_id, rules, confluences, rubric}``."""
        return cls.from_rows(
            str(data.get("playbook_id") or ""),
            data.get("rules") or (),
            data.get("confluences") or (),
            data.get("rubric"),
            default_rubric=default_rubric,
        )
