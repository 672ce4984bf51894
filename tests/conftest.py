"""Shared fixtures for the playbook-journal test suite."""

from __future__ import annotations

import pytest

from playbook_journal.core.enums import RuleType
from playbook_journal.scoring.models import Confluence, Rubric, Rule
from playbook_journal.scoring.playbook import PlaybookDefinition
from playbook_journal.scoring.rubric import get_default_rubric


# ---------------------------------------------------------------------------
# Rubrics
# ---------------------------------------------------------------------------

@pytest.fixture
def default_rubric() -> Rubric:
    return get_default_rubric("pb-1")


@pytest.fixture
def reference_rubric() -> Rubric:
    """Rules 70% / confluences 30%, 0.4 must-rule penalty."""
    return Rubric(
        playbook_id="pb-1",
        weight_rules=0.7,
        weight_confluences=0.3,
        must_rule_penalty=0.4,
        grade_cutoffs={"A+": 0.95, "A": 0.9, "B": 0.8, "C": 0.7, "D": 0.6},
    )


# ---------------------------------------------------------------------------
# Checklist items
# ---------------------------------------------------------------------------

@pytest.fixture
def reference_rules() -> list[Rule]:
    return [
        Rule(id="r1", type=RuleType.MUST, weight=1),
        Rule(id="r2", type=RuleType.SHOULD, weight=1),
    ]


@pytest.fixture
def reference_confluences() -> list[Confluence]:
    return [Confluence(id="c1", weight=1, primary=True)]


@pytest.fixture
def mixed_rules() -> list[Rule]:
    return [
        Rule(id="m1", type=RuleType.MUST, weight=3, label="HTF trend aligned"),
        Rule(id="m2", type=RuleType.MUST, weight=2, label="Liquidity swept"),
        Rule(id="s1", type=RuleType.SHOULD, weight=1, label="London session"),
        Rule(id="o1", type=RuleType.OPTIONAL, weight=0.5, label="News-free day"),
    ]


@pytest.fixture
def mixed_confluences() -> list[Confluence]:
    return [
        Confluence(id="fvg", weight=1, primary=True, label="Fair value gap"),
        Confluence(id="ob", weight=1, label="Order block"),
        Confluence(id="fib", weight=2, label="Fib 0.618"),
    ]


@pytest.fixture
def reference_playbook(reference_rules, reference_confluences, reference_rubric) -> PlaybookDefinition:
    return PlaybookDefinition(
        playbook_id="pb-1",
        rules=tuple(reference_rules),
        confluences=tuple(reference_confluences),
        rubric=reference_rubric,
    )

