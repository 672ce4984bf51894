"""Tests for building playbook definitions from persisted rows."""

from __future__ import annotations

from playbook_journal.core.enums import RuleType
from playbook_journal.scoring.models import Rubric
from playbook_journal.scoring.playbook import PlaybookDefinition

RULE_ROWS = [
    {"id": "r2", "playbook_id": "pb", "label": "Session", "type": "should", "weight": 1, "sort": 2},
    {"id": "r1", "playbook_id": "pb", "label": "Trend", "type": "must", "weight": 2, "sort": 1},
    {"id": "r3", "playbook_id": "pb", "label": "Misc", "type": None, "weight": None, "sort": 3},
]

CONFLUENCE_ROWS = [
    {"id": "c1", "playbook_id": "pb", "label": "FVG", "weight": 1, "primary_confluence": True, "sort": 0},
    {"id": "c2", "playbook_id": "pb", "label": "OB", "weight": "2", "primary_confluence": False, "sort": 1},
]

RUBRIC_ROW = {
    "playbook_id": "other",
    "weight_rules": 0.6,
    "weight_confluences": 0.4,
    "weight_checklist": 0,
    "must_rule_penalty": 0.3,
    "min_checks": 1,
    "grade_cutoffs": {"A": 0.9, "B": 0.75},
}


class TestFromRows:
    def test_rules_sorted_and_typed(self):
        playbook = PlaybookDefinition.from_rows("pb", RULE_ROWS, CONFLUENCE_ROWS, RUBRIC_ROW)
        assert [r.id for r in playbook.rules] == ["r1", "r2", "r3"]
        assert playbook.rules[0].type is RuleType.MUST
        assert playbook.rules[2].type is RuleType.OPTIONAL
        assert playbook.rules[2].weight == 0.0

    def test_confluences(self):
        playbook = PlaybookDefinition.from_rows("pb", RULE_ROWS, CONFLUENCE_ROWS, RUBRIC_ROW)
        assert [c.primary for c in playbook.confluences] == [True, False]
        assert playbook.confluences[1].weight == 2.0

    def test_rubric_row_keeps_requested_playbook_id(self):
        playbook = PlaybookDefinition.from_rows("pb", RULE_ROWS, CONFLUENCE_ROWS, RUBRIC_ROW)
        assert playbook.rubric.playbook_id == "pb"
        assert playbook.rubric.weight_rules == 0.6
        assert playbook.rubric.grade_cutoffs == {"A": 0.9, "B": 0.75}

    def test_missing_rubric_row_uses_default(self):
        playbook = PlaybookDefinition.from_rows("pb", RULE_ROWS, CONFLUENCE_ROWS, None)
        assert playbook.rubric.weight_rules == 0.7
        assert playbook.rubric.playbook_id == "pb"

    def test_missing_rubric_row_uses_given_default(self):
        configured = Rubric(playbook_id="", weight_rules=1.0, grade_cutoffs={"A": 0.9})
        playbook = PlaybookDefinition.from_rows("pb", RULE_ROWS, default_rubric=configured)
        assert playbook.rubric.weight_rules == 1.0
        assert playbook.rubric.playbook_id == "pb"
        assert configured.playbook_id == ""

    def test_stored_rubric_row_beats_given_default(self):
        configured = Rubric(weight_rules=1.0, grade_cutoffs={"A": 0.9})
        playbook = PlaybookDefinition.from_rows(
            "pb", RULE_ROWS, CONFLUENCE_ROWS, RUBRIC_ROW, default_rubric=configured
        )
        assert playbook.rubric.weight_rules == 0.6

    def test_absent_weight_column_is_zero(self):
        playbook = PlaybookDefinition.from_rows("pb", [{"id": "r", "type": "must"}])
        assert playbook.rules[0].weight == 0.0

    def test_rows_without_sort_keep_order(self):
        rows = [{"id": "b", "type": "must"}, {"id": "a", "type": "should"}]
        playbook = PlaybookDefinition.from_rows("pb", rows)
        assert [r.id for r in playbook.rules] == ["b", "a"]

    def test_is_empty(self):
        assert PlaybookDefinition.from_rows("pb").is_empty
        assert not PlaybookDefinition.from_rows("pb", RULE_ROWS).is_empty


class TestFromDict:
    def test_export_shape(self):
        playbook = PlaybookDefinition.from_dict(
            {
                "playbook_id": "pb",
                "rules": RULE_ROWS,
                "confluences": CONFLUENCE_ROWS,
                "rubric": RUBRIC_ROW,
            }
        )
        assert playbook.playbook_id == "pb"
        assert len(playbook.rules) == 3
        assert len(playbook.confluences) == 2

    def test_nulls(self):
        playbook = PlaybookDefinition.from_dict({"rules": None, "confluences": None, "rubric": None})
        assert playbook.playbook_id == ""
        assert playbook.is_empty
        assert playbook.rubric.grade_cutoffs["A+"] == 0.95

    def test_default_rubric_passed_through(self):
        configured = Rubric(weight_rules=1.0, grade_cutoffs={"A": 0.9})
        playbook = PlaybookDefinition.from_dict(
            {"playbook_id": "pb", "rules": RULE_ROWS}, default_rubric=configured
        )
        assert playbook.rubric.weight_rules == 1.0
        assert playbook.rubric.playbook_id == "pb"
