"""Property tests for setup scoring invariants.

Uses hypothesis to verify:
- The score is always within [0, 1], even with pathological weights
- Scoring is deterministic
- A strictly higher score never maps to a strictly lower grade
- Tallies depend only on the check-state, never on weights
- The min-checks guardrail never raises a grade
"""

from hypothesis import given, strategies as st

from playbook_journal.core.enums import RuleType
from playbook_journal.scoring.engine import score_setup
from playbook_journal.scoring.grades import map_grade, ranked_cutoffs
from playbook_journal.scoring.models import Confluence, Rubric, Rule
from playbook_journal.scoring.rubric import get_default_rubric

any_weight = st.one_of(
    st.floats(allow_nan=True, allow_infinity=True),
    st.none(),
    st.floats(min_value=0, max_value=1e6),
)

ids = st.text(alphabet="abcdefgh", min_size=1, max_size=3)

rules_st = st.lists(
    st.builds(
        Rule,
        id=ids,
        type=st.sampled_from(list(RuleType)),
        weight=any_weight,
    ),
    max_size=8,
)

confluences_st = st.lists(
    st.builds(Confluence, id=ids, weight=any_weight, primary=st.booleans()),
    max_size=8,
)

checks_st = st.dictionaries(ids, st.booleans(), max_size=10)

rubric_st = st.builds(
    Rubric,
    weight_rules=any_weight,
    weight_confluences=any_weight,
    must_rule_penalty=any_weight,
    min_checks=st.integers(min_value=-3, max_value=10),
    grade_cutoffs=st.dictionaries(
        st.text(min_size=1, max_size=3), st.floats(min_value=0, max_value=1), max_size=6
    ),
)


@given(rules=rules_st, confluences=confluences_st, rc=checks_st, cc=checks_st, rubric=rubric_st)
def test_score_always_in_unit_interval(rules, confluences, rc, cc, rubric):
    result = score_setup(
        rules=rules, rules_checked=rc, confluences=confluences, conf_checked=cc, rubric=rubric
    )
    assert 0.0 <= result.score <= 1.0
    assert isinstance(result.grade, str) and result.grade


@given(rules=rules_st, confluences=confluences_st, rc=checks_st, cc=checks_st, rubric=rubric_st)
def test_deterministic(rules, confluences, rc, cc, rubric):
    kwargs = dict(
        rules=rules, rules_checked=rc, confluences=confluences, conf_checked=cc, rubric=rubric
    )
    assert score_setup(**kwargs) == score_setup(**kwargs)


@given(
    cutoffs=st.lists(
        st.floats(min_value=0, max_value=1), min_size=1, max_size=8, unique=True
    ),
    a=st.floats(min_value=0, max_value=1),
    b=st.floats(min_value=0, max_value=1),
)
def test_grade_monotonic(cutoffs, a, b):
    table = {f"G{i}": cutoff for i, cutoff in enumerate(sorted(cutoffs, reverse=True))}
    rank = {label: i for i, (label, _) in enumerate(ranked_cutoffs(table))}
    rank["F"] = len(rank)

    low, high = sorted((a, b))
    # smaller rank index = better grade
    assert rank[map_grade(high, table)] <= rank[map_grade(low, table)]


@given(
    rules=rules_st,
    rc=checks_st,
    new_weights=st.lists(st.floats(min_value=0, max_value=100), min_size=8, max_size=8),
)
def test_tallies_independent_of_weights(rules, rc, new_weights):
    rubric = get_default_rubric()
    reweighted = [
        rule.model_copy(update={"weight": w}) for rule, w in zip(rules, new_weights)
    ]
    before = score_setup(rules=rules, rules_checked=rc, rubric=rubric).parts
    after = score_setup(rules=reweighted, rules_checked=rc, rubric=rubric).parts
    assert (before.must_hit, before.must_count) == (after.must_hit, after.must_count)
    assert (before.should_hit, before.should_count) == (after.should_hit, after.should_count)
    assert (before.optional_hit, before.optional_count) == (
        after.optional_hit,
        after.optional_count,
    )
    assert before.missed_must == after.missed_must


@given(rules=rules_st, confluences=confluences_st, rc=checks_st, cc=checks_st, rubric=rubric_st)
def test_min_checks_never_raises_grade(rules, confluences, rc, cc, rubric):
    kwargs = dict(rules=rules, rules_checked=rc, confluences=confluences, conf_checked=cc)
    guarded = score_setup(**kwargs, rubric=rubric)
    unguarded = score_setup(**kwargs, rubric=rubric.model_copy(update={"min_checks": 0.0}))

    assert guarded.score == unguarded.score
    rank = {label: i for i, (label, _) in enumerate(ranked_cutoffs(rubric.grade_cutoffs))}
    worst = len(rank)
    assert rank.get(guarded.grade, worst) >= rank.get(unguarded.grade, worst)


@given(rc=checks_st, cc=checks_st)
def test_full_compliance_default_rubric_is_a_plus(rc, cc):
    rules = [Rule(id="m", type="must", weight=2), Rule(id="s", type="should", weight=1)]
    confluences = [Confluence(id="c", weight=1, primary=True)]
    result = score_setup(
        rules=rules,
        rules_checked={**rc, "m": True, "s": True},
        confluences=confluences,
        conf_checked={**cc, "c": True},
        rubric=get_default_rubric(),
    )
    assert result.grade == "A+"
