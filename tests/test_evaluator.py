"""Test the variant index, rule evaluator, candidate builder and assembler."""
import pytest

from patterns.domain_config import DiscountEngineConfig
from verticals.discounts.engine import (
    BuyXGetYRule,
    CandidateTarget,
    CartLine,
    DiscountCandidate,
    SelectionStrategy,
)
from verticals.discounts.engine.candidates import (
    assemble_result,
    build_candidates,
    candidate_message,
    format_number,
)
from verticals.discounts.engine.evaluator import evaluate_all, evaluate_rule
from verticals.discounts.engine.indexer import build_variant_index


CART = (
    CartLine(id="L1", quantity=2, variant_id="V-shoe"),
    CartLine(id="L2", quantity=1, variant_id="V-sock"),
    CartLine(id="L3", quantity=1, variant_id="V-shoe"),
    CartLine(id="L4", quantity=4, variant_id=None),
    CartLine(id="L5", quantity=3, variant_id="V-sock"),
)


def make_rule(buy="V-shoe", get="V-sock", qty=2, pct=50.0):
    return BuyXGetYRule(buy, get, qty, pct)


# ---------------------------------------------------------------------------
# Index
# ---------------------------------------------------------------------------

def test_index_groups_lines_in_cart_order():
    index = build_variant_index(CART)
    shoe = index.lookup("V-shoe")
    assert [line.id for line in shoe.lines] == ["L1", "L3"]
    assert shoe.total_quantity == 3
    assert [line.id for line in index.lookup("V-sock").lines] == ["L2", "L5"]


def test_index_skips_lines_without_variant():
    index = build_variant_index(CART)
    assert len(index) == 2
    assert "L4" in index.line_ids


def test_index_lookup_missing_variant():
    assert build_variant_index(CART).lookup("V-hat") is None


def test_index_is_read_only():
    index = build_variant_index(CART)
    with pytest.raises(TypeError):
        index.entries["V-hat"] = None


def test_empty_index():
    index = build_variant_index(())
    assert len(index) == 0
    assert index.line_ids == frozenset()


# ---------------------------------------------------------------------------
# Evaluator
# ---------------------------------------------------------------------------

def test_rule_active_when_threshold_met_across_lines():
    evaluation = evaluate_rule(make_rule(qty=3), build_variant_index(CART))
    assert evaluation.active
    assert [line.id for line in evaluation.get_lines] == ["L2", "L5"]
    assert evaluation.result.details["buy_quantity_in_cart"] == 3


def test_rule_inactive_below_threshold():
    evaluation = evaluate_rule(make_rule(qty=4), build_variant_index(CART))
    assert not evaluation.active
    assert evaluation.get_lines == ()


def test_rule_inactive_without_buy_variant():
    evaluation = evaluate_rule(make_rule(buy="V-hat", qty=1), build_variant_index(CART))
    assert not evaluation.active
    assert evaluation.result.message == "Buy variant not in cart"


def test_rule_inactive_without_get_variant():
    evaluation = evaluate_rule(make_rule(get="V-hat", qty=1), build_variant_index(CART))
    assert not evaluation.active
    assert evaluation.result.message == "Get variant not in cart"


def test_units_are_not_consumed_across_rules():
    index = build_variant_index(CART)
    evaluations = evaluate_all([make_rule(qty=3), make_rule(qty=3, pct=10.0)], index)
    assert [e.active for e in evaluations] == [True, True]


# ---------------------------------------------------------------------------
# Candidates
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("value,expected", [(50, "50"), (50.0, "50"), (12.5, "12.5"), (0.1, "0.1")])
def test_format_number(value, expected):
    assert format_number(value) == expected


def test_candidate_message():
    config = DiscountEngineConfig.default()
    assert candidate_message(make_rule(qty=2, pct=50.0), config) == "Buy 2 get 50% off"
    assert candidate_message(make_rule(qty=3, pct=12.5), config) == "Buy 3 get 12.5% off"


def test_one_candidate_per_get_line_with_full_quantity():
    index = build_variant_index(CART)
    candidates = build_candidates(evaluate_all([make_rule()], index))
    assert [c.targets for c in candidates] == [
        (CandidateTarget("L2", 1),),
        (CandidateTarget("L5", 3),),
    ]
    assert all(c.percentage == 50.0 for c in candidates)


def test_no_candidates_for_inactive_rules():
    index = build_variant_index(CART)
    assert build_candidates(evaluate_all([make_rule(qty=10)], index)) == []


def test_candidates_follow_rule_then_cart_order():
    index = build_variant_index(CART)
    rules = [make_rule(pct=10.0), make_rule(pct=90.0)]
    candidates = build_candidates(evaluate_all(rules, index))
    assert [(c.percentage, c.targets[0].line_id) for c in candidates] == [
        (10.0, "L2"), (10.0, "L5"), (90.0, "L2"), (90.0, "L5"),
    ]


def test_custom_message_template():
    config = DiscountEngineConfig(message_template="{percentage}% off with {buy_quantity}")
    index = build_variant_index(CART)
    candidates = build_candidates(evaluate_all([make_rule()], index), config)
    assert candidates[0].message == "50% off with 2"


# ---------------------------------------------------------------------------
# Assembler
# ---------------------------------------------------------------------------

def test_assemble_no_candidates_gives_no_operation():
    result = assemble_result([], build_variant_index(CART))
    assert result.operations == ()


def test_assemble_single_operation_with_first_strategy():
    index = build_variant_index(CART)
    candidates = build_candidates(evaluate_all([make_rule()], index))
    result = assemble_result(candidates, index)
    assert len(result.operations) == 1
    assert result.operations[0].selection_strategy is SelectionStrategy.FIRST
    assert result.candidates == tuple(candidates)


def test_first_is_the_only_selection_strategy():
    assert [s.value for s in SelectionStrategy] == ["FIRST"]


def test_assemble_drops_candidate_for_unknown_line():
    index = build_variant_index(CART)
    ghost = DiscountCandidate("Buy 1 get 5% off", (CandidateTarget("L99", 1),), 5.0)
    good = DiscountCandidate("Buy 1 get 5% off", (CandidateTarget("L2", 1),), 5.0)
    result = assemble_result([ghost, good], index)
    assert result.candidates == (good,)


def test_assemble_only_unknown_lines_gives_no_operation():
    index = build_variant_index(CART)
    ghost = DiscountCandidate("x", (CandidateTarget("L99", 1),), 5.0)
    assert assemble_result([ghost], index).operations == ()
