"""Rule evaluator: decides which Buy X Get Y rules are active for a cart.

A rule is active iff the cart holds at least ``buy_quantity`` units of the
buy variant (summed over all its lines) and at least one line of the get
variant. Units are counted, not consumed: the same units of X may satisfy
any number of rules.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from patterns.rules_engine import RuleResult, check_minimum_quantity, evaluate_rules
from verticals.discounts.engine.models import BuyXGetYRule, CartLine, VariantIndex


@dataclass(frozen=True)
class RuleEvaluation:
    """A rule, the reason it is (in)active, and the lines it would discount."""

    rule: BuyXGetYRule
    result: RuleResult
    get_lines: tuple[CartLine, ...] = ()

    @property
    def active(self) -> bool:
        return self.result.passed


def evaluate_rule(rule: BuyXGetYRule, index: VariantIndex) -> RuleEvaluation:
    buy_entry = index.lookup(rule.buy_variant_id)
    get_entry = index.lookup(rule.get_variant_id)

    buy_total = buy_entry.total_quantity if buy_entry is not None else None
    get_lines = get_entry.lines if get_entry is not None else ()

    outcome = evaluate_rules(
        check_minimum_quantity(f"{rule.name}:buy", buy_total, rule.buy_quantity),
        check_minimum_quantity(f"{rule.name}:get", len(get_lines) or None, 1),
    )

    if buy_entry is None:
        message = "Buy variant not in cart"
    elif not get_lines:
        message = "Get variant not in cart"
    else:
        message = outcome.results[0].message

    result = RuleResult(
        passed=outcome.all_passed,
        rule_name=rule.name,
        message=message,
        details={
            "buy_quantity_in_cart": buy_total or 0,
            "buy_quantity_required": rule.buy_quantity,
            "get_line_count": len(get_lines),
        },
    )
    return RuleEvaluation(
        rule=rule,
        result=result,
        get_lines=get_lines if result.passed else (),
    )


def evaluate_all(
    rules: Iterable[BuyXGetYRule], index: VariantIndex
) -> list[RuleEvaluation]:
    """Evaluate every rule independently, in configuration order."""
    return [evaluate_rule(rule, index) for rule in rules]
