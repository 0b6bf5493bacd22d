"""Pure-function rules engine pattern.

Rules are stateless functions: (entity, context) -> RuleResult.
No database, no side effects, no network calls. This makes them:
- Trivially testable (pure input/output)
- Composable (chain multiple rules)
- Auditable (deterministic, explainable)

Used by the discount engine to record why each Buy X Get Y rule did or did
not activate for a cart.
"""

from dataclasses import dataclass, field
from typing import Any


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

@dataclass
class RuleResult:
    """Outcome of a single rule evaluation."""

    passed: bool
    rule_name: str
    message: str
    details: dict[str, Any] = field(default_factory=dict)


@dataclass
class RuleSetResult:
    """Aggregate outcome of multiple rules."""

    all_passed: bool
    results: list[RuleResult]
    failed: list[RuleResult] = field(default_factory=list)

    def __post_init__(self):
        self.failed = [r for r in self.results if not r.passed]
        self.all_passed = len(self.failed) == 0

    @property
    def passed(self) -> list[RuleResult]:
        return [r for r in self.results if r.passed]


# ---------------------------------------------------------------------------
# Generic rules
# ---------------------------------------------------------------------------

def check_minimum_quantity(
    rule_name: str,
    available: int | None,
    required: int,
) -> RuleResult:
    """Check that a counted quantity reaches a threshold.

    ``available`` of None means the item was not counted at all (for example
    a variant that is not in the cart), which never passes.
    """
    if available is None:
        return RuleResult(
            passed=False,
            rule_name=rule_name,
            message="Nothing to count",
            details={"available": 0, "required": required},
        )

    passed = available >= required
    return RuleResult(
        passed=passed,
        rule_name=rule_name,
        message=(
            f"Threshold met: {available} >= {required}"
            if passed
            else f"Threshold not met: {available} < {required}"
        ),
        details={"available": available, "required": required},
    )


# ---------------------------------------------------------------------------
# Rule composition
# ---------------------------------------------------------------------------

def evaluate_rules(*rules: RuleResult) -> RuleSetResult:
    """Compose multiple rule results into a single aggregate.

    Example::

        result = evaluate_rules(
            check_minimum_quantity("buy_x", available=3, required=2),
            check_minimum_quantity("get_y", available=1, required=1),
        )
        if result.all_passed:
            apply_discount(line)
    """
    return RuleSetResult(
        all_passed=all(r.passed for r in rules),
        results=list(rules),
    )
