"""Pure Buy X Get Y discount engine.

No database, no network, no shared state. ``run_function`` takes the checkout
function input document and returns the output document; ``generate_discounts``
does the same on typed values.
"""

from verticals.discounts.engine.models import (
    BuyXGetYRule,
    CandidateTarget,
    CartLine,
    DiscountCandidate,
    DiscountClass,
    ProductDiscountsAddOperation,
    RuleRejection,
    RuleSet,
    RunInput,
    RunOutcome,
    RunResult,
    SelectionStrategy,
    VariantEntry,
    VariantIndex,
)
from verticals.discounts.engine.observer import (
    EvaluationObserver,
    EvaluationStats,
    RecordingObserver,
    SpanObserver,
    log_observer,
)
from verticals.discounts.engine.parser import parse_rules, parse_run_input
from verticals.discounts.engine.run import generate_discounts, run_function

__all__ = [
    # Types
    "BuyXGetYRule",
    "CandidateTarget",
    "CartLine",
    "DiscountCandidate",
    "DiscountClass",
    "ProductDiscountsAddOperation",
    "RuleRejection",
    "RuleSet",
    "RunInput",
    "RunOutcome",
    "RunResult",
    "SelectionStrategy",
    "VariantEntry",
    "VariantIndex",
    # Observability
    "EvaluationObserver",
    "EvaluationStats",
    "RecordingObserver",
    "SpanObserver",
    "log_observer",
    # Entry points
    "parse_rules",
    "parse_run_input",
    "generate_discounts",
    "run_function",
]
