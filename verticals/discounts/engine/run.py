"""Buy X Get Y discount function: the full pipeline in one call.

    gate -> parse rules -> index cart -> evaluate -> build candidates -> assemble

Runs are pure and independent. ``generate_discounts`` never raises: any
unexpected failure is logged and degrades to "no discount", so checkout is
never blocked.
"""

from __future__ import annotations

from typing import Any, Sequence

import structlog

from patterns.domain_config import DiscountEngineConfig
from verticals.discounts.engine.candidates import assemble_result, build_candidates
from verticals.discounts.engine.evaluator import evaluate_all
from verticals.discounts.engine.indexer import build_variant_index
from verticals.discounts.engine.models import (
    DiscountClass,
    RunInput,
    RunOutcome,
    RunResult,
)
from verticals.discounts.engine.observer import (
    EvaluationObserver,
    EvaluationStats,
    log_observer,
)
from verticals.discounts.engine.parser import parse_rules, parse_run_input

logger = structlog.get_logger(__name__)

DEFAULT_OBSERVERS: tuple[EvaluationObserver, ...] = (log_observer,)


def _run_pipeline(
    run_input: RunInput, config: DiscountEngineConfig
) -> tuple[RunResult, EvaluationStats]:
    line_count = len(run_input.lines)

    # Eligibility gate
    if DiscountClass(config.discount_class) not in run_input.discount_classes:
        return RunResult.empty(), EvaluationStats(
            RunOutcome.INELIGIBLE, cart_line_count=line_count
        )

    if not run_input.lines:
        return RunResult.empty(), EvaluationStats(RunOutcome.EMPTY_CART)

    rule_set = parse_rules(run_input.configuration, config)
    if not rule_set:
        return RunResult.empty(), EvaluationStats(
            RunOutcome.NO_VALID_RULES,
            cart_line_count=line_count,
            rejected_rule_count=len(rule_set.rejected),
        )

    index = build_variant_index(run_input.lines)
    evaluations = evaluate_all(rule_set, index)
    candidates = build_candidates(evaluations, config)
    result = assemble_result(candidates, index, config)

    stats = EvaluationStats(
        RunOutcome.APPLIED if result.operations else RunOutcome.NO_CANDIDATES,
        cart_line_count=line_count,
        rule_count=len(rule_set),
        rejected_rule_count=len(rule_set.rejected),
        active_rule_count=sum(1 for e in evaluations if e.active),
        candidate_count=len(result.candidates),
    )
    return result, stats


def _notify(observers: Sequence[EvaluationObserver], stats: EvaluationStats) -> None:
    for observer in observers:
        try:
            observer(stats)
        except Exception:
            logger.warning("discount_observer_failed", observer=repr(observer), exc_info=True)


def generate_discounts(
    run_input: RunInput,
    config: DiscountEngineConfig | None = None,
    observers: Sequence[EvaluationObserver] | None = None,
) -> RunResult:
    """Evaluate Buy X Get Y rules against a cart.

    Example::

        result = generate_discounts(run_input)
        for candidate in result.candidates:
            print(candidate.message, candidate.targets)
    """
    config = config or DiscountEngineConfig.default()
    observers = DEFAULT_OBSERVERS if observers is None else observers

    try:
        result, stats = _run_pipeline(run_input, config)
    except Exception:
        logger.exception("discount_run_failed")
        result, stats = RunResult.empty(), EvaluationStats(RunOutcome.FAILED)

    _notify(observers, stats)
    return result


def run_function(
    document: Any,
    config: DiscountEngineConfig | None = None,
    observers: Sequence[EvaluationObserver] | None = None,
) -> dict:
    """Wire-level entry point: function input document in, output document out."""
    try:
        run_input = parse_run_input(document)
    except Exception:
        logger.exception("discount_input_unparsable")
        _notify(DEFAULT_OBSERVERS if observers is None else observers,
                EvaluationStats(RunOutcome.FAILED))
        return RunResult.empty().to_dict()

    return generate_discounts(run_input, config, observers).to_dict()
