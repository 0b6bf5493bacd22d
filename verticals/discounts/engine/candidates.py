"""Candidate builder and result assembler."""

from __future__ import annotations

from typing import Iterable

import structlog

from patterns.domain_config import DiscountEngineConfig
from verticals.discounts.engine.evaluator import RuleEvaluation
from verticals.discounts.engine.models import (
    BuyXGetYRule,
    CandidateTarget,
    DiscountCandidate,
    ProductDiscountsAddOperation,
    RunResult,
    SelectionStrategy,
    VariantIndex,
)

logger = structlog.get_logger(__name__)


def format_number(value: float) -> str:
    """Render 50.0 as "50" and 12.5 as "12.5"."""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def candidate_message(rule: BuyXGetYRule, config: DiscountEngineConfig) -> str:
    return config.message_template.format(
        buy_quantity=rule.buy_quantity,
        percentage=format_number(rule.discount_percentage),
    )


# ---------------------------------------------------------------------------
# Candidate builder
# ---------------------------------------------------------------------------

def build_candidates(
    evaluations: Iterable[RuleEvaluation],
    config: DiscountEngineConfig | None = None,
) -> list[DiscountCandidate]:
    """One candidate per get line of every active rule.

    Order is rule configuration order, then cart order of the get lines.
    Each candidate discounts the full quantity of its line.
    """
    config = config or DiscountEngineConfig.default()
    candidates: list[DiscountCandidate] = []

    for evaluation in evaluations:
        if not evaluation.active:
            continue
        message = candidate_message(evaluation.rule, config)
        for line in evaluation.get_lines:
            candidates.append(
                DiscountCandidate(
                    message=message,
                    targets=(CandidateTarget(line_id=line.id, quantity=line.quantity),),
                    percentage=float(evaluation.rule.discount_percentage),
                )
            )

    return candidates


# ---------------------------------------------------------------------------
# Result assembler
# ---------------------------------------------------------------------------

def assemble_result(
    candidates: Iterable[DiscountCandidate],
    index: VariantIndex,
    config: DiscountEngineConfig | None = None,
) -> RunResult:
    """Wrap candidates into a single product discounts operation.

    Candidates targeting a line that is not in the cart are dropped. No
    candidates left means no operation at all.
    """
    config = config or DiscountEngineConfig.default()
    kept: list[DiscountCandidate] = []

    for candidate in candidates:
        unknown = [t.line_id for t in candidate.targets if t.line_id not in index.line_ids]
        if unknown or not candidate.targets:
            logger.error(
                "candidate_target_missing",
                candidate_message=candidate.message,
                unknown_line_ids=unknown,
            )
            continue
        kept.append(candidate)

    if not kept:
        return RunResult.empty()

    return RunResult(
        operations=(
            ProductDiscountsAddOperation(
                candidates=tuple(kept),
                selection_strategy=SelectionStrategy(config.selection_strategy),
            ),
        )
    )
