"""Observability hooks for engine runs.

The engine reports one ``EvaluationStats`` per run to every observer it was
given. Observers are plain callables so they can be swapped in tests.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Callable

import structlog

from verticals.discounts.engine.models import RunOutcome

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class EvaluationStats:
    """Counters describing one run."""

    outcome: RunOutcome
    cart_line_count: int = 0
    rule_count: int = 0
    rejected_rule_count: int = 0
    active_rule_count: int = 0
    candidate_count: int = 0

    def as_attributes(self) -> dict[str, Any]:
        data = asdict(self)
        data["outcome"] = self.outcome.value
        return data


EvaluationObserver = Callable[[EvaluationStats], None]


def log_observer(stats: EvaluationStats) -> None:
    """Default observer: one structured log event per run."""
    logger.info("discount_run_evaluated", **stats.as_attributes())


class SpanObserver:
    """Copy run stats onto an OpenTelemetry span as ``discount.*`` attributes."""

    def __init__(self, span, prefix: str = "discount"):
        self.span = span
        self.prefix = prefix

    def __call__(self, stats: EvaluationStats) -> None:
        if self.span is None:
            return
        for key, value in stats.as_attributes().items():
            self.span.set_attribute(f"{self.prefix}.{key}", value)


class RecordingObserver:
    """Keep every reported ``EvaluationStats``; handy in tests and debugging."""

    def __init__(self):
        self.records: list[EvaluationStats] = []

    def __call__(self, stats: EvaluationStats) -> None:
        self.records.append(stats)

    @property
    def last(self) -> EvaluationStats | None:
        return self.records[-1] if self.records else None
