"""Typed values that flow through the discount engine.

Everything here is a frozen dataclass: built once per run, never mutated,
discarded when the run ends. Untyped payloads stop at the parser; past it
only these types are used.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class DiscountClass(str, Enum):
    """Discount classes a checkout calculation may request."""

    PRODUCT = "PRODUCT"
    ORDER = "ORDER"
    SHIPPING = "SHIPPING"


class SelectionStrategy(str, Enum):
    """How the checkout picks one candidate when several target a line.

    The engine always emits FIRST: candidates are ordered by rule
    configuration order, so the earliest matching rule wins.
    """

    FIRST = "FIRST"


class RunOutcome(str, Enum):
    """Terminal state of one engine run."""

    INELIGIBLE = "ineligible"
    EMPTY_CART = "empty_cart"
    NO_VALID_RULES = "no_valid_rules"
    NO_CANDIDATES = "no_candidates"
    APPLIED = "applied"
    FAILED = "failed"


# ---------------------------------------------------------------------------
# Input
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CartLine:
    """One line of the cart snapshot."""

    id: str
    quantity: int
    variant_id: str | None = None


@dataclass(frozen=True)
class BuyXGetYRule:
    """Buy ``buy_quantity`` of one variant, get a percentage off another."""

    buy_variant_id: str
    get_variant_id: str
    buy_quantity: int
    discount_percentage: float

    @property
    def name(self) -> str:
        return f"buy_x_get_y:{self.buy_variant_id}->{self.get_variant_id}"


@dataclass(frozen=True)
class RuleRejection:
    """A rule record dropped by the parser, with its position and reason."""

    index: int
    reason: str


@dataclass(frozen=True)
class RuleSet:
    """Valid rules in configuration order plus the records that were dropped."""

    rules: tuple[BuyXGetYRule, ...] = ()
    rejected: tuple[RuleRejection, ...] = ()

    def __bool__(self) -> bool:
        return bool(self.rules)

    def __len__(self) -> int:
        return len(self.rules)

    def __iter__(self):
        return iter(self.rules)


@dataclass(frozen=True)
class RunInput:
    """Typed view of one checkout function invocation."""

    lines: tuple[CartLine, ...] = ()
    discount_classes: frozenset[DiscountClass] = frozenset()
    # Opaque until the config parser has looked at it
    configuration: Any = None


# ---------------------------------------------------------------------------
# Index
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class VariantEntry:
    """Cart lines for one variant, in cart order, and their summed quantity."""

    lines: tuple[CartLine, ...]
    total_quantity: int


@dataclass(frozen=True)
class VariantIndex:
    """Read-only lookup from variant id to its cart lines."""

    entries: Mapping[str, VariantEntry] = field(
        default_factory=lambda: MappingProxyType({})
    )
    line_ids: frozenset[str] = frozenset()

    def lookup(self, variant_id: str) -> VariantEntry | None:
        return self.entries.get(variant_id)

    def __len__(self) -> int:
        return len(self.entries)


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CandidateTarget:
    """A cart line and the quantity of it to discount."""

    line_id: str
    quantity: int

    def to_dict(self) -> dict:
        return {"cartLine": {"id": self.line_id, "quantity": self.quantity}}


@dataclass(frozen=True)
class DiscountCandidate:
    """A proposed percentage discount on one or more cart lines."""

    message: str
    targets: tuple[CandidateTarget, ...]
    percentage: float

    def to_dict(self) -> dict:
        return {
            "message": self.message,
            "targets": [t.to_dict() for t in self.targets],
            "value": {"percentage": {"value": self.percentage}},
        }


@dataclass(frozen=True)
class ProductDiscountsAddOperation:
    """The single "add product discounts" operation handed to checkout."""

    candidates: tuple[DiscountCandidate, ...]
    selection_strategy: SelectionStrategy = SelectionStrategy.FIRST

    def to_dict(self) -> dict:
        return {
            "productDiscountsAdd": {
                "candidates": [c.to_dict() for c in self.candidates],
                "selectionStrategy": self.selection_strategy.value,
            }
        }


@dataclass(frozen=True)
class RunResult:
    """Zero or one operations produced by a run."""

    operations: tuple[ProductDiscountsAddOperation, ...] = ()

    @classmethod
    def empty(cls) -> "RunResult":
        return cls()

    @property
    def candidates(self) -> tuple[DiscountCandidate, ...]:
        return tuple(c for op in self.operations for c in op.candidates)

    def to_dict(self) -> dict:
        return {"operations": [op.to_dict() for op in self.operations]}
