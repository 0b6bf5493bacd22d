"""Parsing of untyped function input into engine types.

Two entry points, both total:

- ``parse_rules`` turns the configuration payload into a ``RuleSet``.
  Anything malformed is dropped; valid sibling rules still apply.
- ``parse_run_input`` turns the checkout function input document into a
  ``RunInput``. Cart lines that cannot be used are dropped.
"""

from __future__ import annotations

import json
from typing import Any

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from patterns.domain_config import DiscountEngineConfig
from verticals.discounts.engine.models import (
    BuyXGetYRule,
    CartLine,
    DiscountClass,
    RuleRejection,
    RuleSet,
    RunInput,
)

logger = structlog.get_logger(__name__)


# ---------------------------------------------------------------------------
# Rule records
# ---------------------------------------------------------------------------

class RuleRecord(BaseModel):
    """One entry of ``{"rules": [...]}`` as the admin store serialises it."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)

    buy_variant_id: str = Field(..., alias="buyVariantId", min_length=1)
    get_variant_id: str = Field(..., alias="getVariantId", min_length=1)
    buy_quantity: int = Field(..., alias="buyQuantity", gt=0)
    discount_percentage: float = Field(
        ..., alias="discountPercentage", gt=0, le=100, allow_inf_nan=False
    )

    @field_validator("buy_quantity", "discount_percentage", mode="before")
    @classmethod
    def _require_number(cls, value: Any) -> Any:
        # lax mode would coerce "2" and True; only JSON numbers are accepted
        if isinstance(value, bool):
            raise ValueError("must be a number, not a boolean")
        if isinstance(value, (str, bytes, bytearray)):
            raise ValueError("must be a number, not a string")
        return value

    @field_validator("buy_variant_id", "get_variant_id")
    @classmethod
    def _reject_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value

    def to_rule(self) -> BuyXGetYRule:
        return BuyXGetYRule(
            buy_variant_id=self.buy_variant_id,
            get_variant_id=self.get_variant_id,
            buy_quantity=self.buy_quantity,
            discount_percentage=self.discount_percentage,
        )


def _describe(exc: ValidationError) -> str:
    error = exc.errors()[0]
    loc = ".".join(str(part) for part in error.get("loc", ())) or "record"
    return f"{loc}: {error.get('msg', 'invalid')}"


def _decode(payload: Any) -> Any:
    """Decode a raw JSON body; anything undecodable becomes None."""
    if not isinstance(payload, (str, bytes, bytearray)):
        return payload
    try:
        return json.loads(payload)
    except ValueError:
        logger.debug("config_payload_undecodable", size=len(payload))
        return None


def parse_rules(
    payload: Any,
    config: DiscountEngineConfig | None = None,
) -> RuleSet:
    """Extract valid Buy X Get Y rules from a configuration payload.

    Never raises. An absent or malformed payload, a missing or non-list
    ``rules`` key and an empty list all give an empty ``RuleSet``.
    """
    config = config or DiscountEngineConfig.default()
    payload = _decode(payload)

    if not isinstance(payload, dict):
        return RuleSet()

    records = payload.get("rules")
    if not isinstance(records, list):
        return RuleSet()

    rules: list[BuyXGetYRule] = []
    rejected: list[RuleRejection] = []

    for index, record in enumerate(records):
        if not isinstance(record, dict):
            rejected.append(RuleRejection(index, "rule record is not an object"))
            continue
        try:
            rule = RuleRecord.model_validate(record).to_rule()
        except ValidationError as exc:
            rejected.append(RuleRejection(index, _describe(exc)))
            continue
        if rule.discount_percentage > config.max_percentage:
            rejected.append(
                RuleRejection(
                    index,
                    f"discountPercentage: above configured maximum {config.max_percentage}",
                )
            )
            continue
        rules.append(rule)

    for rejection in rejected:
        logger.debug("rule_rejected", index=rejection.index, reason=rejection.reason)

    return RuleSet(rules=tuple(rules), rejected=tuple(rejected))


# ---------------------------------------------------------------------------
# Function input document
# ---------------------------------------------------------------------------

def _positive_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, int) and value > 0:
        return value
    return None


def _non_empty_str(value: Any) -> str | None:
    if isinstance(value, str) and value:
        return value
    return None


def parse_cart_line(raw: Any) -> CartLine | None:
    """Parse one ``cart.lines[]`` entry. Unusable lines give None."""
    if not isinstance(raw, dict):
        return None

    line_id = _non_empty_str(raw.get("id"))
    quantity = _positive_int(raw.get("quantity"))
    if line_id is None or quantity is None:
        return None

    merchandise = raw.get("merchandise")
    variant_id = (
        _non_empty_str(merchandise.get("id")) if isinstance(merchandise, dict) else None
    )
    return CartLine(id=line_id, quantity=quantity, variant_id=variant_id)


def parse_discount_classes(raw: Any) -> frozenset[DiscountClass]:
    """Known discount classes from a list of enum names; unknown ones are ignored."""
    if not isinstance(raw, list):
        return frozenset()
    known = {c.value for c in DiscountClass}
    return frozenset(DiscountClass(v) for v in raw if isinstance(v, str) and v in known)


def parse_run_input(document: Any) -> RunInput:
    """Build a typed ``RunInput`` from the checkout function input document.

    Example::

        run_input = parse_run_input({
            "cart": {"lines": [{"id": "L1", "quantity": 3,
                                "merchandise": {"id": "V-shoe"}}]},
            "discount": {"discountClasses": ["PRODUCT"]},
            "fetchResult": {"jsonBody": {"rules": [...]}},
        })
    """
    if not isinstance(document, dict):
        return RunInput()

    cart = document.get("cart")
    raw_lines = cart.get("lines") if isinstance(cart, dict) else None
    lines: list[CartLine] = []
    dropped = 0
    for raw in raw_lines if isinstance(raw_lines, list) else ():
        line = parse_cart_line(raw)
        if line is None:
            dropped += 1
            continue
        lines.append(line)
    if dropped:
        logger.debug("cart_lines_dropped", count=dropped)

    discount = document.get("discount")
    classes = parse_discount_classes(
        discount.get("discountClasses") if isinstance(discount, dict) else None
    )

    configuration = None
    fetch_result = document.get("fetchResult")
    if isinstance(fetch_result, dict):
        configuration = fetch_result.get("jsonBody")
        if configuration is None:
            configuration = fetch_result.get("body")

    return RunInput(
        lines=tuple(lines),
        discount_classes=classes,
        configuration=configuration,
    )
