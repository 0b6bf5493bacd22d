"""Test config and function input parsing."""
import json

import pytest

from patterns.domain_config import DiscountEngineConfig
from verticals.discounts.engine import BuyXGetYRule, CartLine, DiscountClass, parse_rules, parse_run_input
from conftest import rule


VALID = rule("V-shoe", "V-sock", 2, 50)


@pytest.mark.parametrize(
    "payload",
    [None, 42, "not json", [], {}, {"rules": None}, {"rules": "x"}, {"rules": []}, {"other": [VALID]}],
)
def test_malformed_payload_gives_empty_rule_set(payload):
    rule_set = parse_rules(payload)
    assert not rule_set
    assert len(rule_set) == 0


def test_valid_rule_parsed():
    rule_set = parse_rules({"rules": [VALID]})
    assert list(rule_set) == [
        BuyXGetYRule(
            buy_variant_id="V-shoe",
            get_variant_id="V-sock",
            buy_quantity=2,
            discount_percentage=50.0,
        )
    ]
    assert rule_set.rejected == ()


def test_json_string_payload_decoded():
    rule_set = parse_rules(json.dumps({"rules": [VALID]}))
    assert len(rule_set) == 1


def test_non_object_entries_dropped_siblings_kept():
    rule_set = parse_rules({"rules": ["x", 3, None, VALID]})
    assert len(rule_set) == 1
    assert [r.index for r in rule_set.rejected] == [0, 1, 2]


@pytest.mark.parametrize(
    "bad",
    [
        rule("V-shoe", "V-sock", 0, 50),
        rule("V-shoe", "V-sock", -1, 50),
        rule("V-shoe", "V-sock", 1.5, 50),
        rule("V-shoe", "V-sock", True, 50),
        rule("V-shoe", "V-sock", "2", 50),
        rule("V-shoe", "V-sock", 2, "50"),
        rule("V-shoe", "V-sock", 2, True),
        rule("V-shoe", "V-sock", 2, 0),
        rule("V-shoe", "V-sock", 2, -5),
        rule("V-shoe", "V-sock", 2, 100.01),
        rule("V-shoe", "V-sock", 2, float("nan")),
        rule("V-shoe", "V-sock", 2, float("inf")),
        rule("", "V-sock", 2, 50),
        rule("V-shoe", "   ", 2, 50),
        rule("V-shoe", None, 2, 50),
        rule(7, "V-sock", 2, 50),
        {"getVariantId": "V-sock", "buyQuantity": 2, "discountPercentage": 50},
    ],
)
def test_invalid_rule_rejected(bad):
    rule_set = parse_rules({"rules": [bad, VALID]})
    assert len(rule_set) == 1
    assert rule_set.rules[0].get_variant_id == "V-sock"
    assert len(rule_set.rejected) == 1
    assert rule_set.rejected[0].index == 0


def test_numeric_strings_rejected_with_reason():
    rule_set = parse_rules({"rules": [rule("V", "V", "2", "50")]})
    assert not rule_set
    assert len(rule_set.rejected) == 1
    assert "string" in rule_set.rejected[0].reason


def test_percentage_of_exactly_100_allowed():
    rule_set = parse_rules({"rules": [rule("A", "B", 1, 100)]})
    assert rule_set.rules[0].discount_percentage == 100.0


def test_integral_float_quantity_accepted():
    rule_set = parse_rules({"rules": [rule("A", "B", 2.0, 10)]})
    assert rule_set.rules[0].buy_quantity == 2


def test_unknown_keys_ignored():
    record = {**VALID, "getQuantity": 1, "id": "abc"}
    assert len(parse_rules({"rules": [record]})) == 1


def test_configured_maximum_percentage():
    config = DiscountEngineConfig(max_percentage=40.0)
    rule_set = parse_rules({"rules": [rule("A", "B", 1, 50), rule("A", "B", 1, 40)]}, config)
    assert [r.discount_percentage for r in rule_set] == [40.0]
    assert "maximum" in rule_set.rejected[0].reason


def test_rejection_reason_names_field():
    rule_set = parse_rules({"rules": [rule("A", "B", 0, 10)]})
    assert rule_set.rejected[0].reason.startswith("buyQuantity")


# ---------------------------------------------------------------------------
# Function input document
# ---------------------------------------------------------------------------

def test_parse_run_input():
    run_input = parse_run_input(
        {
            "cart": {
                "lines": [
                    {"id": "L1", "quantity": 3, "merchandise": {"__typename": "ProductVariant", "id": "V1"}},
                    {"id": "L2", "quantity": 1, "merchandise": {"__typename": "CustomProduct"}},
                ]
            },
            "discount": {"discountClasses": ["PRODUCT", "SHIPPING", "BOGUS"]},
            "fetchResult": {"jsonBody": {"rules": []}},
        }
    )
    assert run_input.lines == (
        CartLine(id="L1", quantity=3, variant_id="V1"),
        CartLine(id="L2", quantity=1, variant_id=None),
    )
    assert run_input.discount_classes == frozenset({DiscountClass.PRODUCT, DiscountClass.SHIPPING})
    assert run_input.configuration == {"rules": []}


@pytest.mark.parametrize(
    "line",
    [
        {"quantity": 1, "merchandise": {"id": "V1"}},
        {"id": "", "quantity": 1},
        {"id": "L1", "quantity": 0},
        {"id": "L1", "quantity": -2},
        {"id": "L1", "quantity": "3"},
        {"id": "L1", "quantity": True},
        {"id": "L1", "quantity": 1.5},
        "L1",
    ],
)
def test_unusable_cart_lines_dropped(line):
    run_input = parse_run_input({"cart": {"lines": [line, {"id": "ok", "quantity": 1}]}})
    assert [line.id for line in run_input.lines] == ["ok"]


def test_body_used_when_json_body_missing():
    body = json.dumps({"rules": [VALID]})
    run_input = parse_run_input({"fetchResult": {"jsonBody": None, "body": body}})
    assert run_input.configuration == body


@pytest.mark.parametrize("document", [None, [], "x", {"cart": None}, {"cart": {"lines": "x"}}])
def test_malformed_document_gives_empty_input(document):
    run_input = parse_run_input(document)
    assert run_input.lines == ()
    assert run_input.discount_classes == frozenset()
    assert run_input.configuration is None
