"""Test cart line rules."""
import pytest
from core.models.cart import CartLine, MerchandiseKind
from patterns.domain_config import QuantityBoundMode, QuantityBounds
from patterns.rules_engine import (
    RuleResult,
    check_product_variant,
    check_quantity_bounds,
    check_vendor,
    evaluate_rules,
)


def variant(quantity=1, vendor="Acme", variant_id="gid://shopify/ProductVariant/1"):
    return CartLine(
        quantity=quantity,
        merchandise_kind=MerchandiseKind.PRODUCT_VARIANT,
        vendor=vendor,
        variant_id=variant_id,
    )


def test_product_variant_passes():
    result = check_product_variant(variant())
    assert result.passed
    assert result.rule_name == "product_variant"


def test_other_merchandise_fails():
    line = CartLine(quantity=1, merchandise_kind=MerchandiseKind.OTHER)
    result = check_product_variant(line)
    assert not result.passed
    assert "not a product variant" in result.message


def test_product_variant_without_id_fails():
    result = check_product_variant(variant(variant_id=None))
    assert not result.passed
    assert result.message == "Product variant has no id"


def test_vendor_inclusion():
    vendors = frozenset({"Acme"})
    assert check_vendor(variant(vendor="Acme"), vendors, include_vendors=True).passed
    assert not check_vendor(variant(vendor="Other"), vendors, include_vendors=True).passed


def test_vendor_exclusion():
    vendors = frozenset({"Acme"})
    assert not check_vendor(variant(vendor="Acme"), vendors, include_vendors=False).passed
    assert check_vendor(variant(vendor="Other"), vendors, include_vendors=False).passed


def test_vendor_is_case_sensitive():
    assert not check_vendor(variant(vendor="acme"), frozenset({"Acme"}), include_vendors=True).passed


def test_missing_vendor_never_allow_listed():
    line = variant(vendor=None)
    assert not check_vendor(line, frozenset({"Acme"}), include_vendors=True).passed
    assert check_vendor(line, frozenset({"Acme"}), include_vendors=False).passed


def test_inactive_quantity_bounds_pass():
    bounds = QuantityBounds(active=False, mode=QuantityBoundMode.BOTH, minimum=10, maximum=20)
    assert check_quantity_bounds(variant(quantity=1), bounds).passed


@pytest.mark.parametrize(
    "mode,quantity,expected",
    [
        (QuantityBoundMode.MINIMUM, 1, False),
        (QuantityBoundMode.MINIMUM, 2, True),
        (QuantityBoundMode.MINIMUM, 100, True),
        (QuantityBoundMode.MAXIMUM, 5, True),
        (QuantityBoundMode.MAXIMUM, 6, False),
        (QuantityBoundMode.BOTH, 1, False),
        (QuantityBoundMode.BOTH, 2, True),
        (QuantityBoundMode.BOTH, 3, True),
        (QuantityBoundMode.BOTH, 5, True),
        (QuantityBoundMode.BOTH, 6, False),
    ],
)
def test_quantity_bounds(mode, quantity, expected):
    bounds = QuantityBounds(active=True, mode=mode, minimum=2, maximum=5)
    assert check_quantity_bounds(variant(quantity=quantity), bounds).passed is expected


def test_unset_quantity_mode_fails_closed():
    bounds = QuantityBounds(active=True, mode=None, minimum=0, maximum=100)
    result = check_quantity_bounds(variant(quantity=3), bounds)
    assert not result.passed
    assert result.message == "Quantity bound mode not set"


def test_evaluate_rules_collects_failures():
    result = evaluate_rules(
        RuleResult(True, "a", "ok"),
        RuleResult(False, "b", "nope"),
    )
    assert not result.all_passed
    assert [r.rule_name for r in result.failed] == ["b"]


def test_evaluate_rules_all_pass():
    result = evaluate_rules(
        check_product_variant(variant()),
        check_vendor(variant(), frozenset({"Acme"}), include_vendors=True),
    )
    assert result.all_passed
    assert result.failed == []
