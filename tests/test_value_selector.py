"""Test value selection and the output contract."""
from decimal import Decimal

import pytest
from pydantic import ValidationError
from core.engine.value_selector import format_decimal, render_result, select
from core.models.discount import (
    EMPTY_DISCOUNT,
    Discount,
    FunctionResult,
    PercentageValue,
    FixedAmountValue,
    Target,
    Value,
)
from patterns.domain_config import DiscountValueConfig

TARGETS = [Target.for_variant("gid://shopify/ProductVariant/1")]


@pytest.mark.parametrize(
    "value,expected",
    [
        (Decimal("15"), "15"),
        (Decimal("15.0"), "15"),
        (Decimal("12.50"), "12.5"),
        (Decimal("100"), "100"),
        (Decimal("0.125"), "0.125"),
    ],
)
def test_format_decimal(value, expected):
    assert format_decimal(value) == expected


def test_percentage_value():
    discount = select(DiscountValueConfig(percentage=Decimal("15")), TARGETS)
    assert discount.value.percentage.value == "15"
    assert discount.value.fixed_amount is None


def test_fixed_amount_value():
    config = DiscountValueConfig(percentage=Decimal("15"), use_fixed_amount=True, fixed_amount=Decimal("5"))
    discount = select(config, TARGETS)
    assert discount.value.fixed_amount.amount == "5"
    assert discount.value.percentage is None


def test_percentage_clamped_to_100():
    discount = select(DiscountValueConfig(percentage=Decimal("150")), TARGETS)
    assert discount.value.percentage.value == "100"


@pytest.mark.parametrize(
    "config",
    [
        DiscountValueConfig(),
        DiscountValueConfig(percentage=Decimal("-5")),
        DiscountValueConfig(use_fixed_amount=True, fixed_amount=Decimal("0")),
    ],
)
def test_non_positive_values_suppressed(config):
    assert select(config, TARGETS) is None
    assert render_result(config, TARGETS) == EMPTY_DISCOUNT


def test_render_result_wire_shape():
    config = DiscountValueConfig(percentage=Decimal("15"), message="Volume deal")
    result = render_result(config, TARGETS)
    assert result.to_wire() == {
        "discountApplicationStrategy": "FIRST",
        "discounts": [
            {
                "targets": [{"productVariant": {"id": "gid://shopify/ProductVariant/1"}}],
                "value": {"percentage": {"value": "15"}},
                "message": "Volume deal",
            }
        ],
    }


def test_render_result_no_targets():
    assert render_result(DiscountValueConfig(percentage=Decimal("15")), []) == EMPTY_DISCOUNT


def test_empty_discount_wire_shape():
    assert EMPTY_DISCOUNT.to_wire() == {"discountApplicationStrategy": "FIRST", "discounts": []}
    assert EMPTY_DISCOUNT.is_empty


def test_whole_order_target_wire_shape():
    wire = Target.whole_order().model_dump(by_alias=True, exclude_none=True, mode="json")
    assert wire == {"orderSubtotal": {"excludedVariantIds": []}}


def test_value_rejects_both_kinds():
    with pytest.raises(ValidationError):
        Value(percentage=PercentageValue(value="10"), fixed_amount=FixedAmountValue(amount="5"))
    with pytest.raises(ValidationError):
        Value()


def test_discount_rejects_empty_targets():
    with pytest.raises(ValidationError):
        Discount(targets=(), value=Value(percentage=PercentageValue(value="10")))


def test_result_rejects_multiple_blocks():
    discount = Discount(targets=tuple(TARGETS), value=Value(percentage=PercentageValue(value="10")))
    with pytest.raises(ValidationError):
        FunctionResult(discounts=(discount, discount))


def test_result_parses_wire_names():
    result = FunctionResult.model_validate({
        "discountApplicationStrategy": "FIRST",
        "discounts": [{
            "targets": [{"orderSubtotal": {"excludedVariantIds": []}}],
            "value": {"fixedAmount": {"amount": "5"}},
        }],
    })
    assert not result.is_empty
    assert not result.discounts[0].value.is_percentage
