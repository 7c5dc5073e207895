"""Discount function output contract.

Field aliases are the wire names consumed by the checkout settlement layer
and must not change. Build results with the snake_case names and serialize
with ``FunctionResult.to_wire()``.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


_WIRE = ConfigDict(frozen=True, populate_by_name=True)


class DiscountApplicationStrategy(str, Enum):
    FIRST = "FIRST"
    ALL = "ALL"


# ---------------------------------------------------------------------------
# Targets
# ---------------------------------------------------------------------------

class ProductVariantTarget(BaseModel):
    model_config = _WIRE

    id: str = Field(..., min_length=1)


class OrderSubtotalTarget(BaseModel):
    model_config = _WIRE

    excluded_variant_ids: tuple[str, ...] = Field(
        default_factory=tuple, alias="excludedVariantIds"
    )


class Target(BaseModel):
    """Either a single product variant or the whole order subtotal."""

    model_config = _WIRE

    product_variant: Optional[ProductVariantTarget] = Field(None, alias="productVariant")
    order_subtotal: Optional[OrderSubtotalTarget] = Field(None, alias="orderSubtotal")

    @model_validator(mode="after")
    def _exactly_one(self) -> "Target":
        if (self.product_variant is None) == (self.order_subtotal is None):
            raise ValueError("Target needs exactly one of productVariant or orderSubtotal")
        return self

    @classmethod
    def for_variant(cls, variant_id: str) -> "Target":
        return cls(product_variant=ProductVariantTarget(id=variant_id))

    @classmethod
    def whole_order(cls) -> "Target":
        return cls(order_subtotal=OrderSubtotalTarget())


# ---------------------------------------------------------------------------
# Values
# ---------------------------------------------------------------------------

class PercentageValue(BaseModel):
    model_config = _WIRE

    value: str


class FixedAmountValue(BaseModel):
    model_config = _WIRE

    amount: str


class Value(BaseModel):
    """Tagged union: percentage or fixed amount, never both."""

    model_config = _WIRE

    percentage: Optional[PercentageValue] = None
    fixed_amount: Optional[FixedAmountValue] = Field(None, alias="fixedAmount")

    @model_validator(mode="after")
    def _exactly_one(self) -> "Value":
        if (self.percentage is None) == (self.fixed_amount is None):
            raise ValueError("Value needs exactly one of percentage or fixedAmount")
        return self

    @property
    def is_percentage(self) -> bool:
        return self.percentage is not None


# ---------------------------------------------------------------------------
# Result
# ---------------------------------------------------------------------------

class Discount(BaseModel):
    """One discount block: targets, value and an optional message."""

    model_config = _WIRE

    targets: tuple[Target, ...]
    value: Value
    message: Optional[str] = None

    @model_validator(mode="after")
    def _has_targets(self) -> "Discount":
        if not self.targets:
            raise ValueError("Discount must have at least one target")
        return self


class FunctionResult(BaseModel):
    """What a discount function hands back to checkout."""

    model_config = _WIRE

    discount_application_strategy: DiscountApplicationStrategy = Field(
        DiscountApplicationStrategy.FIRST, alias="discountApplicationStrategy"
    )
    discounts: tuple[Discount, ...] = Field(default_factory=tuple)

    @model_validator(mode="after")
    def _single_block(self) -> "FunctionResult":
        if len(self.discounts) > 1:
            raise ValueError("At most one discount block is emitted per evaluation")
        return self

    @property
    def is_empty(self) -> bool:
        return not self.discounts

    def to_wire(self) -> dict[str, Any]:
        """Serialize using the wire field names."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


EMPTY_DISCOUNT = FunctionResult(
    discount_application_strategy=DiscountApplicationStrategy.FIRST,
    discounts=(),
)
