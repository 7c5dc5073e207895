"""Cart snapshot models.

Read-only view of the checkout state handed to a discount function. Built
by the input normalizer from the platform's camelCase input document; the
engine only ever reads these.
"""

from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class MerchandiseKind(str, Enum):
    PRODUCT_VARIANT = "ProductVariant"
    OTHER = "Other"


class CartLine(BaseModel):
    """A single cart line."""

    model_config = ConfigDict(frozen=True)

    quantity: int = 0
    merchandise_kind: MerchandiseKind = MerchandiseKind.OTHER
    vendor: Optional[str] = None  # only set for product variants
    variant_id: Optional[str] = None


class CartSnapshot(BaseModel):
    """Cart state for one evaluation."""

    model_config = ConfigDict(frozen=True)

    lines: tuple[CartLine, ...] = Field(default_factory=tuple)
    subtotal: Decimal = Decimal("0")
    buyer_discount_eligible: bool = False

    @property
    def line_count(self) -> int:
        return len(self.lines)
