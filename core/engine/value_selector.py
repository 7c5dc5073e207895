"""Value Selector — turns qualifying targets into the function result.

Percentage and fixed amount are mutually exclusive per evaluation. A value
that would not discount anything (zero, negative) is suppressed so that
defaulted or unparsable numerics end as the canonical empty result.
"""

import logging
from decimal import Decimal
from typing import Optional, Sequence

from core.models.discount import (
    EMPTY_DISCOUNT,
    Discount,
    DiscountApplicationStrategy,
    FixedAmountValue,
    FunctionResult,
    PercentageValue,
    Target,
    Value,
)
from patterns.domain_config import DiscountValueConfig

logger = logging.getLogger(__name__)

MAX_PERCENTAGE = Decimal("100")


def format_decimal(value: Decimal) -> str:
    """Plain numeric string: no exponent, no trailing zeros ("15", "12.5")."""
    return format(value.normalize(), "f")


def select(config: DiscountValueConfig, targets: Sequence[Target]) -> Optional[Discount]:
    """Build the discount block, or None when the value discounts nothing."""
    if config.use_fixed_amount:
        if config.fixed_amount <= 0:
            logger.debug("Fixed amount %s is not positive, no discount", config.fixed_amount)
            return None
        value = Value(fixed_amount=FixedAmountValue(amount=format_decimal(config.fixed_amount)))
    else:
        if config.percentage <= 0:
            logger.debug("Percentage %s is not positive, no discount", config.percentage)
            return None
        percentage = min(config.percentage, MAX_PERCENTAGE)
        value = Value(percentage=PercentageValue(value=format_decimal(percentage)))

    return Discount(targets=tuple(targets), value=value, message=config.message)


def render_result(config: DiscountValueConfig, targets: Sequence[Target]) -> FunctionResult:
    """Wrap the selected discount in a single-block FIRST result."""
    if not targets:
        return EMPTY_DISCOUNT
    discount = select(config, targets)
    if discount is None:
        return EMPTY_DISCOUNT
    return FunctionResult(
        discount_application_strategy=DiscountApplicationStrategy.FIRST,
        discounts=(discount,),
    )
