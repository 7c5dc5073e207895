"""Tiers discount rules — pure functions.

The buyer gate and the tier resolver. Tiers are scanned in the order the
merchant stored them and every matching tier overwrites the previous
candidate, so with unsorted thresholds the last match wins, not the
largest threshold.
"""

import logging
from decimal import Decimal
from typing import Optional

from core.models.cart import CartSnapshot
from patterns.domain_config import TiersDiscountConfig
from patterns.rules_engine import RuleResult

logger = logging.getLogger(__name__)


def check_buyer_eligibility(cart: CartSnapshot) -> RuleResult:
    """Only buyers allowed discounts get a tier discount."""
    passed = cart.buyer_discount_eligible
    return RuleResult(
        passed=passed,
        rule_name="buyer_eligibility",
        message="Buyer is allowed discounts" if passed else "Buyer is not allowed discounts",
        details={"buyer_discount_eligible": passed},
    )


def resolve_tier(config: TiersDiscountConfig, subtotal: Decimal) -> Optional[Decimal]:
    """Percentage of the last tier, in stored order, whose threshold is reached."""
    applicable = None
    for index, tier in enumerate(config.tiers):
        if tier.threshold <= subtotal:
            logger.debug("Tier %d (threshold %s) matches subtotal %s", index, tier.threshold, subtotal)
            applicable = tier.percentage
    return applicable
