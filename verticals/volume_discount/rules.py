"""Volume discount eligibility — pure functions.

Composes the cart line rules from the rules engine pattern into the
eligibility filter: a line qualifies iff every rule passes.
"""

import logging

from core.models.cart import CartLine, CartSnapshot
from core.models.discount import Target
from patterns.domain_config import VolumeDiscountConfig
from patterns.rules_engine import (
    RuleSetResult,
    check_product_variant,
    check_quantity_bounds,
    check_vendor,
    evaluate_rules,
)

logger = logging.getLogger(__name__)


def evaluate_line(line: CartLine, config: VolumeDiscountConfig) -> RuleSetResult:
    """Run every eligibility rule against one cart line."""
    return evaluate_rules(
        check_product_variant(line),
        check_vendor(line, config.vendors, config.include_vendors),
        check_quantity_bounds(line, config.quantity),
    )


def filter_lines(config: VolumeDiscountConfig, cart: CartSnapshot) -> list[tuple[CartLine, RuleSetResult]]:
    """Evaluate every line, in cart order, keeping the rule outcomes."""
    evaluated = []
    for index, line in enumerate(cart.lines):
        outcome = evaluate_line(line, config)
        if not outcome.all_passed:
            logger.debug(
                "Line %d does not qualify: %s",
                index, "; ".join(r.message for r in outcome.failed),
            )
        evaluated.append((line, outcome))
    return evaluated


def qualifying_targets(evaluated: list[tuple[CartLine, RuleSetResult]]) -> tuple[Target, ...]:
    """Product variant targets for the lines whose rules all passed, in cart order."""
    return tuple(
        Target.for_variant(line.variant_id)
        for line, outcome in evaluated
        if outcome.all_passed
    )


def filter_targets(config: VolumeDiscountConfig, cart: CartSnapshot) -> tuple[Target, ...]:
    """Qualifying lines as product variant targets, in cart order."""
    return qualifying_targets(filter_lines(config, cart))
