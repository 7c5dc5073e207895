"""Pure-function rules engine pattern.

Rules are stateless functions: (entity, context) -> RuleResult.
No I/O, no side effects, no hidden state. This makes them:
- Trivially testable (pure input/output)
- Composable (chain multiple rules)
- Auditable (deterministic, explainable)

Domain: deciding whether a cart line qualifies for a discount.
"""

from dataclasses import dataclass, field
from typing import Any

from core.models.cart import CartLine, MerchandiseKind
from patterns.domain_config import QuantityBoundMode, QuantityBounds


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

@dataclass
class RuleResult:
    """Outcome of a single rule evaluation."""

    passed: bool
    rule_name: str
    message: str
    details: dict[str, Any] = field(default_factory=dict)


@dataclass
class RuleSetResult:
    """Aggregate outcome of multiple rules."""

    all_passed: bool
    results: list[RuleResult]
    failed: list[RuleResult] = field(default_factory=list)

    def __post_init__(self):
        self.failed = [r for r in self.results if not r.passed]
        self.all_passed = len(self.failed) == 0


# ---------------------------------------------------------------------------
# Cart line rules
# ---------------------------------------------------------------------------

def check_product_variant(line: CartLine) -> RuleResult:
    """Only product variants with an id can be discount targets."""
    is_variant = line.merchandise_kind is MerchandiseKind.PRODUCT_VARIANT
    passed = is_variant and bool(line.variant_id)

    if passed:
        message = "Line is a product variant"
    elif is_variant:
        message = "Product variant has no id"
    else:
        message = f"Merchandise is {line.merchandise_kind.value}, not a product variant"

    return RuleResult(
        passed=passed,
        rule_name="product_variant",
        message=message,
        details={"merchandise_kind": line.merchandise_kind.value, "variant_id": line.variant_id},
    )


def check_vendor(
    line: CartLine,
    vendors: frozenset[str],
    include_vendors: bool,
) -> RuleResult:
    """Check the line's vendor against an allow-list or a block-list.

    Rules:
    - include_vendors=True: vendor must be listed
    - include_vendors=False: vendor must not be listed
    """
    listed = line.vendor is not None and line.vendor in vendors
    passed = listed if include_vendors else not listed

    if include_vendors:
        message = f"Vendor {line.vendor!r} " + ("is allowed" if passed else "is not in the allow-list")
    else:
        message = f"Vendor {line.vendor!r} " + ("is not blocked" if passed else "is in the block-list")

    return RuleResult(
        passed=passed,
        rule_name="vendor",
        message=message,
        details={"vendor": line.vendor, "include_vendors": include_vendors, "listed": listed},
    )


def check_quantity_bounds(line: CartLine, bounds: QuantityBounds) -> RuleResult:
    """Check the line quantity against the configured inclusive bounds.

    Inactive bounds pass. An active configuration without a mode fails
    closed: no line qualifies.
    """
    quantity = line.quantity
    details = {
        "quantity": quantity,
        "active": bounds.active,
        "mode": bounds.mode.value if bounds.mode else None,
        "minimum": bounds.minimum,
        "maximum": bounds.maximum,
    }

    if not bounds.active:
        return RuleResult(True, "quantity_bounds", "Quantity bounds not active", details)

    if bounds.mode is QuantityBoundMode.MINIMUM:
        passed = quantity >= bounds.minimum
        expected = f">= {bounds.minimum}"
    elif bounds.mode is QuantityBoundMode.MAXIMUM:
        passed = quantity <= bounds.maximum
        expected = f"<= {bounds.maximum}"
    elif bounds.mode is QuantityBoundMode.BOTH:
        passed = bounds.minimum <= quantity <= bounds.maximum
        expected = f"between {bounds.minimum} and {bounds.maximum}"
    else:
        return RuleResult(False, "quantity_bounds", "Quantity bound mode not set", details)

    return RuleResult(
        passed=passed,
        rule_name="quantity_bounds",
        message=(
            f"Quantity {quantity} is {expected}"
            if passed
            else f"Quantity {quantity} is not {expected}"
        ),
        details=details,
    )


# ---------------------------------------------------------------------------
# Rule composition
# ---------------------------------------------------------------------------

def evaluate_rules(*rules: RuleResult) -> RuleSetResult:
    """Compose multiple rule results into a single aggregate.

    Example::

        result = evaluate_rules(
            check_product_variant(line),
            check_vendor(line, config.vendors, config.include_vendors),
        )
        if result.all_passed:
            targets.append(Target.for_variant(line.variant_id))
    """
    return RuleSetResult(
        all_passed=all(r.passed for r in rules),
        results=list(rules),
    )
