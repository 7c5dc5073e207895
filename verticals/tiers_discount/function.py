"""Tiers discount function.

Entry point the function engine dispatches ``tiers-discount`` input to.
Registers itself with the engine on import.
"""

from typing import Any

from core.engine.function_engine import register_function
from core.engine.value_selector import render_result
from core.integrations.normalizer import default_normalizer
from core.models.discount import FunctionResult, Target
from patterns.domain_config import DiscountValueConfig
from patterns.workflow_states import EvaluationRun
from verticals.tiers_discount.config import TiersDiscountConfig, settings
from verticals.tiers_discount.rules import check_buyer_eligibility, resolve_tier

HANDLE = "tiers-discount"

INPUT_QUERY = """query RunInput {{
  cart {{
    buyerIdentity {{
      customer {{
        allowDiscount: hasAnyTag(tags: ["allow-discount"])
      }}
    }}
    cost {{
      subtotalAmount {{
        amount
      }}
    }}
  }}
  discountNode {{
    metafield(namespace: "{namespace}", key: "{key}") {{
      value
    }}
  }}
}}
""".format(namespace=settings.metafield_namespace, key=settings.metafield_key)

_normalizer = default_normalizer()


def evaluate(payload: dict[str, Any]) -> EvaluationRun:
    """Evaluate one function input and return the finished run."""
    run = EvaluationRun(function_handle=HANDLE)
    cart = _normalizer.normalize_cart(payload)

    gate = check_buyer_eligibility(cart)
    if not gate.passed:
        run.finish_empty(gate.message, gate.details)
        return run

    config = TiersDiscountConfig.from_metafield(_normalizer.metafield_value(payload))
    percentage = resolve_tier(config, cart.subtotal)
    if percentage is None:
        run.finish_empty(
            f"No tier threshold reached by subtotal {cart.subtotal}",
            {"tier_count": len(config.tiers)},
        )
        return run

    value = DiscountValueConfig(percentage=percentage, message=config.message)
    result = render_result(value, [Target.whole_order()])
    if result.is_empty:
        run.finish(result, f"Resolved tier percentage {percentage} is not positive")
    else:
        run.finish(result, f"Tier percentage {percentage} applies to subtotal {cart.subtotal}")
    return run


def run(payload: dict[str, Any]) -> FunctionResult:
    """Evaluate one function input and return the wire result."""
    return evaluate(payload).result


# Auto-register on import
register_function(HANDLE, evaluate)
