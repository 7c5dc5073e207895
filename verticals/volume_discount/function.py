"""Volume discount function.

Entry point the function engine dispatches ``volume-discount`` input to.
Registers itself with the engine on import.
"""

from typing import Any

from core.engine.function_engine import register_function
from core.engine.value_selector import render_result
from core.integrations.normalizer import default_normalizer
from core.models.discount import FunctionResult
from patterns.workflow_states import EvaluationRun
from verticals.volume_discount.config import VolumeDiscountConfig, settings
from verticals.volume_discount.rules import filter_lines, qualifying_targets

HANDLE = "volume-discount"

INPUT_QUERY = """query RunInput {{
  cart {{
    lines {{
      quantity
      merchandise {{
        __typename
        ... on ProductVariant {{
          id
          product {{
            vendor
          }}
        }}
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
    config = VolumeDiscountConfig.from_metafield(_normalizer.metafield_value(payload))
    cart = _normalizer.normalize_cart(payload)

    evaluated = filter_lines(config, cart)
    for index, (_, outcome) in enumerate(evaluated):
        if not outcome.all_passed:
            run.note(f"line {index}: " + "; ".join(r.message for r in outcome.failed))
    targets = qualifying_targets(evaluated)

    if not targets:
        run.finish_empty(
            "No cart lines qualify for volume discount",
            {"line_count": cart.line_count},
        )
        return run

    result = render_result(config.value, targets)
    if result.is_empty:
        run.finish(result, "Configured discount value is not positive")
    else:
        run.finish(result, f"{len(targets)} of {cart.line_count} lines qualify")
    return run


def run(payload: dict[str, Any]) -> FunctionResult:
    """Evaluate one function input and return the wire result."""
    return evaluate(payload).result


# Auto-register on import
register_function(HANDLE, evaluate)
