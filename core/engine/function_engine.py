"""Function Engine — dispatches function input to registered discount functions.

Each discount function registers itself under its extension handle; the
engine dispatches on that handle. The engine is the one boundary that
turns an unexpected exception into the canonical empty result, so a
checkout never fails because of a discount function.
"""

import logging
from typing import Any, Callable, Dict

from core.models.discount import EMPTY_DISCOUNT, FunctionResult
from core.observability.otel_setup import create_function_span
from patterns.workflow_states import EvaluationRun

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Function type and registry
# ---------------------------------------------------------------------------

DiscountFunction = Callable[[Dict[str, Any]], EvaluationRun]

_FUNCTIONS: Dict[str, DiscountFunction] = {}


def register_function(handle: str, function: DiscountFunction) -> None:
    """Register a discount function under its handle.

    Example::

        def evaluate(payload):
            run = EvaluationRun(function_handle="volume-discount")
            ...
            return run

        register_function("volume-discount", evaluate)
    """
    _FUNCTIONS[handle] = function


def deregister_function(handle: str) -> None:
    """Remove a discount function."""
    _FUNCTIONS.pop(handle, None)


def get_function(handle: str) -> DiscountFunction:
    """Return the function registered under a handle.

    Raises ValueError if nothing is registered under it.
    """
    function = _FUNCTIONS.get(handle)
    if function is None:
        raise ValueError(f"Function not found: {handle}")
    return function


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------

class FunctionEngine:
    """Runs discount functions against function input documents.

    Usage::

        engine = FunctionEngine()
        result = engine.run("volume-discount", payload)
        print(json.dumps(result.to_wire()))
    """

    def __init__(self, tracer: Any = None):
        self.tracer = tracer

    def evaluate(self, handle: str, payload: Any) -> EvaluationRun:
        """Evaluate a payload and return the full run, trace included.

        Args:
            handle: Extension handle the function is registered under.
            payload: The decoded function input document.

        Returns:
            A terminal EvaluationRun whose ``result`` is always set.
        """
        function = get_function(handle)
        if not isinstance(payload, dict):
            logger.warning("Function input for %s is not a JSON object", handle)
            payload = {}

        span = create_function_span(self.tracer, handle, payload)
        try:
            run = function(payload)
            if not isinstance(run, EvaluationRun) or not run.is_terminal or run.result is None:
                raise TypeError(f"{handle} did not return a finished EvaluationRun: {run!r}")
        except Exception:
            logger.exception("Discount function %s failed, returning no discount", handle)
            run = EvaluationRun(function_handle=handle)
            run.finish_empty("Function raised an unexpected error")
        finally:
            if span is not None:
                span.end()

        logger.debug("%s ended %s: %s", handle, run.current_state.value, run.reason)
        return run

    def run(self, handle: str, payload: Any) -> FunctionResult:
        """Evaluate a payload and return only the wire result."""
        run = self.evaluate(handle, payload)
        return run.result if run.result is not None else EMPTY_DISCOUNT

    @staticmethod
    def list_functions() -> list[str]:
        """Return the handles of all registered functions."""
        return sorted(_FUNCTIONS.keys())
