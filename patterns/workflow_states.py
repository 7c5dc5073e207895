"""Enum-based evaluation state machine.

Every discount function run starts EVALUATING and ends in exactly one
terminal state. The run records why it ended there, which is what the
CLI's --explain output and the debug logs show. Nothing here is part of
the wire output.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from core.models.discount import EMPTY_DISCOUNT, FunctionResult


# ---------------------------------------------------------------------------
# State definitions
# ---------------------------------------------------------------------------

class EvaluationState(str, Enum):
    """Discount evaluation states."""

    EVALUATING = "evaluating"
    EMPTY = "empty"
    DISCOUNTED = "discounted"


# ---------------------------------------------------------------------------
# Transition rules
# ---------------------------------------------------------------------------

# Allowed transitions: {current_state: [allowed_next_states]}
_EVALUATION_TRANSITIONS: dict[EvaluationState, list[EvaluationState]] = {
    EvaluationState.EVALUATING: [EvaluationState.EMPTY, EvaluationState.DISCOUNTED],
    EvaluationState.EMPTY: [],       # terminal
    EvaluationState.DISCOUNTED: [],  # terminal
}


# ---------------------------------------------------------------------------
# State machine
# ---------------------------------------------------------------------------

@dataclass
class WorkflowTransition:
    """Record of a single state transition."""

    from_state: str
    to_state: str
    reason: str
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class EvaluationRun:
    """One discount function evaluation with state tracking.

    Usage::

        run = EvaluationRun(function_handle="volume-discount")
        if not targets:
            run.finish_empty("No cart lines qualify")
        else:
            run.finish(render_result(config.value, targets), "Discount applied")
        return run  # the engine reads state, reason and result from the run
    """

    function_handle: str
    current_state: EvaluationState = EvaluationState.EVALUATING
    history: list[WorkflowTransition] = field(default_factory=list)
    notes: list[str] = field(default_factory=list)
    result: Optional[FunctionResult] = None

    def can_transition(self, to_state: EvaluationState) -> bool:
        """Check if a transition is allowed from the current state."""
        allowed = _EVALUATION_TRANSITIONS.get(self.current_state, [])
        return to_state in allowed

    def transition(
        self,
        to_state: EvaluationState,
        reason: str,
        metadata: dict[str, Any] | None = None,
    ) -> WorkflowTransition:
        """Execute a state transition.

        Raises ValueError if the transition is not allowed.
        """
        if not self.can_transition(to_state):
            allowed = _EVALUATION_TRANSITIONS.get(self.current_state, [])
            allowed_names = [s.value for s in allowed]
            raise ValueError(
                f"Cannot transition from {self.current_state.value} to {to_state.value}. "
                f"Allowed: {allowed_names}"
            )

        record = WorkflowTransition(
            from_state=self.current_state.value,
            to_state=to_state.value,
            reason=reason,
            metadata=metadata or {},
        )
        self.history.append(record)
        self.current_state = to_state
        return record

    def note(self, message: str) -> None:
        """Attach an explanation line (e.g. a failed rule) to the run."""
        self.notes.append(message)

    def finish_empty(self, reason: str, metadata: dict[str, Any] | None = None) -> FunctionResult:
        """End the run without a discount."""
        self.transition(EvaluationState.EMPTY, reason, metadata)
        self.result = EMPTY_DISCOUNT
        return self.result

    def finish(self, result: FunctionResult, reason: str) -> FunctionResult:
        """End the run with a rendered result, empty or not."""
        to_state = EvaluationState.EMPTY if result.is_empty else EvaluationState.DISCOUNTED
        self.transition(to_state, reason)
        self.result = result
        return result

    @property
    def is_terminal(self) -> bool:
        """Check if the run is in a terminal state."""
        return len(_EVALUATION_TRANSITIONS.get(self.current_state, [])) == 0

    @property
    def reason(self) -> Optional[str]:
        """Why the run ended, if it has."""
        return self.history[-1].reason if self.history else None
