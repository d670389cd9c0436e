"""Kinds of progress event an evaluation run emits."""

from enum import Enum


class UnderwritingEventType(str, Enum):
    """Typed events emitted during an evaluation run."""

    EVALUATION_STARTED = "evaluation_started"
    RULE_EVALUATED = "rule_evaluated"

    # A blocking failure stopped the run; later rules were not evaluated
    EVALUATION_HALTED = "evaluation_halted"

    DECISION_MADE = "decision_made"
