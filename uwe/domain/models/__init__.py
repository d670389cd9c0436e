"""Domain models for the underwriting engine."""

from .validation_result import ValidationResult
from .rule_result import RuleResult
from .underwriting_result import UnderwritingDecision, UnderwritingResult


__all__ = [
    "ValidationResult",
    "RuleResult",
    "UnderwritingDecision",
    "UnderwritingResult",
]
