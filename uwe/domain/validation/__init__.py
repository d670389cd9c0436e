"""Rule contract and composition."""

from .validation_context import ValidationContext
from .validation_rule import DEFAULT_RULE_ORDER, ValidationRule
from .conditional_validator import ConditionalValidator, when

__all__ = [
    "ValidationContext",
    "DEFAULT_RULE_ORDER",
    "ValidationRule",
    "ConditionalValidator",
    "when",
]
