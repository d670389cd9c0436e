"""Abstract base class for validation rules.

Concrete business rules (age limits, country eligibility, ...) live with the
application that owns the target type and implement this contract.
"""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from uwe.domain.models.validation_result import ValidationResult
from uwe.domain.validation.validation_context import ValidationContext

T = TypeVar("T")

# Lower runs first. Suggested bands: 1-99 structural, 100-199 business,
# 200-299 reference data, 300+ complex cross-field checks.
DEFAULT_RULE_ORDER = 100


class ValidationRule(ABC, Generic[T]):
    """Abstract interface for a single check over a target of type ``T``.

    Implementations are stateless: they read the target (and the shared
    context) and return a ValidationResult. They must not mutate the target.
    """

    @abstractmethod
    def evaluate(self, target: T, context: ValidationContext) -> ValidationResult:
        """Check ``target`` and return success or a failure with a message.

        Args:
            target: Object under validation (read-only)
            context: Shared data for this evaluation pass

        Returns:
            ValidationResult; failures are returned, never raised
        """
        ...

    @property
    def name(self) -> str:
        """Stable identifier used in reports. Defaults to the class name."""
        return type(self).__name__

    @property
    def order(self) -> int:
        """Execution position; lower runs first, ties keep insertion order."""
        return DEFAULT_RULE_ORDER

    @property
    def critical(self) -> bool:
        """Whether a failure of this rule stops the remaining evaluation."""
        return False

    @property
    def concurrent_safe(self) -> bool:
        """Whether this rule may run in parallel with its non-critical neighbours.

        Only return True for rules that neither write context attributes nor
        read ones set by earlier rules. Rules that are not concurrent-safe
        always run in order, after everything before them has been recorded.
        """
        return False

    def __repr__(self) -> str:
        return f"<{type(self).__name__} name={self.name!r} order={self.order} critical={self.critical}>"
