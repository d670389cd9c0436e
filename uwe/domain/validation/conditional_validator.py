"""Conditional rule decorator.

Applicability is attached when the rule set is assembled, so the wrapped
rule never has to know when it applies.
"""

from typing import Callable

from uwe.domain.models.validation_result import ValidationResult
from uwe.domain.validation.validation_context import ValidationContext
from uwe.domain.validation.validation_rule import T, ValidationRule

Predicate = Callable[[T], bool]


class ConditionalValidator(ValidationRule[T]):
    """Runs the wrapped rule only when ``predicate(target)`` holds.

    When the predicate is false the wrapped rule is not invoked and the
    result is a plain success. Order, criticality and concurrency safety come
    from the wrapped rule. Wrapping another ConditionalValidator ANDs the predicates.
    """

    def __init__(self, predicate: Predicate, rule: ValidationRule[T]) -> None:
        self._predicate = predicate
        self._rule = rule

    @property
    def predicate(self) -> Predicate:
        return self._predicate

    @property
    def rule(self) -> ValidationRule[T]:
        return self._rule

    def evaluate(self, target: T, context: ValidationContext) -> ValidationResult:
        if not self._predicate(target):
            return ValidationResult.success()
        return self._rule.evaluate(target, context)

    @property
    def name(self) -> str:
        return f"Conditional[{self._rule.name}]"

    @property
    def order(self) -> int:
        return self._rule.order

    @property
    def critical(self) -> bool:
        return self._rule.critical

    @property
    def concurrent_safe(self) -> bool:
        return self._rule.concurrent_safe


def when(predicate: Predicate, rule: ValidationRule[T]) -> ConditionalValidator[T]:
    """Guard ``rule`` behind ``predicate``."""
    return ConditionalValidator(predicate, rule)
