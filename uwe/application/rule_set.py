"""Rule set assembly."""

from collections.abc import Iterable, Iterator
from typing import Generic

from uwe.domain.validation.conditional_validator import Predicate, when
from uwe.domain.validation.validation_rule import T, ValidationRule


class RuleSet(Generic[T]):
    """Ordered collection of rules assembled once and reused across runs.

    Insertion order is kept; ``sorted_rules()`` gives the evaluation order
    (ascending ``order``, ties in insertion order).
    """

    def __init__(self, rules: Iterable[ValidationRule[T]] = ()) -> None:
        self._rules: list[ValidationRule[T]] = list(rules)

    def add(self, rule: ValidationRule[T]) -> "RuleSet[T]":
        self._rules.append(rule)
        return self

    def add_all(self, rules: Iterable[ValidationRule[T]]) -> "RuleSet[T]":
        self._rules.extend(rules)
        return self

    def add_when(self, predicate: Predicate, rule: ValidationRule[T]) -> "RuleSet[T]":
        """Add ``rule`` guarded by ``predicate``."""
        return self.add(when(predicate, rule))

    def sorted_rules(self) -> tuple[ValidationRule[T], ...]:
        return sort_rules(self._rules)

    def names(self) -> list[str]:
        return [rule.name for rule in self.sorted_rules()]

    def __iter__(self) -> Iterator[ValidationRule[T]]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)


def sort_rules(rules: Iterable[ValidationRule[T]]) -> tuple[ValidationRule[T], ...]:
    """Sort by ``order`` ascending. ``sorted`` is stable, so ties keep input order."""
    return tuple(sorted(rules, key=lambda rule: rule.order))
