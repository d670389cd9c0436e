"""Domain-level exceptions for the underwriting engine.

A rule that *fails* returns a failed ValidationResult. These exceptions are
for rules that *break*.
"""


class UnderwritingError(Exception):
    """Base class for underwriting engine errors."""

    pass


class RuleEvaluationError(UnderwritingError):
    """Wraps an exception a rule raised instead of returning a result."""

    def __init__(self, rule_name: str, cause: Exception) -> None:
        super().__init__(f"Error evaluating rule: {cause}")
        self.rule_name = rule_name
        self.cause = cause
