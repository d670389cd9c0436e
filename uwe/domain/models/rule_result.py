"""Per-rule outcome record used for reporting after an evaluation pass."""

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, model_validator

from uwe.domain.models.validation_result import ValidationResult

if TYPE_CHECKING:
    from uwe.domain.validation.validation_rule import ValidationRule


class RuleResult(BaseModel):
    """Snapshot of one rule and its ValidationResult for a specific run.

    ``critical`` always reports the rule's own criticality. ``errored`` marks a
    failure recorded because the rule raised instead of returning a result;
    whether that blocks the application is a policy decision (see ``blocks``).
    """

    model_config = ConfigDict(frozen=True)

    name: str
    passed: bool
    critical: bool = False
    message: str | None = None
    errored: bool = False

    @model_validator(mode="after")
    def _validate_failure_has_message(self) -> "RuleResult":
        if not self.passed and (self.message is None or not self.message.strip()):
            raise ValueError(f"Failed rule '{self.name}' requires a message")
        if self.errored and self.passed:
            raise ValueError(f"Rule '{self.name}' cannot both pass and error")
        return self

    def blocks(self, *, errors_are_critical: bool = True) -> bool:
        """Whether this result declines the application and stops the run."""
        if self.passed:
            return False
        return self.critical or (self.errored and errors_are_critical)

    @classmethod
    def from_validation(
        cls, rule: "ValidationRule", result: ValidationResult
    ) -> "RuleResult":
        """Build the record for ``rule`` from the result it just returned."""
        return cls(
            name=rule.name,
            passed=result.valid,
            critical=rule.critical,
            message=result.message,
        )

    @classmethod
    def from_error(cls, rule: "ValidationRule", message: str) -> "RuleResult":
        """Build the record for ``rule`` after it raised during evaluation."""
        return cls(
            name=rule.name,
            passed=False,
            critical=rule.critical,
            message=message,
            errored=True,
        )
