"""Underwriting decision and aggregate result models.

Three outcomes. Non-approved outcomes must say why; an approval carries no
reason and only passing rule results.
"""

from collections.abc import Iterable
from enum import Enum

from pydantic import BaseModel, ConfigDict, model_validator

from uwe.domain.models.rule_result import RuleResult


class UnderwritingDecision(str, Enum):
    """Final outcome of evaluating an application against its rule set."""

    APPROVED = "approved"
    REQUIRES_MANUAL_REVIEW = "requires_manual_review"
    DECLINED = "declined"

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]


_DESCRIPTIONS: dict[UnderwritingDecision, str] = {
    UnderwritingDecision.APPROVED: "Approved",
    UnderwritingDecision.REQUIRES_MANUAL_REVIEW: "Requires Manual Review",
    UnderwritingDecision.DECLINED: "Declined",
}


class UnderwritingResult(BaseModel):
    """Aggregate result of one evaluation run.

    Build it through the factory classmethods rather than the constructor:
    ``approved()``, ``approved(rule_results)``, ``requires_review(...)`` and
    ``declined(...)``. Invariant violations raise ``pydantic.ValidationError``.
    """

    model_config = ConfigDict(frozen=True)

    decision: UnderwritingDecision
    rule_results: tuple[RuleResult, ...] = ()
    decline_reason: str | None = None

    @model_validator(mode="after")
    def _validate_reason_matches_decision(self) -> "UnderwritingResult":
        if self.decision == UnderwritingDecision.APPROVED:
            if self.decline_reason is not None:
                raise ValueError("Approved result must not carry a decline reason")
            failed = [r.name for r in self.rule_results if not r.passed]
            if failed:
                raise ValueError(
                    f"Approved result cannot contain failed rules: {', '.join(failed)}"
                )
            return self

        if self.decline_reason is None:
            raise ValueError(
                f"{self.decision.description} decision requires a reason"
            )
        if not self.decline_reason.strip():
            raise ValueError("Decline reason cannot be empty or whitespace")
        return self

    @classmethod
    def approved(
        cls, rule_results: Iterable[RuleResult] | None = None
    ) -> "UnderwritingResult":
        return cls(
            decision=UnderwritingDecision.APPROVED,
            rule_results=tuple(rule_results or ()),
        )

    @classmethod
    def requires_review(
        cls, rule_results: Iterable[RuleResult], reason: str
    ) -> "UnderwritingResult":
        return cls(
            decision=UnderwritingDecision.REQUIRES_MANUAL_REVIEW,
            rule_results=tuple(rule_results),
            decline_reason=reason,
        )

    @classmethod
    def declined(
        cls, rule_results: Iterable[RuleResult], reason: str
    ) -> "UnderwritingResult":
        return cls(
            decision=UnderwritingDecision.DECLINED,
            rule_results=tuple(rule_results),
            decline_reason=reason,
        )

    @property
    def is_approved(self) -> bool:
        return self.decision == UnderwritingDecision.APPROVED

    @property
    def requires_manual_review(self) -> bool:
        return self.decision == UnderwritingDecision.REQUIRES_MANUAL_REVIEW

    @property
    def is_declined(self) -> bool:
        return self.decision == UnderwritingDecision.DECLINED

    @property
    def failed_rules(self) -> tuple[RuleResult, ...]:
        return tuple(r for r in self.rule_results if not r.passed)
