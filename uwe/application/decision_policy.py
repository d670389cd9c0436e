"""Decision aggregation: fold per-rule results into one underwriting outcome.

Precedence:
    1. any blocking failure         -> DECLINED (reason: first such failure)
    2. any other failed rule        -> REQUIRES_MANUAL_REVIEW (reasons joined)
    3. otherwise                    -> APPROVED

A failure blocks when its rule is critical, or when the rule raised and
``errors_are_critical`` is set.
"""

import logging
from collections.abc import Iterable

from uwe.domain.models.rule_result import RuleResult
from uwe.domain.models.underwriting_result import UnderwritingResult

logger = logging.getLogger(__name__)

DEFAULT_REASON_SEPARATOR = "; "


def decide(
    rule_results: Iterable[RuleResult],
    *,
    reason_separator: str = DEFAULT_REASON_SEPARATOR,
    errors_are_critical: bool = True,
) -> UnderwritingResult:
    """Aggregate ``rule_results`` (in evaluation order) into a decision.

    Fail-fast normally leaves at most one blocking failure, but results
    gathered through other paths may hold several; the first one wins.
    """
    results = tuple(rule_results)

    blocking = [r for r in results if r.blocks(errors_are_critical=errors_are_critical)]
    if blocking:
        reason = blocking[0].message or blocking[0].name
        logger.info(f"Application DECLINED: {reason}")
        return UnderwritingResult.declined(results, reason)

    review_failures = [r for r in results if not r.passed]
    if review_failures:
        reason = reason_separator.join(r.message or r.name for r in review_failures)
        logger.info(f"Application REQUIRES MANUAL REVIEW: {reason}")
        return UnderwritingResult.requires_review(results, reason)

    logger.info("Application APPROVED")
    return UnderwritingResult.approved(results)
