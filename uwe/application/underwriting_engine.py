"""Rule-set orchestration.

Sorts the rules, runs them against the target, records each outcome and
folds the records into an UnderwritingResult.

Fail-fast: the first failing critical rule ends the run. The recorded
results then only cover the rules that actually ran.
"""

import logging
import uuid
from collections.abc import Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Generic

from uwe.application.config_loader import load_engine_config
from uwe.application.config_models import EngineConfig
from uwe.application.decision_policy import decide
from uwe.application.rule_set import sort_rules
from uwe.domain.errors import RuleEvaluationError
from uwe.domain.events.emitter import UnderwritingEventEmitter
from uwe.domain.events.event import UnderwritingEvent
from uwe.domain.events.event_types import UnderwritingEventType
from uwe.domain.models.rule_result import RuleResult
from uwe.domain.models.underwriting_result import UnderwritingResult
from uwe.domain.validation.validation_context import ValidationContext
from uwe.domain.validation.validation_rule import T, ValidationRule

logger = logging.getLogger(__name__)


class UnderwritingEngine(Generic[T]):
    """Evaluates rule sets and produces underwriting decisions.

    Holds no per-run state, so one engine can serve many evaluations.
    """

    def __init__(
        self,
        config: EngineConfig | None = None,
        *,
        event_emitter: UnderwritingEventEmitter | None = None,
    ) -> None:
        self._config = config or EngineConfig()
        self._emitter = event_emitter or UnderwritingEventEmitter()

    @classmethod
    def from_config(
        cls,
        *,
        project_root: Path | None = None,
        user_home: Path | None = None,
        event_emitter: UnderwritingEventEmitter | None = None,
    ) -> "UnderwritingEngine[T]":
        config = load_engine_config(project_root=project_root, user_home=user_home)
        return cls(config, event_emitter=event_emitter)

    @property
    def config(self) -> EngineConfig:
        return self._config

    @property
    def event_emitter(self) -> UnderwritingEventEmitter:
        return self._emitter

    def evaluate(
        self,
        target: T,
        context: ValidationContext | None,
        rules: Iterable[ValidationRule[T]],
    ) -> UnderwritingResult:
        """Run ``rules`` against ``target`` and return the decision.

        Args:
            target: Application object under evaluation (never mutated here)
            context: Shared context for this run; a fresh one if None
            rules: Rules in any order; sorted by ``order`` before running

        Returns:
            UnderwritingResult with one RuleResult per rule that ran
        """
        context = context if context is not None else ValidationContext()
        ordered = sort_rules(rules)
        evaluation_id = uuid.uuid4().hex[:12]

        logger.info(
            f"Starting underwriting evaluation {evaluation_id} "
            f"({len(ordered)} rules, max_workers={self._config.max_workers})"
        )
        self._emit(
            UnderwritingEventType.EVALUATION_STARTED,
            evaluation_id,
            metadata={"rule_count": len(ordered)},
        )

        if self._config.max_workers > 1:
            rule_results = self._run_concurrent(ordered, target, context, evaluation_id)
        else:
            rule_results = self._run_sequential(ordered, target, context, evaluation_id)

        result = decide(
            rule_results,
            reason_separator=self._config.reason_separator,
            errors_are_critical=self._config.errors_are_critical,
        )

        self._emit(
            UnderwritingEventType.DECISION_MADE,
            evaluation_id,
            decision=result.decision,
            message=result.decline_reason,
            metadata={"rules_run": len(rule_results), "rules_total": len(ordered)},
        )
        return result

    def _run_sequential(
        self,
        ordered: Sequence[ValidationRule[T]],
        target: T,
        context: ValidationContext,
        evaluation_id: str,
    ) -> list[RuleResult]:
        results: list[RuleResult] = []
        for rule in ordered:
            rule_result = self._evaluate_rule(rule, target, context)
            if self._record(results, rule_result, len(ordered), evaluation_id):
                break
        return results

    def _run_concurrent(
        self,
        ordered: Sequence[ValidationRule[T]],
        target: T,
        context: ValidationContext,
        evaluation_id: str,
    ) -> list[RuleResult]:
        """Evaluate runs of concurrent-safe, non-critical rules in parallel.

        Each batch is collected in rule order before any result is recorded.
        Every other rule runs alone once the rules before it are recorded, so
        context written by an earlier rule is visible to it and nothing after
        a blocking failure is dispatched. A batched rule that raises under
        ``errors_are_critical`` still stops the run; its batch neighbours have
        already run but their results are dropped.
        """
        results: list[RuleResult] = []
        with ThreadPoolExecutor(max_workers=self._config.max_workers) as pool:
            for batch in _batches(ordered):
                if len(batch) == 1:
                    batch_results = [self._evaluate_rule(batch[0], target, context)]
                else:
                    futures = [
                        pool.submit(self._evaluate_rule, rule, target, context)
                        for rule in batch
                    ]
                    batch_results = [future.result() for future in futures]

                for rule_result in batch_results:
                    if self._record(results, rule_result, len(ordered), evaluation_id):
                        return results
        return results

    def _evaluate_rule(
        self,
        rule: ValidationRule[T],
        target: T,
        context: ValidationContext,
    ) -> RuleResult:
        logger.debug(f"Evaluating rule: {rule.name}")
        try:
            outcome = rule.evaluate(target, context)
        except Exception as e:
            error = RuleEvaluationError(rule.name, e)
            logger.error(f"Error evaluating rule {rule.name}: {e}", exc_info=True)
            return RuleResult.from_error(rule, str(error))

        rule_result = RuleResult.from_validation(rule, outcome)
        logger.debug(
            f"Rule {rule.name} result: {'PASS' if rule_result.passed else 'FAIL'}"
        )
        return rule_result

    def _record(
        self,
        results: list[RuleResult],
        rule_result: RuleResult,
        total: int,
        evaluation_id: str,
    ) -> bool:
        """Append ``rule_result``; return True when the run must stop."""
        results.append(rule_result)
        self._emit(
            UnderwritingEventType.RULE_EVALUATED,
            evaluation_id,
            rule_name=rule_result.name,
            passed=rule_result.passed,
            message=rule_result.message,
        )
        if not rule_result.blocks(errors_are_critical=self._config.errors_are_critical):
            return False

        skipped = total - len(results)
        logger.info(
            f"Blocking failure in rule {rule_result.name}; skipping {skipped} remaining rules"
        )
        self._emit(
            UnderwritingEventType.EVALUATION_HALTED,
            evaluation_id,
            rule_name=rule_result.name,
            passed=False,
            message=rule_result.message,
            metadata={"skipped": skipped},
        )
        return True

    def _emit(
        self,
        event_type: UnderwritingEventType,
        evaluation_id: str,
        *,
        metadata: dict[str, Any] | None = None,
        **fields: Any,
    ) -> None:
        if not self._emitter.has_observers:
            return
        self._emitter.emit(
            UnderwritingEvent(
                event_type=event_type,
                evaluation_id=evaluation_id,
                timestamp=datetime.now(timezone.utc),
                metadata=metadata or {},
                **fields,
            )
        )


def _batches(
    ordered: Sequence[ValidationRule[T]],
) -> list[list[ValidationRule[T]]]:
    """Group consecutive concurrent-safe, non-critical rules; every other rule stands alone."""
    batches: list[list[ValidationRule[T]]] = []
    current: list[ValidationRule[T]] = []
    for rule in ordered:
        if rule.critical or not rule.concurrent_safe:
            if current:
                batches.append(current)
                current = []
            batches.append([rule])
        else:
            current.append(rule)
    if current:
        batches.append(current)
    return batches


def evaluate(
    target: T,
    context: ValidationContext | None,
    rules: Iterable[ValidationRule[T]],
) -> UnderwritingResult:
    """Evaluate ``rules`` against ``target`` with default engine settings."""
    return UnderwritingEngine().evaluate(target, context, rules)
