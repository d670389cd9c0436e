"""Human-readable evaluation trace on stderr."""

import click

from uwe.domain.events.event import UnderwritingEvent
from uwe.domain.events.event_types import UnderwritingEventType


class StderrEventObserver:
    """Writes one line per event, prefixed with the evaluation id.

    Example trace of a halted run::

        [uwe 3f9c0a1b2d4e] evaluation_started rules=5
        [uwe 3f9c0a1b2d4e] rule_evaluated NotBlank.first_name PASS
        [uwe 3f9c0a1b2d4e] rule_evaluated CountryRule FAIL: Country XX is not covered
        [uwe 3f9c0a1b2d4e] evaluation_halted CountryRule skipped=3
        [uwe 3f9c0a1b2d4e] decision_made DECLINED: Country XX is not covered

    With ``failures_only`` passing rules are left out of the trace.
    """

    def __init__(self, *, failures_only: bool = False) -> None:
        self._failures_only = failures_only

    def on_event(self, event: UnderwritingEvent) -> None:
        if self._failures_only and event.event_type is UnderwritingEventType.RULE_EVALUATED and event.passed:
            return
        click.echo(f"[uwe {event.evaluation_id}] {self._describe(event)}", err=True)

    @staticmethod
    def _describe(event: UnderwritingEvent) -> str:
        kind = event.event_type
        text = kind.value
        if kind is UnderwritingEventType.EVALUATION_STARTED:
            text += f" rules={event.metadata.get('rule_count', 0)}"
        elif kind is UnderwritingEventType.RULE_EVALUATED:
            text += f" {event.rule_name} {'PASS' if event.passed else 'FAIL'}"
            if not event.passed and event.message:
                text += f": {event.message}"
        elif kind is UnderwritingEventType.EVALUATION_HALTED:
            text += f" {event.rule_name} skipped={event.metadata.get('skipped', 0)}"
        elif kind is UnderwritingEventType.DECISION_MADE and event.decision is not None:
            text += f" {event.decision.name}"
            if event.message:
                text += f": {event.message}"
        return text
