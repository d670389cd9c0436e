"""Underwriting observer protocol."""

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from uwe.domain.events.event import UnderwritingEvent


class UnderwritingObserver(Protocol):
    """Receives progress of evaluation runs.

    ``on_event`` runs synchronously on the evaluating thread, between rules,
    so a slow observer slows the evaluation. Exceptions are logged by the
    emitter and do not change the decision.
    """

    def on_event(self, event: "UnderwritingEvent") -> None: ...
