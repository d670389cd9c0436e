"""Progress notifications for underwriting evaluations."""

from uwe.domain.events.event_types import UnderwritingEventType
from uwe.domain.events.event import UnderwritingEvent
from uwe.domain.events.observer import UnderwritingObserver
from uwe.domain.events.emitter import UnderwritingEventEmitter
from uwe.domain.events.stderr_observer import StderrEventObserver

__all__ = [
    "UnderwritingEventType",
    "UnderwritingEvent",
    "UnderwritingObserver",
    "UnderwritingEventEmitter",
    "StderrEventObserver",
]
