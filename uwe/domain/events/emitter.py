"""Fan-out of evaluation progress to observers.

One emitter may be shared by many engines and many concurrent evaluations.
Each event is delivered on the thread that called ``evaluate``, never from a
pool worker, and observers see an evaluation's events in this order:

    EVALUATION_STARTED
    RULE_EVALUATED      once per recorded rule, in rule order
    EVALUATION_HALTED   only after a blocking failure
    DECISION_MADE
"""

import logging
import threading
from collections.abc import Iterable

from uwe.domain.events.event import UnderwritingEvent
from uwe.domain.events.event_types import UnderwritingEventType
from uwe.domain.events.observer import UnderwritingObserver

logger = logging.getLogger(__name__)


class UnderwritingEventEmitter:
    """Delivers underwriting events to subscribed observers.

    Observers are notified in subscription order, at most once per event
    even when subscribed more than once. Observers are keyed by hash, so
    plain objects (identity hash) work. An observer that raises is logged
    and skipped; the evaluation carries on.
    """

    def __init__(self) -> None:
        # observer -> event types it wants; None means every type
        self._subscriptions: dict[UnderwritingObserver, frozenset[UnderwritingEventType] | None] = {}
        self._lock = threading.Lock()

    def subscribe(
        self,
        observer: UnderwritingObserver,
        event_types: Iterable[UnderwritingEventType] | None = None,
    ) -> None:
        """Subscribe to ``event_types``, or to every event when None.

        Subscribing again widens the observer's existing filter.
        """
        wanted = None if event_types is None else frozenset(event_types)
        with self._lock:
            if observer in self._subscriptions:
                current = self._subscriptions[observer]
                if current is None or wanted is None:
                    wanted = None
                else:
                    wanted = current | wanted
            self._subscriptions[observer] = wanted

    def unsubscribe(self, observer: UnderwritingObserver) -> None:
        with self._lock:
            self._subscriptions.pop(observer, None)

    @property
    def has_observers(self) -> bool:
        """False when emitting would reach nobody."""
        with self._lock:
            return bool(self._subscriptions)

    def emit(self, event: UnderwritingEvent) -> None:
        with self._lock:
            recipients = [
                observer
                for observer, wanted in self._subscriptions.items()
                if wanted is None or event.event_type in wanted
            ]
        for observer in recipients:
            try:
                observer.on_event(event)
            except Exception as e:
                logger.warning(
                    f"Observer {observer!r} failed on {event.event_type.value} "
                    f"for evaluation {event.evaluation_id}: {e}"
                )
