"""Mini README: Notification log for off-ledger monitoring.

Structure:
    * Event name constants - one per mutating ledger operation.
    * EventLog - ordered, bounded history plus subscriber fan-out.

The ledger emits exactly one event per successful mutation and none on
failure. It records the event (assigning its sequence number) while the
ledger lock is held and publishes it to subscribers after the lock is
released, so a slow subscriber never stalls other ledger operations.
Subscribers are plain callables receiving a ``LedgerEvent``; a subscriber
that raises is logged and skipped so monitoring never rolls back a
committed mutation.

Sequence numbers follow commit order with one exception:
``funds_withdrawn`` is recorded only once the payout hook has returned,
because a failed payout rolls the withdrawal back and must leave no event.
Anything the payout hook triggers (a nested withdrawal, say) and any
operation committed by another caller while the payout runs therefore
carries a lower sequence number than the withdrawal that preceded it.
"""

from __future__ import annotations

import threading
from collections import deque
from datetime import datetime, timezone
from typing import Any, Callable, Deque, Dict, List, Optional

from ..logging_utils import get_logger
from .models import LedgerEvent

LOGGER = get_logger(__name__)

CAMPAIGN_REGISTERED = "campaign_registered"
CONTRIBUTION_RECEIVED = "contribution_received"
RELIEF_REQUESTED = "relief_requested"
RELIEF_FULFILLED = "relief_fulfilled"
FUNDS_WITHDRAWN = "funds_withdrawn"
COORDINATOR_AUTHORIZED = "coordinator_authorized"
CAMPAIGN_DEACTIVATED = "campaign_deactivated"

Subscriber = Callable[[LedgerEvent], None]


class EventLog:
    """Keep emitted events in order and forward them to subscribers."""

    def __init__(self, history_limit: int = 10_000) -> None:
        if history_limit < 1:
            raise ValueError("history_limit must be at least 1")
        self._history: Deque[LedgerEvent] = deque(maxlen=history_limit)
        self._subscribers: List[Subscriber] = []
        self._sequence = 0
        self._lock = threading.Lock()

    def subscribe(self, callback: Subscriber) -> None:
        """Register a callable invoked for every subsequent event."""

        with self._lock:
            self._subscribers.append(callback)
        LOGGER.debug("Registered event subscriber %r", callback)

    def record(
        self,
        name: str,
        payload: Dict[str, Any],
        *,
        emitted_at: Optional[datetime] = None,
    ) -> LedgerEvent:
        """Sequence and retain an event without notifying subscribers yet."""

        with self._lock:
            self._sequence += 1
            event = LedgerEvent(
                sequence=self._sequence,
                name=name,
                emitted_at=emitted_at or datetime.now(timezone.utc),
                payload=dict(payload),
            )
            self._history.append(event)
        LOGGER.debug("Recorded event #%s %s %s", event.sequence, name, payload)
        return event

    def publish(self, event: LedgerEvent) -> None:
        """Deliver a recorded event to every subscriber."""

        with self._lock:
            subscribers = list(self._subscribers)
        for subscriber in subscribers:
            try:
                subscriber(event)
            except Exception:
                LOGGER.exception("Event subscriber %r failed for %s", subscriber, event.name)

    def emit(
        self,
        name: str,
        payload: Dict[str, Any],
        *,
        emitted_at: Optional[datetime] = None,
    ) -> LedgerEvent:
        """Record an event and deliver it to every subscriber."""

        event = self.record(name, payload, emitted_at=emitted_at)
        self.publish(event)
        return event

    def history(self, name: Optional[str] = None) -> List[LedgerEvent]:
        """Return retained events in emission order, optionally filtered by name."""

        with self._lock:
            events = list(self._history)
        if name is None:
            return events
        return [event for event in events if event.name == name]

    def __len__(self) -> int:
        with self._lock:
            return len(self._history)
