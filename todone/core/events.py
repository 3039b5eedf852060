"""In-process change notification for the presentation layer.

Views do not observe records directly. Instead every successful mutation
publishes one ``TaskEvent`` and subscribers decide when to re-run their
queries.
"""

import logging
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum

from .clock import Clock, SystemClock


logger = logging.getLogger(__name__)


class TaskEventType(StrEnum):
    """Kinds of change published after a successful save."""

    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"
    COMMENTED = "commented"
    COMPLETED = "completed"
    REOPENED = "reopened"
    PREFERENCES_CHANGED = "preferences_changed"


@dataclass(frozen=True, slots=True)
class TaskEvent:
    """Change event delivered to subscribers."""

    event_id: int
    event_type: TaskEventType
    timestamp: datetime
    task_id: int | None = None


Subscriber = Callable[[TaskEvent], None]


class ChangeNotifier:
    """Synchronous pub/sub hub with bounded history."""

    def __init__(self, *, history_limit: int = 100, clock: Clock | None = None):
        self.clock = clock or SystemClock()
        self._events: deque[TaskEvent] = deque(maxlen=history_limit)
        self._subscribers: dict[int, Subscriber] = {}
        self._next_event_id = 1
        self._next_subscriber_id = 1

    def subscribe(self, callback: Subscriber) -> int:
        """Register a callback and return its subscription id."""
        subscriber_id = self._next_subscriber_id
        self._next_subscriber_id += 1
        self._subscribers[subscriber_id] = callback
        return subscriber_id

    def unsubscribe(self, subscriber_id: int) -> None:
        self._subscribers.pop(subscriber_id, None)

    def publish(self, event_type: TaskEventType, task_id: int | None = None) -> TaskEvent:
        """Record an event and deliver it to every subscriber in order."""
        event = TaskEvent(
            event_id=self._next_event_id,
            event_type=event_type,
            timestamp=self.clock.now(),
            task_id=task_id,
        )
        self._next_event_id += 1
        self._events.append(event)

        for subscriber_id, callback in list(self._subscribers.items()):
            try:
                callback(event)
            except Exception:
                logger.exception(
                    f"Subscriber {subscriber_id} failed handling {event_type.value}"
                )

        return event

    def list_recent(self, *, limit: int = 20) -> list[TaskEvent]:
        if limit <= 0:
            return []
        return list(self._events)[-limit:]

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    @property
    def last_event(self) -> TaskEvent | None:
        return self._events[-1] if self._events else None
