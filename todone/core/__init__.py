"""Core building blocks shared by services and the presentation layer."""

from .clock import Clock, FixedClock, SystemClock, start_of_day
from .events import ChangeNotifier, TaskEvent, TaskEventType


__all__ = [
    "ChangeNotifier",
    "Clock",
    "FixedClock",
    "SystemClock",
    "TaskEvent",
    "TaskEventType",
    "start_of_day",
]
