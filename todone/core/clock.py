"""Injectable clock.

Everything time-dependent (overdue status, the past-due check, the weekly
window, comment and creation timestamps) reads the time through a ``Clock``
so results are deterministic under test.
"""

from datetime import datetime, time, timedelta
from typing import Protocol, runtime_checkable


@runtime_checkable
class Clock(Protocol):
    """Source of the current local time."""

    def now(self) -> datetime:
        """Return the current time."""
        ...


class SystemClock:
    """Clock backed by the wall clock."""

    def now(self) -> datetime:
        return datetime.now()


class FixedClock:
    """Clock frozen at a given instant, advanced explicitly."""

    def __init__(self, current: datetime):
        self.current = current

    def now(self) -> datetime:
        return self.current

    def advance(self, **kwargs: float) -> datetime:
        """Move the clock forward by ``timedelta(**kwargs)``."""
        self.current = self.current + timedelta(**kwargs)
        return self.current


def start_of_day(moment: datetime) -> datetime:
    """Midnight at the beginning of ``moment``'s calendar day."""
    return datetime.combine(moment.date(), time.min, tzinfo=moment.tzinfo)
