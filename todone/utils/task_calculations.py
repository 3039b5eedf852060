"""Task calculation utilities for derived display attributes.

Every function here is a pure function of a task's due date and the current
time; nothing is cached on the task.
"""

from datetime import datetime, timedelta
from typing import Protocol

from ..schemas.models import DueStatus


UPCOMING_WINDOW = timedelta(hours=24)


class HasDueDate(Protocol):
    """Anything with a due date: a ``Task`` entity or a ``TaskCore``."""

    due_date: datetime


class TaskCalculations:
    """Utility class for due-date status and labels."""

    @staticmethod
    def is_overdue(task: HasDueDate, now: datetime) -> bool:
        """Due date strictly before the current time."""
        return task.due_date < now

    @staticmethod
    def is_upcoming(task: HasDueDate, now: datetime) -> bool:
        """Not overdue and due within the next 24 hours."""
        if TaskCalculations.is_overdue(task, now):
            return False
        return task.due_date - now <= UPCOMING_WINDOW

    @staticmethod
    def days_overdue(task: HasDueDate, now: datetime) -> int:
        """Whole days elapsed since the due date, 0 when not overdue."""
        if not TaskCalculations.is_overdue(task, now):
            return 0
        return (now - task.due_date).days

    @staticmethod
    def due_status(task: HasDueDate, now: datetime) -> DueStatus:
        if TaskCalculations.is_overdue(task, now):
            return DueStatus.OVERDUE
        if TaskCalculations.is_upcoming(task, now):
            return DueStatus.UPCOMING
        return DueStatus.SCHEDULED

    @staticmethod
    def format_date(moment: datetime) -> str:
        """Abbreviated date, e.g. ``Oct 17, 2026``."""
        return f"{moment:%b} {moment.day}, {moment.year}"

    @staticmethod
    def format_datetime(moment: datetime) -> str:
        """Abbreviated date with short time, e.g. ``Oct 17, 2026 at 9:05 AM``."""
        hour = moment.hour % 12 or 12
        return f"{TaskCalculations.format_date(moment)} at {hour}:{moment:%M %p}"

    @staticmethod
    def date_label(task: HasDueDate, now: datetime) -> str:
        """Formatted due date, plus a days-overdue line when overdue."""
        formatted = TaskCalculations.format_date(task.due_date)
        if not TaskCalculations.is_overdue(task, now):
            return formatted

        days = TaskCalculations.days_overdue(task, now)
        suffix = "" if days == 1 else "s"
        return f"{formatted}\n{days} day{suffix} overdue"
