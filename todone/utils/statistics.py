"""Aggregate statistics over the full task collection.

Recomputed on every call. The weekly histogram attributes completed tasks to
the calendar day they were created on unless completion-time bucketing is
requested, in which case ``completed_at`` is used where it was recorded.
"""

from collections import Counter
from collections.abc import Sequence
from datetime import datetime, timedelta

from ..core.clock import start_of_day
from ..schemas.models import DailyCompletion, TaskOverview


WEEK_DAYS = 7


class TaskStatistics:
    """Utility class for the analytics views."""

    @staticmethod
    def overview(tasks: Sequence) -> TaskOverview:
        """Total, completed and pending counts."""
        total = len(tasks)
        completed = sum(1 for task in tasks if task.is_completed)
        return TaskOverview(total=total, completed=completed, pending=total - completed)

    @staticmethod
    def completion_rate(tasks: Sequence) -> float:
        """Completed tasks as a percentage of all tasks."""
        overview = TaskStatistics.overview(tasks)
        if overview.total == 0:
            return 0.0
        return round(overview.completed / overview.total * 100, 1)

    @staticmethod
    def _bucket_day(task, use_completion_time: bool) -> datetime:
        moment = task.created_at
        if use_completion_time and task.completed_at is not None:
            moment = task.completed_at
        return start_of_day(moment)

    @staticmethod
    def weekly_completions(
        tasks: Sequence,
        now: datetime,
        use_completion_time: bool = False,
        days: int = WEEK_DAYS,
    ) -> list[DailyCompletion]:
        """Completed-task counts for the ``days`` calendar days ending today.

        Entries run oldest first and always include today, even when every
        count is zero.
        """
        today = start_of_day(now)
        window = [today - timedelta(days=offset) for offset in reversed(range(days))]

        counts = Counter(
            TaskStatistics._bucket_day(task, use_completion_time)
            for task in tasks
            if task.is_completed
        )

        return [DailyCompletion(date=day, count=counts.get(day, 0)) for day in window]
