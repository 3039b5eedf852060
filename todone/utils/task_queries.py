"""Filtered and sorted views of the task collection.

Each call recomputes its result from the collection it is given. Inputs are
never mutated, and every ordering is stable: tasks with equal sort keys keep
their collection order.
"""

from collections.abc import Iterable, Sequence
from typing import TypeVar

from ..schemas.models import SortOption, TaskPriority


TaskT = TypeVar("TaskT")

SUGGESTION_LIMIT = 3


class TaskQueries:
    """Utility class for the task list views."""

    @staticmethod
    def matches_search(task, search_text: str) -> bool:
        """Case-insensitive containment in title or content."""
        if not search_text:
            return True
        needle = search_text.casefold()
        return needle in task.title.casefold() or needle in task.content.casefold()

    @staticmethod
    def filter_by_search(tasks: Iterable[TaskT], search_text: str) -> list[TaskT]:
        return [task for task in tasks if TaskQueries.matches_search(task, search_text)]

    @staticmethod
    def sort_tasks(tasks: Iterable[TaskT], sort_option: SortOption) -> list[TaskT]:
        """Earliest due first for DATE, highest priority first for PRIORITY."""
        if sort_option is SortOption.PRIORITY:
            return sorted(tasks, key=lambda task: -TaskPriority(task.priority).rank)
        return sorted(tasks, key=lambda task: task.due_date)

    @staticmethod
    def _view(
        tasks: Iterable[TaskT],
        completed: bool,
        search_text: str,
        sort_option: SortOption,
    ) -> list[TaskT]:
        selected = [task for task in tasks if bool(task.is_completed) is completed]
        return TaskQueries.sort_tasks(
            TaskQueries.filter_by_search(selected, search_text), sort_option
        )

    @staticmethod
    def active_tasks(
        tasks: Iterable[TaskT],
        search_text: str = "",
        sort_option: SortOption = SortOption.DATE,
    ) -> list[TaskT]:
        """Tasks not yet completed, filtered by search text and sorted."""
        return TaskQueries._view(tasks, False, search_text, sort_option)

    @staticmethod
    def completed_tasks(
        tasks: Iterable[TaskT],
        search_text: str = "",
        sort_option: SortOption = SortOption.DATE,
    ) -> list[TaskT]:
        """Completed tasks, filtered by search text and sorted."""
        return TaskQueries._view(tasks, True, search_text, sort_option)

    @staticmethod
    def search_suggestions(
        tasks: Sequence,
        search_text: str = "",
        limit: int = SUGGESTION_LIMIT,
    ) -> list[str]:
        """Up to ``limit`` distinct titles, sorted, offered while search is empty."""
        if search_text:
            return []
        titles = {task.title for task in tasks if task.title.strip()}
        return sorted(titles)[:limit]
