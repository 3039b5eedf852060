"""Service layer bridging the task views and persistence.

Provides the operations the presentation layer calls: list views, the task
detail, editing sessions, completion toggles, deletion and statistics.
"""

import logging
from datetime import datetime

from sqlmodel import Session

from ..config import AnalyticsSettings
from ..core.clock import Clock, SystemClock
from ..core.events import ChangeNotifier, TaskEventType
from ..database import get_sync_session
from ..errors import TaskNotFoundError
from ..repositories import TaskRepository
from ..schemas.database import Task
from ..schemas.models import (
    CommitResult,
    DailyCompletion,
    SortOption,
    TaskCore,
    TaskOverview,
    TaskPriority,
)
from ..utils.statistics import TaskStatistics
from ..utils.task_queries import TaskQueries
from .task_editor import TaskEditor


logger = logging.getLogger(__name__)


class TaskService:
    """Task operations for the presentation layer.

    Queries read the whole collection from the store and derive their view
    from it on every call. Mutations save immediately and publish one change
    event on success; a failed save raises ``PersistenceError``.
    """

    def __init__(
        self,
        session: Session | None = None,
        clock: Clock | None = None,
        notifier: ChangeNotifier | None = None,
        analytics: AnalyticsSettings | None = None,
    ):
        """Initialize task service with database session.

        Args:
            session: SQLModel session. If None, creates default sync session.
            clock: Time source. Defaults to the wall clock.
            notifier: Change notifier shared with the presentation layer.
            analytics: Statistics settings. Defaults to built-in values.

        """
        if session is None:
            session = get_sync_session()

        self.session = session
        self.task_repo = TaskRepository(session)
        self.clock = clock or SystemClock()
        self.notifier = notifier or ChangeNotifier(clock=self.clock)
        self.analytics = analytics or AnalyticsSettings()

    def now(self) -> datetime:
        return self.clock.now()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_tasks(self) -> list[TaskCore]:
        """Get every task in insertion order."""
        tasks = [task.to_core_model() for task in self.task_repo.query_all()]
        logger.debug(f"Loaded {len(tasks)} tasks")
        return tasks

    def active_tasks(
        self, search_text: str = "", sort_option: SortOption = SortOption.DATE
    ) -> list[TaskCore]:
        return TaskQueries.active_tasks(self.list_tasks(), search_text, sort_option)

    def completed_tasks(
        self, search_text: str = "", sort_option: SortOption = SortOption.DATE
    ) -> list[TaskCore]:
        return TaskQueries.completed_tasks(self.list_tasks(), search_text, sort_option)

    def search_suggestions(self, search_text: str = "") -> list[str]:
        return TaskQueries.search_suggestions(self.list_tasks(), search_text)

    def get_task(self, task_id: int) -> TaskCore:
        """Get one task with its comments.

        Raises:
            TaskNotFoundError: If no task has this id.

        """
        return self._get_entity(task_id).to_core_model()

    def overview(self) -> TaskOverview:
        return TaskStatistics.overview(self.list_tasks())

    def completion_rate(self) -> float:
        return TaskStatistics.completion_rate(self.list_tasks())

    def weekly_completions(self) -> list[DailyCompletion]:
        """Completed tasks per day for the configured window ending today."""
        return TaskStatistics.weekly_completions(
            self.list_tasks(),
            self.now(),
            use_completion_time=self.analytics.bucket_by_completion_time,
            days=self.analytics.window_days,
        )

    # ------------------------------------------------------------------
    # Editing sessions
    # ------------------------------------------------------------------

    def new_task_editor(self) -> TaskEditor:
        """Start a session that creates a new task."""
        return TaskEditor(self.task_repo, clock=self.clock, notifier=self.notifier)

    def open_task_editor(self, task_id: int) -> TaskEditor:
        """Start a session viewing an existing task."""
        return TaskEditor(
            self.task_repo,
            task=self._get_entity(task_id),
            clock=self.clock,
            notifier=self.notifier,
        )

    def create_task(
        self,
        title: str,
        content: str = "",
        priority: TaskPriority = TaskPriority.MEDIUM,
        due_date: datetime | None = None,
    ) -> CommitResult:
        """Create a task through a new editing session."""
        editor = self.new_task_editor()
        editor.update_draft(
            title=title,
            content=content,
            priority=priority,
            due_date=due_date or editor.draft.due_date,
        )
        return editor.commit()

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def set_completed(self, task_id: int, completed: bool) -> TaskCore:
        """Mark a task complete or not complete and save."""
        task = self._get_entity(task_id)
        task.set_completed(completed, self.now())
        self.task_repo.insert(task)
        self.task_repo.save("complete the task" if completed else "reopen the task")

        logger.info(f"Task {task_id} marked {'completed' if completed else 'pending'}")
        self.notifier.publish(
            TaskEventType.COMPLETED if completed else TaskEventType.REOPENED,
            task_id=task_id,
        )
        return task.to_core_model()

    def complete_task(self, task_id: int) -> TaskCore:
        return self.set_completed(task_id, True)

    def reopen_task(self, task_id: int) -> TaskCore:
        return self.set_completed(task_id, False)

    def toggle_completed(self, task_id: int) -> TaskCore:
        task = self._get_entity(task_id)
        return self.set_completed(task_id, not task.is_completed)

    def delete_task(self, task_id: int) -> None:
        """Delete a task together with its comments."""
        task = self._get_entity(task_id)
        self.task_repo.delete(task)
        self.task_repo.save("delete the task")

        logger.info(f"Deleted task {task_id}")
        self.notifier.publish(TaskEventType.DELETED, task_id=task_id)

    def close(self):
        """Close the database session."""
        if self.session:
            self.session.close()

    def _get_entity(self, task_id: int) -> Task:
        task = self.task_repo.get_by_id(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        return task
