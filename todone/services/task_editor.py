"""Editing session for a single task.

A session starts in ``CREATING`` when there is no backing record and in
``VIEWING`` otherwise. Edits go to a ``TaskDraft`` staging buffer and reach
the record only on ``commit``. Validation failures and save failures are
reported through ``CommitResult`` rather than raised, so the caller only has
to show the message.
"""

import logging
from datetime import datetime
from typing import Any

from ..core.clock import Clock, SystemClock, start_of_day
from ..core.events import ChangeNotifier, TaskEventType
from ..errors import (
    InvalidTransitionError,
    MissingTitleError,
    PastDueDateError,
    PersistenceError,
    TaskValidationError,
)
from ..repositories import TaskRepository
from ..schemas.database import Comment, Task
from ..schemas.models import (
    CommentCore,
    CommitOutcome,
    CommitResult,
    EditorState,
    TaskDraft,
)


logger = logging.getLogger(__name__)


def validate_new_task(draft: TaskDraft, now: datetime) -> None:
    """Check a draft before it becomes a new task.

    Raises:
        MissingTitleError: If the trimmed title is empty.
        PastDueDateError: If the due date is before the start of today.

    """
    if not draft.has_title:
        raise MissingTitleError()
    if draft.due_date < start_of_day(now):
        raise PastDueDateError()


def validate_task_update(draft: TaskDraft, task: Task, now: datetime) -> None:
    """Check a draft before it is written onto an existing task.

    An unchanged due date is accepted even when it has already passed, so an
    overdue task stays editable.
    """
    if not draft.has_title:
        raise MissingTitleError()
    if draft.due_date != task.due_date and draft.due_date < start_of_day(now):
        raise PastDueDateError()


class TaskEditor:
    """State machine for viewing, editing and creating one task."""

    def __init__(
        self,
        repository: TaskRepository,
        task: Task | None = None,
        clock: Clock | None = None,
        notifier: ChangeNotifier | None = None,
    ):
        """Initialize an editing session.

        Args:
            repository: Object store used to persist the task.
            task: Existing record, or None to create a new task.
            clock: Time source. Defaults to the wall clock.
            notifier: Receives one event per successful save.

        """
        self.repository = repository
        self.task = task
        self.clock = clock or SystemClock()
        self.notifier = notifier
        self.comment_text = ""

        if task is None:
            self.state = EditorState.CREATING
            self.draft = TaskDraft(due_date=self.clock.now())
        else:
            self.state = EditorState.VIEWING
            self.draft = TaskDraft.from_task(task)

    @property
    def is_new_task(self) -> bool:
        return self.state is EditorState.CREATING

    @property
    def is_editable(self) -> bool:
        return self.state in (EditorState.CREATING, EditorState.EDITING)

    @property
    def display_title(self) -> str:
        return self.draft.title or "New Task"

    @property
    def comments(self) -> list[CommentCore]:
        """Comments of the record, newest first."""
        if self.task is None:
            return []
        return self.task.to_core_model().sorted_comments

    def begin_edit(self) -> TaskDraft:
        """Copy the record into a fresh staging buffer and start editing."""
        if self.state is not EditorState.VIEWING:
            raise InvalidTransitionError("start editing", self.state.value)

        self.draft = TaskDraft.from_task(self.task)
        self.state = EditorState.EDITING
        return self.draft

    def update_draft(self, **changes: Any) -> TaskDraft:
        """Change fields of the staging buffer."""
        if not self.is_editable:
            raise InvalidTransitionError("change fields", self.state.value)

        for field, value in changes.items():
            setattr(self.draft, field, value)
        return self.draft

    def commit(self) -> CommitResult:
        """Validate and persist the staging buffer.

        ``CREATING`` moves to ``CLOSED`` and ``EDITING`` back to ``VIEWING`` on
        success. On any failure the state and the draft are left as they were.
        """
        if self.state is EditorState.CREATING:
            return self._commit_new_task()
        if self.state is EditorState.EDITING:
            return self._commit_update()
        raise InvalidTransitionError("save", self.state.value)

    def cancel(self) -> None:
        """Discard the staging buffer and close the session without saving."""
        self.draft = TaskDraft.from_task(self.task) if self.task else TaskDraft()
        self.state = EditorState.CLOSED

    def add_comment(self, text: str | None = None) -> CommentCore | None:
        """Append a comment to the record.

        Uses the comment input buffer when ``text`` is None. Does nothing when
        there is no record yet or the text is blank.

        Raises:
            PersistenceError: If the comment could not be saved. The input
                buffer is kept so it can be retried.

        """
        text = self.comment_text if text is None else text
        if self.task is None or not text.strip():
            return None

        comment = Comment(text=text, date=self.clock.now())
        self.repository.add_comment(self.task, comment)
        self.repository.save("add the comment")

        self.comment_text = ""
        logger.info(f"Added comment to task {self.task.id}")
        self._publish(TaskEventType.COMMENTED)
        return comment.to_core_model()

    def _commit_new_task(self) -> CommitResult:
        now = self.clock.now()
        try:
            validate_new_task(self.draft, now)
        except TaskValidationError as e:
            return self._invalid(e)

        task = Task.from_draft(self.draft, created_at=now)
        self.repository.insert(task)
        try:
            self.repository.save("create the task")
        except PersistenceError as e:
            return CommitResult(outcome=CommitOutcome.SAVE_FAILED, message=str(e))

        self.task = task
        self.state = EditorState.CLOSED
        logger.info(f"Created task {task.id}: {task.title}")
        self._publish(TaskEventType.CREATED)
        return CommitResult(outcome=CommitOutcome.SAVED, task_id=task.id)

    def _commit_update(self) -> CommitResult:
        try:
            validate_task_update(self.draft, self.task, self.clock.now())
        except TaskValidationError as e:
            return self._invalid(e)

        self.task.apply_draft(self.draft)
        self.repository.insert(self.task)
        try:
            self.repository.save("update the task")
        except PersistenceError as e:
            return CommitResult(
                outcome=CommitOutcome.SAVE_FAILED, task_id=self.task.id, message=str(e)
            )

        self.state = EditorState.VIEWING
        logger.info(f"Updated task {self.task.id}")
        self._publish(TaskEventType.UPDATED)
        return CommitResult(outcome=CommitOutcome.SAVED, task_id=self.task.id)

    def _invalid(self, error: TaskValidationError) -> CommitResult:
        logger.debug(f"Rejected task draft: {error.reason.value}")
        return CommitResult(
            outcome=CommitOutcome.INVALID,
            task_id=self.task.id if self.task else None,
            reason=error.reason,
            message=error.message,
        )

    def _publish(self, event_type: TaskEventType) -> None:
        if self.notifier is not None:
            self.notifier.publish(event_type, task_id=self.task.id)
