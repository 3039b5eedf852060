"""Tests for the task editing session and its validation rules."""

from datetime import datetime, timedelta
from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from todone.core.events import TaskEventType
from todone.errors import (
    InvalidTransitionError,
    MissingTitleError,
    PastDueDateError,
    PersistenceError,
)
from todone.schemas.models import (
    CommitOutcome,
    EditorState,
    TaskDraft,
    TaskPriority,
    ValidationReason,
)
from todone.services.task_editor import TaskEditor, validate_new_task, validate_task_update


def _failing_commit():
    raise OperationalError("COMMIT", {}, Exception("disk I/O error"))


class TestValidation:
    """Test commit validation rules."""

    def test_missing_title(self, now):
        with pytest.raises(MissingTitleError):
            validate_new_task(TaskDraft(title="  ", due_date=now), now)

    def test_title_checked_before_due_date(self, now):
        """Test a draft failing both rules reports the missing title."""
        draft = TaskDraft(title="", due_date=now - timedelta(days=3))

        with pytest.raises(MissingTitleError):
            validate_new_task(draft, now)

    def test_due_earlier_today_is_allowed(self, now):
        """Test the past-date rule compares against the start of today."""
        draft = TaskDraft(title="Call", due_date=datetime(2026, 10, 17, 0, 0))

        validate_new_task(draft, now)

    def test_due_yesterday_rejected(self, now):
        draft = TaskDraft(title="Call", due_date=datetime(2026, 10, 16, 23, 59))

        with pytest.raises(PastDueDateError):
            validate_new_task(draft, now)

    def test_update_keeps_unchanged_past_due_date(self, make_task, now):
        """Test an overdue task can still be edited without moving its date."""
        task = make_task(title="Old", due_date=now - timedelta(days=5))
        draft = TaskDraft.from_task(task)
        draft.title = "Old but renamed"

        validate_task_update(draft, task, now)

    def test_update_rejects_new_past_due_date(self, make_task, now):
        task = make_task(title="Old", due_date=now + timedelta(days=1))
        draft = TaskDraft.from_task(task)
        draft.due_date = now - timedelta(days=2)

        with pytest.raises(PastDueDateError):
            validate_task_update(draft, task, now)

    def test_update_requires_title(self, make_task, now):
        task = make_task(title="Old")
        draft = TaskDraft.from_task(task)
        draft.title = ""

        with pytest.raises(MissingTitleError):
            validate_task_update(draft, task, now)


class TestCreatingSession:
    """Test a session that creates a new task."""

    @pytest.fixture
    def editor(self, task_repo, clock, notifier):
        return TaskEditor(task_repo, clock=clock, notifier=notifier)

    def test_initial_state(self, editor, now):
        assert editor.state is EditorState.CREATING
        assert editor.is_new_task
        assert editor.is_editable
        assert editor.display_title == "New Task"
        assert editor.draft.due_date == now
        assert editor.draft.priority is TaskPriority.MEDIUM
        assert editor.comments == []

    def test_commit_creates_task(self, editor, task_repo, notifier, now):
        """Test a valid draft is inserted and the session closes."""
        editor.update_draft(title="Buy milk", content="2 litres", priority=TaskPriority.HIGH)

        result = editor.commit()

        assert result.ok
        assert editor.state is EditorState.CLOSED
        stored = task_repo.get_by_id(result.task_id)
        assert stored.title == "Buy milk"
        assert stored.priority is TaskPriority.HIGH
        assert stored.created_at == now
        assert not stored.is_completed
        assert notifier.last_event.event_type is TaskEventType.CREATED
        assert notifier.last_event.task_id == result.task_id

    def test_missing_title_keeps_session_open(self, editor, task_repo, notifier):
        result = editor.commit()

        assert result.outcome is CommitOutcome.INVALID
        assert result.reason is ValidationReason.MISSING_TITLE
        assert result.message == "Please enter a title for your task."
        assert editor.state is EditorState.CREATING
        assert task_repo.count() == 0
        assert notifier.last_event is None

    def test_past_due_date_rejected(self, editor, now, task_repo):
        editor.update_draft(title="Late", due_date=now - timedelta(days=1))

        result = editor.commit()

        assert result.reason is ValidationReason.PAST_DUE_DATE
        assert editor.draft.title == "Late"
        assert task_repo.count() == 0

    def test_save_failure_reported(self, editor, task_repo, notifier):
        """Test a failing save is reported and nothing is created."""
        editor.update_draft(title="Buy milk")

        with patch.object(task_repo.session, "commit", side_effect=_failing_commit):
            result = editor.commit()

        assert result.outcome is CommitOutcome.SAVE_FAILED
        assert "create the task" in result.message
        assert editor.state is EditorState.CREATING
        assert notifier.last_event is None
        assert task_repo.count() == 0

    def test_cancel_discards(self, editor, task_repo):
        editor.update_draft(title="Never saved")

        editor.cancel()

        assert editor.state is EditorState.CLOSED
        assert task_repo.count() == 0

    def test_begin_edit_not_allowed(self, editor):
        with pytest.raises(InvalidTransitionError):
            editor.begin_edit()

    def test_comment_ignored_without_record(self, editor):
        editor.comment_text = "Hello"

        assert editor.add_comment() is None
        assert editor.comment_text == "Hello"


class TestExistingTaskSession:
    """Test viewing and editing an existing task."""

    @pytest.fixture
    def task(self, make_task, now):
        return make_task(
            title="Dentist", content="Bring card", due_date=now + timedelta(days=1)
        )

    @pytest.fixture
    def editor(self, task_repo, task, clock, notifier):
        return TaskEditor(task_repo, task=task, clock=clock, notifier=notifier)

    def test_initial_state(self, editor):
        assert editor.state is EditorState.VIEWING
        assert not editor.is_new_task
        assert not editor.is_editable
        assert editor.display_title == "Dentist"

    def test_update_draft_requires_editing(self, editor):
        with pytest.raises(InvalidTransitionError):
            editor.update_draft(title="Other")

    def test_draft_isolated_until_commit(self, editor, task):
        """Test the stored record only changes on commit."""
        editor.begin_edit()
        editor.update_draft(title="Orthodontist", priority=TaskPriority.LOW)

        assert task.title == "Dentist"

        result = editor.commit()

        assert result.ok
        assert editor.state is EditorState.VIEWING
        assert task.title == "Orthodontist"
        assert task.priority is TaskPriority.LOW

    def test_commit_publishes_update(self, editor, notifier, task):
        editor.begin_edit()
        editor.update_draft(content="New notes")

        editor.commit()

        assert notifier.last_event.event_type is TaskEventType.UPDATED
        assert notifier.last_event.task_id == task.id

    def test_invalid_edit_stays_editing(self, editor, task):
        editor.begin_edit()
        editor.update_draft(title="   ")

        result = editor.commit()

        assert result.reason is ValidationReason.MISSING_TITLE
        assert result.task_id == task.id
        assert editor.state is EditorState.EDITING
        assert task.title == "Dentist"

    def test_cancel_edit_restores_draft(self, editor, task):
        editor.begin_edit()
        editor.update_draft(title="Changed")

        editor.cancel()

        assert editor.state is EditorState.CLOSED
        assert editor.draft.title == "Dentist"
        assert task.title == "Dentist"

    def test_begin_edit_twice_rejected(self, editor):
        editor.begin_edit()

        with pytest.raises(InvalidTransitionError):
            editor.begin_edit()

    def test_commit_while_viewing_rejected(self, editor):
        with pytest.raises(InvalidTransitionError):
            editor.commit()

    def test_edit_does_not_change_created_at(self, editor, task, clock, now):
        clock.advance(days=1)
        editor.begin_edit()
        editor.update_draft(title="Later edit")

        editor.commit()

        assert task.created_at == now

    def test_add_comment_from_buffer(self, editor, task, clock, notifier):
        """Test comment uses the input buffer, is timestamped and clears it."""
        editor.comment_text = "Rescheduled"

        comment = editor.add_comment()

        assert comment.text == "Rescheduled"
        assert comment.date == clock.now()
        assert editor.comment_text == ""
        assert [c.text for c in editor.comments] == ["Rescheduled"]
        assert notifier.last_event.event_type is TaskEventType.COMMENTED

    def test_blank_comment_ignored(self, editor, notifier):
        editor.comment_text = "   "

        assert editor.add_comment() is None
        assert editor.comments == []
        assert notifier.last_event is None

    def test_comments_newest_first(self, editor, clock):
        editor.add_comment("first")
        clock.advance(minutes=5)
        editor.add_comment("second")

        assert [c.text for c in editor.comments] == ["second", "first"]

    def test_comment_allowed_while_editing(self, editor):
        editor.begin_edit()

        assert editor.add_comment("During edit") is not None

    def test_comment_save_failure_keeps_buffer(self, editor, task_repo, notifier):
        """Test a failed comment save keeps the text for a retry."""
        editor.comment_text = "Called vendor"

        with patch.object(task_repo.session, "commit", side_effect=_failing_commit):
            with pytest.raises(PersistenceError, match="add the comment"):
                editor.add_comment()

        assert editor.comment_text == "Called vendor"
        assert editor.comments == []
        assert notifier.last_event is None

        assert editor.add_comment().text == "Called vendor"
        assert editor.comment_text == ""

    def test_edit_save_failure_allows_retry(self, editor, task, task_repo, notifier):
        """Test a failed edit keeps state and draft and leaves the record as stored."""
        editor.begin_edit()
        editor.update_draft(title="Orthodontist")

        with patch.object(task_repo.session, "commit", side_effect=_failing_commit):
            result = editor.commit()

        assert result.outcome is CommitOutcome.SAVE_FAILED
        assert result.task_id == task.id
        assert "update the task" in result.message
        assert editor.state is EditorState.EDITING
        assert editor.draft.title == "Orthodontist"
        assert task.title == "Dentist"
        assert notifier.last_event is None

        retry = editor.commit()

        assert retry.ok
        assert editor.state is EditorState.VIEWING
        assert task.title == "Orthodontist"
