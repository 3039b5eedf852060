"""Tests for the task and settings repositories."""

from datetime import datetime
from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError
from sqlmodel import Session

from todone.errors import PersistenceError
from todone.repositories import TaskRepository
from todone.schemas.database import Comment, Task


class TestTaskRepository:
    """Test task repository operations."""

    def test_insert_requires_save(self, task_repo):
        """Test staged inserts become visible after save."""
        task = task_repo.insert(Task(title="Staged", due_date=datetime(2026, 10, 20)))
        task_repo.save()

        assert task.id is not None
        assert task_repo.get_by_id(task.id) is task
        assert task_repo.count() == 1

    def test_naive_datetimes_round_trip(self, engine, task_repo):
        """Test local timestamps reload unchanged and without timezone."""
        due = datetime(2026, 10, 18, 9, 30)
        completed = datetime(2026, 10, 17, 12, 0)
        task = Task(
            title="Buy milk",
            due_date=due,
            created_at=completed,
            is_completed=True,
            completed_at=completed,
        )
        task.comments.append(Comment(text="on the way home", date=completed))
        task_repo.insert(task)
        task_repo.save("create the task")

        with Session(engine) as other_session:
            reloaded = TaskRepository(other_session).query_all()[0]

            assert reloaded.due_date == due
            assert reloaded.due_date.tzinfo is None
            assert reloaded.created_at == completed
            assert reloaded.completed_at == completed
            assert reloaded.comments[0].date == completed

    def test_query_all_in_insertion_order(self, task_repo, make_task):
        make_task(title="one")
        make_task(title="two")
        make_task(title="three")

        assert [t.title for t in task_repo.query_all()] == ["one", "two", "three"]

    def test_add_comment(self, task_repo, make_task):
        task = make_task()
        task_repo.add_comment(task, Comment(text="noted", date=datetime(2026, 10, 17)))
        task_repo.save()

        reloaded = task_repo.get_by_id(task.id)
        assert [c.text for c in reloaded.comments] == ["noted"]

    def test_delete(self, task_repo, make_task):
        task = make_task(title="Gone")

        task_repo.delete(task)
        task_repo.save("delete the task")

        assert task_repo.get_by_id(task.id) is None

    def test_save_failure_rolls_back(self, task_repo):
        """Test a failing commit raises PersistenceError and discards changes."""
        task_repo.insert(Task(title="Lost", due_date=datetime(2026, 10, 20)))

        def fail():
            raise OperationalError("COMMIT", {}, Exception("disk full"))

        with patch.object(task_repo.session, "commit", side_effect=fail):
            with pytest.raises(PersistenceError) as exc_info:
                task_repo.save("create the task")

        assert exc_info.value.operation == "create the task"
        assert isinstance(exc_info.value.cause, OperationalError)
        assert task_repo.count() == 0


class TestSettingsRepository:
    """Test the key/value settings store."""

    def test_missing_key_returns_default(self, settings_repo):
        assert settings_repo.get_value("appTheme") is None
        assert settings_repo.get_value("appTheme", "system") == "system"

    def test_set_and_overwrite(self, settings_repo):
        settings_repo.set_value("appTheme", "dark")
        settings_repo.save()
        settings_repo.set_value("appTheme", "light")
        settings_repo.save()

        assert settings_repo.get_value("appTheme") == "light"
        assert settings_repo.count() == 1
