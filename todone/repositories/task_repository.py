"""Task repository implementations.

``TaskRepository`` is the object store behind every task view: it hands out
the full collection in insertion order and stages inserts, deletes and
comment appends until ``save`` commits them.
"""

from sqlalchemy.orm import selectinload
from sqlmodel import col, select

from ..schemas.database import AppSetting, Comment, Task
from .base import BaseRepository


class TaskRepository(BaseRepository[Task]):
    """Repository for task and comment records."""

    def get_entity_class(self) -> type[Task]:
        """Return the database entity class for this repository."""
        return Task

    def query_all(self) -> list[Task]:
        """Get every task with its comments, in insertion order."""
        statement = (
            select(Task).options(selectinload(Task.comments)).order_by(col(Task.id))
        )
        return list(self.session.exec(statement).all())

    def add_comment(self, task: Task, comment: Comment) -> Comment:
        """Append a comment to a task's comment collection."""
        task.comments.append(comment)
        self.session.add(task)
        return comment


class SettingsRepository(BaseRepository[AppSetting]):
    """Key/value settings store."""

    def get_entity_class(self) -> type[AppSetting]:
        """Return the database entity class for this repository."""
        return AppSetting

    def get_value(self, key: str, default: str | None = None) -> str | None:
        """Get the stored value for a key."""
        setting = self.get_by_id(key)
        return setting.value if setting else default

    def set_value(self, key: str, value: str) -> AppSetting:
        """Stage a value for a key, creating the entry when missing."""
        setting = self.get_by_id(key)
        if setting is None:
            setting = AppSetting(key=key, value=value)
        else:
            setting.value = value
        self.session.add(setting)
        return setting
