"""SQLModel database entity models with Pydantic integration.

These tables are the persistence side of the task model. Entities convert
into the read-only ``TaskCore`` / ``CommentCore`` business models before they
reach the presentation layer.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Index
from sqlmodel import Field, Relationship

from .models import (
    BaseEntityModel,
    CommentCore,
    TaskCore,
    TaskDraft,
    TaskPriority,
)


class Task(BaseEntityModel, table=True):
    """A to-do item.

    ``created_at`` is assigned once on construction and never written again.
    Comments are owned by the task and removed with it.
    """

    __tablename__ = "tasks"
    __table_args__ = (
        Index("ix_tasks_is_completed", "is_completed"),
        Index("ix_tasks_due_date", "due_date"),
    )

    id: int | None = Field(default=None, primary_key=True)
    title: str = Field(default="")
    content: str = Field(default="")
    priority: TaskPriority = TaskPriority.MEDIUM
    # Naive local time, stored without timezone
    due_date: datetime = Field(default_factory=datetime.now, sa_type=DateTime)
    created_at: datetime = Field(default_factory=datetime.now, sa_type=DateTime)
    is_completed: bool = False
    completed_at: datetime | None = Field(default=None, sa_type=DateTime)

    # Relationships
    comments: list["Comment"] = Relationship(
        back_populates="task",
        sa_relationship_kwargs={
            "cascade": "all, delete-orphan",
            "order_by": "Comment.id",
        },
    )

    def to_core_model(self) -> TaskCore:
        """Convert to TaskCore business model."""
        return TaskCore(
            id=self.id,
            title=self.title,
            content=self.content,
            priority=TaskPriority(self.priority),
            due_date=self.due_date,
            created_at=self.created_at,
            is_completed=self.is_completed,
            completed_at=self.completed_at,
            comments=[comment.to_core_model() for comment in self.comments],
        )

    @classmethod
    def from_draft(cls, draft: TaskDraft, created_at: datetime) -> "Task":
        """Create a new, not yet completed task from a staging buffer."""
        return cls(
            title=draft.title,
            content=draft.content,
            priority=draft.priority,
            due_date=draft.due_date,
            created_at=created_at,
            is_completed=False,
        )

    def apply_draft(self, draft: TaskDraft) -> None:
        """Write the editable fields of a staging buffer onto this record."""
        self.title = draft.title
        self.content = draft.content
        self.priority = draft.priority
        self.due_date = draft.due_date

    def set_completed(self, completed: bool, now: datetime) -> None:
        """Set the completion flag, keeping ``completed_at`` in step."""
        if completed and not self.is_completed:
            self.completed_at = now
        elif not completed:
            self.completed_at = None
        self.is_completed = completed


class Comment(BaseEntityModel, table=True):
    """Timestamped note attached to exactly one task."""

    __tablename__ = "comments"
    __table_args__ = (
        Index("ix_comments_task_id", "task_id"),
        Index("ix_comments_date", "date"),
    )

    id: int | None = Field(default=None, primary_key=True)
    task_id: int | None = Field(default=None, foreign_key="tasks.id", ondelete="CASCADE")
    text: str
    date: datetime = Field(default_factory=datetime.now, sa_type=DateTime)

    # Relationships
    task: Optional["Task"] = Relationship(back_populates="comments")

    def to_core_model(self) -> CommentCore:
        """Convert to CommentCore business model."""
        return CommentCore(id=self.id, text=self.text, date=self.date)


class AppSetting(BaseEntityModel, table=True):
    """Key/value pair of the settings store."""

    __tablename__ = "app_settings"

    key: str = Field(primary_key=True, max_length=100)
    value: str = Field(default="")
