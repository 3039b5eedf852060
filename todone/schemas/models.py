"""Business models and enums shared by every ToDone layer.

The enums here double as SQLModel column types, and the Pydantic models are the
read-only views handed to the presentation layer. Persistence entities live in
``schemas/database.py`` and convert into these models via ``to_core_model``.
"""

from datetime import datetime
from enum import StrEnum
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)
from sqlmodel import SQLModel

# ============================================================================
# ENUMS
# ============================================================================


class TaskPriority(StrEnum):
    """Task priority, ordered low to high."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        """Numeric rank used for priority sorting (higher sorts first)."""
        return _PRIORITY_RANKS[self]

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @property
    def picker_label(self) -> str:
        """Label shown in the edit form, e.g. ``P1 - High``."""
        return f"P{3 - self.rank} - {self.label}"


_PRIORITY_RANKS = {
    TaskPriority.LOW: 0,
    TaskPriority.MEDIUM: 1,
    TaskPriority.HIGH: 2,
}


class SortOption(StrEnum):
    """Ordering applied to the active and completed task lists."""

    DATE = "date"
    PRIORITY = "priority"

    @property
    def label(self) -> str:
        return "By Date" if self is SortOption.DATE else "By Priority"


class DueStatus(StrEnum):
    """Due-date state of a task relative to the current time."""

    OVERDUE = "overdue"
    UPCOMING = "upcoming"
    SCHEDULED = "scheduled"


class AppTheme(StrEnum):
    """Colour scheme preference."""

    SYSTEM = "system"
    LIGHT = "light"
    DARK = "dark"


class AccentColor(StrEnum):
    """Accent colour preference."""

    GREEN = "green"
    BLUE = "blue"
    RED = "red"
    ORANGE = "orange"
    PURPLE = "purple"
    PINK = "pink"
    YELLOW = "yellow"
    MINT = "mint"
    TEAL = "teal"
    INDIGO = "indigo"
    BROWN = "brown"


class EditorState(StrEnum):
    """States of a single task editing session."""

    VIEWING = "viewing"
    EDITING = "editing"
    CREATING = "creating"
    CLOSED = "closed"


class ValidationReason(StrEnum):
    """Why a task commit was rejected."""

    MISSING_TITLE = "missing_title"
    PAST_DUE_DATE = "past_due_date"


class CommitOutcome(StrEnum):
    """Result of committing an editing session."""

    SAVED = "saved"
    INVALID = "invalid"
    SAVE_FAILED = "save_failed"


# ============================================================================
# BASE MODELS
# ============================================================================


class UnifiedConfig:
    """Shared Pydantic configuration for business and entity models."""

    PYDANTIC_CONFIG = ConfigDict(
        strict=True,
        extra="forbid",
        validate_assignment=True,
        use_enum_values=False,
        frozen=False,
        from_attributes=True,
    )


class BaseBusinessModel(BaseModel):
    """Base for pure business logic models."""

    model_config = UnifiedConfig.PYDANTIC_CONFIG


class BaseEntityModel(SQLModel):
    """Base for database entity models."""

    model_config = UnifiedConfig.PYDANTIC_CONFIG


# ============================================================================
# TASK MODELS
# ============================================================================


class CommentCore(BaseBusinessModel):
    """Immutable timestamped note attached to a task."""

    model_config = ConfigDict({**UnifiedConfig.PYDANTIC_CONFIG, "frozen": True})

    id: int | None = None
    text: str = Field(..., min_length=1)
    date: datetime = Field(default_factory=datetime.now)


class TaskCore(BaseBusinessModel):
    """Read-only view of a stored task."""

    id: int | None = None
    title: str = Field(default="")
    content: str = Field(default="")
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: datetime = Field(default_factory=datetime.now)
    created_at: datetime = Field(default_factory=datetime.now)
    is_completed: bool = False
    completed_at: datetime | None = None
    comments: list[CommentCore] = Field(default_factory=list)

    @property
    def sorted_comments(self) -> list[CommentCore]:
        """Comments newest first, the order they are displayed in."""
        return sorted(self.comments, key=lambda comment: comment.date, reverse=True)


class TaskDraft(BaseBusinessModel):
    """Staging buffer for an editing session.

    Holds the editable fields of a task until the session is committed; the
    stored record is not touched before then.
    """

    title: str = Field(default="")
    content: str = Field(default="")
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: datetime = Field(default_factory=datetime.now)

    @classmethod
    def from_task(cls, task: Any) -> "TaskDraft":
        """Copy the editable fields of a task entity or ``TaskCore``."""
        return cls(
            title=task.title,
            content=task.content,
            priority=task.priority,
            due_date=task.due_date,
        )

    @property
    def has_title(self) -> bool:
        return bool(self.title.strip())


class CommitResult(BaseBusinessModel):
    """Outcome of ``TaskEditor.commit``."""

    outcome: CommitOutcome
    task_id: int | None = None
    reason: ValidationReason | None = None
    message: str | None = None

    @property
    def ok(self) -> bool:
        return self.outcome is CommitOutcome.SAVED


# ============================================================================
# STATISTICS MODELS
# ============================================================================


class TaskOverview(BaseBusinessModel):
    """Total, completed and pending task counts."""

    total: int = Field(default=0, ge=0)
    completed: int = Field(default=0, ge=0)
    pending: int = Field(default=0, ge=0)


class DailyCompletion(BaseBusinessModel):
    """Number of completed tasks attributed to one calendar day."""

    date: datetime
    count: int = Field(default=0, ge=0)


# ============================================================================
# PREFERENCES
# ============================================================================


class AppearancePreferences(BaseBusinessModel):
    """Display preferences handed to the presentation layer at startup."""

    theme: AppTheme = AppTheme.SYSTEM
    accent_color: AccentColor = AccentColor.GREEN

    @field_validator("theme", mode="before")
    @classmethod
    def coerce_theme(cls, v: Any) -> Any:
        """Accept the raw strings read back from the settings store."""
        if isinstance(v, str):
            return AppTheme(v.strip().lower())
        return v

    @field_validator("accent_color", mode="before")
    @classmethod
    def coerce_accent_color(cls, v: Any) -> Any:
        if isinstance(v, str):
            return AccentColor(v.strip().lower())
        return v
