"""Schema package for ToDone.

Quick usage:
    from todone.schemas import TaskCore, TaskPriority, SortOption
    from todone.schemas import Task, Comment
"""

# Database entities
from .database import AppSetting, Comment, Task

# Business models and enums
from .models import (
    AccentColor,
    AppearancePreferences,
    AppTheme,
    BaseBusinessModel,
    BaseEntityModel,
    CommentCore,
    CommitOutcome,
    CommitResult,
    DailyCompletion,
    DueStatus,
    EditorState,
    SortOption,
    TaskCore,
    TaskDraft,
    TaskOverview,
    TaskPriority,
    UnifiedConfig,
    ValidationReason,
)


__all__ = [
    "AccentColor",
    "AppSetting",
    "AppTheme",
    "AppearancePreferences",
    "BaseBusinessModel",
    "BaseEntityModel",
    "Comment",
    "CommentCore",
    "CommitOutcome",
    "CommitResult",
    "DailyCompletion",
    "DueStatus",
    "EditorState",
    "SortOption",
    "Task",
    "TaskCore",
    "TaskDraft",
    "TaskOverview",
    "TaskPriority",
    "UnifiedConfig",
    "ValidationReason",
]
