"""Service layer for ToDone business operations.

This module provides the service layer that coordinates between business
models, repositories and the presentation layer.
"""

from .preferences_service import PreferencesService
from .task_editor import TaskEditor, validate_new_task, validate_task_update
from .task_service import TaskService

__all__ = [
    "PreferencesService",
    "TaskEditor",
    "TaskService",
    "validate_new_task",
    "validate_task_update",
]
