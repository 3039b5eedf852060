"""ToDone: a personal task tracker.

Tasks carry a title, notes, a priority and a due date, collect timestamped
comments and are marked complete. The package provides the data model, the
list queries, the editing workflow, statistics and a command line front end.
"""

from .errors import (
    InvalidTransitionError,
    MissingTitleError,
    PastDueDateError,
    PersistenceError,
    TaskNotFoundError,
    TaskValidationError,
    TodoneError,
)
from .services import PreferencesService, TaskEditor, TaskService


__version__ = "1.0.0"

__all__ = [
    "InvalidTransitionError",
    "MissingTitleError",
    "PastDueDateError",
    "PersistenceError",
    "PreferencesService",
    "TaskEditor",
    "TaskNotFoundError",
    "TaskService",
    "TaskValidationError",
    "TodoneError",
]
