"""Error taxonomy for ToDone.

Validation errors are raised by the edit workflow and handled at its commit
boundary. Persistence errors wrap the underlying SQLAlchemy failure and are
surfaced to the presentation layer as recoverable notices.
"""

from .schemas.models import ValidationReason


class TodoneError(Exception):
    """Base class for all ToDone errors."""


class TaskValidationError(TodoneError):
    """Raised when a task draft cannot be committed."""

    reason: ValidationReason
    default_message = "The task is not valid."

    def __init__(self, message: str | None = None):
        """Initialize with a user-facing message."""
        self.message = message or self.default_message
        super().__init__(self.message)


class MissingTitleError(TaskValidationError):
    """The trimmed title is empty."""

    reason = ValidationReason.MISSING_TITLE
    default_message = "Please enter a title for your task."


class PastDueDateError(TaskValidationError):
    """The due date lies before the start of today."""

    reason = ValidationReason.PAST_DUE_DATE
    default_message = "The due date must be today or in the future."


class PersistenceError(TodoneError):
    """Exception raised when the object store fails to save."""

    def __init__(self, operation: str, cause: Exception | None = None):
        """Initialize with the failed operation and its cause."""
        self.operation = operation
        self.cause = cause
        detail = f": {cause}" if cause else ""
        super().__init__(f"Could not save changes while trying to {operation}{detail}")


class InvalidTransitionError(TodoneError):
    """An editing session was asked to do something its state forbids."""

    def __init__(self, action: str, state: str):
        """Initialize with the attempted action and current editor state."""
        self.action = action
        self.state = state
        super().__init__(f"Cannot {action} while {state}")


class TaskNotFoundError(TodoneError):
    """No task exists with the requested id."""

    def __init__(self, task_id: int):
        """Initialize with the missing task id."""
        self.task_id = task_id
        super().__init__(f"Task {task_id} not found")
