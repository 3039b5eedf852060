"""Repository pattern implementations for clean data access.

This module provides the repository layer that bridges business logic
with database persistence.
"""

from .base import BaseRepository
from .task_repository import SettingsRepository, TaskRepository


__all__ = ["BaseRepository", "SettingsRepository", "TaskRepository"]
