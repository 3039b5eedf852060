"""Pure query, display and statistics helpers for ToDone."""

from .statistics import TaskStatistics
from .task_calculations import TaskCalculations
from .task_queries import TaskQueries

__all__ = ["TaskCalculations", "TaskQueries", "TaskStatistics"]
