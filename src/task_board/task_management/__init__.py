"""Task management module: task models, persistence and the task store."""

from .database import TaskDatabase
from .exceptions import (
    CorruptStateError,
    MissingFieldError,
    PersistenceError,
    TaskManagementError,
)
from .models import SortOption, Task, TaskPriority
from .task_store import TaskStore

__all__ = [
    "Task",
    "TaskPriority",
    "SortOption",
    "TaskStore",
    "TaskDatabase",
    "TaskManagementError",
    "MissingFieldError",
    "PersistenceError",
    "CorruptStateError",
]
