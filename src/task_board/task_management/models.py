"""Data models for task management functionality."""

from dataclasses import dataclass
from datetime import date
from enum import Enum


class TaskPriority(str, Enum):
    """Task priority enumeration, ordered Low < Medium < High."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

    @property
    def rank(self) -> int:
        """Position of the priority in the total order (Low is 1)."""
        return _PRIORITY_RANKS[self]

    @classmethod
    def parse(cls, value: "TaskPriority | str") -> "TaskPriority":
        """
        Resolve a priority from an enum member or a case-insensitive name.

        Args:
            value: TaskPriority member, or a string such as "High" or "high"

        Returns:
            Matching TaskPriority

        Raises:
            ValueError: If the value names no priority
        """
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().lower()
        for priority in cls:
            if priority.value.lower() == normalized:
                return priority
        raise ValueError(f"Invalid priority: {value}")


_PRIORITY_RANKS = {
    TaskPriority.LOW: 1,
    TaskPriority.MEDIUM: 2,
    TaskPriority.HIGH: 3,
}


class SortOption(str, Enum):
    """Sort modes for the task list view."""

    DEFAULT = "default"
    DUE_DATE_ASC = "dueDateAsc"
    DUE_DATE_DESC = "dueDateDesc"
    PRIORITY_HIGH_TO_LOW = "priorityHighToLow"
    PRIORITY_LOW_TO_HIGH = "priorityLowToHigh"
    TITLE_ASC = "titleAsc"


@dataclass(frozen=True)
class Task:
    """Represents a task item. Tasks are never modified after creation."""

    id: str
    title: str
    description: str
    due_date: str
    priority: TaskPriority

    @property
    def parsed_due_date(self) -> date | None:
        """Due date as a calendar date, or None if it is not an ISO date."""
        try:
            return date.fromisoformat(self.due_date)
        except ValueError:
            return None
