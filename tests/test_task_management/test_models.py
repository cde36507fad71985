"""Tests for task management data models."""

from dataclasses import FrozenInstanceError
from datetime import date

import pytest

from task_board.task_management.models import SortOption, Task, TaskPriority


def make_task(**overrides: str) -> Task:
    fields = {
        "id": "1",
        "title": "Buy milk",
        "description": "Two litres",
        "due_date": "2024-01-10",
        "priority": TaskPriority.LOW,
    }
    fields.update(overrides)
    return Task(**fields)


@pytest.mark.unit
class TestTaskPriority:
    """Test cases for the priority enumeration."""

    def test_priority_values_match_stored_names(self) -> None:
        """Test that priority values are the persisted spellings."""
        assert [p.value for p in TaskPriority] == ["Low", "Medium", "High"]

    def test_priority_ranks_are_totally_ordered(self) -> None:
        """Test Low < Medium < High."""
        assert TaskPriority.LOW.rank < TaskPriority.MEDIUM.rank < TaskPriority.HIGH.rank

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("High", TaskPriority.HIGH),
            ("high", TaskPriority.HIGH),
            (" medium ", TaskPriority.MEDIUM),
            (TaskPriority.LOW, TaskPriority.LOW),
        ],
    )
    def test_parse_accepts_names_in_any_case(
        self, raw: TaskPriority | str, expected: TaskPriority
    ) -> None:
        """Test parsing priorities from enum members and strings."""
        assert TaskPriority.parse(raw) is expected

    def test_parse_rejects_unknown_priority(self) -> None:
        """Test that unknown priority names raise ValueError."""
        with pytest.raises(ValueError, match="Invalid priority"):
            TaskPriority.parse("urgent")


@pytest.mark.unit
class TestSortOption:
    """Test cases for the sort option enumeration."""

    def test_sort_option_values(self) -> None:
        """Test that all six sort modes exist with their wire values."""
        assert {option.value for option in SortOption} == {
            "default",
            "dueDateAsc",
            "dueDateDesc",
            "priorityHighToLow",
            "priorityLowToHigh",
            "titleAsc",
        }

    def test_sort_option_from_string(self) -> None:
        """Test constructing a sort option from its value."""
        assert SortOption("titleAsc") is SortOption.TITLE_ASC


@pytest.mark.unit
class TestTask:
    """Test cases for the Task record."""

    def test_task_is_immutable(self) -> None:
        """Test that tasks cannot be changed after creation."""
        task = make_task()

        with pytest.raises(FrozenInstanceError):
            task.title = "Other"  # type: ignore[misc]

    def test_tasks_compare_by_fields(self) -> None:
        """Test field-for-field equality."""
        assert make_task() == make_task()
        assert make_task() != make_task(title="Buy bread")

    def test_parsed_due_date(self) -> None:
        """Test parsing an ISO due date."""
        assert make_task(due_date="2024-01-10").parsed_due_date == date(2024, 1, 10)

    def test_parsed_due_date_invalid(self) -> None:
        """Test that a non-date due date parses to None."""
        assert make_task(due_date="next week").parsed_due_date is None
