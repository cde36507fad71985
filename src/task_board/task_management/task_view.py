"""Filtering and sorting for the task list view (pure functions, no I/O)."""

from collections.abc import Sequence
from functools import lru_cache

from pyuca import Collator

from .models import SortOption, Task


def filter_tasks(tasks: Sequence[Task], search_query: str) -> list[Task]:
    """Keep tasks whose title contains the query, ignoring case."""
    needle = search_query.casefold()
    if not needle:
        return list(tasks)
    return [task for task in tasks if needle in task.title.casefold()]


def _sort_by_due_date(tasks: list[Task], descending: bool) -> list[Task]:
    # Unparseable dates have no place in the order; they trail in input order.
    dated = [task for task in tasks if task.parsed_due_date is not None]
    undated = [task for task in tasks if task.parsed_due_date is None]
    dated.sort(key=lambda task: task.parsed_due_date, reverse=descending)
    return dated + undated


@lru_cache(maxsize=1)
def _collator() -> Collator:
    # Root collation (DUCET), independent of the process locale
    return Collator()


def _title_key(task: Task) -> tuple[int, ...]:
    return _collator().sort_key(task.title)


def sort_tasks(tasks: Sequence[Task], sort_option: SortOption | str) -> list[Task]:
    """
    Return a new list ordered by the given sort mode.

    All modes are stable, so tasks that compare equal keep their input order.
    The input sequence is never modified.

    Args:
        tasks: Tasks in insertion order
        sort_option: SortOption member or its string value

    Returns:
        Sorted copy of tasks

    Raises:
        ValueError: If sort_option is not a known sort mode
    """
    option = SortOption(sort_option)
    ordered = list(tasks)

    if option is SortOption.DUE_DATE_ASC:
        return _sort_by_due_date(ordered, descending=False)
    if option is SortOption.DUE_DATE_DESC:
        return _sort_by_due_date(ordered, descending=True)
    if option is SortOption.PRIORITY_HIGH_TO_LOW:
        ordered.sort(key=lambda task: task.priority.rank, reverse=True)
    elif option is SortOption.PRIORITY_LOW_TO_HIGH:
        ordered.sort(key=lambda task: task.priority.rank)
    elif option is SortOption.TITLE_ASC:
        ordered.sort(key=_title_key)
    return ordered


def build_view(
    tasks: Sequence[Task], search_query: str, sort_option: SortOption | str
) -> tuple[Task, ...]:
    """Filter then sort tasks into a read-only view."""
    return tuple(sort_tasks(filter_tasks(tasks, search_query), sort_option))
