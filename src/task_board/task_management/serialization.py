"""JSON encoding of the persisted task collection."""

import json
from collections.abc import Iterable
from typing import Any

from .exceptions import CorruptStateError
from .models import Task, TaskPriority

# Wire name -> Task attribute
_FIELDS = {
    "id": "id",
    "title": "title",
    "description": "description",
    "dueDate": "due_date",
    "priority": "priority",
}


def task_to_dict(task: Task) -> dict[str, str]:
    """Convert a task to its persisted object form."""
    return {
        "id": task.id,
        "title": task.title,
        "description": task.description,
        "dueDate": task.due_date,
        "priority": task.priority.value,
    }


def task_from_dict(data: Any) -> Task:
    """
    Build a task from its persisted object form.

    Args:
        data: Decoded JSON object

    Returns:
        Task object

    Raises:
        CorruptStateError: If a field is missing, not a string, or the
            priority is not one of Low, Medium, High
    """
    if not isinstance(data, dict):
        raise CorruptStateError(f"Task entry is not an object: {data!r}")

    values: dict[str, str] = {}
    for wire_name, attr in _FIELDS.items():
        value = data.get(wire_name)
        if not isinstance(value, str):
            raise CorruptStateError(f"Task entry has invalid field {wire_name!r}")
        values[attr] = value

    try:
        priority = TaskPriority(values.pop("priority"))
    except ValueError as e:
        raise CorruptStateError(f"Task entry has invalid priority: {e}") from e

    return Task(priority=priority, **values)


def tasks_to_json(tasks: Iterable[Task]) -> str:
    """Serialize the whole collection as a JSON array."""
    return json.dumps([task_to_dict(task) for task in tasks])


def tasks_from_json(raw: str) -> list[Task]:
    """
    Deserialize a collection written by tasks_to_json.

    Args:
        raw: JSON text read from storage

    Returns:
        Tasks in stored order

    Raises:
        CorruptStateError: If the payload is not a JSON array of valid task
            objects with unique ids
    """
    try:
        data = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise CorruptStateError(f"Persisted tasks are not valid JSON: {e}") from e

    if not isinstance(data, list):
        raise CorruptStateError("Persisted tasks are not a JSON array")

    tasks = [task_from_dict(item) for item in data]

    seen: set[str] = set()
    for task in tasks:
        if task.id in seen:
            raise CorruptStateError(f"Duplicate task id in persisted tasks: {task.id}")
        seen.add(task.id)

    return tasks
