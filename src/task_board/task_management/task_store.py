"""Task Store holding the task list, the selection, and the list view."""

import time
from collections.abc import Callable

from task_board.logging_utils import get_logger

from .config import (
    CORRUPT_BACKUP_KEY,
    DEFAULT_BACKUP_ENABLED,
    DEFAULT_PRIORITY,
    DEFAULT_SORT_OPTION,
    TASKS_STORAGE_KEY,
)
from .exceptions import CorruptStateError, MissingFieldError, PersistenceError
from .interfaces import KeyValueStorage
from .models import SortOption, Task, TaskPriority
from .serialization import tasks_from_json, tasks_to_json
from .task_view import build_view

logger = get_logger(__name__)


class TaskStore:
    """
    Owns the task collection, the selection set and the view parameters.

    Every mutation writes the full collection to storage before it takes
    effect in memory, so a failed write leaves the store unchanged. The
    selection is never persisted and always refers to existing tasks.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        storage_key: str = TASKS_STORAGE_KEY,
        backup_enabled: bool = DEFAULT_BACKUP_ENABLED,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """
        Initialize Task Store.

        Args:
            storage: Key-value backend for the serialized task list
            storage_key: Slot holding the task list
            backup_enabled: Copy undecodable task lists to a backup slot on load
            clock: Source of the current time in seconds, used for task ids
        """
        self._storage = storage
        self._storage_key = storage_key
        self._backup_enabled = backup_enabled
        self._clock = clock
        self._tasks: list[Task] = []
        self._selected: set[str] = set()
        self._search_query = ""
        self._sort_option = SortOption(DEFAULT_SORT_OPTION)
        self._last_issued_id = 0

    @property
    def tasks(self) -> tuple[Task, ...]:
        """Snapshot of the collection in insertion order."""
        return tuple(self._tasks)

    @property
    def selected_ids(self) -> frozenset[str]:
        """Snapshot of the selection set."""
        return frozenset(self._selected)

    @property
    def has_selection(self) -> bool:
        """Whether bulk deletion currently has anything to delete."""
        return bool(self._selected)

    @property
    def search_query(self) -> str:
        return self._search_query

    @property
    def sort_option(self) -> SortOption:
        return self._sort_option

    async def load(self) -> None:
        """
        Initialize storage and replace the collection with the persisted one.

        The selection is cleared. If nothing is persisted the store starts
        empty. If the persisted list cannot be decoded the store also starts
        empty, the raw payload is copied to the backup slot, and the error is
        raised.

        Raises:
            CorruptStateError: If the persisted task list is malformed
            PersistenceError: If storage cannot be read
        """
        logger.info("Loading task list")

        self._tasks = []
        self._selected = set()

        try:
            await self._storage.initialize()
            raw = await self._storage.read(self._storage_key)
        except PersistenceError:
            raise
        except Exception as e:
            raise PersistenceError(f"Failed to read task list: {e}") from e

        if raw is None:
            logger.info("No persisted task list, starting empty")
            return

        try:
            tasks = tasks_from_json(raw)
        except CorruptStateError as e:
            logger.error(f"Persisted task list is corrupt, starting empty: {e}")
            if self._backup_enabled:
                await self._backup_corrupt_payload(raw)
            raise

        # Ids are opaque; only plain ASCII decimal ids take part in numbering
        last_issued_id = max(
            (
                int(task.id)
                for task in tasks
                if task.id.isascii() and task.id.isdecimal()
            ),
            default=0,
        )

        self._tasks = tasks
        self._last_issued_id = last_issued_id
        logger.info(f"Loaded {len(self._tasks)} tasks")

    async def _backup_corrupt_payload(self, raw: str) -> None:
        try:
            await self._storage.write(CORRUPT_BACKUP_KEY, raw)
            logger.warning(f"Saved corrupt task list to {CORRUPT_BACKUP_KEY!r}")
        except Exception as e:
            logger.error(f"Failed to back up corrupt task list: {e}")

    async def has_corrupt_backup(self) -> bool:
        """
        Whether an undecodable task list has been set aside by load().

        Raises:
            PersistenceError: If storage cannot be read
        """
        try:
            return await self._storage.read(CORRUPT_BACKUP_KEY) is not None
        except PersistenceError:
            raise
        except Exception as e:
            raise PersistenceError(f"Failed to read backup slot: {e}") from e

    async def _persist(self, tasks: list[Task]) -> None:
        """
        Write the full collection to storage.

        Raises:
            PersistenceError: If the write fails
        """
        try:
            await self._storage.write(self._storage_key, tasks_to_json(tasks))
        except PersistenceError:
            raise
        except Exception as e:
            raise PersistenceError(f"Failed to write task list: {e}") from e

    def _next_id(self) -> int:
        """Millisecond creation timestamp, bumped past ids already in use."""
        candidate = max(int(self._clock() * 1000), self._last_issued_id + 1)
        existing = {task.id for task in self._tasks}
        while str(candidate) in existing:
            candidate += 1
        return candidate

    @staticmethod
    def validate_new_task(title: str, description: str, due_date: str) -> None:
        """
        Check that all required task fields are non-empty.

        Raises:
            MissingFieldError: For the first empty field
        """
        for field, value in (
            ("title", title),
            ("description", description),
            ("due_date", due_date),
        ):
            if not value:
                raise MissingFieldError(field)

    async def add(
        self,
        title: str,
        description: str,
        due_date: str,
        priority: TaskPriority | str = DEFAULT_PRIORITY,
        *,
        strict: bool = False,
    ) -> Task | None:
        """
        Add a new task to the end of the collection.

        Args:
            title: Task title
            description: Task description
            due_date: Due date as an ISO date string (YYYY-MM-DD)
            priority: Task priority or its name
            strict: Raise on an empty required field instead of declining

        Returns:
            The created task, or None if a required field was empty

        Raises:
            MissingFieldError: If strict and a required field is empty
            ValueError: If priority names no priority
            PersistenceError: If the task list cannot be written
        """
        try:
            self.validate_new_task(title, description, due_date)
        except MissingFieldError as e:
            if strict:
                raise
            logger.debug(f"Declined to add task: {e}")
            return None

        task_id = self._next_id()
        task = Task(
            id=str(task_id),
            title=title,
            description=description,
            due_date=due_date,
            priority=TaskPriority.parse(priority),
        )

        updated = [*self._tasks, task]
        await self._persist(updated)

        self._tasks = updated
        self._last_issued_id = task_id

        logger.info(f"Added task {task.id}: {task.title}")
        return task

    def is_selected(self, task_id: str) -> bool:
        return task_id in self._selected

    def toggle_select(self, task_id: str) -> bool:
        """
        Flip whether a task is selected for bulk deletion.

        Ids that are not in the collection are ignored.

        Args:
            task_id: Task id

        Returns:
            True if the task is selected afterwards
        """
        if task_id in self._selected:
            self._selected.discard(task_id)
            return False

        if not any(task.id == task_id for task in self._tasks):
            logger.debug(f"Ignoring selection of unknown task {task_id}")
            return False

        self._selected.add(task_id)
        return True

    async def delete_selected(self) -> int:
        """
        Delete every selected task and clear the selection.

        Returns:
            Number of tasks deleted

        Raises:
            PersistenceError: If the task list cannot be written; the
                collection and the selection are left unchanged
        """
        if not self._selected:
            return 0

        remaining = [task for task in self._tasks if task.id not in self._selected]
        await self._persist(remaining)

        removed = len(self._tasks) - len(remaining)
        self._tasks = remaining
        self._selected = set()

        logger.info(f"Deleted {removed} selected tasks")
        return removed

    async def delete_task(self, task_id: str) -> bool:
        """
        Delete one task.

        Deleting an id that is not in the collection is a no-op.

        Args:
            task_id: Task id

        Returns:
            True if a task was deleted

        Raises:
            PersistenceError: If the task list cannot be written
        """
        remaining = [task for task in self._tasks if task.id != task_id]
        if len(remaining) == len(self._tasks):
            return False

        await self._persist(remaining)

        self._tasks = remaining
        self._selected.discard(task_id)

        logger.info(f"Deleted task {task_id}")
        return True

    def set_search_query(self, search_query: str) -> None:
        self._search_query = search_query

    def set_sort_option(self, sort_option: SortOption | str) -> None:
        """
        Set the sort mode used by view() when none is given.

        Raises:
            ValueError: If sort_option is not a known sort mode
        """
        self._sort_option = SortOption(sort_option)

    def view(
        self,
        search_query: str | None = None,
        sort_option: SortOption | str | None = None,
    ) -> tuple[Task, ...]:
        """
        Compute the filtered and sorted task list.

        Has no side effects on the store.

        Args:
            search_query: Case-insensitive title substring; defaults to the
                store's current search query
            sort_option: Sort mode; defaults to the store's current sort option

        Returns:
            Read-only ordered tasks

        Raises:
            ValueError: If sort_option is not a known sort mode
        """
        query = self._search_query if search_query is None else search_query
        option = self._sort_option if sort_option is None else sort_option

        result = build_view(self._tasks, query, option)
        logger.trace(
            f"View query={query!r} sort={SortOption(option).value}: "
            f"{len(result)}/{len(self._tasks)} tasks"
        )
        return result

    def get_statistics(self) -> dict[str, int]:
        """
        Get task statistics.

        Returns:
            Dictionary with task counts:
            - total: Total number of tasks
            - selected: Number of selected tasks
            - low / medium / high: Number of tasks per priority
        """
        stats = {
            "total": len(self._tasks),
            "selected": len(self._selected),
            "low": 0,
            "medium": 0,
            "high": 0,
        }

        for task in self._tasks:
            stats[task.priority.value.lower()] += 1

        return stats

    async def shutdown(self) -> None:
        """
        Close the storage backend.

        Handles errors gracefully to ensure cleanup completes.
        """
        logger.info("Shutting down Task Store")
        try:
            await self._storage.close()
        except Exception as e:
            logger.error(f"Error closing storage: {e}")
