"""Command-line interface for the task board."""

import argparse
import asyncio
import sys
from collections.abc import Sequence

from .logging_utils import configure_logging
from .task_management.config import (
    CORRUPT_BACKUP_KEY,
    DEFAULT_DATABASE_PATH,
    DEFAULT_PRIORITY,
    DEFAULT_SORT_OPTION,
    DEFAULT_WAL_MODE,
)
from .task_management.database import TaskDatabase
from .task_management.exceptions import (
    CorruptStateError,
    MissingFieldError,
    PersistenceError,
)
from .task_management.models import SortOption, Task, TaskPriority
from .task_management.task_store import TaskStore

# CLI spelling of the required fields
_FIELD_FLAGS = {
    "title": "TITLE",
    "description": "--description",
    "due_date": "--due",
}


def format_task(task: Task, selected: bool = False) -> str:
    """Render one task as list lines."""
    marker = "[x]" if selected else "[ ]"
    lines = [
        f"{marker} {task.id}  {task.due_date}  {task.priority.value:<6}  {task.title}"
    ]
    if task.description:
        lines.append(f"      {task.description}")
    return "\n".join(lines)


class TaskBoardCLI:
    """Command-line front end over a TaskStore."""

    def __init__(
        self,
        store: TaskStore | None = None,
        db_path: str = DEFAULT_DATABASE_PATH,
    ) -> None:
        """
        Initialize the CLI.

        Args:
            store: Optional TaskStore instance. If None, creates one backed by
                an SQLite database at db_path.
            db_path: Database file used when no store is given
        """
        self._store = store or TaskStore(TaskDatabase(db_path, wal_mode=DEFAULT_WAL_MODE))

    async def start(self) -> bool:
        """
        Load the persisted task list.

        Returns:
            True if the CLI can go on with a command
        """
        try:
            await self._store.load()
        except CorruptStateError as e:
            print(f"⚠️  Stored tasks could not be read ({e}).")
            print(
                f"   They were saved under '{CORRUPT_BACKUP_KEY}'; "
                "continuing with an empty list."
            )
        except PersistenceError as e:
            print(f"❌ Error opening task storage: {e}")
            return False
        return True

    async def add_task(
        self,
        title: str,
        description: str,
        due_date: str,
        priority: str = DEFAULT_PRIORITY,
    ) -> bool:
        """Create a task from the form fields."""
        try:
            task = await self._store.add(
                title, description, due_date, priority, strict=True
            )
        except MissingFieldError as e:
            print(f"❌ Missing required field: {_FIELD_FLAGS.get(e.field, e.field)}")
            return False
        except PersistenceError as e:
            print(f"❌ Error saving task: {e}")
            return False

        print(f"✅ Added task {task.id}: {task.title}")
        return True

    def list_tasks(
        self, search_query: str = "", sort_option: str = DEFAULT_SORT_OPTION
    ) -> None:
        """Print the filtered and sorted task list."""
        self._store.set_search_query(search_query)
        self._store.set_sort_option(sort_option)

        tasks = self._store.view()
        if not tasks:
            print("(no tasks)" if not search_query else "(no matching tasks)")
            return

        for task in tasks:
            print(format_task(task, self._store.is_selected(task.id)))

    async def delete_tasks(self, task_ids: Sequence[str]) -> bool:
        """Select the given tasks and delete them in one write."""
        for task_id in task_ids:
            if not self._store.is_selected(task_id):
                self._store.toggle_select(task_id)

        if not self._store.has_selection:
            print("ℹ️  No matching tasks selected; nothing deleted.")
            return True

        try:
            removed = await self._store.delete_selected()
        except PersistenceError as e:
            print(f"❌ Error deleting tasks: {e}")
            return False

        print(f"🗑️  Deleted {removed} task{'s' if removed != 1 else ''}.")
        return True

    async def show_statistics(self) -> bool:
        """Print task counts and whether unreadable tasks were set aside."""
        stats = self._store.get_statistics()
        print(f"Total:  {stats['total']}")
        print(f"High:   {stats['high']}")
        print(f"Medium: {stats['medium']}")
        print(f"Low:    {stats['low']}")

        try:
            has_backup = await self._store.has_corrupt_backup()
        except PersistenceError as e:
            print(f"❌ Error reading task storage: {e}")
            return False

        if has_backup:
            print(f"⚠️  Unreadable tasks are kept under '{CORRUPT_BACKUP_KEY}'.")
        return True

    async def run(self, args: argparse.Namespace) -> int:
        """
        Load the store, run one command and shut down.

        Returns:
            Process exit code
        """
        try:
            if not await self.start():
                return 1

            if args.command == "add":
                ok = await self.add_task(
                    args.title, args.description, args.due, args.priority
                )
                return 0 if ok else 1
            if args.command == "list":
                self.list_tasks(args.search, args.sort)
                return 0
            if args.command == "delete":
                ok = await self.delete_tasks(args.ids)
                return 0 if ok else 1
            if args.command == "stats":
                ok = await self.show_statistics()
                return 0 if ok else 1

            print(f"❌ Unknown command: {args.command}")
            return 1
        finally:
            await self._store.shutdown()


async def main(args: argparse.Namespace) -> int:
    """Main entry point for the CLI application."""
    cli = TaskBoardCLI(db_path=args.db)
    return await cli.run(args)


def create_argument_parser() -> argparse.ArgumentParser:
    """
    Create and configure the argument parser for the CLI.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        description="Task Board CLI - Keep a local task list with search and sorting",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  task-board add "Buy milk" -d "Two litres" --due 2024-01-10 -p High
  task-board list                          # All tasks in creation order
  task-board list --search milk            # Title contains "milk" (any case)
  task-board list --sort dueDateAsc        # Earliest due date first
  task-board delete 1704067200000 1704067200001
  task-board --db /tmp/tasks.db stats      # Use another task database
        """,
    )

    parser.add_argument(
        "--db",
        type=str,
        default=DEFAULT_DATABASE_PATH,
        metavar="PATH",
        help=f"Task database file (default: {DEFAULT_DATABASE_PATH})",
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging and debug information",
    )

    parser.add_argument(
        "--trace",
        action="store_true",
        help="Enable trace logging (most verbose, includes view computations)",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    add_parser = subparsers.add_parser("add", help="Create a new task")
    add_parser.add_argument("title", help="Task title")
    add_parser.add_argument(
        "--description", "-d", default="", help="Task description (required)"
    )
    add_parser.add_argument(
        "--due", default="", metavar="YYYY-MM-DD", help="Due date (required)"
    )
    add_parser.add_argument(
        "--priority",
        "-p",
        default=DEFAULT_PRIORITY,
        choices=[priority.value for priority in TaskPriority],
        help=f"Task priority (default: {DEFAULT_PRIORITY})",
    )

    list_parser = subparsers.add_parser("list", help="Show tasks")
    list_parser.add_argument(
        "--search", "-s", default="", help="Only show tasks whose title contains this"
    )
    list_parser.add_argument(
        "--sort",
        default=DEFAULT_SORT_OPTION,
        choices=[option.value for option in SortOption],
        help=f"Sort mode (default: {DEFAULT_SORT_OPTION})",
    )

    delete_parser = subparsers.add_parser("delete", help="Delete tasks by id")
    delete_parser.add_argument("ids", nargs="+", metavar="ID", help="Task id")

    subparsers.add_parser("stats", help="Show task counts")

    return parser


def handle_arguments(args: argparse.Namespace) -> None:
    """
    Apply process-wide settings from parsed arguments.

    Args:
        args: Parsed arguments from argparse
    """
    configure_logging(verbose=args.verbose, trace=args.trace)


def cli_entry_with_args(argv: Sequence[str] | None = None) -> None:
    """CLI entry point with argument parsing."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    handle_arguments(args)

    try:
        exit_code = asyncio.run(main(args))
    except KeyboardInterrupt:
        exit_code = 130

    sys.exit(exit_code)


if __name__ == "__main__":
    cli_entry_with_args()
