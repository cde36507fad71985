"""Custom exceptions for task management functionality."""


class TaskManagementError(Exception):
    """Base exception for task management errors."""

    pass


class MissingFieldError(TaskManagementError):
    """Exception raised when a required task field is empty."""

    def __init__(self, field: str) -> None:
        super().__init__(f"Missing required field: {field}")
        self.field = field


class PersistenceError(TaskManagementError):
    """Exception raised when the persisted task list cannot be read or written."""

    pass


class DatabaseError(PersistenceError):
    """Exception raised for database related errors."""

    pass


class SchemaError(DatabaseError):
    """Exception raised for database schema errors."""

    pass


class CorruptStateError(PersistenceError):
    """Exception raised when the persisted task list cannot be decoded."""

    pass
