"""Task Board - a local task list editor with durable storage."""

__version__ = "0.1.0"
