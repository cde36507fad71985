"""Configuration constants for task management functionality."""

import os

# Storage Configuration
DEFAULT_DATABASE_PATH = os.path.expanduser("~/.task-board/tasks.db")
DEFAULT_WAL_MODE = True
DEFAULT_BACKUP_ENABLED = True

# Key-value slots
TASKS_STORAGE_KEY = "tasks"
CORRUPT_BACKUP_KEY = "tasks.corrupt"

# Database Schema Version
SCHEMA_VERSION = 1

# Task defaults
DEFAULT_PRIORITY = "Low"
DEFAULT_SORT_OPTION = "default"
