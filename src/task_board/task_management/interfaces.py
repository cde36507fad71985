"""Abstract interfaces for task management system."""

from abc import ABC, abstractmethod


class KeyValueStorage(ABC):
    """Abstract interface for the durable key-value slot holding the task list."""

    @abstractmethod
    async def initialize(self) -> None:
        """
        Initialize the storage backend.

        This method opens connections and creates any schema the backend
        needs. Calling it more than once must be safe.

        Raises:
            DatabaseError: If the backend cannot be opened
            SchemaError: If the backend schema cannot be created
        """
        pass

    @abstractmethod
    async def read(self, key: str) -> str | None:
        """
        Read the value stored under a key.

        Args:
            key: Slot name

        Returns:
            Stored text, or None if nothing is stored under the key

        Raises:
            DatabaseError: If the read fails
        """
        pass

    @abstractmethod
    async def write(self, key: str, value: str) -> None:
        """
        Replace the value stored under a key.

        The write is durable when this method returns. On failure the
        previously stored value is left in place.

        Args:
            key: Slot name
            value: Text to store

        Raises:
            DatabaseError: If the write fails
        """
        pass

    @abstractmethod
    async def delete(self, key: str) -> None:
        """
        Remove a key. Removing a missing key is a no-op.

        Args:
            key: Slot name

        Raises:
            DatabaseError: If the delete fails
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """
        Close the storage backend.

        This method releases connections. The backend may be initialized
        again afterwards.
        """
        pass
