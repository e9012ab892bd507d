"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for durable storage.
This allows us to:
1. Swap the local JSON file for another backend later
2. Use in-memory storage for testing
3. Keep the record store decoupled from where bytes end up

The interface is intentionally tiny: a named key holding a whole
serialized collection. There are no partial updates.
"""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStorageInterface(ABC):
    """
    Abstract interface for durable key-value storage.

    Any storage implementation must implement these methods.
    """

    @abstractmethod
    def read(self, key: str) -> Optional[str]:
        """
        Read the text stored under a key.

        Args:
            key: The storage key

        Returns:
            The stored text, or None if the key was never written

        Raises:
            StorageError: If the backend exists but cannot be read
        """
        pass

    @abstractmethod
    def write(self, key: str, value: str) -> None:
        """
        Overwrite the text stored under a key.

        Args:
            key: The storage key
            value: The full text to store

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        """
        Remove a key.

        Returns:
            True if the key existed
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class DuplicateError(StorageError):
    """Attempted to insert a duplicate entity."""
    pass
