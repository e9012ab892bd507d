"""
Storage Services Package

Provides the abstract key-value interface, concrete backends, and the
expense record store built on top of them.
"""

from src.services.storage.interface import (
    DuplicateError,
    KeyValueStorageInterface,
    StorageError,
)
from src.services.storage.local_json import InMemoryStorage, LocalJSONStorage
from src.services.storage.expense_store import ExpenseStore

__all__ = [
    # Interfaces
    "KeyValueStorageInterface",
    # Exceptions
    "DuplicateError",
    "StorageError",
    # Implementations
    "InMemoryStorage",
    "LocalJSONStorage",
    # Record store
    "ExpenseStore",
]
