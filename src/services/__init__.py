"""Services package."""

from src.services.storage import (
    DuplicateError,
    ExpenseStore,
    InMemoryStorage,
    KeyValueStorageInterface,
    LocalJSONStorage,
    StorageError,
)

__all__ = [
    "DuplicateError",
    "ExpenseStore",
    "InMemoryStorage",
    "KeyValueStorageInterface",
    "LocalJSONStorage",
    "StorageError",
]
