"""Services package."""

from expense_tracker.services.storage import (
    ExpenseStorageInterface,
    SQLiteExpenseStorage,
    StorageError,
    StorageInitError,
)

__all__ = [
    "ExpenseStorageInterface",
    "SQLiteExpenseStorage",
    "StorageError",
    "StorageInitError",
]
