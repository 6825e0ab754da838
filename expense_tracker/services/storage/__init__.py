"""
Storage Services Package

Provides the abstract expense storage interface and its SQLite implementation.
"""

from expense_tracker.services.storage.interface import (
    ExpenseStorageInterface,
    StorageError,
    StorageInitError,
)
from expense_tracker.services.storage.sqlite import (
    SQLiteExpenseStorage,
    parse_date,
    serialize_date,
)

__all__ = [
    # Interfaces
    "ExpenseStorageInterface",
    # Exceptions
    "StorageError",
    "StorageInitError",
    # SQLite implementation
    "SQLiteExpenseStorage",
    "parse_date",
    "serialize_date",
]
