"""
Abstract Storage Interface

Any expense store implements these operations. The tracker ships with a
SQLite implementation; tests substitute their own.

Contract shared by every implementation:
- Operations never raise to the caller. Failures come back as a failed
  StoreResult carrying the benign default value.
- Any operation opens the store lazily if initialize() was not called.
- The store does not validate expenses. That is the caller's job.
"""

from abc import ABC, abstractmethod

from expense_tracker.models.expense import Expense, StoreResult


class ExpenseStorageInterface(ABC):
    """
    Abstract interface for expense storage operations.
    """

    @abstractmethod
    async def initialize(self) -> StoreResult[bool]:
        """
        Open the store, creating it and its schema on first use.

        Calling it again once open is a no-op success.
        """
        pass

    @abstractmethod
    async def insert_or_replace(self, expense: Expense) -> StoreResult[bool]:
        """
        Save an expense, overwriting any existing expense with the same id.

        The store stamps the creation time itself; `expense.created_at`
        is ignored.
        """
        pass

    @abstractmethod
    async def list_all(self) -> StoreResult[list[Expense]]:
        """
        List every expense, most recent date first.

        Expenses sharing a date keep their insertion order.
        """
        pass

    @abstractmethod
    async def delete_by_id(self, expense_id: str) -> StoreResult[bool]:
        """
        Delete an expense by id.

        Deleting an id that does not exist still succeeds.
        """
        pass

    @abstractmethod
    async def delete_all(self) -> StoreResult[bool]:
        """Delete every expense."""
        pass

    @abstractmethod
    async def update(self, expense: Expense) -> StoreResult[bool]:
        """
        Overwrite title, amount, date and category for `expense.id`.

        Returns:
            Success with value True when a row changed, False when no row
            had that id. Neither case is an error.
        """
        pass

    @abstractmethod
    async def sum_all(self) -> StoreResult[float]:
        """Sum of all amounts, 0.0 when empty."""
        pass

    @abstractmethod
    async def sum_by_category(self) -> StoreResult[dict[str, float]]:
        """
        Sum of amounts per category.

        Only categories with at least one expense appear as keys.
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release the underlying connection."""
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StorageInitError(StorageError):
    """The database could not be opened or created."""
    pass
