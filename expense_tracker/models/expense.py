"""
Core Data Models for the Expense Tracker

DESIGN DECISION: Two models describe an expense.

- ExpenseDraft is what the user typed into the add form. It is strict:
  the title must be non-empty after trimming and the amount must be positive.
- Expense is a stored record. It is lenient: the store is plain persistence,
  so whatever is in the database must still load, even rows that would not
  pass the draft checks.

Store operations report through StoreResult instead of raising, so callers
always receive a usable value plus the reason when something went wrong.
"""

import time
from datetime import datetime
from enum import Enum
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from expense_tracker.models.category import ExpenseCategory


T = TypeVar("T")

_last_expense_id = 0


def new_expense_id() -> str:
    """
    Create a new expense ID.

    IDs are the current time in milliseconds, rendered as a string.
    An id that is not greater than the last one handed out is bumped to
    last + 1, so calls within the same millisecond stay unique within the
    process. Any unique string is accepted by the store.
    """
    global _last_expense_id

    millis = time.time_ns() // 1_000_000
    if millis <= _last_expense_id:
        millis = _last_expense_id + 1
    _last_expense_id = millis
    return str(millis)


# =============================================================================
# EXPENSE MODELS
# =============================================================================

class Expense(BaseModel):
    """
    A single stored expense.

    Records are immutable once loaded. Changing one means writing a
    replacement under the same id.
    """
    model_config = ConfigDict(frozen=True)

    id: str = Field(
        ...,
        description="Unique expense ID (primary key)"
    )
    title: str = Field(
        ...,
        description="What the money was spent on"
    )
    amount: float = Field(
        ...,
        description="Amount spent"
    )
    date: datetime = Field(
        ...,
        description="When the expense happened (local time)"
    )
    category: str = Field(
        default=ExpenseCategory.OTHER.value,
        description="Category name; unknown names are kept as-is"
    )
    created_at: Optional[datetime] = Field(
        default=None,
        description="Set by the store when the record was written"
    )

    def to_dict(self) -> dict:
        """Convert to a plain dictionary for presentation and logging."""
        return {
            "id": self.id,
            "title": self.title,
            "amount": self.amount,
            "date": self.date.isoformat(),
            "category": self.category,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class ExpenseDraft(BaseModel):
    """
    An expense as entered in the add form, before it gets an id.

    Validation happens here, never in the store.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(
        ...,
        min_length=1,
        description="Title (required, whitespace trimmed)"
    )
    amount: float = Field(
        ...,
        gt=0,
        allow_inf_nan=False,
        description="Amount spent (must be positive and finite)"
    )
    date: datetime = Field(
        default_factory=datetime.now,
        description="When the expense happened"
    )
    category: ExpenseCategory = Field(
        default=ExpenseCategory.FOOD,
        description="One of the fixed categories"
    )

    def to_expense(self, expense_id: Optional[str] = None) -> Expense:
        """Build the record to store, generating an id if none is given."""
        return Expense(
            id=expense_id or new_expense_id(),
            title=self.title,
            amount=self.amount,
            date=self.date,
            category=self.category.value,
        )


class ValidationIssue(BaseModel):
    """A single problem found in the add form."""

    field: str = Field(
        ...,
        description="Form field with the issue"
    )
    message: str = Field(
        ...,
        description="Message shown to the user"
    )


# =============================================================================
# STORE RESULTS
# =============================================================================

class StoreErrorKind(str, Enum):
    """Why a store operation failed."""
    STORAGE_INIT_FAILURE = "storage_init_failure"
    WRITE_FAILURE = "write_failure"
    READ_FAILURE = "read_failure"


class StoreResult(BaseModel, Generic[T]):
    """
    Outcome of a store operation.

    On failure, `value` still holds the benign default for the operation
    (False for writes, empty or zero for reads), so callers that only want
    to degrade gracefully can use it without checking `success`.
    """

    success: bool
    value: T
    error: Optional[StoreErrorKind] = None
    error_message: Optional[str] = None

    @classmethod
    def ok(cls, value: T) -> "StoreResult[T]":
        return cls(success=True, value=value)

    @classmethod
    def fail(
        cls,
        error: StoreErrorKind,
        message: str,
        default: T,
    ) -> "StoreResult[T]":
        return cls(
            success=False,
            value=default,
            error=error,
            error_message=message,
        )


# =============================================================================
# VIEW MODELS
# =============================================================================

class ExpenseSummary(BaseModel):
    """The figures shown above the expense list."""

    total: float = Field(
        default=0.0,
        description="Sum of all expenses"
    )
    monthly_total: float = Field(
        default=0.0,
        description="Sum of expenses in the reference month"
    )
    expense_count: int = Field(
        default=0,
        ge=0,
        description="Number of expenses"
    )
    category_totals: dict[str, float] = Field(
        default_factory=dict,
        description="Sum per category, only for categories with expenses"
    )


class ActionOutcome(BaseModel):
    """Result of a user action, with the notice to show."""

    success: bool
    message: str
