"""
Expense Aggregations

Pure functions over a list of expenses that is already in memory. The view
model computes its header figures with these instead of querying the store
on every render.

Month grouping uses the calendar fields of each expense's own date. No
timezone conversion happens; all dates are assumed to be in one local frame.
"""

from datetime import datetime
from typing import Iterable, Optional

from expense_tracker.models.expense import Expense, ExpenseSummary


def total(expenses: Iterable[Expense]) -> float:
    """Sum of all amounts."""
    return sum((expense.amount for expense in expenses), 0.0)


def in_month(expense: Expense, reference: datetime) -> bool:
    """Check whether an expense falls in the reference's calendar month."""
    return (
        expense.date.year == reference.year
        and expense.date.month == reference.month
    )


def monthly_total(
    expenses: Iterable[Expense],
    reference: Optional[datetime] = None,
) -> float:
    """
    Sum of amounts for expenses in the same month and year as `reference`.

    Args:
        expenses: Expenses to sum
        reference: Any moment inside the month of interest.
                   Defaults to now.
    """
    reference = reference or datetime.now()
    return sum(
        (expense.amount for expense in expenses if in_month(expense, reference)),
        0.0,
    )


def category_totals(expenses: Iterable[Expense]) -> dict[str, float]:
    """
    Sum of amounts per category.

    Only categories that occur in `expenses` appear as keys. Unknown
    category names are grouped under their own name.
    """
    totals: dict[str, float] = {}
    for expense in expenses:
        totals[expense.category] = totals.get(expense.category, 0.0) + expense.amount
    return totals


def summarize(
    expenses: Iterable[Expense],
    reference: Optional[datetime] = None,
) -> ExpenseSummary:
    """Compute every header figure in one pass over a materialized list."""
    expenses = list(expenses)
    return ExpenseSummary(
        total=total(expenses),
        monthly_total=monthly_total(expenses, reference),
        expense_count=len(expenses),
        category_totals=category_totals(expenses),
    )
