"""Add-form validation package."""

from expense_tracker.validation.validator import ExpenseFormValidator

__all__ = ["ExpenseFormValidator"]
