"""
Data Models Package

This package contains all Pydantic models used by the expense tracker.
"""

from expense_tracker.models.category import (
    CATEGORY_STYLES,
    CategoryStyle,
    ExpenseCategory,
    category_style,
    is_known_category,
)
from expense_tracker.models.expense import (
    ActionOutcome,
    Expense,
    ExpenseDraft,
    ExpenseSummary,
    StoreErrorKind,
    StoreResult,
    ValidationIssue,
    new_expense_id,
)
from expense_tracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Category models
    "CATEGORY_STYLES",
    "CategoryStyle",
    "ExpenseCategory",
    "category_style",
    "is_known_category",
    # Expense models
    "ActionOutcome",
    "Expense",
    "ExpenseDraft",
    "ExpenseSummary",
    "StoreErrorKind",
    "StoreResult",
    "ValidationIssue",
    "new_expense_id",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
