"""
Expense Tracker - Source Package

The persistence and aggregation core of a single-user expense tracker.
A presentation layer calls into ExpenseListFlow and renders what it returns.

PRINCIPLES:
1. The store persists; the caller validates
2. Store failures never crash the caller
3. The in-memory list is resynchronized from the store after any failure
"""

__version__ = "1.0.0"
__author__ = "Expense Tracker Team"
