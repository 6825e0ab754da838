"""Aggregation package."""

from expense_tracker.queries.aggregations import (
    category_totals,
    monthly_total,
    summarize,
    total,
)

__all__ = ["category_totals", "monthly_total", "summarize", "total"]
