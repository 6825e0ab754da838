"""Tests for the in-memory aggregations."""

from datetime import datetime

import pytest

from expense_tracker.queries import category_totals, monthly_total, summarize, total

from tests.conftest import make_expense


@pytest.fixture
def expenses():
    return [
        make_expense("1", "Coffee", 50, datetime(2024, 5, 1), "Food"),
        make_expense("2", "Bus", 20, datetime(2024, 5, 31, 23, 59), "Transport"),
        make_expense("3", "Book", 300, datetime(2024, 4, 30, 23, 59), "Education"),
        make_expense("4", "Dinner", 450, datetime(2023, 5, 15), "Food"),
        make_expense("5", "Vet", 80, datetime(2024, 5, 10), "Pets"),
    ]


class TestTotals:

    def test_total(self, expenses):
        assert total(expenses) == 900

    def test_total_empty(self):
        assert total([]) == 0

    def test_monthly_total_same_month_and_year(self, expenses):
        assert monthly_total(expenses, datetime(2024, 5, 20)) == 150

    def test_monthly_total_ignores_same_month_other_year(self, expenses):
        assert monthly_total(expenses, datetime(2023, 5, 1)) == 450

    def test_monthly_total_no_matches(self, expenses):
        assert monthly_total(expenses, datetime(2025, 1, 1)) == 0

    def test_monthly_total_defaults_to_now(self):
        now = datetime.now()
        recent = [make_expense(date=now, amount=12.5)]
        assert monthly_total(recent) == 12.5


class TestCategoryTotals:

    def test_only_present_categories(self, expenses):
        assert category_totals(expenses) == {
            "Food": 500,
            "Transport": 20,
            "Education": 300,
            "Pets": 80,
        }

    def test_empty(self):
        assert category_totals([]) == {}


class TestSummary:

    def test_summarize(self, expenses):
        summary = summarize(expenses, datetime(2024, 5, 1))
        assert summary.total == 900
        assert summary.monthly_total == 150
        assert summary.expense_count == 5
        assert summary.category_totals["Food"] == 500

    def test_summarize_accepts_generator(self, expenses):
        summary = summarize((e for e in expenses), datetime(2024, 5, 1))
        assert summary.expense_count == 5
        assert summary.total == 900
