"""Shared fixtures for the expense tracker tests."""

from datetime import datetime

import pytest
import pytest_asyncio

from expense_tracker.models.expense import Expense
from expense_tracker.services.storage import SQLiteExpenseStorage


def make_expense(
    expense_id: str = "1",
    title: str = "Coffee",
    amount: float = 50.0,
    date: datetime = datetime(2024, 5, 1, 9, 30),
    category: str = "Food",
) -> Expense:
    return Expense(
        id=expense_id,
        title=title,
        amount=amount,
        date=date,
        category=category,
    )


@pytest.fixture
def database_path(tmp_path):
    return tmp_path / "data" / "expense_tracker.db"


@pytest_asyncio.fixture
async def storage(database_path):
    store = SQLiteExpenseStorage(database_path)
    await store.initialize()
    yield store
    await store.close()
