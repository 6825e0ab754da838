"""
Tests for the expense list flows.

A SQLite store with switchable failures stands in for a flaky disk, so the
rollback-by-reload behaviour can be checked against real persisted state.
"""

from datetime import datetime

import pytest
import pytest_asyncio

from expense_tracker.audit import AuditLogger
from expense_tracker.models.expense import ExpenseDraft, StoreErrorKind, StoreResult
from expense_tracker.orchestrator import (
    ADD_FAILED_MESSAGE,
    ADDED_MESSAGE,
    CLEAR_FAILED_MESSAGE,
    CLEARED_MESSAGE,
    DELETE_FAILED_MESSAGE,
    NOTHING_TO_UNDO_MESSAGE,
    RESTORED_MESSAGE,
    ExpenseListFlow,
    create_app_components,
)
from expense_tracker.services.storage import SQLiteExpenseStorage

from tests.conftest import make_expense


class FlakyStorage(SQLiteExpenseStorage):
    """SQLite store whose writes can be made to fail."""

    def __init__(self, database_path):
        super().__init__(database_path)
        self.failing: set[str] = set()

    def _failure(self) -> StoreResult[bool]:
        return StoreResult.fail(StoreErrorKind.WRITE_FAILURE, "disk I/O error", False)

    async def insert_or_replace(self, expense):
        if "insert" in self.failing:
            return self._failure()
        return await super().insert_or_replace(expense)

    async def delete_by_id(self, expense_id):
        if "delete" in self.failing:
            return self._failure()
        return await super().delete_by_id(expense_id)

    async def delete_all(self):
        if "delete_all" in self.failing:
            return self._failure()
        return await super().delete_all()


@pytest_asyncio.fixture
async def flaky_storage(database_path):
    store = FlakyStorage(database_path)
    await store.initialize()
    yield store
    await store.close()


@pytest_asyncio.fixture
async def flow(flaky_storage):
    await flaky_storage.insert_or_replace(
        make_expense("1", "Coffee", 50, datetime(2024, 5, 1), "Food")
    )
    await flaky_storage.insert_or_replace(
        make_expense("2", "Bus", 20, datetime(2024, 5, 2), "Transport")
    )
    flow = ExpenseListFlow(flaky_storage, audit_logger=AuditLogger())
    await flow.load()
    return flow


class TestLoad:

    async def test_load_orders_newest_first(self, flow):
        assert [e.id for e in flow.expenses] == ["2", "1"]

    async def test_view_figures(self, flow):
        assert flow.total == 70
        assert flow.monthly_total(datetime(2024, 5, 15)) == 70
        assert flow.monthly_total(datetime(2024, 6, 1)) == 0
        assert flow.category_totals == {"Food": 50, "Transport": 20}

        summary = flow.summary(datetime(2024, 5, 15))
        assert summary.expense_count == 2
        assert summary.total == 70

    async def test_expenses_returns_copy(self, flow):
        flow.expenses.clear()
        assert len(flow.expenses) == 2

    async def test_load_failure_empties_list(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        flow = ExpenseListFlow(SQLiteExpenseStorage(blocker / "x.db"))

        result = await flow.load()

        assert result.success is False
        assert flow.expenses == []
        assert flow.total == 0


class TestAdd:

    async def test_add_persists_and_reloads(self, flow, flaky_storage):
        outcome = await flow.add(
            ExpenseDraft(title="Lunch", amount=120, date=datetime(2024, 5, 3))
        )

        assert outcome.success is True
        assert outcome.message == ADDED_MESSAGE
        assert [e.title for e in flow.expenses] == ["Lunch", "Bus", "Coffee"]
        stored = (await flaky_storage.list_all()).value
        assert len(stored) == 3

    async def test_add_failure_leaves_list(self, flow, flaky_storage):
        flaky_storage.failing.add("insert")

        outcome = await flow.add(ExpenseDraft(title="Lunch", amount=120))

        assert outcome.success is False
        assert outcome.message == ADD_FAILED_MESSAGE
        assert len(flow.expenses) == 2

    async def test_add_from_form(self, flow):
        outcome = await flow.add_from_form(
            title="Movie", amount_text="250", date=datetime(2024, 5, 4),
            category="Entertainment",
        )
        assert outcome.success is True
        assert flow.expenses[0].category == "Entertainment"

    async def test_add_from_form_rejects_invalid_input(self, flow, flaky_storage):
        outcome = await flow.add_from_form(title="", amount_text="12")

        assert outcome.success is False
        assert outcome.message == "Please enter a title"
        assert len((await flaky_storage.list_all()).value) == 2

    async def test_long_title_round_trip_with_audit(self, flow, flaky_storage):
        title = "x" * 600

        added = await flow.add(ExpenseDraft(title=title, amount=5))
        expense_id = next(e.id for e in flow.expenses if e.title == title)
        deleted = await flow.delete(expense_id)
        restored = await flow.undo_delete()

        assert added.success is True
        assert deleted.success is True
        assert deleted.message == f"{title} deleted"
        assert restored.success is True
        stored = (await flaky_storage.list_all()).value
        assert [e.title for e in stored].count(title) == 1


class TestDelete:

    async def test_delete_confirms(self, flow, flaky_storage):
        outcome = await flow.delete("1")

        assert outcome.success is True
        assert outcome.message == "Coffee deleted"
        assert [e.id for e in flow.expenses] == ["2"]
        assert [e.id for e in (await flaky_storage.list_all()).value] == ["2"]

    async def test_delete_failure_resyncs_from_store(self, flow, flaky_storage):
        flaky_storage.failing.add("delete")

        outcome = await flow.delete("1")

        assert outcome.success is False
        assert outcome.message == DELETE_FAILED_MESSAGE
        assert [e.id for e in flow.expenses] == ["2", "1"]
        assert flow.last_deleted is None

    async def test_delete_unknown_id(self, flow):
        outcome = await flow.delete("missing")
        assert outcome.success is True
        assert len(flow.expenses) == 2


class TestUndo:

    async def test_undo_restores_same_record(self, flow):
        await flow.delete("1")

        outcome = await flow.undo_delete()

        assert outcome.success is True
        assert outcome.message == RESTORED_MESSAGE
        restored = [e for e in flow.expenses if e.id == "1"]
        assert len(restored) == 1
        assert restored[0].title == "Coffee"
        assert flow.last_deleted is None

    async def test_nothing_to_undo(self, flow):
        outcome = await flow.undo_delete()
        assert outcome.success is False
        assert outcome.message == NOTHING_TO_UNDO_MESSAGE

    async def test_undo_failure_keeps_candidate(self, flow, flaky_storage):
        await flow.delete("1")
        flaky_storage.failing.add("insert")

        outcome = await flow.undo_delete()

        assert outcome.success is False
        assert flow.last_deleted is not None
        assert [e.id for e in flow.expenses] == ["2"]


class TestClearAll:

    async def test_clear_all(self, flow, flaky_storage):
        outcome = await flow.clear_all()

        assert outcome.success is True
        assert outcome.message == CLEARED_MESSAGE
        assert flow.expenses == []
        assert (await flaky_storage.sum_all()).value == 0

    async def test_clear_all_failure_keeps_list(self, flow, flaky_storage):
        flaky_storage.failing.add("delete_all")

        outcome = await flow.clear_all()

        assert outcome.success is False
        assert outcome.message == CLEAR_FAILED_MESSAGE
        assert len(flow.expenses) == 2


class TestCreateAppComponents:

    async def test_creates_store_at_configured_path(self, tmp_path, monkeypatch):
        monkeypatch.setenv("EXPENSE_TRACKER_STORAGE_DATA_DIR", str(tmp_path / "app"))

        flow, storage = await create_app_components()
        try:
            assert storage.is_initialized
            assert storage.database_path == tmp_path / "app" / "expense_tracker.db"
            assert flow.expenses == []

            outcome = await flow.add_from_form(title="Tea", amount_text="15")
            assert outcome.success is True
            assert flow.expenses[0].category == "Food"
        finally:
            await storage.close()

    async def test_uses_given_storage(self, flaky_storage):
        await flaky_storage.insert_or_replace(make_expense())

        flow, storage = await create_app_components(storage=flaky_storage)

        assert storage is flaky_storage
        assert [e.id for e in flow.expenses] == ["1"]
