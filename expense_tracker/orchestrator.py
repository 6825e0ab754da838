"""
Expense List Orchestrator

This module holds the in-memory expense list the presentation layer renders,
and the flows that change it:

1. Load   (store → list)
2. Add    (form → validate → store → reload)
3. Delete (remove locally → confirm with store → reload on failure)
4. Undo   (re-insert the last deleted expense → reload)
5. Clear  (store → empty list on success)

DESIGN DECISION: mutations are two-phase. The list is changed first, then
the store confirms. If the store reports failure, the tentative state is
discarded and the whole list is reloaded from the store. A full reload is
the only reconciliation step.

Only this module knows about the in-memory list; the store knows nothing
about it.
"""

from datetime import datetime
from typing import Optional, Union

from expense_tracker.audit import AuditLogger, configure_logging
from expense_tracker.config import Settings, get_settings
from expense_tracker.models.category import ExpenseCategory
from expense_tracker.models.expense import (
    ActionOutcome,
    Expense,
    ExpenseDraft,
    ExpenseSummary,
    StoreResult,
)
from expense_tracker.queries import aggregations
from expense_tracker.services.storage import (
    ExpenseStorageInterface,
    SQLiteExpenseStorage,
)
from expense_tracker.validation import ExpenseFormValidator


ADDED_MESSAGE = "Expense added successfully!"
ADD_FAILED_MESSAGE = "Failed to add expense"
DELETE_FAILED_MESSAGE = "Failed to delete expense"
CLEARED_MESSAGE = "All expenses cleared"
CLEAR_FAILED_MESSAGE = "Failed to clear expenses"
RESTORED_MESSAGE = "Expense restored"
NOTHING_TO_UNDO_MESSAGE = "Nothing to undo"
RESTORE_FAILED_MESSAGE = "Failed to restore expense"


class ExpenseListFlow:
    """
    View model for the expense list.

    Flow for every mutation:
    1. Apply the change to the local list (tentative)
    2. Apply it to the store (confirm)
    3. On failure, reload everything from the store

    The store is passed in; the flow never creates one itself.
    """

    def __init__(
        self,
        storage: ExpenseStorageInterface,
        validator: Optional[ExpenseFormValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._storage = storage
        self._validator = validator or ExpenseFormValidator()
        self._audit_logger = audit_logger
        self._expenses: list[Expense] = []
        self._last_deleted: Optional[Expense] = None

    # -------------------------------------------------------------------------
    # Read-only view
    # -------------------------------------------------------------------------

    @property
    def expenses(self) -> list[Expense]:
        """The current list, most recent first. A copy; mutate via the flows."""
        return list(self._expenses)

    @property
    def last_deleted(self) -> Optional[Expense]:
        return self._last_deleted

    @property
    def total(self) -> float:
        return aggregations.total(self._expenses)

    def monthly_total(self, reference: Optional[datetime] = None) -> float:
        return aggregations.monthly_total(self._expenses, reference)

    @property
    def category_totals(self) -> dict[str, float]:
        return aggregations.category_totals(self._expenses)

    def summary(self, reference: Optional[datetime] = None) -> ExpenseSummary:
        return aggregations.summarize(self._expenses, reference)

    # -------------------------------------------------------------------------
    # Flows
    # -------------------------------------------------------------------------

    async def load(self) -> StoreResult[list[Expense]]:
        """
        Replace the local list with everything in the store.

        On a read failure the list becomes empty, which is what the store
        reports as its benign default.
        """
        result = await self._storage.list_all()
        self._expenses = list(result.value)

        if self._audit_logger:
            if result.success:
                await self._audit_logger.log_expenses_loaded(len(self._expenses))
            else:
                await self._audit_logger.log_storage_failure(
                    operation="list_all",
                    error_code=result.error.value if result.error else None,
                    error_message=result.error_message,
                )
        return result

    async def add(self, draft: ExpenseDraft) -> ActionOutcome:
        """
        Save a validated draft and reload the list.

        A new id is generated for every add, including re-adds used to
        edit an expense.
        """
        expense = draft.to_expense()
        result = await self._storage.insert_or_replace(expense)

        if not result.success:
            await self._log_failure("insert_or_replace", result, expense.id)
            return ActionOutcome(success=False, message=ADD_FAILED_MESSAGE)

        await self.load()
        if self._audit_logger:
            await self._audit_logger.log_expense_added(
                expense_id=expense.id,
                title=expense.title,
                amount=expense.amount,
                category=expense.category,
            )
        return ActionOutcome(success=True, message=ADDED_MESSAGE)

    async def add_from_form(
        self,
        title: str,
        amount_text: str,
        date: Optional[datetime] = None,
        category: Union[ExpenseCategory, str, None] = None,
    ) -> ActionOutcome:
        """Validate raw form input, then add it."""
        draft, issues = self._validator.validate(
            title=title,
            amount_text=amount_text,
            date=date,
            category=category,
        )

        if draft is None:
            if self._audit_logger:
                for issue in issues:
                    await self._audit_logger.log_validation_failed(
                        issue.field, issue.message
                    )
            return ActionOutcome(
                success=False,
                message=self._validator.get_user_friendly_summary(issues),
            )

        return await self.add(draft)

    async def delete(self, expense_id: str) -> ActionOutcome:
        """
        Delete an expense optimistically.

        The expense disappears from the list before the store is asked.
        If the store fails, the list is reloaded so it matches the store.
        """
        removed = next((e for e in self._expenses if e.id == expense_id), None)
        self._expenses = [e for e in self._expenses if e.id != expense_id]

        result = await self._storage.delete_by_id(expense_id)

        if not result.success:
            await self._log_failure("delete_by_id", result, expense_id)
            await self._resync("failed delete")
            return ActionOutcome(success=False, message=DELETE_FAILED_MESSAGE)

        if removed is not None:
            self._last_deleted = removed
            if self._audit_logger:
                await self._audit_logger.log_expense_deleted(removed.id, removed.title)
            return ActionOutcome(success=True, message=f"{removed.title} deleted")

        return ActionOutcome(success=True, message="Expense deleted")

    async def undo_delete(self) -> ActionOutcome:
        """Put the most recently deleted expense back under its old id."""
        expense = self._last_deleted
        if expense is None:
            return ActionOutcome(success=False, message=NOTHING_TO_UNDO_MESSAGE)

        result = await self._storage.insert_or_replace(expense)
        if not result.success:
            await self._log_failure("insert_or_replace", result, expense.id)
            return ActionOutcome(success=False, message=RESTORE_FAILED_MESSAGE)

        self._last_deleted = None
        await self.load()
        if self._audit_logger:
            await self._audit_logger.log_expense_restored(expense.id, expense.title)
        return ActionOutcome(success=True, message=RESTORED_MESSAGE)

    async def clear_all(self) -> ActionOutcome:
        """Delete every expense; the local list is only cleared on success."""
        result = await self._storage.delete_all()

        if not result.success:
            await self._log_failure("delete_all", result)
            return ActionOutcome(success=False, message=CLEAR_FAILED_MESSAGE)

        self._expenses = []
        self._last_deleted = None
        if self._audit_logger:
            await self._audit_logger.log_expenses_cleared()
        return ActionOutcome(success=True, message=CLEARED_MESSAGE)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    async def _resync(self, reason: str) -> None:
        """Throw away local state and reload from the store."""
        await self.load()
        if self._audit_logger:
            await self._audit_logger.log_view_resynced(reason, len(self._expenses))

    async def _log_failure(
        self,
        operation: str,
        result: StoreResult,
        expense_id: Optional[str] = None,
    ) -> None:
        if self._audit_logger:
            await self._audit_logger.log_storage_failure(
                operation=operation,
                error_code=result.error.value if result.error else None,
                error_message=result.error_message,
                expense_id=expense_id,
            )


async def create_app_components(
    settings: Optional[Settings] = None,
    storage: Optional[ExpenseStorageInterface] = None,
) -> tuple[ExpenseListFlow, ExpenseStorageInterface]:
    """
    Factory function to create all application components.

    Creates the single store for the process, opens it, and hands it to the
    view model. An unusable database does not stop startup: the store reports
    failures and every flow degrades to empty results.

    Args:
        settings: Settings to use. Defaults to get_settings().
        storage: Store to use instead of the configured SQLite file.

    Returns:
        (expense_list_flow, storage)
    """
    settings = settings or get_settings()
    app_settings = settings.app

    configure_logging(debug=app_settings.debug_mode)

    if storage is None:
        storage = SQLiteExpenseStorage(settings.storage.database_path)
    await storage.initialize()

    flow = ExpenseListFlow(
        storage=storage,
        validator=ExpenseFormValidator(default_category=app_settings.default_category),
        audit_logger=AuditLogger(),
    )
    await flow.load()

    return flow, storage
