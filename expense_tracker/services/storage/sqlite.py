"""
SQLite Storage Implementation

All expenses live in one table of one local database file. The file sits at a
fixed path taken from StorageSettings, so every run of the tracker finds the
same data.

Dates are stored as ISO-8601 text with microsecond precision. Naive local
datetimes, which is what the add flow produces, are all written with the same
width, so ordering by the text column is the same as ordering by date. Aware
values keep their UTC offset suffix and are compared as text, so mixing them
with naive values or with other offsets does not give chronological order.

FAILURE HANDLING: every sqlite3 or filesystem error is caught here, logged,
and returned as a failed StoreResult. Nothing is retried.
"""

import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional, TypeVar

from pydantic import ValidationError

from expense_tracker.audit.logger import get_logger
from expense_tracker.config import get_settings
from expense_tracker.models.expense import (
    Expense,
    StoreErrorKind,
    StoreResult,
)
from expense_tracker.services.storage.interface import (
    ExpenseStorageInterface,
    StorageInitError,
)


T = TypeVar("T")

TABLE_NAME = "expenses"
SCHEMA_VERSION = 1

CREATE_TABLE_SQL = f"""
    CREATE TABLE IF NOT EXISTS {TABLE_NAME} (
        id TEXT PRIMARY KEY,
        title TEXT NOT NULL,
        amount REAL NOT NULL,
        date TEXT NOT NULL,
        category TEXT NOT NULL,
        createdAt TEXT NOT NULL
    )
"""


def serialize_date(value: datetime) -> str:
    """Render a date-time as fixed-width ISO-8601 text."""
    return value.isoformat(timespec="microseconds")


def parse_date(value: str) -> datetime:
    """Parse ISO-8601 text written by serialize_date (or any ISO writer)."""
    return datetime.fromisoformat(value)


class SQLiteExpenseStorage(ExpenseStorageInterface):
    """
    SQLite implementation of expense storage.

    One instance owns one connection. Create it once at startup and pass it
    to whatever needs it.
    """

    def __init__(self, database_path: Optional[Path] = None):
        """
        Args:
            database_path: Where the database file lives.
                           Defaults to the configured application data path.
        """
        if database_path is None:
            database_path = get_settings().storage.database_path
        self._database_path = Path(database_path)
        self._connection: Optional[sqlite3.Connection] = None
        self._logger = get_logger(__name__)

    @property
    def database_path(self) -> Path:
        return self._database_path

    @property
    def is_initialized(self) -> bool:
        return self._connection is not None

    # -------------------------------------------------------------------------
    # Connection handling
    # -------------------------------------------------------------------------

    def _open(self) -> sqlite3.Connection:
        """Return the open connection, opening the database if needed."""
        if self._connection is not None:
            return self._connection

        connection = None
        try:
            self._database_path.parent.mkdir(parents=True, exist_ok=True)
            connection = sqlite3.connect(self._database_path)
            connection.row_factory = sqlite3.Row
            self._create_schema(connection)
        except (sqlite3.Error, OSError) as e:
            if connection is not None:
                connection.close()
            raise StorageInitError(
                f"Failed to open database at {self._database_path}: {e}"
            ) from e

        self._connection = connection
        self._logger.info("database_opened", path=str(self._database_path))
        return connection

    def _create_schema(self, connection: sqlite3.Connection) -> None:
        """Create the expenses table the first time the file is opened."""
        version = connection.execute("PRAGMA user_version").fetchone()[0]
        if version >= SCHEMA_VERSION:
            return

        with connection:
            connection.execute(CREATE_TABLE_SQL)
            connection.execute(f"PRAGMA user_version = {SCHEMA_VERSION}")
        self._logger.info(
            "database_table_created",
            table=TABLE_NAME,
            schema_version=SCHEMA_VERSION,
        )

    def _run(
        self,
        operation: str,
        error_kind: StoreErrorKind,
        default: T,
        action: Callable[[sqlite3.Connection], T],
    ) -> StoreResult[T]:
        """
        Run one operation against the database.

        Opens the database lazily and turns any failure into a failed
        result holding `default`.
        """
        try:
            connection = self._open()
        except StorageInitError as e:
            self._logger.error(
                "storage_init_failed",
                operation=operation,
                path=str(self._database_path),
                error=str(e),
            )
            return StoreResult.fail(StoreErrorKind.STORAGE_INIT_FAILURE, str(e), default)

        try:
            value = action(connection)
        except sqlite3.Error as e:
            self._logger.error(
                "storage_operation_failed",
                operation=operation,
                error_kind=error_kind.value,
                error=str(e),
            )
            return StoreResult.fail(error_kind, f"Failed to {operation}: {e}", default)

        return StoreResult.ok(value)

    def _row_to_expense(self, row: sqlite3.Row) -> Expense:
        """Convert a database row to an Expense."""
        return Expense(
            id=row["id"],
            title=row["title"],
            amount=float(row["amount"]),
            date=parse_date(row["date"]),
            category=row["category"],
            created_at=parse_date(row["createdAt"]),
        )

    # -------------------------------------------------------------------------
    # ExpenseStorageInterface
    # -------------------------------------------------------------------------

    async def initialize(self) -> StoreResult[bool]:
        """Open the database, creating the file and table if absent."""
        if self._connection is not None:
            return StoreResult.ok(True)

        try:
            self._open()
        except StorageInitError as e:
            self._logger.error(
                "storage_init_failed",
                operation="initialize",
                path=str(self._database_path),
                error=str(e),
            )
            return StoreResult.fail(StoreErrorKind.STORAGE_INIT_FAILURE, str(e), False)

        return StoreResult.ok(True)

    async def insert_or_replace(self, expense: Expense) -> StoreResult[bool]:
        """Save an expense with replace-on-conflict semantics."""
        def action(connection: sqlite3.Connection) -> bool:
            with connection:
                connection.execute(
                    f"""
                    INSERT OR REPLACE INTO {TABLE_NAME}
                        (id, title, amount, date, category, createdAt)
                    VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    (
                        expense.id,
                        expense.title,
                        expense.amount,
                        serialize_date(expense.date),
                        expense.category,
                        serialize_date(datetime.now()),
                    ),
                )
            return True

        result = self._run("insert expense", StoreErrorKind.WRITE_FAILURE, False, action)
        if result.success:
            self._logger.info(
                "expense_saved",
                expense_id=expense.id,
                title=expense.title,
            )
        return result

    async def list_all(self) -> StoreResult[list[Expense]]:
        """List expenses, newest date first, insertion order within a date."""
        def action(connection: sqlite3.Connection) -> list[Expense]:
            rows = connection.execute(
                f"SELECT * FROM {TABLE_NAME} ORDER BY date DESC, rowid ASC"
            ).fetchall()

            expenses = []
            for row in rows:
                try:
                    expenses.append(self._row_to_expense(row))
                except (ValueError, TypeError, ValidationError) as e:
                    self._logger.warning(
                        "malformed_expense_row_skipped",
                        expense_id=row["id"],
                        error=str(e),
                    )
            return expenses

        result = self._run("list expenses", StoreErrorKind.READ_FAILURE, [], action)
        if result.success:
            self._logger.debug("expenses_loaded", count=len(result.value))
        return result

    async def delete_by_id(self, expense_id: str) -> StoreResult[bool]:
        """Delete one expense; a missing id is not an error."""
        def action(connection: sqlite3.Connection) -> bool:
            with connection:
                connection.execute(
                    f"DELETE FROM {TABLE_NAME} WHERE id = ?",
                    (expense_id,),
                )
            return True

        result = self._run("delete expense", StoreErrorKind.WRITE_FAILURE, False, action)
        if result.success:
            self._logger.info("expense_deleted", expense_id=expense_id)
        return result

    async def delete_all(self) -> StoreResult[bool]:
        """Delete every expense."""
        def action(connection: sqlite3.Connection) -> bool:
            with connection:
                connection.execute(f"DELETE FROM {TABLE_NAME}")
            return True

        result = self._run("delete all expenses", StoreErrorKind.WRITE_FAILURE, False, action)
        if result.success:
            self._logger.info("all_expenses_deleted")
        return result

    async def update(self, expense: Expense) -> StoreResult[bool]:
        """Overwrite the editable fields of an expense; createdAt is kept."""
        def action(connection: sqlite3.Connection) -> bool:
            with connection:
                cursor = connection.execute(
                    f"""
                    UPDATE {TABLE_NAME}
                    SET title = ?, amount = ?, date = ?, category = ?
                    WHERE id = ?
                    """,
                    (
                        expense.title,
                        expense.amount,
                        serialize_date(expense.date),
                        expense.category,
                        expense.id,
                    ),
                )
            return cursor.rowcount > 0

        result = self._run("update expense", StoreErrorKind.WRITE_FAILURE, False, action)
        if result.success:
            self._logger.info(
                "expense_updated",
                expense_id=expense.id,
                matched=result.value,
            )
        return result

    async def sum_all(self) -> StoreResult[float]:
        """Total of all amounts."""
        def action(connection: sqlite3.Connection) -> float:
            row = connection.execute(
                f"SELECT SUM(amount) AS total FROM {TABLE_NAME}"
            ).fetchone()
            total = row["total"]
            return float(total) if total is not None else 0.0

        return self._run("sum expenses", StoreErrorKind.READ_FAILURE, 0.0, action)

    async def sum_by_category(self) -> StoreResult[dict[str, float]]:
        """Totals grouped by category."""
        def action(connection: sqlite3.Connection) -> dict[str, float]:
            rows = connection.execute(
                f"""
                SELECT category, SUM(amount) AS total
                FROM {TABLE_NAME}
                GROUP BY category
                ORDER BY category
                """
            ).fetchall()
            return {row["category"]: float(row["total"]) for row in rows}

        return self._run("sum expenses by category", StoreErrorKind.READ_FAILURE, {}, action)

    async def close(self) -> None:
        """Close the connection. The next operation reopens it."""
        if self._connection is not None:
            self._connection.close()
            self._connection = None
            self._logger.info("database_closed", path=str(self._database_path))
