"""
Audit Models for the Expense Tracker

Every user action on the expense list (add, delete, undo, clear) and every
failure reported by the store is recorded as an audit event. Events are
written to the structured local log.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # User actions
    EXPENSE_ADDED = "expense_added"
    EXPENSE_DELETED = "expense_deleted"
    EXPENSE_RESTORED = "expense_restored"
    EXPENSES_CLEARED = "expenses_cleared"
    EXPENSES_LOADED = "expenses_loaded"

    # Failures
    STORAGE_FAILURE = "storage_failure"
    VALIDATION_FAILED = "validation_failed"
    VIEW_RESYNCED = "view_resynced"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    Every significant action creates one of these.
    """

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=datetime.now,
        description="When the event occurred (local time)"
    )

    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    expense_id: Optional[str] = Field(
        default=None,
        description="ID of the expense this event relates to"
    )

    description: str = Field(
        ...,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    error_code: Optional[str] = None
    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "expense_id": self.expense_id,
            "description": self.description,
            "details": self.details,
            "error_code": self.error_code,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.expense_added(expense_id, title, amount)
        event = AuditEventBuilder.storage_failure("delete", "write_failure", msg)
    """

    @staticmethod
    def expense_added(
        expense_id: str,
        title: str,
        amount: float,
        category: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_ADDED,
            expense_id=expense_id,
            description=f"Expense added: {title} - ₹{amount:,.2f}",
            details={
                "title": title,
                "amount": amount,
                "category": category,
            },
            is_user_action=True,
        )

    @staticmethod
    def expense_deleted(expense_id: str, title: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_DELETED,
            expense_id=expense_id,
            description=f"Expense deleted: {title}",
            details={"title": title},
            is_user_action=True,
        )

    @staticmethod
    def expense_restored(expense_id: str, title: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_RESTORED,
            expense_id=expense_id,
            description=f"Deleted expense restored: {title}",
            details={"title": title},
            is_user_action=True,
        )

    @staticmethod
    def expenses_cleared() -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSES_CLEARED,
            severity=AuditSeverity.WARNING,
            description="All expenses cleared",
            is_user_action=True,
        )

    @staticmethod
    def expenses_loaded(count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSES_LOADED,
            severity=AuditSeverity.DEBUG,
            description=f"Loaded {count} expenses",
            details={"count": count},
        )

    @staticmethod
    def storage_failure(
        operation: str,
        error_code: Optional[str],
        error_message: Optional[str],
        expense_id: Optional[str] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_FAILURE,
            severity=AuditSeverity.ERROR,
            expense_id=expense_id,
            description=f"Storage operation failed: {operation}",
            details={"operation": operation},
            error_code=error_code,
            error_message=error_message,
        )

    @staticmethod
    def validation_failed(field: str, message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            description=f"Expense form rejected: {message}",
            details={"field": field},
            is_user_action=True,
        )

    @staticmethod
    def view_resynced(reason: str, count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VIEW_RESYNCED,
            severity=AuditSeverity.WARNING,
            description=f"Expense list reloaded from storage after {reason}",
            details={"reason": reason, "count": count},
        )
