"""
Audit Logger

Every user action on the expense list is logged as a structured event.

The audit logger:
- Writes JSON lines through structlog
- Never raises: a logging problem must not break an expense operation
"""

import logging
from typing import Any, Callable, Optional

import structlog

from expense_tracker.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(debug: bool = False) -> None:
    """
    Send structlog output to stderr through the stdlib root logger.

    Called once at startup by create_app_components().
    """
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(format="%(message)s", level=level)
    logging.getLogger("expense_tracker").setLevel(level)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger using the configuration above."""
    return structlog.get_logger(name)


class AuditLogger:
    """
    Central audit logging service.

    Events go to the structured local log at a level matching their severity.
    """

    def __init__(self, logger_name: str = "expense_tracker.audit"):
        self._logger = structlog.get_logger(logger_name)

    async def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Returns False if the event could not be written.
        """
        log_dict = event.to_log_dict()

        try:
            if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
                self._logger.error("audit_event", **log_dict)
            elif event.severity == AuditSeverity.WARNING:
                self._logger.warning("audit_event", **log_dict)
            elif event.severity == AuditSeverity.DEBUG:
                self._logger.debug("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except Exception as e:
            logging.getLogger(__name__).error(
                "Failed to write audit event %s: %s", event.event_id, e
            )
            return False

        return True

    async def _build_and_log(
        self,
        build: Callable[..., AuditEvent],
        *args: Any,
        **kwargs: Any,
    ) -> bool:
        """Build an event and log it. A build error is reported, not raised."""
        try:
            event = build(*args, **kwargs)
        except Exception as e:
            logging.getLogger(__name__).error(
                "Failed to build audit event %s: %s", build.__name__, e
            )
            return False

        return await self.log(event)

    async def log_expense_added(
        self,
        expense_id: str,
        title: str,
        amount: float,
        category: str,
    ) -> None:
        """Log a new expense."""
        await self._build_and_log(
            AuditEventBuilder.expense_added,
            expense_id=expense_id,
            title=title,
            amount=amount,
            category=category,
        )

    async def log_expense_deleted(self, expense_id: str, title: str) -> None:
        """Log an expense deletion."""
        await self._build_and_log(AuditEventBuilder.expense_deleted, expense_id, title)

    async def log_expense_restored(self, expense_id: str, title: str) -> None:
        """Log an undone deletion."""
        await self._build_and_log(AuditEventBuilder.expense_restored, expense_id, title)

    async def log_expenses_cleared(self) -> None:
        await self._build_and_log(AuditEventBuilder.expenses_cleared)

    async def log_expenses_loaded(self, count: int) -> None:
        await self._build_and_log(AuditEventBuilder.expenses_loaded, count)

    async def log_storage_failure(
        self,
        operation: str,
        error_code: Optional[str],
        error_message: Optional[str],
        expense_id: Optional[str] = None,
    ) -> None:
        """Log a failed store operation."""
        await self._build_and_log(
            AuditEventBuilder.storage_failure,
            operation=operation,
            error_code=error_code,
            error_message=error_message,
            expense_id=expense_id,
        )

    async def log_validation_failed(self, field: str, message: str) -> None:
        """Log a rejected add form."""
        await self._build_and_log(AuditEventBuilder.validation_failed, field, message)

    async def log_view_resynced(self, reason: str, count: int) -> None:
        """Log a full reload after a failed mutation."""
        await self._build_and_log(AuditEventBuilder.view_resynced, reason, count)
