"""
Ledger Event Logger

DESIGN DECISION: Every write to the ledger and every rejected request
is logged as a structured event. Events are local log lines only; the
ledger itself is the only thing that gets persisted.

The event logger:
- Is synchronous, like the store it sits next to
- Only logs after the write it describes has committed
- Picks up request-scoped context (request_id) from contextvars
"""

import logging
import sys
from typing import Optional
from uuid import UUID, uuid4

import structlog


def configure_logging(level: str = "INFO", json_logs: bool = True) -> None:
    """
    Configure structlog on top of stdlib logging.

    Safe to call more than once; the last call wins.
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper(), logging.INFO),
        force=True,
    )

    renderer = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: Optional[str] = None):
    return structlog.get_logger(name or "finance_tracker")


class LedgerEventLogger:
    """
    Central event logging for ledger operations.

    One method per event so call sites stay uniform and the event
    names stay greppable.
    """

    def __init__(self, logger=None):
        self._logger = logger or get_logger("finance_tracker.ledger")

    def log(self, event: str, severity: str = "info", **fields) -> None:
        """Emit one event. Values are stringified where JSON can't hold them."""
        payload = {key: _loggable(value) for key, value in fields.items()}
        getattr(self._logger, severity, self._logger.info)(event, **payload)

    def log_account_created(
        self,
        account_id: UUID,
        name: str,
        account_type: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(
            "account_created",
            account_id=account_id,
            name=name,
            account_type=account_type,
            correlation_id=correlation_id,
        )

    def log_category_created(
        self,
        category_id: UUID,
        name: str,
        category_type: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(
            "category_created",
            category_id=category_id,
            name=name,
            category_type=category_type,
            correlation_id=correlation_id,
        )

    def log_transaction_created(
        self,
        transaction_id: UUID,
        account_id: UUID,
        transaction_type: str,
        amount: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(
            "transaction_created",
            transaction_id=transaction_id,
            account_id=account_id,
            transaction_type=transaction_type,
            amount=amount,
            correlation_id=correlation_id,
        )

    def log_validation_failed(
        self,
        operation: str,
        issues: list[dict],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a rejected request with every issue found."""
        self.log(
            "validation_failed",
            severity="warning",
            operation=operation,
            issues=issues,
            correlation_id=correlation_id,
        )

    def log_summary_computed(
        self,
        year: int,
        month: int,
        category_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(
            "summary_computed",
            year=year,
            month=month,
            category_count=category_count,
            correlation_id=correlation_id,
        )

    def log_storage_error(
        self,
        operation: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(
            "storage_error",
            severity="error",
            operation=operation,
            error=error_message,
            correlation_id=correlation_id,
        )


def _loggable(value):
    if isinstance(value, UUID):
        return str(value)
    return value


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    The API binds one per request as request_id.
    """
    return uuid4()
