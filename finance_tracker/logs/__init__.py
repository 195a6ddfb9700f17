"""Structured logging package."""

from finance_tracker.logs.logger import (
    LedgerEventLogger,
    configure_logging,
    create_correlation_id,
    get_logger,
)

__all__ = [
    "LedgerEventLogger",
    "configure_logging",
    "create_correlation_id",
    "get_logger",
]
