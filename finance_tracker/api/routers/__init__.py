"""HTTP routers, one per resource."""

from finance_tracker.api.routers import (
    accounts,
    categories,
    dashboard,
    health,
    transactions,
)

__all__ = ["accounts", "categories", "dashboard", "health", "transactions"]
