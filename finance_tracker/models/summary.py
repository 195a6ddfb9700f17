"""
Dashboard Summary Models

What the monthly aggregation hands back to the dashboard. The
values are computed from stored transactions, never estimated.
"""

from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import UUID

from pydantic import Field

from finance_tracker.models.ledger import LedgerModel, MoneyTotal


class CategorySummary(LedgerModel):
    """Expense total for one category within a month."""

    category_id: Optional[UUID] = Field(
        default=None,
        description="Category ID, None for uncategorized expenses"
    )
    category_name: str = Field(
        ...,
        description="Current category name, or the uncategorized label"
    )
    total_expenses: MoneyTotal = Field(
        ...,
        description="Sum of expense amounts in this group"
    )


class MonthlySummaryResponse(LedgerModel):
    """
    Income, expenses and per-category breakdown for one calendar month.

    Invariants:
    - net == total_income - total_expenses
    - sum(per_category totals) == total_expenses
    - transfers appear nowhere
    """

    year: int
    month: int
    total_income: MoneyTotal = Field(default=Decimal("0.00"))
    total_expenses: MoneyTotal = Field(default=Decimal("0.00"))
    net: MoneyTotal = Field(default=Decimal("0.00"))
    per_category: list[CategorySummary] = Field(default_factory=list)


class SpendingStatus(str, Enum):
    """How a month's expenses compare to its income."""
    NO_INCOME = "no_income"
    HEALTHY = "healthy"      # expenses below 70% of income
    CLOSE = "close"          # 70% to 100% of income
    OVERSPENT = "overspent"  # more than earned


class SpendingHealth(LedgerModel):
    """Expense-to-income ratio with its classification."""

    status: SpendingStatus
    ratio: Optional[Decimal] = Field(
        default=None,
        description="expenses / income, None when there is no income"
    )
