"""
Monthly Summary Aggregation

DESIGN DECISION: The dashboard numbers are DETERMINISTIC reductions over
stored transactions. The store hands back the month's rows; this module
sums them with Decimal arithmetic, so net and the category breakdown add
up to the cent.

The month window is HALF-OPEN: [first of month, first of next month).
The transaction list filter is inclusive on both ends. The two are kept
separate on purpose.
"""

from datetime import MAXYEAR, date
from decimal import Decimal
from typing import Optional
from uuid import UUID

from finance_tracker.config import get_settings
from finance_tracker.models.ledger import Transaction, TransactionType
from finance_tracker.models.summary import (
    CategorySummary,
    MonthlySummaryResponse,
    SpendingHealth,
    SpendingStatus,
)
from finance_tracker.services.storage import LedgerStorageInterface
from finance_tracker.validation import LedgerValidator


ZERO = Decimal("0.00")
HEALTHY_RATIO = Decimal("0.7")


def month_window(year: int, month: int) -> tuple[date, Optional[date]]:
    """
    Return (first day of month, first day of next month).

    December of the last representable year has no next month; its
    window is open-ended (end is None).
    """
    start = date(year, month, 1)
    if month == 12:
        if year == MAXYEAR:
            return start, None
        end = date(year + 1, 1, 1)
    else:
        end = date(year, month + 1, 1)
    return start, end


def spending_health(income: Decimal, expenses: Decimal) -> SpendingHealth:
    """
    Classify a month by its expense-to-income ratio.

    Below 70% is healthy, up to 100% is close, above is overspent.
    Without positive income there is no ratio.
    """
    if income <= 0:
        return SpendingHealth(status=SpendingStatus.NO_INCOME)

    ratio = expenses / income
    if ratio < HEALTHY_RATIO:
        status = SpendingStatus.HEALTHY
    elif ratio <= 1:
        status = SpendingStatus.CLOSE
    else:
        status = SpendingStatus.OVERSPENT

    return SpendingHealth(status=status, ratio=ratio.quantize(Decimal("0.0001")))


UNCATEGORIZED_COLOR = "#9e9e9e"


def category_chart_slices(
    per_category: list[CategorySummary],
    colors: dict[UUID, Optional[str]],
) -> list[dict]:
    """
    Slices for the category donut: name, total and display color.

    Only positive totals can be drawn. Categories without a stored
    color, and uncategorized spending, get the neutral grey.
    """
    return [
        {
            "category": item.category_name,
            "total": float(item.total_expenses),
            "color": colors.get(item.category_id) or UNCATEGORIZED_COLOR,
        }
        for item in per_category
        if item.total_expenses > 0
    ]


class SummaryAggregator:
    """
    Computes the monthly income / expense / category breakdown.

    GUARANTEES:
    - Read-only, no side effects
    - net == total_income - total_expenses, exactly
    - per-category totals add up to total_expenses
    - transfers count nowhere
    """

    def __init__(
        self,
        storage: LedgerStorageInterface,
        uncategorized_label: Optional[str] = None,
    ):
        self._storage = storage
        self._validator = LedgerValidator(storage)
        self._uncategorized_label = (
            uncategorized_label or get_settings().app.uncategorized_label
        )

    def monthly_summary(
        self,
        year: Optional[int],
        month: Optional[int],
    ) -> MonthlySummaryResponse:
        """
        Summarize one calendar month.

        Raises:
            LedgerValidationError: If year isn't within 1-9999 or month
                                   isn't within 1-12
        """
        result = self._validator.validate_period(year, month)
        self._validator.ensure_valid(result, "Invalid year or month.")

        start, end = month_window(year, month)
        transactions = self._storage.list_transactions_in_window(start, end)

        total_income = self._sum_by_type(transactions, TransactionType.INCOME)
        total_expenses = self._sum_by_type(transactions, TransactionType.EXPENSE)

        return MonthlySummaryResponse(
            year=year,
            month=month,
            total_income=total_income,
            total_expenses=total_expenses,
            net=total_income - total_expenses,
            per_category=self._expenses_by_category(transactions),
        )

    @staticmethod
    def _sum_by_type(
        transactions: list[Transaction],
        transaction_type: TransactionType,
    ) -> Decimal:
        return sum(
            (t.amount for t in transactions if t.transaction_type == transaction_type),
            ZERO,
        )

    def _expenses_by_category(
        self,
        transactions: list[Transaction],
    ) -> list[CategorySummary]:
        """
        Group expenses by category and resolve names.

        Ordered by total descending, then name, so the biggest
        spending shows first and the order is stable.
        """
        groups: dict[Optional[UUID], Decimal] = {}

        for t in transactions:
            if t.transaction_type != TransactionType.EXPENSE:
                continue
            groups[t.category_id] = groups.get(t.category_id, ZERO) + t.amount

        names = self._storage.get_category_names(
            category_id for category_id in groups if category_id is not None
        )

        summaries = [
            CategorySummary(
                category_id=category_id,
                category_name=names.get(category_id, self._uncategorized_label)
                if category_id is not None
                else self._uncategorized_label,
                total_expenses=total,
            )
            for category_id, total in groups.items()
        ]

        summaries.sort(
            key=lambda s: (-s.total_expenses, s.category_name, str(s.category_id or ""))
        )
        return summaries
