"""Query and aggregation package."""

from finance_tracker.queries.summary import (
    SummaryAggregator,
    category_chart_slices,
    month_window,
    spending_health,
)

__all__ = ["SummaryAggregator", "category_chart_slices", "month_window", "spending_health"]
