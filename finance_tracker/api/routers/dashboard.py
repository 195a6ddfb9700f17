"""Dashboard endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from finance_tracker.api.dependencies import get_dashboard_flow
from finance_tracker.models.summary import MonthlySummaryResponse
from finance_tracker.orchestrator import DashboardFlow


router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/summary", response_model=MonthlySummaryResponse)
def monthly_summary(
    year: Optional[int] = Query(None),
    month: Optional[int] = Query(None),
    flow: DashboardFlow = Depends(get_dashboard_flow),
) -> MonthlySummaryResponse:
    # Missing or out-of-range values are rejected by the flow with a 400
    return flow.monthly_summary(year, month)
