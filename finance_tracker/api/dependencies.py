"""FastAPI dependencies that hand the app's flows to the routers."""

from fastapi import Request

from finance_tracker.orchestrator import DashboardFlow, LedgerFlow


def get_ledger_flow(request: Request) -> LedgerFlow:
    return request.app.state.ledger_flow


def get_dashboard_flow(request: Request) -> DashboardFlow:
    return request.app.state.dashboard_flow
