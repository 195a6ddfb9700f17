"""Account endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from finance_tracker.api.dependencies import get_ledger_flow
from finance_tracker.models.ledger import Account, CreateAccountRequest
from finance_tracker.orchestrator import LedgerFlow


router = APIRouter(prefix="/accounts", tags=["accounts"])


@router.get("", response_model=list[Account])
def list_accounts(flow: LedgerFlow = Depends(get_ledger_flow)) -> list[Account]:
    return flow.list_accounts()


@router.get("/{account_id}", response_model=Account)
def get_account(account_id: UUID, flow: LedgerFlow = Depends(get_ledger_flow)) -> Account:
    account = flow.get_account(account_id)
    if account is None:
        raise HTTPException(status_code=404, detail=f"Account {account_id} not found.")
    return account


@router.post("", response_model=Account, status_code=status.HTTP_201_CREATED)
def create_account(
    payload: CreateAccountRequest,
    request: Request,
    response: Response,
    flow: LedgerFlow = Depends(get_ledger_flow),
) -> Account:
    account = flow.create_account(payload)
    response.headers["Location"] = str(request.url_for("get_account", account_id=account.id))
    return account
