"""
Transaction endpoints.

The list filter is inclusive on both ends: ?from=2024-01-01&to=2024-01-31
returns transactions dated on either boundary day.
"""

from datetime import date
from typing import Optional
from uuid import UUID

from fastapi import (
    APIRouter,
    Depends,
    HTTPException,
    Query,
    Request,
    Response,
    status,
)
from pydantic import ValidationError

from finance_tracker.api.dependencies import get_ledger_flow
from finance_tracker.models.ledger import (
    CreateTransactionRequest,
    Transaction,
    TransactionFilter,
)
from finance_tracker.orchestrator import LedgerFlow
from finance_tracker.validation import LedgerValidationError


router = APIRouter(prefix="/transactions", tags=["transactions"])


@router.get("", response_model=list[Transaction])
def list_transactions(
    account_id: Optional[UUID] = Query(None, alias="accountId"),
    category_id: Optional[UUID] = Query(None, alias="categoryId"),
    date_from: Optional[date] = Query(None, alias="from"),
    date_to: Optional[date] = Query(None, alias="to"),
    flow: LedgerFlow = Depends(get_ledger_flow),
) -> list[Transaction]:
    try:
        filters = TransactionFilter(
            account_id=account_id,
            category_id=category_id,
            date_from=date_from,
            date_to=date_to,
        )
    except ValidationError as e:
        # Each value parsed; the combination (e.g. to before from) did not
        raise LedgerValidationError.from_errors("Malformed request.", e.errors()) from e
    return flow.list_transactions(filters)


@router.get("/{transaction_id}", response_model=Transaction)
def get_transaction(
    transaction_id: UUID,
    flow: LedgerFlow = Depends(get_ledger_flow),
) -> Transaction:
    transaction = flow.get_transaction(transaction_id)
    if transaction is None:
        raise HTTPException(
            status_code=404,
            detail=f"Transaction {transaction_id} not found.",
        )
    return transaction


@router.post("", response_model=Transaction, status_code=status.HTTP_201_CREATED)
def create_transaction(
    payload: CreateTransactionRequest,
    request: Request,
    response: Response,
    flow: LedgerFlow = Depends(get_ledger_flow),
) -> Transaction:
    """Record a transaction; 400 if the account or category is unknown."""
    transaction = flow.create_transaction(payload)
    response.headers["Location"] = str(
        request.url_for("get_transaction", transaction_id=transaction.id)
    )
    return transaction
