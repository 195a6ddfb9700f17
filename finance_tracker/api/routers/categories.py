"""Category endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from finance_tracker.api.dependencies import get_ledger_flow
from finance_tracker.models.ledger import Category, CreateCategoryRequest
from finance_tracker.orchestrator import LedgerFlow


router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("", response_model=list[Category])
def list_categories(flow: LedgerFlow = Depends(get_ledger_flow)) -> list[Category]:
    return flow.list_categories()


@router.get("/{category_id}", response_model=Category)
def get_category(category_id: UUID, flow: LedgerFlow = Depends(get_ledger_flow)) -> Category:
    category = flow.get_category(category_id)
    if category is None:
        raise HTTPException(status_code=404, detail=f"Category {category_id} not found.")
    return category


@router.post("", response_model=Category, status_code=status.HTTP_201_CREATED)
def create_category(
    payload: CreateCategoryRequest,
    request: Request,
    response: Response,
    flow: LedgerFlow = Depends(get_ledger_flow),
) -> Category:
    category = flow.create_category(payload)
    response.headers["Location"] = str(
        request.url_for("get_category", category_id=category.id)
    )
    return category
