"""Liveness endpoint."""

from fastapi import APIRouter

from finance_tracker import __version__


router = APIRouter(tags=["health"])


@router.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok", "version": __version__}
