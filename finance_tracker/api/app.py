"""
HTTP Application

Builds the FastAPI app around the orchestrator flows.

DESIGN DECISION: Routers hold no rules. They parse the request, call a
flow and shape the response. Errors raised by the flows are turned into
HTTP responses here, in one place:

- LedgerValidationError  → 400 with every issue
- Malformed body / query → 400 with every issue
- Unknown id             → 404 (raised by the routers)
- StorageError           → 500, cause logged, not echoed
- Anything else          → 500, a server fault

Every error body has the same shape: {"detail": str, "issues": [...]}.
"""

from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from finance_tracker import __version__
from finance_tracker.api.routers import (
    accounts,
    categories,
    dashboard,
    health,
    transactions,
)
from finance_tracker.config import get_settings
from finance_tracker.logs import create_correlation_id, get_logger
from finance_tracker.models.ledger import ValidationIssue
from finance_tracker.orchestrator import create_app_components
from finance_tracker.services.storage import LedgerStorageInterface, StorageError
from finance_tracker.validation import LedgerValidationError


REQUEST_ID_HEADER = "X-Request-ID"

logger = get_logger("finance_tracker.api")


def _error_response(status_code: int, detail: str, issues: list[ValidationIssue]) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "detail": detail,
            "issues": [issue.model_dump(mode="json", by_alias=True) for issue in issues],
        },
    )


def _register_exception_handlers(app: FastAPI) -> None:

    @app.exception_handler(LedgerValidationError)
    async def handle_ledger_validation(request: Request, exc: LedgerValidationError):
        return _error_response(400, exc.message, exc.issues)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        error = LedgerValidationError.from_errors("Malformed request.", exc.errors())
        return _error_response(400, error.message, error.issues)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException):
        return _error_response(exc.status_code, str(exc.detail), [])

    @app.exception_handler(StorageError)
    async def handle_storage_error(request: Request, exc: StorageError):
        logger.error("storage_error", path=request.url.path, error=str(exc))
        return _error_response(500, "The ledger store failed to process the request.", [])


def create_app(
    storage: Optional[LedgerStorageInterface] = None,
    database_url: Optional[str] = None,
) -> FastAPI:
    """
    Build the API application.

    Args:
        storage: Ready-made store. When omitted one is built from settings
                 and closed on shutdown.
        database_url: Overrides the configured database URL.
    """
    settings = get_settings()
    owns_storage = storage is None

    ledger_flow, dashboard_flow, storage = create_app_components(
        database_url=database_url,
        storage=storage,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("api_started", version=__version__)
        yield
        if owns_storage and hasattr(storage, "close"):
            storage.close()
        logger.info("api_stopped")

    app = FastAPI(
        title=settings.api.title,
        version=__version__,
        lifespan=lifespan,
    )
    app.state.ledger_flow = ledger_flow
    app.state.dashboard_flow = dashboard_flow
    app.state.storage = storage

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.api.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def bind_request_id(request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(create_correlation_id())
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)
        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response

    _register_exception_handlers(app)

    app.include_router(accounts.router)
    app.include_router(categories.router)
    app.include_router(transactions.router)
    app.include_router(dashboard.router)
    app.include_router(health.router)

    return app
