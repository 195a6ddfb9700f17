"""
Main Orchestrator for Finance Tracker

This module ties together all the components and defines the
flows behind every screen and endpoint:
1. Ledger (list / get / create for accounts, categories, transactions)
2. Dashboard (year + month → monthly summary)

DESIGN DECISION: The orchestrator enforces the boundaries:
- No transaction is written with a dangling account or category
- No summary is computed for an invalid period
- Every write and every rejection is logged

Both the FastAPI routers and the Streamlit UI go through these flows,
so the rules hold no matter which surface the request came from.
"""

from typing import Optional
from uuid import UUID

from finance_tracker.config import get_settings
from finance_tracker.logs import (
    LedgerEventLogger,
    configure_logging,
    create_correlation_id,
)
from finance_tracker.models.ledger import (
    Account,
    Category,
    CreateAccountRequest,
    CreateCategoryRequest,
    CreateTransactionRequest,
    Transaction,
    TransactionFilter,
    ValidationIssue,
    ValidationResult,
)
from finance_tracker.models.summary import MonthlySummaryResponse
from finance_tracker.queries import SummaryAggregator
from finance_tracker.services.storage import (
    InvalidReferenceError,
    LedgerStorageInterface,
    SQLAlchemyLedgerStorage,
    StorageError,
    create_storage_engine,
)
from finance_tracker.validation import LedgerValidationError, LedgerValidator


class LedgerFlow:
    """
    Orchestrates reads and writes of ledger records.

    Reads pass straight through to the store. Transaction writes are
    reference-checked first; the store checks again inside its own
    DB transaction, and either failure surfaces as LedgerValidationError.
    """

    def __init__(
        self,
        storage: LedgerStorageInterface,
        validator: Optional[LedgerValidator] = None,
        event_logger: Optional[LedgerEventLogger] = None,
    ):
        self._storage = storage
        self._validator = validator or LedgerValidator(storage)
        self._event_logger = event_logger or LedgerEventLogger()

    # =========================================================================
    # Accounts
    # =========================================================================

    def list_accounts(self) -> list[Account]:
        return self._storage.list_accounts()

    def get_account(self, account_id: UUID) -> Optional[Account]:
        return self._storage.get_account(account_id)

    def create_account(
        self,
        request: CreateAccountRequest,
        correlation_id: Optional[UUID] = None,
    ) -> Account:
        correlation_id = correlation_id or create_correlation_id()

        account = self._write("create_account", correlation_id,
                              self._storage.create_account, request)

        self._event_logger.log_account_created(
            account_id=account.id,
            name=account.name,
            account_type=account.account_type.value,
            correlation_id=correlation_id,
        )
        return account

    # =========================================================================
    # Categories
    # =========================================================================

    def list_categories(self) -> list[Category]:
        return self._storage.list_categories()

    def get_category(self, category_id: UUID) -> Optional[Category]:
        return self._storage.get_category(category_id)

    def create_category(
        self,
        request: CreateCategoryRequest,
        correlation_id: Optional[UUID] = None,
    ) -> Category:
        correlation_id = correlation_id or create_correlation_id()

        category = self._write("create_category", correlation_id,
                               self._storage.create_category, request)

        self._event_logger.log_category_created(
            category_id=category.id,
            name=category.name,
            category_type=category.category_type.value,
            correlation_id=correlation_id,
        )
        return category

    # =========================================================================
    # Transactions
    # =========================================================================

    def list_transactions(
        self,
        filters: Optional[TransactionFilter] = None,
    ) -> list[Transaction]:
        return self._storage.list_transactions(filters)

    def get_transaction(self, transaction_id: UUID) -> Optional[Transaction]:
        return self._storage.get_transaction(transaction_id)

    def create_transaction(
        self,
        request: CreateTransactionRequest,
        correlation_id: Optional[UUID] = None,
    ) -> Transaction:
        """
        Record a transaction.

        Raises:
            LedgerValidationError: If the account or category doesn't exist.
                                   Nothing is written in that case.
        """
        correlation_id = correlation_id or create_correlation_id()

        result = self._validator.validate_transaction_references(request)
        self._reject_if_invalid("create_transaction", result, correlation_id)

        try:
            transaction = self._write("create_transaction", correlation_id,
                                      self._storage.create_transaction, request)
        except InvalidReferenceError as e:
            # Reference vanished between the check and the write
            result = ValidationResult(issues=[
                ValidationIssue(
                    field=f"{e.entity}_id",
                    issue_type="unresolved_reference",
                    message=str(e),
                ),
            ])
            self._event_logger.log_validation_failed(
                operation="create_transaction",
                issues=[issue.model_dump() for issue in result.issues],
                correlation_id=correlation_id,
            )
            raise LedgerValidationError(str(e), result) from e

        self._event_logger.log_transaction_created(
            transaction_id=transaction.id,
            account_id=transaction.account_id,
            transaction_type=transaction.transaction_type.value,
            amount=str(transaction.amount),
            correlation_id=correlation_id,
        )
        return transaction

    # =========================================================================
    # Helpers
    # =========================================================================

    def _reject_if_invalid(
        self,
        operation: str,
        result: ValidationResult,
        correlation_id: UUID,
    ) -> None:
        if result.is_valid:
            return
        self._event_logger.log_validation_failed(
            operation=operation,
            issues=[issue.model_dump() for issue in result.issues],
            correlation_id=correlation_id,
        )
        self._validator.ensure_valid(result)

    def _write(self, operation: str, correlation_id: UUID, write, request):
        try:
            return write(request)
        except InvalidReferenceError:
            raise
        except StorageError as e:
            self._event_logger.log_storage_error(
                operation=operation,
                error_message=str(e),
                correlation_id=correlation_id,
            )
            raise


class DashboardFlow:
    """
    Orchestrates the dashboard's monthly summary.

    Flow:
    1. Validate year/month
    2. Read the month's transactions once
    3. Reduce to totals and the category breakdown
    """

    def __init__(
        self,
        storage: LedgerStorageInterface,
        aggregator: Optional[SummaryAggregator] = None,
        event_logger: Optional[LedgerEventLogger] = None,
    ):
        self._storage = storage
        self._aggregator = aggregator or SummaryAggregator(storage)
        self._event_logger = event_logger or LedgerEventLogger()

    def monthly_summary(
        self,
        year: Optional[int],
        month: Optional[int],
        correlation_id: Optional[UUID] = None,
    ) -> MonthlySummaryResponse:
        """
        Summarize one calendar month.

        Raises:
            LedgerValidationError: If the period is invalid
        """
        correlation_id = correlation_id or create_correlation_id()

        try:
            summary = self._aggregator.monthly_summary(year, month)
        except LedgerValidationError as e:
            self._event_logger.log_validation_failed(
                operation="monthly_summary",
                issues=[issue.model_dump() for issue in e.issues],
                correlation_id=correlation_id,
            )
            raise

        self._event_logger.log_summary_computed(
            year=summary.year,
            month=summary.month,
            category_count=len(summary.per_category),
            correlation_id=correlation_id,
        )
        return summary


def create_app_components(
    database_url: Optional[str] = None,
    storage: Optional[LedgerStorageInterface] = None,
) -> tuple[LedgerFlow, DashboardFlow, LedgerStorageInterface]:
    """
    Factory function to create all application components.

    Args:
        database_url: SQLAlchemy URL. Defaults to the configured one.
                      Ignored when storage is given.
        storage: Ready-made store, e.g. in-memory SQLite for tests.

    Returns:
        (ledger_flow, dashboard_flow, storage)
    """
    settings = get_settings()
    configure_logging(settings.app.log_level, settings.app.log_json)

    if storage is None:
        engine = create_storage_engine(
            database_url or settings.database.url,
            echo=settings.database.echo,
        )
        storage = SQLAlchemyLedgerStorage(engine)

    storage.initialize()

    event_logger = LedgerEventLogger()

    ledger_flow = LedgerFlow(
        storage=storage,
        event_logger=event_logger,
    )

    dashboard_flow = DashboardFlow(
        storage=storage,
        aggregator=SummaryAggregator(storage, settings.app.uncategorized_label),
        event_logger=event_logger,
    )

    return ledger_flow, dashboard_flow, storage
