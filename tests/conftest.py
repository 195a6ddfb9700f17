"""Shared fixtures: an in-memory ledger with a deterministic clock."""

from datetime import date, datetime, timedelta
from decimal import Decimal

import pytest

from finance_tracker.models import (
    CategoryType,
    CreateAccountRequest,
    CreateCategoryRequest,
    CreateTransactionRequest,
    TransactionType,
)
from finance_tracker.orchestrator import create_app_components
from finance_tracker.services.storage import (
    SQLAlchemyLedgerStorage,
    create_storage_engine,
)


class SteppingClock:
    """Returns a strictly increasing timestamp on every call."""

    def __init__(self, start: datetime = datetime(2024, 1, 1, 12, 0, 0)):
        self._now = start

    def __call__(self) -> datetime:
        self._now += timedelta(seconds=1)
        return self._now


@pytest.fixture
def storage():
    store = SQLAlchemyLedgerStorage(
        create_storage_engine("sqlite://"),
        clock=SteppingClock(),
    )
    store.initialize()
    yield store
    store.close()


@pytest.fixture
def components(storage):
    return create_app_components(storage=storage)


@pytest.fixture
def ledger_flow(components):
    return components[0]


@pytest.fixture
def dashboard_flow(components):
    return components[1]


@pytest.fixture
def account(storage):
    return storage.create_account(CreateAccountRequest(name="Checking"))


@pytest.fixture
def groceries(storage):
    return storage.create_category(
        CreateCategoryRequest(name="Groceries", category_type=CategoryType.EXPENSE)
    )


@pytest.fixture
def add_transaction(storage, account):
    """Factory for transactions on the default account."""

    def _add(
        amount: str,
        on: date,
        transaction_type: TransactionType = TransactionType.EXPENSE,
        category_id=None,
        account_id=None,
    ):
        return storage.create_transaction(CreateTransactionRequest(
            account_id=account_id or account.id,
            category_id=category_id,
            amount=Decimal(amount),
            transaction_type=transaction_type,
            date=on,
        ))

    return _add
