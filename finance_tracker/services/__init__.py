"""Services package."""

from finance_tracker.services.storage import (
    AccountStorageInterface,
    CategoryStorageInterface,
    InvalidReferenceError,
    LedgerStorageInterface,
    NotFoundError,
    SQLAlchemyLedgerStorage,
    StorageError,
    TransactionStorageInterface,
    create_storage_engine,
)

__all__ = [
    # Storage services
    "AccountStorageInterface",
    "CategoryStorageInterface",
    "InvalidReferenceError",
    "LedgerStorageInterface",
    "NotFoundError",
    "SQLAlchemyLedgerStorage",
    "StorageError",
    "TransactionStorageInterface",
    "create_storage_engine",
]
