"""
Storage Services Package

Provides abstract interfaces and the relational implementation of the
ledger store. Currently implements SQLAlchemy (SQLite by default), but
designed to be swappable.
"""

from finance_tracker.services.storage.interface import (
    AccountStorageInterface,
    CategoryStorageInterface,
    InvalidReferenceError,
    LedgerStorageInterface,
    NotFoundError,
    StorageError,
    TransactionStorageInterface,
)
from finance_tracker.services.storage.sqlalchemy_storage import (
    MoneyType,
    SQLAlchemyLedgerStorage,
    create_storage_engine,
)

__all__ = [
    # Interfaces
    "AccountStorageInterface",
    "CategoryStorageInterface",
    "LedgerStorageInterface",
    "TransactionStorageInterface",
    # Exceptions
    "InvalidReferenceError",
    "NotFoundError",
    "StorageError",
    # SQLAlchemy implementation
    "MoneyType",
    "SQLAlchemyLedgerStorage",
    "create_storage_engine",
]
