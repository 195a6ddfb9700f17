"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface per entity kind.
This allows us to:
1. Swap SQLite for another relational database without touching flows
2. Keep business logic decoupled from the storage implementation
3. Keep the summary aggregator independent of SQL

The interface is intentionally simple - list, get, create, and the
deletes that carry the referential policy. Nothing else.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Iterable, Optional
from uuid import UUID

from finance_tracker.models.ledger import (
    Account,
    Category,
    CreateAccountRequest,
    CreateCategoryRequest,
    CreateTransactionRequest,
    Transaction,
    TransactionFilter,
)


class AccountStorageInterface(ABC):
    """Storage operations for accounts."""

    @abstractmethod
    def list_accounts(self) -> list[Account]:
        """
        List all accounts.

        Returns:
            Accounts ordered by name ascending
        """
        pass

    @abstractmethod
    def get_account(self, account_id: UUID) -> Optional[Account]:
        """
        Retrieve an account by its ID.

        Returns:
            The account if found, None otherwise
        """
        pass

    @abstractmethod
    def account_exists(self, account_id: UUID) -> bool:
        """Check whether an account with this ID exists."""
        pass

    @abstractmethod
    def create_account(self, request: CreateAccountRequest) -> Account:
        """
        Persist a new account.

        The store assigns the ID and creation timestamp.

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    def delete_account(self, account_id: UUID) -> None:
        """
        Delete an account and, by cascade, all of its transactions.

        Raises:
            NotFoundError: If the account doesn't exist
        """
        pass


class CategoryStorageInterface(ABC):
    """Storage operations for categories."""

    @abstractmethod
    def list_categories(self) -> list[Category]:
        """
        List all categories.

        Returns:
            Categories ordered by name ascending
        """
        pass

    @abstractmethod
    def get_category(self, category_id: UUID) -> Optional[Category]:
        """
        Retrieve a category by its ID.

        Returns:
            The category if found, None otherwise
        """
        pass

    @abstractmethod
    def category_exists(self, category_id: UUID) -> bool:
        """Check whether a category with this ID exists."""
        pass

    @abstractmethod
    def get_category_names(self, category_ids: Iterable[UUID]) -> dict[UUID, str]:
        """
        Resolve category IDs to their current names.

        IDs that no longer exist are simply absent from the result.
        """
        pass

    @abstractmethod
    def create_category(self, request: CreateCategoryRequest) -> Category:
        """
        Persist a new category.

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    def delete_category(self, category_id: UUID) -> None:
        """
        Delete a category. Its transactions are kept with
        their category reference cleared.

        Raises:
            NotFoundError: If the category doesn't exist
        """
        pass


class TransactionStorageInterface(ABC):
    """Storage operations for transactions."""

    @abstractmethod
    def list_transactions(
        self,
        filters: Optional[TransactionFilter] = None,
    ) -> list[Transaction]:
        """
        List transactions with optional filters.

        Args:
            filters: account/category exact match, and an
                     INCLUSIVE date range on both ends

        Returns:
            Transactions ordered by date descending, then
            creation time descending
        """
        pass

    @abstractmethod
    def list_transactions_in_window(
        self,
        start: date,
        end: Optional[date],
    ) -> list[Transaction]:
        """
        List transactions with start <= date < end (half-open).

        end is None for a window that runs past the last
        representable date (December 9999).

        Used by the monthly summary. Do not merge with the
        inclusive range of list_transactions.
        """
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: UUID) -> Optional[Transaction]:
        """
        Retrieve a transaction by its ID.

        Returns:
            The transaction if found, None otherwise
        """
        pass

    @abstractmethod
    def create_transaction(self, request: CreateTransactionRequest) -> Transaction:
        """
        Persist a new transaction.

        Raises:
            InvalidReferenceError: If the account, or a given
                                   category, doesn't exist
            StorageError: If the write fails
        """
        pass


class LedgerStorageInterface(
    AccountStorageInterface,
    CategoryStorageInterface,
    TransactionStorageInterface,
):
    """The whole ledger behind one object."""

    @abstractmethod
    def initialize(self) -> None:
        """Create the schema if it doesn't exist yet."""
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class InvalidReferenceError(StorageError):
    """A transaction points at an account or category that doesn't exist."""

    def __init__(self, entity: str, entity_id: UUID):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity.capitalize()} {entity_id} does not exist.")
