"""
Relational Storage Implementation (SQLAlchemy)

DESIGN DECISION: The ledger lives in a relational database accessed through
SQLAlchemy Core/ORM. SQLite is the default because:
1. No database server to run for a personal tracker
2. A single file is easy to back up
3. The same code runs against PostgreSQL by changing the URL

TRADEOFFS:
- SQLite has no DECIMAL type, so money is stored as integer cents
- Writes are serialized by SQLite itself; we add no locking of our own

Referential policy is enforced explicitly by this class:
- a transaction's account (and category, if given) must exist at write time
- deleting an account deletes its transactions
- deleting a category clears the category on its transactions
The foreign keys declare the same policy so the database agrees.
"""

import uuid
from contextlib import contextmanager
from datetime import date as Date, datetime
from decimal import Decimal
from pathlib import Path
from typing import Callable, Iterable, Iterator, Optional
from uuid import UUID

from sqlalchemy import (
    BigInteger,
    Boolean,
    Date as SQLDate,
    DateTime,
    Enum as SAEnum,
    ForeignKey,
    String,
    Text,
    Uuid,
    create_engine,
    delete,
    event,
    select,
    update,
)
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column, sessionmaker
from sqlalchemy.pool import StaticPool
from sqlalchemy.types import TypeDecorator

from finance_tracker.config import get_settings
from finance_tracker.models.ledger import (
    Account,
    AccountType,
    Category,
    CategoryType,
    CreateAccountRequest,
    CreateCategoryRequest,
    CreateTransactionRequest,
    Transaction,
    TransactionFilter,
    TransactionType,
    quantize_money,
    utcnow,
)
from finance_tracker.services.storage.interface import (
    InvalidReferenceError,
    LedgerStorageInterface,
    NotFoundError,
    StorageError,
)


# =============================================================================
# COLUMN TYPES
# =============================================================================

class MoneyType(TypeDecorator):
    """
    Decimal amount stored as integer cents.

    Keeps every stored amount exact regardless of the backend's
    DECIMAL support.
    """

    impl = BigInteger
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return int(quantize_money(Decimal(value)) * 100)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return quantize_money(Decimal(value) / 100)


def _enum_column(enum_cls: type, name: str) -> SAEnum:
    """Store enum values ("credit_card"), not member names."""
    return SAEnum(
        enum_cls,
        name=name,
        native_enum=False,
        values_callable=lambda members: [member.value for member in members],
    )


# =============================================================================
# TABLES
# =============================================================================

class Base(DeclarativeBase):
    pass


class AccountRow(Base):
    __tablename__ = "accounts"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    account_type: Mapped[AccountType] = mapped_column(
        _enum_column(AccountType, "account_type_enum"), nullable=False
    )
    initial_balance: Mapped[Decimal] = mapped_column(MoneyType, nullable=False)
    is_archived: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)


class CategoryRow(Base):
    __tablename__ = "categories"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    category_type: Mapped[CategoryType] = mapped_column(
        _enum_column(CategoryType, "category_type_enum"), nullable=False
    )
    color: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    is_archived: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)


class TransactionRow(Base):
    __tablename__ = "transactions"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)
    account_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    category_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True, index=True
    )
    amount: Mapped[Decimal] = mapped_column(MoneyType, nullable=False)
    transaction_type: Mapped[TransactionType] = mapped_column(
        _enum_column(TransactionType, "transaction_type_enum"), nullable=False
    )
    date: Mapped[Date] = mapped_column(SQLDate, nullable=False, index=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)


# =============================================================================
# ENGINE
# =============================================================================

def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys = ON")
    cursor.close()


def create_storage_engine(url: str, echo: bool = False) -> Engine:
    """
    Create an engine for the ledger database.

    SQLite gets foreign keys switched on and cross-thread use allowed
    (FastAPI runs sync endpoints in a threadpool). An in-memory SQLite
    URL shares one connection so every session sees the same data.
    """
    kwargs = {"echo": echo}
    is_sqlite = url.startswith("sqlite")

    if is_sqlite:
        kwargs["connect_args"] = {"check_same_thread": False}
        database = make_url(url).database
        if not database or database == ":memory:":
            kwargs["poolclass"] = StaticPool
        else:
            Path(database).parent.mkdir(parents=True, exist_ok=True)

    engine = create_engine(url, **kwargs)

    if is_sqlite:
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)

    return engine


# =============================================================================
# STORAGE
# =============================================================================

class SQLAlchemyLedgerStorage(LedgerStorageInterface):
    """
    SQLAlchemy implementation of the ledger store.

    Every public call runs in its own session and database transaction:
    a create either fully commits or leaves nothing behind.
    """

    def __init__(
        self,
        engine: Optional[Engine] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize the store.

        Args:
            engine: Engine to use. Defaults to one built from settings.
            clock: Source of creation timestamps. Defaults to UTC now.
        """
        if engine is None:
            db_settings = get_settings().database
            engine = create_storage_engine(db_settings.url, echo=db_settings.echo)
        self._engine = engine
        self._session_factory = sessionmaker(bind=engine, expire_on_commit=False)
        self._clock = clock or utcnow

    @property
    def engine(self) -> Engine:
        return self._engine

    @contextmanager
    def _session(self) -> Iterator[Session]:
        """Session scope: commit on success, roll back on any error."""
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            raise StorageError(f"Database error: {e}") from e
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def initialize(self) -> None:
        try:
            Base.metadata.create_all(self._engine)
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to initialize schema: {e}") from e

    def close(self) -> None:
        """Release pooled connections."""
        self._engine.dispose()

    # -------------------------------------------------------------------------
    # Row conversion
    # -------------------------------------------------------------------------

    @staticmethod
    def _row_to_account(row: AccountRow) -> Account:
        return Account(
            id=row.id,
            name=row.name,
            account_type=row.account_type,
            initial_balance=row.initial_balance,
            is_archived=row.is_archived,
            created_at=row.created_at,
        )

    @staticmethod
    def _row_to_category(row: CategoryRow) -> Category:
        return Category(
            id=row.id,
            name=row.name,
            category_type=row.category_type,
            color=row.color,
            is_archived=row.is_archived,
            created_at=row.created_at,
        )

    @staticmethod
    def _row_to_transaction(row: TransactionRow) -> Transaction:
        return Transaction(
            id=row.id,
            account_id=row.account_id,
            category_id=row.category_id,
            amount=row.amount,
            transaction_type=row.transaction_type,
            date=row.date,
            description=row.description,
            created_at=row.created_at,
        )

    # -------------------------------------------------------------------------
    # Accounts
    # -------------------------------------------------------------------------

    def list_accounts(self) -> list[Account]:
        with self._session() as session:
            rows = session.scalars(select(AccountRow).order_by(AccountRow.name))
            return [self._row_to_account(row) for row in rows]

    def get_account(self, account_id: UUID) -> Optional[Account]:
        with self._session() as session:
            row = session.get(AccountRow, account_id)
            return self._row_to_account(row) if row else None

    def account_exists(self, account_id: UUID) -> bool:
        with self._session() as session:
            return session.get(AccountRow, account_id) is not None

    def create_account(self, request: CreateAccountRequest) -> Account:
        with self._session() as session:
            row = AccountRow(
                id=uuid.uuid4(),
                name=request.name,
                account_type=request.account_type,
                initial_balance=request.initial_balance,
                is_archived=False,
                created_at=self._clock(),
            )
            session.add(row)
            session.flush()
            return self._row_to_account(row)

    def delete_account(self, account_id: UUID) -> None:
        with self._session() as session:
            row = session.get(AccountRow, account_id)
            if row is None:
                raise NotFoundError(f"Account not found: {account_id}")
            session.execute(
                delete(TransactionRow).where(TransactionRow.account_id == account_id)
            )
            session.delete(row)

    # -------------------------------------------------------------------------
    # Categories
    # -------------------------------------------------------------------------

    def list_categories(self) -> list[Category]:
        with self._session() as session:
            rows = session.scalars(select(CategoryRow).order_by(CategoryRow.name))
            return [self._row_to_category(row) for row in rows]

    def get_category(self, category_id: UUID) -> Optional[Category]:
        with self._session() as session:
            row = session.get(CategoryRow, category_id)
            return self._row_to_category(row) if row else None

    def category_exists(self, category_id: UUID) -> bool:
        with self._session() as session:
            return session.get(CategoryRow, category_id) is not None

    def get_category_names(self, category_ids: Iterable[UUID]) -> dict[UUID, str]:
        ids = list(category_ids)
        if not ids:
            return {}
        with self._session() as session:
            rows = session.execute(
                select(CategoryRow.id, CategoryRow.name).where(CategoryRow.id.in_(ids))
            )
            return {row.id: row.name for row in rows}

    def create_category(self, request: CreateCategoryRequest) -> Category:
        with self._session() as session:
            row = CategoryRow(
                id=uuid.uuid4(),
                name=request.name,
                category_type=request.category_type,
                color=request.color,
                is_archived=False,
                created_at=self._clock(),
            )
            session.add(row)
            session.flush()
            return self._row_to_category(row)

    def delete_category(self, category_id: UUID) -> None:
        with self._session() as session:
            row = session.get(CategoryRow, category_id)
            if row is None:
                raise NotFoundError(f"Category not found: {category_id}")
            session.execute(
                update(TransactionRow)
                .where(TransactionRow.category_id == category_id)
                .values(category_id=None)
            )
            session.delete(row)

    # -------------------------------------------------------------------------
    # Transactions
    # -------------------------------------------------------------------------

    def list_transactions(
        self,
        filters: Optional[TransactionFilter] = None,
    ) -> list[Transaction]:
        stmt = select(TransactionRow)

        if filters:
            if filters.account_id:
                stmt = stmt.where(TransactionRow.account_id == filters.account_id)
            if filters.category_id:
                stmt = stmt.where(TransactionRow.category_id == filters.category_id)
            if filters.date_from:
                stmt = stmt.where(TransactionRow.date >= filters.date_from)
            if filters.date_to:
                stmt = stmt.where(TransactionRow.date <= filters.date_to)

        # Newest first; the later-recorded of two same-day entries wins
        stmt = stmt.order_by(
            TransactionRow.date.desc(),
            TransactionRow.created_at.desc(),
        )

        with self._session() as session:
            return [self._row_to_transaction(row) for row in session.scalars(stmt)]

    def list_transactions_in_window(
        self,
        start: Date,
        end: Optional[Date],
    ) -> list[Transaction]:
        stmt = select(TransactionRow).where(TransactionRow.date >= start)
        if end is not None:
            stmt = stmt.where(TransactionRow.date < end)
        stmt = stmt.order_by(TransactionRow.date, TransactionRow.created_at)
        with self._session() as session:
            return [self._row_to_transaction(row) for row in session.scalars(stmt)]

    def get_transaction(self, transaction_id: UUID) -> Optional[Transaction]:
        with self._session() as session:
            row = session.get(TransactionRow, transaction_id)
            return self._row_to_transaction(row) if row else None

    def create_transaction(self, request: CreateTransactionRequest) -> Transaction:
        with self._session() as session:
            # Checked in the same database transaction as the insert
            if session.get(AccountRow, request.account_id) is None:
                raise InvalidReferenceError("account", request.account_id)
            if (
                request.category_id is not None
                and session.get(CategoryRow, request.category_id) is None
            ):
                raise InvalidReferenceError("category", request.category_id)

            row = TransactionRow(
                id=uuid.uuid4(),
                account_id=request.account_id,
                category_id=request.category_id,
                amount=request.amount,
                transaction_type=request.transaction_type,
                date=request.date,
                description=request.description,
                created_at=self._clock(),
            )
            session.add(row)
            session.flush()
            return self._row_to_transaction(row)
