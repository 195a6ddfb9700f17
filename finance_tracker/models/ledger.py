"""
Core Data Models for Finance Tracker

These models define the strict schemas for all data flowing through the system.
They are designed to:
1. Enforce type safety at runtime
2. Keep every amount a two-digit Decimal
3. Be serializable for storage and the HTTP API
4. Give clear validation error messages

DESIGN DECISION: Field names are snake_case in Python and camelCase on the
wire. Both spellings are accepted on input so the storage layer and the API
can construct the same models.
"""

from datetime import date as Date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Annotated, Optional
from uuid import UUID, uuid4

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    model_validator,
)
from pydantic.alias_generators import to_camel


CENTS = Decimal("0.01")


def utcnow() -> datetime:
    """Current UTC time as a naive datetime (the store keeps naive UTC)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def quantize_money(value: Decimal) -> Decimal:
    """Pad an amount to exactly two fractional digits."""
    return value.quantize(CENTS)


# Rejects more than two fractional digits, then pads to exactly two.
Money = Annotated[
    Decimal,
    Field(max_digits=15, decimal_places=2),
    AfterValidator(quantize_money),
]

# Sums of Money: same two digits, no cap on the integer part.
MoneyTotal = Annotated[Decimal, AfterValidator(quantize_money)]


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class AccountType(str, Enum):
    """Kinds of account money can sit in."""
    CASH = "cash"
    BANK = "bank"
    CREDIT_CARD = "credit_card"
    SAVINGS = "savings"
    INVESTMENT = "investment"


class CategoryType(str, Enum):
    """Whether a category classifies spending or earning."""
    EXPENSE = "expense"
    INCOME = "income"


class TransactionType(str, Enum):
    """
    Transaction direction.

    TRANSFER is a label only. It carries no automatic
    dual-entry effect and is left out of monthly totals.
    """
    EXPENSE = "expense"
    INCOME = "income"
    TRANSFER = "transfer"


# =============================================================================
# BASE MODEL
# =============================================================================

class LedgerModel(BaseModel):
    """Shared configuration for every ledger model."""
    model_config = ConfigDict(
        str_strip_whitespace=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


# =============================================================================
# CORE LEDGER ENTITIES
# =============================================================================

class Account(LedgerModel):
    """
    A place money is held.

    Accounts are create-only. `is_archived` is written as False
    at creation and nothing reads or sets it afterwards.
    """

    id: UUID = Field(
        default_factory=uuid4,
        description="Unique account ID"
    )
    name: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Account name"
    )
    account_type: AccountType = Field(
        default=AccountType.BANK,
        description="Kind of account"
    )
    initial_balance: Money = Field(
        default=Decimal("0.00"),
        description="Opening balance (may be negative)"
    )
    is_archived: bool = Field(
        default=False,
        description="Archived flag (never set by any operation)"
    )
    created_at: datetime = Field(
        default_factory=utcnow,
        description="When the account was created (UTC)"
    )


class Category(LedgerModel):
    """A label for grouping transactions."""

    id: UUID = Field(
        default_factory=uuid4,
        description="Unique category ID"
    )
    name: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Category name"
    )
    category_type: CategoryType = Field(
        default=CategoryType.EXPENSE,
        description="Expense or income category"
    )
    color: Optional[str] = Field(
        default=None,
        max_length=20,
        description="Display color, free form"
    )
    is_archived: bool = Field(
        default=False,
        description="Archived flag (never set by any operation)"
    )
    created_at: datetime = Field(
        default_factory=utcnow,
        description="When the category was created (UTC)"
    )


class Transaction(LedgerModel):
    """
    A single money movement on one account.

    `date` is when it happened (caller supplied); `created_at` is when it
    was recorded and breaks ties between transactions on the same date.
    """

    id: UUID = Field(
        default_factory=uuid4,
        description="Unique transaction ID"
    )
    account_id: UUID = Field(
        ...,
        description="Owning account"
    )
    category_id: Optional[UUID] = Field(
        default=None,
        description="Optional category"
    )
    amount: Money = Field(
        ...,
        description="Amount; sign is not tied to the transaction type"
    )
    transaction_type: TransactionType = Field(
        default=TransactionType.EXPENSE,
        description="Expense, income or transfer"
    )
    date: Date = Field(
        ...,
        description="Occurrence date"
    )
    description: Optional[str] = Field(
        default=None,
        description="Free-text note"
    )
    created_at: datetime = Field(
        default_factory=utcnow,
        description="When the transaction was recorded (UTC)"
    )


# =============================================================================
# REQUEST MODELS
# =============================================================================

class CreateAccountRequest(LedgerModel):
    """Fields a caller supplies to open an account."""

    name: str = Field(..., min_length=1, max_length=100)
    account_type: AccountType = AccountType.BANK
    initial_balance: Money = Decimal("0.00")


class CreateCategoryRequest(LedgerModel):
    """Fields a caller supplies to add a category."""

    name: str = Field(..., min_length=1, max_length=100)
    category_type: CategoryType = CategoryType.EXPENSE
    color: Optional[str] = Field(default=None, max_length=20)


class CreateTransactionRequest(LedgerModel):
    """
    Fields a caller supplies to record a transaction.

    Reference existence is NOT checked here; that needs the store
    and is done by the validator before the write.
    """

    account_id: UUID
    category_id: Optional[UUID] = None
    amount: Money
    transaction_type: TransactionType = TransactionType.EXPENSE
    date: Date
    description: Optional[str] = None


class TransactionFilter(LedgerModel):
    """
    Optional filters for listing transactions.

    Both date bounds are INCLUSIVE. The monthly summary uses a
    half-open window instead; the two are intentionally different.
    """

    account_id: Optional[UUID] = None
    category_id: Optional[UUID] = None
    date_from: Optional[Date] = None
    date_to: Optional[Date] = None

    @model_validator(mode='after')
    def validate_range(self) -> 'TransactionFilter':
        """An inverted range can never match; reject it instead."""
        if self.date_from and self.date_to and self.date_to < self.date_from:
            raise ValueError("'to' date cannot be before 'from' date")
        return self


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'out_of_range', 'unresolved_reference')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        default="error",
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )


class ValidationResult(BaseModel):
    """Outcome of validating one request."""

    validated_at: datetime = Field(
        default_factory=utcnow
    )
    issues: list[ValidationIssue] = Field(
        default_factory=list,
        description="All validation issues found"
    )

    @property
    def is_valid(self) -> bool:
        return not self.has_errors

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")
