"""
Data Models Package

This package contains all Pydantic models used in the Finance Tracker.
All data flowing through the system must conform to these schemas.
"""

from finance_tracker.models.ledger import (
    Account,
    AccountType,
    Category,
    CategoryType,
    CreateAccountRequest,
    CreateCategoryRequest,
    CreateTransactionRequest,
    Money,
    MoneyTotal,
    Transaction,
    TransactionFilter,
    TransactionType,
    ValidationIssue,
    ValidationResult,
    quantize_money,
    utcnow,
)
from finance_tracker.models.summary import (
    CategorySummary,
    MonthlySummaryResponse,
    SpendingHealth,
    SpendingStatus,
)

__all__ = [
    # Ledger models
    "Account",
    "AccountType",
    "Category",
    "CategoryType",
    "CreateAccountRequest",
    "CreateCategoryRequest",
    "CreateTransactionRequest",
    "Money",
    "MoneyTotal",
    "Transaction",
    "TransactionFilter",
    "TransactionType",
    "ValidationIssue",
    "ValidationResult",
    "quantize_money",
    "utcnow",
    # Summary models
    "CategorySummary",
    "MonthlySummaryResponse",
    "SpendingHealth",
    "SpendingStatus",
]
