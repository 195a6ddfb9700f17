"""
Tests for Finance Tracker models

Test strategy:
1. Money is always a two-digit Decimal
2. Names are trimmed and bounded
3. JSON uses camelCase; Python uses snake_case
"""

import pytest
from datetime import date
from decimal import Decimal
from uuid import uuid4

from pydantic import ValidationError

from finance_tracker.models import (
    Account,
    AccountType,
    Category,
    CategoryType,
    CreateAccountRequest,
    CreateCategoryRequest,
    CreateTransactionRequest,
    MonthlySummaryResponse,
    TransactionFilter,
    TransactionType,
    ValidationIssue,
    ValidationResult,
    quantize_money,
)


class TestMoney:
    """Tests for the two-digit Decimal amount type."""

    def test_whole_amount_is_padded(self):
        """Test that 5 becomes 5.00."""
        request = CreateAccountRequest(name="Wallet", initial_balance=Decimal("5"))
        assert request.initial_balance == Decimal("5.00")
        assert str(request.initial_balance) == "5.00"

    def test_one_fractional_digit_is_padded(self):
        """Test that 12.5 becomes 12.50."""
        request = CreateAccountRequest(name="Wallet", initial_balance="12.5")
        assert str(request.initial_balance) == "12.50"

    def test_three_fractional_digits_rejected(self):
        """Test that sub-cent precision is rejected, not rounded."""
        with pytest.raises(ValidationError):
            CreateAccountRequest(name="Wallet", initial_balance=Decimal("1.005"))

    def test_negative_balance_allowed(self):
        """Test that a credit card can open below zero."""
        request = CreateAccountRequest(
            name="Visa",
            account_type=AccountType.CREDIT_CARD,
            initial_balance=Decimal("-250.00"),
        )
        assert request.initial_balance == Decimal("-250.00")

    def test_quantize_money(self):
        """Test the quantize helper directly."""
        assert str(quantize_money(Decimal("7"))) == "7.00"


class TestAccountModels:
    """Tests for account models."""

    def test_defaults(self):
        """Test account defaults."""
        request = CreateAccountRequest(name="Checking")
        assert request.account_type == AccountType.BANK
        assert request.initial_balance == Decimal("0.00")

    def test_name_is_stripped(self):
        """Test that whitespace is stripped from the name."""
        request = CreateAccountRequest(name="  Checking  ")
        assert request.name == "Checking"

    def test_blank_name_rejected(self):
        """Test that a whitespace-only name is rejected."""
        with pytest.raises(ValidationError):
            CreateAccountRequest(name="   ")

    def test_long_name_rejected(self):
        """Test that names over 100 characters are rejected."""
        with pytest.raises(ValidationError):
            CreateAccountRequest(name="x" * 101)

    def test_unknown_account_type_rejected(self):
        """Test that account types outside the enum are rejected."""
        with pytest.raises(ValidationError):
            CreateAccountRequest(name="Checking", account_type="crypto")

    def test_account_is_not_archived(self):
        """Test that a new account is never archived."""
        account = Account(name="Checking")
        assert account.is_archived is False


class TestCategoryModels:
    """Tests for category models."""

    def test_defaults(self):
        """Test category defaults."""
        request = CreateCategoryRequest(name="Rent")
        assert request.category_type == CategoryType.EXPENSE
        assert request.color is None

    def test_color_length_limit(self):
        """Test that color is free form but bounded."""
        assert CreateCategoryRequest(name="Rent", color="teal").color == "teal"
        with pytest.raises(ValidationError):
            CreateCategoryRequest(name="Rent", color="#" * 21)


class TestTransactionModels:
    """Tests for transaction models."""

    def test_camel_case_input_accepted(self):
        """Test that the wire spelling populates the model."""
        account_id = uuid4()
        request = CreateTransactionRequest.model_validate({
            "accountId": str(account_id),
            "amount": "10",
            "transactionType": "income",
            "date": "2024-03-01",
        })
        assert request.account_id == account_id
        assert request.transaction_type == TransactionType.INCOME
        assert request.amount == Decimal("10.00")
        assert request.date == date(2024, 3, 1)

    def test_default_type_is_expense(self):
        """Test that transaction type defaults to expense."""
        request = CreateTransactionRequest(
            account_id=uuid4(), amount="1.00", date=date(2024, 1, 1)
        )
        assert request.transaction_type == TransactionType.EXPENSE
        assert request.category_id is None

    def test_date_required(self):
        """Test that the occurrence date is required."""
        with pytest.raises(ValidationError):
            CreateTransactionRequest(account_id=uuid4(), amount="1.00")

    def test_json_dump_is_camel_case(self):
        """Test that serialization uses camelCase keys and string amounts."""
        category = Category(name="Food", color="red")
        data = category.model_dump(mode="json", by_alias=True)
        assert "categoryType" in data
        assert "isArchived" in data
        assert "createdAt" in data
        assert "category_type" not in data


class TestTransactionFilter:
    """Tests for the list filter."""

    def test_empty_filter(self):
        """Test that every field is optional."""
        filters = TransactionFilter()
        assert filters.account_id is None
        assert filters.date_from is None

    def test_same_day_range_allowed(self):
        """Test that from == to is a valid one-day range."""
        filters = TransactionFilter(date_from=date(2024, 3, 1), date_to=date(2024, 3, 1))
        assert filters.date_from == filters.date_to

    def test_inverted_range_rejected(self):
        """Test that to < from is rejected."""
        with pytest.raises(ValidationError):
            TransactionFilter(date_from=date(2024, 3, 2), date_to=date(2024, 3, 1))


class TestValidationModels:
    """Tests for validation result models."""

    def test_empty_result_is_valid(self):
        """Test that no issues means valid."""
        result = ValidationResult()
        assert result.is_valid
        assert result.error_count == 0

    def test_warning_does_not_invalidate(self):
        """Test that warnings alone keep the result valid."""
        result = ValidationResult(issues=[
            ValidationIssue(field="x", issue_type="odd", message="odd", severity="warning"),
        ])
        assert result.is_valid
        assert not result.has_errors

    def test_error_invalidates(self):
        """Test that an error-level issue invalidates the result."""
        result = ValidationResult(issues=[
            ValidationIssue(field="month", issue_type="out_of_range", message="bad"),
        ])
        assert not result.is_valid
        assert result.error_count == 1


class TestSummaryModels:
    """Tests for the summary response model."""

    def test_zero_defaults(self):
        """Test that an empty month reports 0.00 everywhere."""
        summary = MonthlySummaryResponse(year=2024, month=2)
        assert summary.total_income == Decimal("0.00")
        assert summary.total_expenses == Decimal("0.00")
        assert summary.net == Decimal("0.00")
        assert summary.per_category == []


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
