"""
Tests for ledger validation and the orchestrator flows

Validation must stop a bad request before anything is written.
"""

import pytest
from datetime import date
from decimal import Decimal
from unittest.mock import MagicMock
from uuid import uuid4

from finance_tracker.logs import LedgerEventLogger
from finance_tracker.models import (
    CreateAccountRequest,
    CreateCategoryRequest,
    CreateTransactionRequest,
    TransactionFilter,
    ValidationResult,
)
from finance_tracker.orchestrator import LedgerFlow
from finance_tracker.validation import LedgerValidationError, LedgerValidator


class TestPeriodValidation:
    """Tests for year/month checks."""

    def test_valid_period(self):
        """Test that a normal month passes."""
        assert LedgerValidator().validate_period(2024, 12).is_valid

    def test_zero_year(self):
        """Test that year 0 is out of range."""
        result = LedgerValidator().validate_period(0, 5)
        assert not result.is_valid
        assert result.issues[0].field == "year"
        assert result.issues[0].issue_type == "out_of_range"

    def test_year_past_calendar(self):
        """Test that years beyond 9999 are out of range."""
        result = LedgerValidator().validate_period(10000, 1)
        assert [i.field for i in result.issues] == ["year"]
        assert result.issues[0].issue_type == "out_of_range"
        assert "9999" in result.issues[0].message

    def test_last_representable_month(self):
        """Test that December 9999 still passes."""
        assert LedgerValidator().validate_period(9999, 12).is_valid

    def test_month_thirteen(self):
        """Test that month 13 is out of range."""
        result = LedgerValidator().validate_period(2024, 13)
        assert [i.field for i in result.issues] == ["month"]

    def test_both_missing(self):
        """Test that both missing values are reported together."""
        result = LedgerValidator().validate_period(None, None)
        assert result.error_count == 2
        assert {i.issue_type for i in result.issues} == {"missing"}


class TestReferenceValidation:
    """Tests for account/category existence checks."""

    def test_existing_references(self, storage, account, groceries):
        """Test that existing references pass."""
        result = LedgerValidator(storage).validate_transaction_references(
            CreateTransactionRequest(
                account_id=account.id,
                category_id=groceries.id,
                amount="1.00",
                date=date(2024, 1, 1),
            )
        )
        assert result.is_valid

    def test_both_missing_reported(self, storage):
        """Test that a missing account and category are both named."""
        account_id, category_id = uuid4(), uuid4()
        result = LedgerValidator(storage).validate_transaction_references(
            CreateTransactionRequest(
                account_id=account_id,
                category_id=category_id,
                amount="1.00",
                date=date(2024, 1, 1),
            )
        )
        messages = [i.message for i in result.issues]
        assert messages == [
            f"Account {account_id} does not exist.",
            f"Category {category_id} does not exist.",
        ]

    def test_requires_storage(self):
        """Test that reference checks without a store are a programming error."""
        with pytest.raises(RuntimeError):
            LedgerValidator().validate_transaction_references(
                CreateTransactionRequest(account_id=uuid4(), amount="1.00", date=date(2024, 1, 1))
            )

    def test_ensure_valid_raises_with_result(self):
        """Test that ensure_valid carries every issue."""
        result = LedgerValidator().validate_period(0, 0)
        with pytest.raises(LedgerValidationError) as exc_info:
            LedgerValidator.ensure_valid(result)
        assert len(exc_info.value.issues) == 2

    def test_from_errors_drops_request_location(self):
        """Test that issues name the field the way the caller spelled it."""
        error = LedgerValidationError.from_errors("Malformed request.", [
            {"loc": ("query", "accountId"), "type": "uuid_parsing", "msg": "Input should be a valid UUID"},
            {"loc": (), "type": "value_error", "msg": "Value error, date_to is before date_from"},
        ])
        assert error.message == "Malformed request."
        assert [(i.field, i.issue_type) for i in error.issues] == [
            ("accountId", "uuid_parsing"),
            ("request", "value_error"),
        ]

    def test_ensure_valid_passes_clean_result(self):
        """Test that a clean result doesn't raise."""
        LedgerValidator.ensure_valid(ValidationResult())

    def test_user_friendly_summary(self):
        """Test the readable summary shown in the UI."""
        validator = LedgerValidator()
        assert "All checks passed" in validator.get_user_friendly_summary(ValidationResult())
        summary = validator.get_user_friendly_summary(validator.validate_period(2024, 13))
        assert "Month must be between 1 and 12" in summary


class TestLedgerFlow:
    """Tests for the ledger orchestration flow."""

    def test_create_transaction_unknown_account(self, storage, ledger_flow):
        """Test that a missing account fails naming the id, with nothing written."""
        missing = uuid4()
        with pytest.raises(LedgerValidationError) as exc_info:
            ledger_flow.create_transaction(CreateTransactionRequest(
                account_id=missing,
                amount=Decimal("5.00"),
                date=date(2024, 3, 5),
            ))
        assert str(missing) in exc_info.value.message
        assert ledger_flow.list_transactions() == []

    def test_create_transaction_unknown_category(self, ledger_flow, account):
        """Test that a missing category fails with nothing written."""
        with pytest.raises(LedgerValidationError):
            ledger_flow.create_transaction(CreateTransactionRequest(
                account_id=account.id,
                category_id=uuid4(),
                amount=Decimal("5.00"),
                date=date(2024, 3, 5),
            ))
        assert ledger_flow.list_transactions(TransactionFilter(account_id=account.id)) == []

    def test_reference_vanishing_before_write(self, storage):
        """Test that the store's own check is translated to a validation error."""
        validator = MagicMock()
        validator.validate_transaction_references.return_value = ValidationResult()
        flow = LedgerFlow(storage, validator=validator)

        with pytest.raises(LedgerValidationError) as exc_info:
            flow.create_transaction(CreateTransactionRequest(
                account_id=uuid4(),
                amount=Decimal("5.00"),
                date=date(2024, 3, 5),
            ))
        assert exc_info.value.issues[0].field == "account_id"
        assert storage.list_transactions() == []

    def test_creates_pass_through(self, ledger_flow):
        """Test that accounts and categories are created and readable."""
        account = ledger_flow.create_account(CreateAccountRequest(name="Cash"))
        category = ledger_flow.create_category(CreateCategoryRequest(name="Food"))
        assert ledger_flow.get_account(account.id) == account
        assert ledger_flow.get_category(category.id) == category
        assert ledger_flow.get_transaction(uuid4()) is None

    def test_events_logged(self, storage, account):
        """Test that a create and a rejection are both logged."""
        logger = MagicMock()
        flow = LedgerFlow(storage, event_logger=LedgerEventLogger(logger))

        transaction = flow.create_transaction(CreateTransactionRequest(
            account_id=account.id,
            amount=Decimal("5.00"),
            date=date(2024, 3, 5),
        ))
        event, fields = logger.info.call_args.args[0], logger.info.call_args.kwargs
        assert event == "transaction_created"
        assert fields["transaction_id"] == str(transaction.id)
        assert fields["amount"] == "5.00"

        with pytest.raises(LedgerValidationError):
            flow.create_transaction(CreateTransactionRequest(
                account_id=uuid4(),
                amount=Decimal("5.00"),
                date=date(2024, 3, 5),
            ))
        assert logger.warning.call_args.args[0] == "validation_failed"


class TestDashboardFlow:
    """Tests for the dashboard flow."""

    def test_invalid_period(self, dashboard_flow):
        """Test that the flow surfaces period errors."""
        with pytest.raises(LedgerValidationError):
            dashboard_flow.monthly_summary(2024, 13)

    def test_summary(self, dashboard_flow, add_transaction):
        """Test that the flow returns the aggregate."""
        add_transaction("4.00", date(2024, 3, 3))
        assert dashboard_flow.monthly_summary(2024, 3).total_expenses == Decimal("4.00")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
