"""
Ledger Validation

DESIGN DECISION: Validation happens before anything touches the store:

STAGE 1 - SHAPE VALIDATION:
- Types, lengths, decimal places
- Handled by the pydantic request models themselves

STAGE 2 - LEDGER VALIDATION (this module):
- Summary period is a real calendar month
- Referenced account and category exist
- Needs the store for reference checks

IMPORTANT: Validation NEVER silently fixes issues.
A failed check raises LedgerValidationError and nothing is written.
"""

from datetime import MAXYEAR
from typing import Optional

from finance_tracker.models.ledger import (
    CreateTransactionRequest,
    ValidationIssue,
    ValidationResult,
)
from finance_tracker.services.storage import LedgerStorageInterface


MAX_YEAR = MAXYEAR


class LedgerValidationError(Exception):
    """
    Input failed ledger validation.

    Carries the full ValidationResult so callers can show every issue.
    """

    def __init__(self, message: str, result: Optional[ValidationResult] = None):
        self.message = message
        self.result = result or ValidationResult(issues=[
            ValidationIssue(field="request", issue_type="invalid", message=message),
        ])
        super().__init__(message)

    @property
    def issues(self) -> list[ValidationIssue]:
        return self.result.issues

    @classmethod
    def from_errors(cls, message: str, errors) -> "LedgerValidationError":
        """
        Build from pydantic error dicts (ValidationError.errors()).

        Location prefixes added by FastAPI (body, query, path) are dropped
        so the field reads the way the caller spelled it.
        """
        issues = []
        for error in errors:
            location = [
                str(part) for part in error.get("loc", ())
                if part not in ("body", "query", "path")
            ]
            issues.append(ValidationIssue(
                field=".".join(location) or "request",
                issue_type=error.get("type", "invalid"),
                message=error.get("msg", "Invalid value"),
            ))
        return cls(message, ValidationResult(issues=issues))


class LedgerValidator:
    """
    Validates requests that need more than their own schema.

    Period checks run without storage; reference checks need it.
    """

    def __init__(
        self,
        storage: Optional[LedgerStorageInterface] = None,
    ):
        """
        Initialize validator.

        Args:
            storage: Ledger store used for reference checks.
                     Required for validate_transaction_references.
        """
        self._storage = storage

    def validate_period(
        self,
        year: Optional[int],
        month: Optional[int],
    ) -> ValidationResult:
        """
        Check a summary period.

        Year must be within 1-9999 (what a calendar date can hold) and
        month within 1-12. A missing value is as invalid as an
        out-of-range one.
        """
        issues = []

        if year is None:
            issues.append(ValidationIssue(
                field="year",
                issue_type="missing",
                message="Year is required",
            ))
        elif year <= 0:
            issues.append(ValidationIssue(
                field="year",
                issue_type="out_of_range",
                message=f"Year must be positive (got {year})",
            ))
        elif year > MAX_YEAR:
            issues.append(ValidationIssue(
                field="year",
                issue_type="out_of_range",
                message=f"Year must be at most {MAX_YEAR} (got {year})",
            ))

        if month is None:
            issues.append(ValidationIssue(
                field="month",
                issue_type="missing",
                message="Month is required",
            ))
        elif not 1 <= month <= 12:
            issues.append(ValidationIssue(
                field="month",
                issue_type="out_of_range",
                message=f"Month must be between 1 and 12 (got {month})",
            ))

        return ValidationResult(issues=issues)

    def validate_transaction_references(
        self,
        request: CreateTransactionRequest,
    ) -> ValidationResult:
        """
        Check that the account, and the category if given, exist.

        Both references are checked so the caller sees every problem
        at once.
        """
        if self._storage is None:
            raise RuntimeError("Reference checks need a ledger store")

        issues = []

        if not self._storage.account_exists(request.account_id):
            issues.append(ValidationIssue(
                field="account_id",
                issue_type="unresolved_reference",
                message=f"Account {request.account_id} does not exist.",
            ))

        if (
            request.category_id is not None
            and not self._storage.category_exists(request.category_id)
        ):
            issues.append(ValidationIssue(
                field="category_id",
                issue_type="unresolved_reference",
                message=f"Category {request.category_id} does not exist.",
            ))

        return ValidationResult(issues=issues)

    @staticmethod
    def ensure_valid(result: ValidationResult, message: Optional[str] = None) -> None:
        """
        Raise LedgerValidationError if the result has errors.

        Args:
            result: Outcome of a validate_* call
            message: Summary message; defaults to the joined issue messages
        """
        if result.is_valid:
            return
        summary = message or " ".join(
            issue.message for issue in result.issues if issue.severity == "error"
        )
        raise LedgerValidationError(summary, result)

    def get_user_friendly_summary(
        self,
        result: ValidationResult,
    ) -> str:
        """
        Generate a short, readable summary of validation results.

        This is what the dashboard shows next to a rejected form.
        """
        if result.is_valid:
            return "✅ All checks passed."

        lines = ["❌ Please fix the following:"]
        for issue in result.issues:
            if issue.severity == "error":
                lines.append(f"   • {issue.message}")

        return "\n".join(lines)
