"""
Input Validation

Checks user-supplied fields before any record store call is made. A
rejected input never reaches the store, so a validation failure never
needs a rollback.

Errors block the write. Warnings describe a normalization that was applied
(for example, a frequency dropped from a non-recurring transaction) and let
the write proceed.
"""

import re
from decimal import Decimal

from findash.errors import ValidationError
from findash.models.ledger import (
    TransactionFields,
    ValidationIssue,
    ValidationResult,
)


COLOR_PATTERN = re.compile(r"^#[0-9a-fA-F]{6}$")
MAX_DESCRIPTION_LENGTH = 200
MAX_CATEGORY_LENGTH = 60


def _error(field: str, issue_type: str, message: str) -> ValidationIssue:
    return ValidationIssue(
        field=field,
        issue_type=issue_type,
        message=message,
        severity="error",
    )


class TransactionValidator:
    """Validates transaction fields, budget limits and new categories."""

    def validate(self, fields: TransactionFields) -> ValidationResult:
        """
        Validate one set of transaction fields.

        Checks:
        - Description is present
        - Amount is a finite number above zero
        - A recurring transaction names its frequency

        Returns the normalized fields when there are no errors.
        """
        issues = []

        if not fields.description:
            issues.append(_error(
                "description",
                "missing",
                "Description is required",
            ))
        elif len(fields.description) > MAX_DESCRIPTION_LENGTH:
            issues.append(_error(
                "description",
                "too_long",
                f"Description cannot exceed {MAX_DESCRIPTION_LENGTH} characters",
            ))

        if not fields.amount.is_finite() or fields.amount <= 0:
            issues.append(_error(
                "amount",
                "invalid_value",
                "Amount must be greater than zero",
            ))

        if fields.is_recurring and fields.frequency is None:
            issues.append(_error(
                "frequency",
                "missing",
                "Recurring transactions need a weekly or monthly frequency",
            ))

        normalized = fields
        if not fields.is_recurring and fields.frequency is not None:
            issues.append(ValidationIssue(
                field="frequency",
                issue_type="ignored",
                message="Frequency dropped because the transaction does not recur",
                severity="warning",
            ))
            normalized = fields.model_copy(update={"frequency": None})

        result = ValidationResult(issues=issues)
        if not result.has_errors:
            result.fields = normalized
        return result

    def validate_or_raise(self, fields: TransactionFields) -> TransactionFields:
        """Normalized fields, or ValidationError listing every error found."""
        result = self.validate(fields)
        if result.has_errors:
            raise ValidationError(
                "; ".join(i.message for i in result.issues if i.severity == "error"),
                issues=result.issues,
            )
        return result.fields

    def validate_budget(self, category: str, amount: Decimal) -> None:
        issues = []
        if not category or not category.strip():
            issues.append(_error("category", "missing", "Budget category is required"))
        elif len(category.strip()) > MAX_CATEGORY_LENGTH:
            issues.append(_error(
                "category",
                "too_long",
                f"Budget category cannot exceed {MAX_CATEGORY_LENGTH} characters",
            ))
        if not amount.is_finite() or amount < 0:
            issues.append(_error("amount", "invalid_value", "Budget limit cannot be negative"))
        if issues:
            raise ValidationError("Invalid budget", issues=issues)

    def validate_category(self, name: str, color: str) -> None:
        issues = []
        if not name or not name.strip():
            issues.append(_error("name", "missing", "Category name is required"))
        elif len(name.strip()) > MAX_CATEGORY_LENGTH:
            issues.append(_error(
                "name",
                "too_long",
                f"Category name cannot exceed {MAX_CATEGORY_LENGTH} characters",
            ))
        if not COLOR_PATTERN.match(color or ""):
            issues.append(_error("color", "invalid_format", "Color must look like #1a2b3c"))
        if issues:
            raise ValidationError("Invalid category", issues=issues)
