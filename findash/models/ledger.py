"""
Core Ledger Models for FinDash

These models define the records an owner keeps:
1. Transactions (income and expense entries)
2. Budgets (one monthly limit per category)
3. Categories (labels offered per transaction kind)

DESIGN DECISION: Stored records are frozen Pydantic models. Snapshots handed
to the engine can be shared freely because nothing can mutate them in place.
An update is a full-field replace that produces a new Transaction.
"""

from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    model_validator,
)


# =============================================================================
# ENUMS
# =============================================================================

class TransactionKind(str, Enum):
    """Direction of a money movement."""
    INCOME = "income"
    EXPENSE = "expense"


class Frequency(str, Enum):
    """Recurrence period of a recurring transaction."""
    WEEKLY = "weekly"
    MONTHLY = "monthly"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


# =============================================================================
# TRANSACTIONS
# =============================================================================

class TransactionFields(BaseModel):
    """
    The user-editable fields of a transaction.

    Used for direct entry, for full-field replace on update and as the
    candidate type of an import. Deliberately permissive: the validator
    reports every problem at once instead of failing on the first one.
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    description: str = ""
    amount: Decimal
    kind: TransactionKind
    category: str = ""
    date: date
    is_recurring: bool = False
    frequency: Optional[Frequency] = None


class Transaction(BaseModel):
    """
    A stored transaction.

    ``id`` and ``created_at`` are assigned by the record store.
    ``created_at`` only breaks ties in display order; every report keys on
    ``date``.
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    id: str = Field(
        ...,
        min_length=1,
        description="Opaque store-assigned identifier"
    )
    owner_id: str = Field(
        ...,
        min_length=1,
        description="Owner this transaction belongs to"
    )
    description: str = Field(
        ...,
        min_length=1,
        max_length=200,
    )
    amount: Decimal = Field(
        ...,
        gt=0,
        description="Always positive; direction comes from kind"
    )
    kind: TransactionKind
    category: str = Field(
        default="",
        description="Free-text category label, not a foreign key"
    )
    date: date
    created_at: datetime = Field(default_factory=utc_now)
    is_recurring: bool = False
    frequency: Optional[Frequency] = None

    @model_validator(mode='after')
    def validate_recurrence(self) -> 'Transaction':
        """Frequency is present exactly when the transaction recurs."""
        if self.is_recurring and self.frequency is None:
            raise ValueError("Recurring transaction requires a frequency")
        if not self.is_recurring and self.frequency is not None:
            raise ValueError("Non-recurring transaction cannot carry a frequency")
        return self

    @property
    def signed_amount(self) -> Decimal:
        """Amount with income positive and expense negative."""
        return self.amount if self.kind == TransactionKind.INCOME else -self.amount

    @property
    def is_expense(self) -> bool:
        return self.kind == TransactionKind.EXPENSE

    def to_fields(self) -> TransactionFields:
        """The editable part of this transaction."""
        return TransactionFields(
            description=self.description,
            amount=self.amount,
            kind=self.kind,
            category=self.category,
            date=self.date,
            is_recurring=self.is_recurring,
            frequency=self.frequency,
        )

    def replaced_with(self, fields: TransactionFields) -> 'Transaction':
        """Full-field replace keeping identity and creation time."""
        return Transaction(
            id=self.id,
            owner_id=self.owner_id,
            created_at=self.created_at,
            **fields.model_dump(),
        )


# =============================================================================
# BUDGETS AND CATEGORIES
# =============================================================================

class Budget(BaseModel):
    """Monthly spending limit for one category. Keyed by (owner, category)."""
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    owner_id: str
    category: str = Field(..., min_length=1)
    amount: Decimal = Field(
        ...,
        ge=0,
        description="Monthly limit; zero means no limit configured"
    )


class CategoryItem(BaseModel):
    """
    A category label offered for one transaction kind.

    Deleting a category never rewrites transactions that use its name.
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    id: str
    owner_id: str
    name: str = Field(..., min_length=1, max_length=60)
    color: str = Field(..., pattern=r"^#[0-9a-fA-F]{6}$")
    kind: TransactionKind


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
        description="Type of issue (e.g., 'missing', 'invalid_value')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning)$",
    )


class ValidationResult(BaseModel):
    """Outcome of validating one set of transaction fields."""

    fields: Optional[TransactionFields] = Field(
        default=None,
        description="Normalized fields, present when valid"
    )
    issues: list[ValidationIssue] = Field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.has_errors

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        return sum(1 for issue in self.issues if issue.severity == "error")
