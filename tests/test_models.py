"""
Tests for FinDash

Test strategy:
1. Unit tests for individual components (models, engine functions)
2. Integration tests for flows (session over the in-memory store)
3. No network or real bank access in tests
"""

import logging

import pytest
from datetime import date
from decimal import Decimal

from findash.activity import (
    ActivityEvent,
    ActivityEventBuilder,
    ActivityEventType,
    ActivityLogger,
    ActivitySeverity,
    configure_logging,
)
from findash.config import AppSettings
from findash.errors import (
    ErrorKind,
    FinDashError,
    NotFoundError,
    PermissionOrMissingError,
    StoreUnavailableError,
    ValidationError,
)
from findash.models import (
    Budget,
    CategoryItem,
    Frequency,
    OwnerSnapshot,
    Transaction,
    TransactionFields,
    TransactionKind,
    ValidationIssue,
    ValidationResult,
)


class TestTransactionModels:
    """Tests for transaction-related Pydantic models."""

    def test_transaction_creation(self, make_transaction):
        """Test Transaction model creation."""
        tx = make_transaction(date(2024, 1, 5), "12.50", category="Food")
        assert tx.amount == Decimal("12.50")
        assert tx.kind == TransactionKind.EXPENSE
        assert tx.is_expense

    def test_transaction_strips_whitespace(self):
        """Test that whitespace is stripped from the description."""
        tx = Transaction(
            id="tx-1",
            owner_id="alice",
            description="  Groceries  ",
            amount=Decimal("10"),
            kind=TransactionKind.EXPENSE,
            date=date(2024, 1, 1),
        )
        assert tx.description == "Groceries"

    def test_transaction_rejects_non_positive_amount(self):
        """Test that zero and negative amounts are rejected."""
        for amount in ("0", "-5"):
            with pytest.raises(ValueError):
                Transaction(
                    id="tx-1",
                    owner_id="alice",
                    description="Test",
                    amount=Decimal(amount),
                    kind=TransactionKind.EXPENSE,
                    date=date(2024, 1, 1),
                )

    def test_recurring_requires_frequency(self):
        """Test that a recurring transaction must carry a frequency."""
        with pytest.raises(ValueError):
            Transaction(
                id="tx-1",
                owner_id="alice",
                description="Netflix",
                amount=Decimal("39.90"),
                kind=TransactionKind.EXPENSE,
                date=date(2024, 1, 1),
                is_recurring=True,
            )

    def test_non_recurring_rejects_frequency(self):
        with pytest.raises(ValueError):
            Transaction(
                id="tx-1",
                owner_id="alice",
                description="Netflix",
                amount=Decimal("39.90"),
                kind=TransactionKind.EXPENSE,
                date=date(2024, 1, 1),
                frequency=Frequency.MONTHLY,
            )

    def test_signed_amount(self, make_transaction):
        income = make_transaction(date(2024, 1, 1), 100, kind=TransactionKind.INCOME)
        expense = make_transaction(date(2024, 1, 1), 40)
        assert income.signed_amount == Decimal("100")
        assert expense.signed_amount == Decimal("-40")

    def test_transaction_is_frozen(self, make_transaction):
        tx = make_transaction(date(2024, 1, 1), 10)
        with pytest.raises(ValueError):
            tx.amount = Decimal("20")

    def test_replaced_with_keeps_identity(self, make_transaction):
        """Test that a full-field replace keeps id and created_at."""
        tx = make_transaction(date(2024, 1, 1), 10, description="Old")
        fields = TransactionFields(
            description="New",
            amount=Decimal("25"),
            kind=TransactionKind.INCOME,
            category="Salary",
            date=date(2024, 2, 1),
        )
        updated = tx.replaced_with(fields)

        assert updated.id == tx.id
        assert updated.created_at == tx.created_at
        assert updated.description == "New"
        assert updated.kind == TransactionKind.INCOME
        assert updated.date == date(2024, 2, 1)

    def test_to_fields_roundtrip(self, make_transaction):
        tx = make_transaction(date(2024, 1, 1), 10, frequency=Frequency.WEEKLY)
        fields = tx.to_fields()
        assert fields.is_recurring
        assert fields.frequency == Frequency.WEEKLY
        assert tx.replaced_with(fields) == tx


class TestBudgetAndCategoryModels:
    """Tests for budget and category models."""

    def test_budget_allows_zero_limit(self):
        budget = Budget(owner_id="alice", category="Food", amount=Decimal("0"))
        assert budget.amount == Decimal("0")

    def test_budget_rejects_negative_limit(self):
        with pytest.raises(ValueError):
            Budget(owner_id="alice", category="Food", amount=Decimal("-1"))

    def test_category_color_format(self):
        """Test that category colors must be #rrggbb."""
        category = CategoryItem(
            id="c1", owner_id="alice", name="Food", color="#f59e0b",
            kind=TransactionKind.EXPENSE,
        )
        assert category.color == "#f59e0b"

        with pytest.raises(ValueError):
            CategoryItem(
                id="c2", owner_id="alice", name="Food", color="orange",
                kind=TransactionKind.EXPENSE,
            )


class TestOwnerSnapshot:
    """Tests for the immutable owner snapshot."""

    def test_with_transaction_prepends(self, make_transaction):
        first = make_transaction(date(2024, 1, 1), 10)
        second = make_transaction(date(2024, 1, 2), 20)
        snapshot = OwnerSnapshot(owner_id="alice", transactions=(first,))

        updated = snapshot.with_transaction(second)

        assert [t.id for t in updated.transactions] == [second.id, first.id]
        assert snapshot.transactions == (first,)

    def test_replacing_and_removing_transactions(self, make_transaction):
        tx = make_transaction(date(2024, 1, 1), 10)
        other = make_transaction(date(2024, 1, 2), 30)
        snapshot = OwnerSnapshot(owner_id="alice", transactions=(tx, other))

        replaced = snapshot.replacing_transaction(tx.id, other)
        assert replaced.transactions == (other, other)

        removed = snapshot.without_transaction(tx.id)
        assert removed.transactions == (other,)
        assert removed.find_transaction(tx.id) is None

    def test_with_budget_upserts_by_category(self):
        snapshot = OwnerSnapshot(owner_id="alice")
        snapshot = snapshot.with_budget(
            Budget(owner_id="alice", category="Food", amount=Decimal("100"))
        )
        snapshot = snapshot.with_budget(
            Budget(owner_id="alice", category="Transport", amount=Decimal("50"))
        )
        snapshot = snapshot.with_budget(
            Budget(owner_id="alice", category="Food", amount=Decimal("300"))
        )

        assert [b.category for b in snapshot.budgets] == ["Food", "Transport"]
        assert snapshot.budgets[0].amount == Decimal("300")

    def test_category_helpers(self):
        category = CategoryItem(
            id="c1", owner_id="alice", name="Food", color="#f59e0b",
            kind=TransactionKind.EXPENSE,
        )
        snapshot = OwnerSnapshot(owner_id="alice").with_category(category)
        assert snapshot.find_category("c1") == category
        assert snapshot.without_category("c1").categories == ()


class TestValidationResult:
    """Tests for validation result logic."""

    def test_valid_result(self):
        result = ValidationResult(issues=[])
        assert result.is_valid
        assert result.error_count == 0

    def test_result_with_warnings_only_is_valid(self):
        result = ValidationResult(issues=[
            ValidationIssue(
                field="frequency",
                issue_type="ignored",
                message="Frequency dropped",
                severity="warning",
            )
        ])
        assert result.is_valid
        assert not result.has_errors

    def test_result_with_errors(self):
        result = ValidationResult(issues=[
            ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message="Amount must be greater than zero",
                severity="error",
            )
        ])
        assert not result.is_valid
        assert result.error_count == 1


class TestErrors:
    """Tests for the error taxonomy."""

    def test_each_error_carries_its_kind(self):
        assert ValidationError("bad").kind == ErrorKind.VALIDATION
        assert NotFoundError("gone").kind == ErrorKind.NOT_FOUND
        assert PermissionOrMissingError("transaction", "tx-1").kind == (
            ErrorKind.PERMISSION_OR_MISSING
        )
        assert StoreUnavailableError("down").kind == ErrorKind.STORE_UNAVAILABLE

    def test_errors_share_a_base(self):
        for error in (
            ValidationError("bad"),
            NotFoundError("gone"),
            PermissionOrMissingError("category", "c1"),
            StoreUnavailableError("down"),
        ):
            assert isinstance(error, FinDashError)

    def test_permission_or_missing_keeps_entity(self):
        error = PermissionOrMissingError("transaction", "tx-9")
        assert error.entity_type == "transaction"
        assert error.entity_id == "tx-9"


class TestActivityModels:
    """Tests for activity event models."""

    def test_activity_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = ActivityEvent(
            event_type=ActivityEventType.BUDGET_SAVED,
            description="Budget saved",
            details={"category": "Food", "amount": "100"},
        )
        log_dict = event.to_log_dict()
        assert "event_id" in log_dict
        assert log_dict["event_type"] == "budget_saved"
        assert log_dict["details"]["category"] == "Food"

    def test_builder_delete_blocked_is_warning(self):
        event = ActivityEventBuilder.delete_blocked(
            owner_id="alice",
            entity_type="transaction",
            entity_id="tx-1",
        )
        assert event.event_type == ActivityEventType.DELETE_BLOCKED
        assert event.severity == ActivitySeverity.WARNING
        assert event.entity_id == "tx-1"

    def test_builder_import_completed_severity(self):
        clean = ActivityEventBuilder.import_completed("alice", 3, 1, 0)
        partial = ActivityEventBuilder.import_completed("alice", 3, 1, 2)
        assert clean.severity == ActivitySeverity.INFO
        assert partial.severity == ActivitySeverity.WARNING
        assert partial.details["failed_count"] == 2

    def test_builder_keeps_user_text_in_details(self):
        category = "C" * 520
        event = ActivityEventBuilder.budget_saved("alice", category, "10")
        assert event.details == {"category": category, "amount": "10"}
        assert category not in event.description

        added = ActivityEventBuilder.category_added("alice", "c1", "N" * 520, "expense")
        assert added.details["name"] == "N" * 520
        assert "N" not in added.description

    def test_logger_binds_owner(self):
        logger = ActivityLogger().bind("alice")
        event = logger.log(ActivityEventBuilder.transaction_deleted("alice", "tx-1"))
        assert logger.owner_id == "alice"
        assert event.event_type == ActivityEventType.TRANSACTION_DELETED

    def test_configure_logging_uses_app_settings(self):
        configure_logging(AppSettings(log_level="WARNING"))
        assert logging.getLogger("findash").level == logging.WARNING

        configure_logging(AppSettings(log_level="ERROR", debug_mode=True))
        assert logging.getLogger("findash").level == logging.DEBUG
