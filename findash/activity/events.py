"""
Activity Events for FinDash

Notable actions (ledger mutations, rollbacks, imports) are described as
structured events and written to the application log.

DESIGN DECISION: Events are log records only. They are not persisted and
cannot be replayed; FinDash keeps no history of edited records.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from findash.models.ledger import utc_now


class ActivityEventType(str, Enum):
    """Types of events we log."""
    # Transactions
    TRANSACTION_CREATED = "transaction_created"
    TRANSACTION_UPDATED = "transaction_updated"
    TRANSACTION_DELETED = "transaction_deleted"
    DELETE_BLOCKED = "delete_blocked"

    # Budgets and categories
    BUDGET_SAVED = "budget_saved"
    CATEGORY_ADDED = "category_added"
    CATEGORY_DELETED = "category_deleted"
    CATEGORIES_SEEDED = "categories_seeded"

    # Optimistic updates
    MUTATION_ROLLED_BACK = "mutation_rolled_back"

    # Imports
    IMPORT_STARTED = "import_started"
    IMPORT_CANDIDATE_FAILED = "import_candidate_failed"
    IMPORT_COMPLETED = "import_completed"

    # System
    VALIDATION_FAILED = "validation_failed"
    STORE_ERROR = "store_error"


class ActivitySeverity(str, Enum):
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class ActivityEvent(BaseModel):
    """A single activity event."""

    event_id: UUID = Field(default_factory=uuid4)
    timestamp: datetime = Field(default_factory=utc_now)

    event_type: ActivityEventType
    severity: ActivitySeverity = ActivitySeverity.INFO

    owner_id: Optional[str] = Field(
        default=None,
        description="Owner whose data the event concerns"
    )
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'transaction', 'budget')"
    )
    entity_id: Optional[str] = None

    description: str = Field(..., max_length=500)
    details: dict[str, Any] = Field(default_factory=dict)

    error_kind: Optional[str] = None
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """Convert to a dictionary suitable for structured logging."""
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "owner_id": self.owner_id,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "error_kind": self.error_kind,
            "error_message": self.error_message,
        }


class ActivityEventBuilder:
    """
    Helper class to build activity events with common patterns.

    Usage:
        event = ActivityEventBuilder.transaction_created(
            owner_id="alice",
            transaction_id="tx-1",
            amount="12.50",
            kind="expense",
        )
    """

    @staticmethod
    def transaction_created(
        owner_id: str,
        transaction_id: str,
        amount: str,
        kind: str,
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.TRANSACTION_CREATED,
            owner_id=owner_id,
            entity_type="transaction",
            entity_id=transaction_id,
            description=f"Recorded {kind} of {amount}",
            details={"amount": amount, "kind": kind},
        )

    @staticmethod
    def transaction_updated(owner_id: str, transaction_id: str) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.TRANSACTION_UPDATED,
            owner_id=owner_id,
            entity_type="transaction",
            entity_id=transaction_id,
            description="Transaction replaced",
        )

    @staticmethod
    def transaction_deleted(owner_id: str, transaction_id: str) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.TRANSACTION_DELETED,
            owner_id=owner_id,
            entity_type="transaction",
            entity_id=transaction_id,
            description="Transaction deleted",
        )

    @staticmethod
    def delete_blocked(
        owner_id: str,
        entity_type: str,
        entity_id: str,
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.DELETE_BLOCKED,
            severity=ActivitySeverity.WARNING,
            owner_id=owner_id,
            entity_type=entity_type,
            entity_id=entity_id,
            description="Delete affected no rows (missing or blocked by access policy)",
            error_kind="permission_or_missing",
        )

    @staticmethod
    def budget_saved(owner_id: str, category: str, amount: str) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.BUDGET_SAVED,
            owner_id=owner_id,
            entity_type="budget",
            entity_id=category,
            description=f"Budget limit set to {amount}",
            details={"category": category, "amount": amount},
        )

    @staticmethod
    def category_added(
        owner_id: str,
        category_id: str,
        name: str,
        kind: str,
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.CATEGORY_ADDED,
            owner_id=owner_id,
            entity_type="category",
            entity_id=category_id,
            description=f"Category added for {kind}",
            details={"name": name, "kind": kind},
        )

    @staticmethod
    def category_deleted(owner_id: str, category_id: str) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.CATEGORY_DELETED,
            owner_id=owner_id,
            entity_type="category",
            entity_id=category_id,
            description="Category deleted",
        )

    @staticmethod
    def categories_seeded(owner_id: str, count: int) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.CATEGORIES_SEEDED,
            owner_id=owner_id,
            entity_type="category",
            description=f"Seeded {count} default categories",
            details={"count": count},
        )

    @staticmethod
    def mutation_rolled_back(
        owner_id: str,
        operation: str,
        error_kind: str,
        error_message: str,
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.MUTATION_ROLLED_BACK,
            severity=ActivitySeverity.WARNING,
            owner_id=owner_id,
            description=f"Local change rolled back after failed {operation}",
            details={"operation": operation},
            error_kind=error_kind,
            error_message=error_message,
        )

    @staticmethod
    def import_started(owner_id: Optional[str], candidate_count: int) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.IMPORT_STARTED,
            owner_id=owner_id,
            description=f"Reconciling {candidate_count} candidates",
            details={"candidate_count": candidate_count},
        )

    @staticmethod
    def import_candidate_failed(
        owner_id: Optional[str],
        error_kind: str,
        error_message: str,
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.IMPORT_CANDIDATE_FAILED,
            severity=ActivitySeverity.WARNING,
            owner_id=owner_id,
            description="Candidate insert failed; continuing with the batch",
            error_kind=error_kind,
            error_message=error_message,
        )

    @staticmethod
    def import_completed(
        owner_id: Optional[str],
        imported_count: int,
        skipped_count: int,
        failed_count: int,
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.IMPORT_COMPLETED,
            severity=(
                ActivitySeverity.WARNING if failed_count else ActivitySeverity.INFO
            ),
            owner_id=owner_id,
            description=(
                f"Imported {imported_count}, skipped {skipped_count} duplicates, "
                f"{failed_count} failed"
            ),
            details={
                "imported_count": imported_count,
                "skipped_count": skipped_count,
                "failed_count": failed_count,
            },
        )

    @staticmethod
    def validation_failed(
        owner_id: str,
        entity_type: str,
        issues: list[dict],
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.VALIDATION_FAILED,
            severity=ActivitySeverity.WARNING,
            owner_id=owner_id,
            entity_type=entity_type,
            description=f"{entity_type} rejected with {len(issues)} issue(s)",
            details={"issues": issues},
            error_kind="validation",
        )

    @staticmethod
    def store_error(
        owner_id: Optional[str],
        operation: str,
        error_message: str,
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.STORE_ERROR,
            severity=ActivitySeverity.ERROR,
            owner_id=owner_id,
            description=f"Record store failed during {operation}",
            details={"operation": operation},
            error_kind="store_unavailable",
            error_message=error_message,
        )
