"""
Abstract Record Store Interface

DESIGN DECISION: We define an abstract interface for the record store.
This allows us to:
1. Keep the engine independent of where records live
2. Use in-memory storage for testing
3. Swap the JSON-file store for a database later

Every method is scoped by owner. An implementation must never return or
touch another owner's rows.

Failures are reported with the exceptions in ``findash.errors``:
- NotFoundError when an update targets a missing row
- StoreUnavailableError for any transport or storage failure
Deletes report the number of affected rows instead of raising, so that the
caller can tell "deleted" from "nothing happened".
"""

from abc import ABC, abstractmethod
from decimal import Decimal

from findash.models.ledger import (
    Budget,
    CategoryItem,
    Transaction,
    TransactionFields,
    TransactionKind,
)


# Seeded for an owner the first time their categories are listed
DEFAULT_CATEGORIES: list[tuple[str, str, TransactionKind]] = [
    ("Salary", "#10b981", TransactionKind.INCOME),
    ("Freelance", "#34d399", TransactionKind.INCOME),
    ("Housing", "#3b82f6", TransactionKind.EXPENSE),
    ("Food", "#f59e0b", TransactionKind.EXPENSE),
    ("Transport", "#8b5cf6", TransactionKind.EXPENSE),
    ("Utilities", "#6366f1", TransactionKind.EXPENSE),
    ("Leisure", "#ec4899", TransactionKind.EXPENSE),
    ("Health", "#ef4444", TransactionKind.EXPENSE),
    ("Other", "#94a3b8", TransactionKind.EXPENSE),
]


class RecordStoreInterface(ABC):
    """
    Abstract interface for owner-scoped record storage.

    Any storage implementation must implement these methods.
    """

    # -- transactions ---------------------------------------------------------

    @abstractmethod
    async def list_transactions(self, owner_id: str) -> list[Transaction]:
        """
        List an owner's transactions.

        Returns:
            Transactions ordered newest date first
        """
        pass

    @abstractmethod
    async def create_transaction(
        self,
        owner_id: str,
        fields: TransactionFields,
    ) -> Transaction:
        """
        Store a new transaction.

        The store assigns ``id`` and ``created_at``.

        Raises:
            StoreUnavailableError: If the write fails
        """
        pass

    @abstractmethod
    async def update_transaction(
        self,
        owner_id: str,
        transaction_id: str,
        fields: TransactionFields,
    ) -> Transaction:
        """
        Replace every editable field of a transaction.

        Raises:
            NotFoundError: If the owner has no such transaction
            StoreUnavailableError: If the write fails
        """
        pass

    @abstractmethod
    async def delete_transaction(self, owner_id: str, transaction_id: str) -> int:
        """
        Delete a transaction.

        Returns:
            Number of rows deleted (0 or 1)
        """
        pass

    # -- budgets --------------------------------------------------------------

    @abstractmethod
    async def list_budgets(self, owner_id: str) -> list[Budget]:
        pass

    @abstractmethod
    async def upsert_budget(
        self,
        owner_id: str,
        category: str,
        amount: Decimal,
    ) -> Budget:
        """Insert or replace the owner's budget for ``category``."""
        pass

    # -- categories -----------------------------------------------------------

    @abstractmethod
    async def list_categories(self, owner_id: str) -> list[CategoryItem]:
        """
        List an owner's categories.

        The first call for an owner with no categories seeds
        DEFAULT_CATEGORIES and returns them.
        """
        pass

    @abstractmethod
    async def add_category(
        self,
        owner_id: str,
        name: str,
        kind: TransactionKind,
        color: str,
    ) -> CategoryItem:
        pass

    @abstractmethod
    async def delete_category(self, owner_id: str, category_id: str) -> int:
        """
        Delete a category. Transactions using its name are left alone.

        Returns:
            Number of rows deleted (0 or 1)
        """
        pass
