"""
In-Memory Record Store

Keeps every owner's records in a process-local dictionary. Used by tests
and as the default backend for a single-process dashboard.

Subclasses that persist somewhere else override ``_load`` and ``_save``;
the record manipulation itself lives here once.
"""

from decimal import Decimal
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, Field

from findash.activity import ActivityLogger
from findash.errors import NotFoundError
from findash.models.ledger import (
    Budget,
    CategoryItem,
    Transaction,
    TransactionFields,
    TransactionKind,
    utc_now,
)
from findash.services.storage.interface import (
    DEFAULT_CATEGORIES,
    RecordStoreInterface,
)


class OwnerDocument(BaseModel):
    """Everything stored for one owner."""

    owner_id: str
    transactions: list[Transaction] = Field(default_factory=list)
    budgets: list[Budget] = Field(default_factory=list)
    categories: list[CategoryItem] = Field(default_factory=list)
    categories_seeded: bool = False


def new_id() -> str:
    return str(uuid4())


class InMemoryRecordStore(RecordStoreInterface):
    """
    Record store backed by a dictionary of OwnerDocuments.

    Transactions are kept newest-created first, so listing by date keeps
    same-day entries in reverse creation order.
    """

    def __init__(self, activity_logger: Optional[ActivityLogger] = None):
        self._documents: dict[str, OwnerDocument] = {}
        self._activity_logger = activity_logger

    # -- persistence hooks ----------------------------------------------------

    def _load(self, owner_id: str) -> OwnerDocument:
        if owner_id not in self._documents:
            self._documents[owner_id] = OwnerDocument(owner_id=owner_id)
        return self._documents[owner_id]

    def _save(self, document: OwnerDocument) -> None:
        self._documents[document.owner_id] = document

    # -- transactions ---------------------------------------------------------

    async def list_transactions(self, owner_id: str) -> list[Transaction]:
        document = self._load(owner_id)
        return sorted(document.transactions, key=lambda t: t.date, reverse=True)

    async def create_transaction(
        self,
        owner_id: str,
        fields: TransactionFields,
    ) -> Transaction:
        document = self._load(owner_id)
        transaction = Transaction(
            id=new_id(),
            owner_id=owner_id,
            created_at=utc_now(),
            **fields.model_dump(),
        )
        document.transactions.insert(0, transaction)
        self._save(document)
        return transaction

    async def update_transaction(
        self,
        owner_id: str,
        transaction_id: str,
        fields: TransactionFields,
    ) -> Transaction:
        document = self._load(owner_id)
        for index, existing in enumerate(document.transactions):
            if existing.id == transaction_id:
                updated = existing.replaced_with(fields)
                document.transactions[index] = updated
                self._save(document)
                return updated

        raise NotFoundError(f"Transaction not found: {transaction_id}")

    async def delete_transaction(self, owner_id: str, transaction_id: str) -> int:
        document = self._load(owner_id)
        remaining = [t for t in document.transactions if t.id != transaction_id]
        deleted = len(document.transactions) - len(remaining)
        if deleted:
            document.transactions = remaining
            self._save(document)
        return deleted

    # -- budgets --------------------------------------------------------------

    async def list_budgets(self, owner_id: str) -> list[Budget]:
        return list(self._load(owner_id).budgets)

    async def upsert_budget(
        self,
        owner_id: str,
        category: str,
        amount: Decimal,
    ) -> Budget:
        document = self._load(owner_id)
        budget = Budget(owner_id=owner_id, category=category, amount=amount)

        for index, existing in enumerate(document.budgets):
            if existing.category == budget.category:
                document.budgets[index] = budget
                break
        else:
            document.budgets.append(budget)

        self._save(document)
        return budget

    # -- categories -----------------------------------------------------------

    async def list_categories(self, owner_id: str) -> list[CategoryItem]:
        document = self._load(owner_id)
        if not document.categories and not document.categories_seeded:
            document.categories = [
                CategoryItem(
                    id=new_id(),
                    owner_id=owner_id,
                    name=name,
                    color=color,
                    kind=kind,
                )
                for name, color, kind in DEFAULT_CATEGORIES
            ]
            document.categories_seeded = True
            self._save(document)
            if self._activity_logger:
                self._activity_logger.bind(owner_id).log_categories_seeded(
                    len(document.categories)
                )
        return list(document.categories)

    async def add_category(
        self,
        owner_id: str,
        name: str,
        kind: TransactionKind,
        color: str,
    ) -> CategoryItem:
        document = self._load(owner_id)
        category = CategoryItem(
            id=new_id(),
            owner_id=owner_id,
            name=name,
            color=color,
            kind=kind,
        )
        document.categories.append(category)
        self._save(document)
        return category

    async def delete_category(self, owner_id: str, category_id: str) -> int:
        document = self._load(owner_id)
        remaining = [c for c in document.categories if c.id != category_id]
        deleted = len(document.categories) - len(remaining)
        if deleted:
            document.categories = remaining
            self._save(document)
        return deleted
