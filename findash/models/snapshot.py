"""
Owner Snapshot

DESIGN DECISION: The data of one owner travels as a single immutable value.
Every engine function receives it (or its transactions) explicitly, so there
is no ambient "current user" state to read from. Mutating helpers return a
new snapshot and leave the original untouched, which is what makes rollback
a plain reassignment.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from findash.models.ledger import Budget, CategoryItem, Transaction


class OwnerSnapshot(BaseModel):
    """Transactions, budgets and categories of one owner at one moment."""
    model_config = ConfigDict(frozen=True)

    owner_id: str
    transactions: tuple[Transaction, ...] = Field(default_factory=tuple)
    budgets: tuple[Budget, ...] = Field(default_factory=tuple)
    categories: tuple[CategoryItem, ...] = Field(default_factory=tuple)

    def find_transaction(self, transaction_id: str) -> Optional[Transaction]:
        for transaction in self.transactions:
            if transaction.id == transaction_id:
                return transaction
        return None

    def find_category(self, category_id: str) -> Optional[CategoryItem]:
        for category in self.categories:
            if category.id == category_id:
                return category
        return None

    # -- transactions ---------------------------------------------------------

    def with_transaction(self, transaction: Transaction) -> 'OwnerSnapshot':
        """Newest entries go first, matching the order the store lists them."""
        return self.model_copy(
            update={"transactions": (transaction, *self.transactions)}
        )

    def replacing_transaction(
        self,
        transaction_id: str,
        replacement: Transaction,
    ) -> 'OwnerSnapshot':
        return self.model_copy(update={
            "transactions": tuple(
                replacement if t.id == transaction_id else t
                for t in self.transactions
            )
        })

    def without_transaction(self, transaction_id: str) -> 'OwnerSnapshot':
        return self.model_copy(update={
            "transactions": tuple(
                t for t in self.transactions if t.id != transaction_id
            )
        })

    # -- budgets --------------------------------------------------------------

    def with_budget(self, budget: Budget) -> 'OwnerSnapshot':
        """Upsert by category; an existing budget keeps its position."""
        budgets = list(self.budgets)
        for index, existing in enumerate(budgets):
            if existing.category == budget.category:
                budgets[index] = budget
                break
        else:
            budgets.append(budget)
        return self.model_copy(update={"budgets": tuple(budgets)})

    # -- categories -----------------------------------------------------------

    def with_category(self, category: CategoryItem) -> 'OwnerSnapshot':
        return self.model_copy(
            update={"categories": (*self.categories, category)}
        )

    def replacing_category(
        self,
        category_id: str,
        replacement: CategoryItem,
    ) -> 'OwnerSnapshot':
        return self.model_copy(update={
            "categories": tuple(
                replacement if c.id == category_id else c
                for c in self.categories
            )
        })

    def without_category(self, category_id: str) -> 'OwnerSnapshot':
        return self.model_copy(update={
            "categories": tuple(
                c for c in self.categories if c.id != category_id
            )
        })
