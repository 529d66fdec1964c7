"""
Transaction Queries

Deterministic lookups over a snapshot: the filtered list view and the
per-day grouping behind the calendar view.
"""

from datetime import date
from typing import Iterable, Optional

from pydantic import BaseModel, Field, model_validator

from findash.models.ledger import Transaction, TransactionKind
from findash.models.reports import ZERO, DayActivity


ALL_CATEGORIES = "All"


class TransactionFilter(BaseModel):
    """
    List-view filter. Date bounds are inclusive; either may be omitted.
    """

    category: str = Field(
        default=ALL_CATEGORIES,
        description="Exact category label, or 'All'"
    )
    date_from: Optional[date] = None
    date_to: Optional[date] = None

    @model_validator(mode='after')
    def validate_range(self) -> 'TransactionFilter':
        if self.date_from and self.date_to and self.date_to < self.date_from:
            raise ValueError("date_to cannot be before date_from")
        return self

    def matches(self, transaction: Transaction) -> bool:
        if self.category != ALL_CATEGORIES and transaction.category != self.category:
            return False
        if self.date_from and transaction.date < self.date_from:
            return False
        if self.date_to and transaction.date > self.date_to:
            return False
        return True

    def apply(self, transactions: Iterable[Transaction]) -> list[Transaction]:
        """Matching transactions in their original order."""
        return [t for t in transactions if self.matches(t)]


def daily_activity(
    transactions: Iterable[Transaction],
    year: int,
    month: int,
) -> dict[int, DayActivity]:
    """
    Group one month's transactions by day of month.

    Days without transactions are absent. Items within a day are ordered
    newest-created first.
    """
    grouped: dict[int, list[Transaction]] = {}
    for transaction in transactions:
        if (transaction.date.year, transaction.date.month) != (year, month):
            continue
        grouped.setdefault(transaction.date.day, []).append(transaction)

    activity = {}
    for day in sorted(grouped):
        items = sorted(grouped[day], key=lambda t: t.created_at, reverse=True)
        income = sum(
            (t.amount for t in items if t.kind == TransactionKind.INCOME), ZERO
        )
        expense = sum(
            (t.amount for t in items if t.is_expense), ZERO
        )
        activity[day] = DayActivity(income=income, expense=expense, items=items)
    return activity
