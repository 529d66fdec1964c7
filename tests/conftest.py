"""Shared fixtures for FinDash tests."""

import itertools
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from findash.models.ledger import (
    Frequency,
    Transaction,
    TransactionFields,
    TransactionKind,
)


BASE_CREATED_AT = datetime(2024, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def make_transaction():
    """
    Factory for stored transactions.

    Each call gets a fresh id and a ``created_at`` one second after the
    previous call, so creation order is predictable.
    """
    counter = itertools.count(1)

    def _make(
        day: date,
        amount,
        kind: TransactionKind = TransactionKind.EXPENSE,
        category: str = "Food",
        description: str = "Entry",
        frequency: Frequency = None,
        owner_id: str = "alice",
    ) -> Transaction:
        n = next(counter)
        return Transaction(
            id=f"tx-{n}",
            owner_id=owner_id,
            description=description,
            amount=Decimal(str(amount)),
            kind=kind,
            category=category,
            date=day,
            created_at=BASE_CREATED_AT + timedelta(seconds=n),
            is_recurring=frequency is not None,
            frequency=frequency,
        )

    return _make


@pytest.fixture
def make_fields():
    """Factory for user-entered transaction fields."""

    def _make(
        day: date,
        amount,
        kind: TransactionKind = TransactionKind.EXPENSE,
        category: str = "Food",
        description: str = "Entry",
    ) -> TransactionFields:
        return TransactionFields(
            description=description,
            amount=Decimal(str(amount)),
            kind=kind,
            category=category,
            date=day,
        )

    return _make
