"""Tests for list filters, calendar grouping and the optimistic wrapper."""

import asyncio
from datetime import date
from decimal import Decimal

import pytest

from findash.errors import StoreUnavailableError
from findash.models.ledger import TransactionKind
from findash.models.snapshot import OwnerSnapshot
from findash.optimistic import SnapshotHolder, apply_optimistically
from findash.queries import ALL_CATEGORIES, TransactionFilter, daily_activity


class TestTransactionFilter:
    """Tests for the list-view filter."""

    def test_all_categories_matches_everything(self, make_transaction):
        transactions = [
            make_transaction(date(2024, 1, 1), 10, category="Food"),
            make_transaction(date(2024, 1, 2), 10, category="Transport"),
        ]
        assert TransactionFilter(category=ALL_CATEGORIES).apply(transactions) == transactions

    def test_category_and_inclusive_dates(self, make_transaction):
        transactions = [
            make_transaction(date(2024, 1, 1), 1, category="Food"),
            make_transaction(date(2024, 1, 15), 2, category="Food"),
            make_transaction(date(2024, 1, 31), 3, category="Food"),
            make_transaction(date(2024, 1, 15), 4, category="Transport"),
        ]
        criteria = TransactionFilter(
            category="Food",
            date_from=date(2024, 1, 15),
            date_to=date(2024, 1, 31),
        )
        assert [t.amount for t in criteria.apply(transactions)] == [
            Decimal("2"), Decimal("3"),
        ]

    def test_inverted_range_rejected(self):
        with pytest.raises(ValueError):
            TransactionFilter(date_from=date(2024, 2, 1), date_to=date(2024, 1, 1))


class TestDailyActivity:
    """Tests for the calendar grouping."""

    def test_groups_by_day(self, make_transaction):
        older = make_transaction(date(2024, 3, 4), 20)
        newer = make_transaction(date(2024, 3, 4), 5)
        transactions = [
            older,
            newer,
            make_transaction(date(2024, 3, 4), 100, kind=TransactionKind.INCOME),
            make_transaction(date(2024, 3, 9), 7),
            make_transaction(date(2024, 4, 4), 50),
        ]
        activity = daily_activity(transactions, 2024, 3)

        assert list(activity) == [4, 9]
        assert activity[4].income == Decimal("100")
        assert activity[4].expense == Decimal("25")
        assert activity[4].count == 3
        assert activity[4].items[1] == newer
        assert activity[4].items[2] == older

    def test_empty_month(self):
        assert daily_activity([], 2024, 3) == {}


class TestOptimisticUpdate:
    """Tests for apply-then-confirm with rollback."""

    def test_commit_applies_write_result(self, make_transaction):
        provisional = make_transaction(date(2024, 1, 1), 10)
        stored = make_transaction(date(2024, 1, 1), 10)
        holder = SnapshotHolder(OwnerSnapshot(owner_id="alice"))

        async def write():
            assert holder.snapshot.transactions == (provisional,)
            return stored

        result = asyncio.run(apply_optimistically(
            holder,
            change=lambda s: s.with_transaction(provisional),
            write=write,
            commit=lambda s, created: s.replacing_transaction(provisional.id, created),
        ))

        assert result is stored
        assert holder.snapshot.transactions == (stored,)

    def test_failure_restores_and_reraises(self, make_transaction):
        original = OwnerSnapshot(owner_id="alice")
        holder = SnapshotHolder(original)
        rolled_back = []

        async def write():
            raise StoreUnavailableError("offline")

        with pytest.raises(StoreUnavailableError):
            asyncio.run(apply_optimistically(
                holder,
                change=lambda s: s.with_transaction(make_transaction(date(2024, 1, 1), 10)),
                write=write,
                on_rollback=rolled_back.append,
            ))

        assert holder.snapshot is original
        assert len(rolled_back) == 1
        assert isinstance(rolled_back[0], StoreUnavailableError)
