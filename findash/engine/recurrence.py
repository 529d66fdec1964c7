"""
Recurrence Projector

Projects the next occurrence of recurring expenses and normalizes their
cost to a month and a year.

Anchors come from the transaction's own date: the day of month for monthly
entries, the weekday for weekly ones. A projection is never in the past. An
anchor that falls on today rolls over to the next period.

Monthly anchors past the end of a shorter month are clamped to that month's
last day (anchor 31 falls on Feb 29 in 2024, on Apr 30 in April).
"""

import calendar
from datetime import date, timedelta
from decimal import Decimal
from typing import Iterable

from findash.engine.aggregation import shift_month, weekday_index, week_start
from findash.models.ledger import (
    Frequency,
    Transaction,
    TransactionFields,
)
from findash.models.reports import ZERO, ProjectedBill, SubscriptionMetrics


WEEKS_PER_MONTH = 4
MONTHS_PER_YEAR = 12


def clamped_date(year: int, month: int, day: int) -> date:
    """``date(year, month, day)`` with the day capped at the month's length."""
    return date(year, month, min(day, calendar.monthrange(year, month)[1]))


def is_recurring_expense(transaction: Transaction) -> bool:
    return (
        transaction.is_expense
        and transaction.is_recurring
        and transaction.frequency is not None
    )


def next_due_date(transaction: Transaction, today: date) -> date:
    """Next occurrence of a recurring transaction, never before ``today``."""
    anchor = transaction.date

    if transaction.frequency == Frequency.MONTHLY:
        if anchor.day > today.day:
            return clamped_date(today.year, today.month, anchor.day)
        year, month = shift_month(today.year, today.month, 1)
        return clamped_date(year, month, anchor.day)

    diff = weekday_index(anchor) - weekday_index(today)
    if diff <= 0:
        diff += 7
    return today + timedelta(days=diff)


def days_until_due(due_date: date, today: date) -> int:
    return (due_date - today).days


def is_due_soon(days_until: int, threshold: int = 3) -> bool:
    return 0 <= days_until <= threshold


# =============================================================================
# COST PROJECTIONS
# =============================================================================

def projected_monthly_cost(recurring_expenses: Iterable[Transaction]) -> Decimal:
    """Weekly entries count four times a month, monthly entries once."""
    total = ZERO
    for transaction in recurring_expenses:
        if transaction.frequency == Frequency.WEEKLY:
            total += transaction.amount * WEEKS_PER_MONTH
        else:
            total += transaction.amount
    return total


def projected_annual_cost(recurring_expenses: Iterable[Transaction]) -> Decimal:
    return projected_monthly_cost(recurring_expenses) * MONTHS_PER_YEAR


def compute_subscription_metrics(
    transactions: Iterable[Transaction],
) -> SubscriptionMetrics:
    subscriptions = [t for t in transactions if is_recurring_expense(t)]
    monthly = projected_monthly_cost(subscriptions)
    return SubscriptionMetrics(
        monthly_fixed=monthly,
        annual_projected=monthly * MONTHS_PER_YEAR,
        subscription_count=len(subscriptions),
    )


# =============================================================================
# VIEWS
# =============================================================================

def _project(transaction: Transaction, today: date, due_soon_days: int) -> ProjectedBill:
    due = next_due_date(transaction, today)
    days = days_until_due(due, today)
    return ProjectedBill(
        transaction=transaction,
        frequency=transaction.frequency,
        next_due_date=due,
        days_until=days,
        is_due_soon=is_due_soon(days, due_soon_days),
    )


def project_subscriptions(
    transactions: Iterable[Transaction],
    today: date,
    due_soon_days: int = 3,
) -> list[ProjectedBill]:
    """Every recurring expense with its next due date, soonest first."""
    projected = [
        _project(t, today, due_soon_days)
        for t in transactions
        if is_recurring_expense(t)
    ]
    projected.sort(key=lambda bill: bill.days_until)
    return projected


def _in_current_period(bill: ProjectedBill, today: date) -> bool:
    if bill.frequency == Frequency.MONTHLY:
        return (bill.next_due_date.year, bill.next_due_date.month) == (
            today.year,
            today.month,
        )
    return bill.next_due_date < week_start(today) + timedelta(days=7)


def upcoming_bills(
    transactions: Iterable[Transaction],
    today: date,
    limit: int = 5,
    due_soon_days: int = 3,
) -> list[ProjectedBill]:
    """
    Recurring expenses still due in the current period.

    The period is the calendar month for monthly entries and the
    Sunday-started week for weekly ones.
    """
    bills = [
        bill
        for bill in project_subscriptions(transactions, today, due_soon_days)
        if bill.days_until >= 0 and _in_current_period(bill, today)
    ]
    return bills[:limit]


# =============================================================================
# CONVERSION
# =============================================================================

def conversion_candidates(
    transactions: Iterable[Transaction],
    limit: int = 10,
) -> list[Transaction]:
    """
    Non-recurring expenses that could become subscriptions.

    One entry per distinct description (its first occurrence), so a charge
    that shows up every month is offered once.
    """
    seen: dict[str, Transaction] = {}
    for transaction in transactions:
        if not transaction.is_expense or transaction.is_recurring:
            continue
        seen.setdefault(transaction.description, transaction)
    return list(seen.values())[:limit]


def as_recurring(
    transaction: Transaction,
    frequency: Frequency,
) -> TransactionFields:
    """Full replacement fields turning ``transaction`` into a subscription."""
    return transaction.to_fields().model_copy(
        update={"is_recurring": True, "frequency": frequency}
    )
