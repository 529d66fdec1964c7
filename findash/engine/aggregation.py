"""
Aggregation Engine

Turns a flat list of dated money movements into month-aware reports.

Every function here is pure: it takes a sequence of transactions (plus a
reference date where the report is relative to "today") and returns fresh
view models. Nothing is cached and nothing is mutated.

Calendar conventions shared by the windowed reports:
- Months are keyed ``YYYY-MM``; the string order is chronological.
- Weeks start on Sunday. Windowed grids are snapped back to a Sunday so
  they cover whole weeks.
"""

from collections import defaultdict
from datetime import date, timedelta
from decimal import Decimal
from typing import Iterable, Sequence

from findash.models.ledger import Transaction, TransactionKind
from findash.models.reports import (
    ZERO,
    BalancePoint,
    CategoryTrend,
    CategoryTrendRow,
    FinancialReport,
    HeatmapDay,
    MonthlyFlowPoint,
    MonthlyStats,
    SummaryStats,
)


OTHER_SERIES = "Other"


# =============================================================================
# CALENDAR HELPERS
# =============================================================================

def month_key(day: date) -> str:
    return f"{day.year:04d}-{day.month:02d}"


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    """Move (year, month) by ``delta`` months, wrapping across years."""
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def weekday_index(day: date) -> int:
    """Day of week with Sunday = 0 ... Saturday = 6."""
    return (day.weekday() + 1) % 7


def week_start(day: date) -> date:
    """The Sunday on or before ``day``."""
    return day - timedelta(days=weekday_index(day))


def _daterange(start: date, end: date) -> Iterable[date]:
    day = start
    while day <= end:
        yield day
        day += timedelta(days=1)


# =============================================================================
# TOTALS
# =============================================================================

def compute_summary(transactions: Iterable[Transaction]) -> SummaryStats:
    """All-time income, expenses and balance in one pass."""
    income = ZERO
    expenses = ZERO
    for transaction in transactions:
        if transaction.kind == TransactionKind.INCOME:
            income += transaction.amount
        else:
            expenses += transaction.amount

    return SummaryStats(
        total_income=income,
        total_expenses=expenses,
        total_balance=income - expenses,
    )


def _month_stats(income: Decimal, expenses: Decimal) -> MonthlyStats:
    return MonthlyStats(income=income, expenses=expenses, balance=income - expenses)


def compute_monthly_report(
    transactions: Iterable[Transaction],
    today: date,
) -> FinancialReport:
    """
    Current month against previous month.

    The closing balance is everything dated before the first day of the
    current month, so it equals the running balance the month started with.
    """
    current = (today.year, today.month)
    previous = shift_month(today.year, today.month, -1)

    totals = {
        current: [ZERO, ZERO],
        previous: [ZERO, ZERO],
    }
    total_balance = ZERO
    closing_balance = ZERO

    for transaction in transactions:
        signed = transaction.signed_amount
        total_balance += signed

        period = (transaction.date.year, transaction.date.month)
        if period < current:
            closing_balance += signed

        if period in totals:
            slot = 0 if transaction.kind == TransactionKind.INCOME else 1
            totals[period][slot] += transaction.amount

    return FinancialReport(
        current_month=_month_stats(*totals[current]),
        previous_month=_month_stats(*totals[previous]),
        total_balance=total_balance,
        previous_closing_balance=closing_balance,
    )


def compute_monthly_flow(
    transactions: Iterable[Transaction],
    today: date,
    months: int = 6,
) -> list[MonthlyFlowPoint]:
    """Income and expense for the trailing ``months`` months, oldest first."""
    keys = []
    for offset in range(months - 1, -1, -1):
        year, month = shift_month(today.year, today.month, -offset)
        keys.append(f"{year:04d}-{month:02d}")

    flow = {key: [ZERO, ZERO] for key in keys}
    for transaction in transactions:
        bucket = flow.get(month_key(transaction.date))
        if bucket is None:
            continue
        slot = 0 if transaction.kind == TransactionKind.INCOME else 1
        bucket[slot] += transaction.amount

    return [
        MonthlyFlowPoint(month_key=key, income=income, expense=expense)
        for key, (income, expense) in flow.items()
    ]


# =============================================================================
# CATEGORIES
# =============================================================================

def compute_category_breakdown(
    transactions: Iterable[Transaction],
) -> dict[str, Decimal]:
    """Expense total per category, in first-seen order."""
    breakdown: dict[str, Decimal] = {}
    for transaction in transactions:
        if not transaction.is_expense:
            continue
        breakdown[transaction.category] = (
            breakdown.get(transaction.category, ZERO) + transaction.amount
        )
    return {category: total for category, total in breakdown.items() if total}


def compute_category_trend(
    transactions: Iterable[Transaction],
    top_n: int = 5,
) -> CategoryTrend:
    """
    Month-by-month totals of the top ``top_n`` expense categories.

    Categories are ranked by all-time total; equal totals keep the order in
    which the categories first appear. Everything outside the top N lands in
    the ``Other`` series, which only exists when something lands there. A
    real category named ``Other`` is never ranked and always folds into that
    series.
    """
    expenses = [t for t in transactions if t.is_expense]
    if not expenses:
        return CategoryTrend()

    totals = compute_category_breakdown(expenses)
    ranked = sorted(
        (category for category in totals if category != OTHER_SERIES),
        key=lambda category: totals[category],
        reverse=True,
    )
    selected = ranked[:top_n]
    selected_set = set(selected)

    series = list(selected)
    if any(t.category not in selected_set for t in expenses):
        series.append(OTHER_SERIES)

    by_month: dict[str, dict[str, Decimal]] = {}
    for transaction in expenses:
        key = month_key(transaction.date)
        if key not in by_month:
            by_month[key] = {name: ZERO for name in series}
        bucket = (
            transaction.category
            if transaction.category in selected_set
            else OTHER_SERIES
        )
        by_month[key][bucket] += transaction.amount

    rows = [
        CategoryTrendRow(month_key=key, amounts=by_month[key])
        for key in sorted(by_month)
    ]
    return CategoryTrend(series=series, rows=rows)


# =============================================================================
# WINDOWED SERIES
# =============================================================================

def compute_balance_history(
    transactions: Sequence[Transaction],
    today: date,
    window_days: int = 180,
) -> list[BalancePoint]:
    """
    Day-by-day cumulative balance ending today.

    Transactions are replayed oldest first (same-day entries keep their
    input order) and each date records the balance after its last movement.
    The window starts at the later of the first transaction and
    ``today - window_days``, snapped back to Sunday, and opens with the last
    balance recorded before it. Days without movements repeat the previous
    day's balance.
    """
    if not transactions:
        return []

    ordered = sorted(transactions, key=lambda t: t.date)

    running = ZERO
    end_of_day: dict[date, Decimal] = {}
    for transaction in ordered:
        running += transaction.signed_amount
        end_of_day[transaction.date] = running

    start = week_start(max(ordered[0].date, today - timedelta(days=window_days)))

    balance = ZERO
    for day, value in end_of_day.items():
        if day >= start:
            break
        balance = value

    points = []
    for day in _daterange(start, today):
        balance = end_of_day.get(day, balance)
        points.append(BalancePoint(date=day, balance=balance))
    return points


def compute_expense_heatmap(
    transactions: Iterable[Transaction],
    today: date,
    window_days: int = 91,
) -> list[HeatmapDay]:
    """
    Daily expense totals over whole weeks ending with today's week.

    Intensity is relative to the busiest day inside the grid, so the
    darkest cell is always 1.0 unless the grid holds no expenses at all.
    """
    start = week_start(today - timedelta(days=window_days))
    end = today + timedelta(days=6 - weekday_index(today))

    daily: dict[date, Decimal] = defaultdict(lambda: ZERO)
    for transaction in transactions:
        if not transaction.is_expense:
            continue
        if start <= transaction.date <= end:
            daily[transaction.date] += transaction.amount

    peak = max(daily.values(), default=ZERO)

    return [
        HeatmapDay(
            date=day,
            amount=daily.get(day, ZERO),
            intensity=float(daily.get(day, ZERO) / peak) if peak > 0 else 0.0,
        )
        for day in _daterange(start, end)
    ]
