"""
Budget Evaluator

Merges this month's spend per category with the configured limits.

A category appears when it has spend this month, a budget, or both. The
percentage is only meaningful against a positive limit: a category without
one reports 0% no matter how much was spent. That is how the dashboard has
always behaved, and changing it changes what users see, so it stays.
"""

from datetime import date
from decimal import Decimal
from typing import Iterable

from findash.models.ledger import Budget, Transaction
from findash.models.reports import ZERO, BudgetUtilization


def current_month_spend(
    transactions: Iterable[Transaction],
    today: date,
) -> dict[str, Decimal]:
    spend: dict[str, Decimal] = {}
    for transaction in transactions:
        if not transaction.is_expense:
            continue
        if (transaction.date.year, transaction.date.month) != (today.year, today.month):
            continue
        spend[transaction.category] = spend.get(transaction.category, ZERO) + transaction.amount
    return spend


def utilization_percentage(spent: Decimal, limit: Decimal) -> float:
    if limit > 0:
        return float(spent / limit * 100)
    return 0.0


def evaluate_budgets(
    transactions: Iterable[Transaction],
    budgets: Iterable[Budget],
    today: date,
) -> list[BudgetUtilization]:
    """Utilization rows for the current month, highest percentage first."""
    spend = current_month_spend(transactions, today)
    limits = {budget.category: budget.amount for budget in budgets}

    categories = list(spend)
    categories.extend(category for category in limits if category not in spend)

    rows = []
    for category in categories:
        spent = spend.get(category, ZERO)
        limit = limits.get(category, ZERO)
        if spent == 0 and limit == 0:
            continue
        rows.append(BudgetUtilization(
            category=category,
            spent=spent,
            limit=limit,
            percentage=utilization_percentage(spent, limit),
        ))

    rows.sort(key=lambda row: row.percentage, reverse=True)
    return rows
