"""Report, projection, budget and reconciliation engine."""

from findash.engine.aggregation import (
    OTHER_SERIES,
    compute_balance_history,
    compute_category_breakdown,
    compute_category_trend,
    compute_expense_heatmap,
    compute_monthly_flow,
    compute_monthly_report,
    compute_summary,
)
from findash.engine.budgets import evaluate_budgets
from findash.engine.reconciliation import (
    classify_candidates,
    is_duplicate,
    reconcile,
)
from findash.engine.recurrence import (
    as_recurring,
    compute_subscription_metrics,
    conversion_candidates,
    days_until_due,
    is_due_soon,
    next_due_date,
    project_subscriptions,
    projected_annual_cost,
    projected_monthly_cost,
    upcoming_bills,
)

__all__ = [
    # Aggregation
    "OTHER_SERIES",
    "compute_balance_history",
    "compute_category_breakdown",
    "compute_category_trend",
    "compute_expense_heatmap",
    "compute_monthly_flow",
    "compute_monthly_report",
    "compute_summary",
    # Budgets
    "evaluate_budgets",
    # Reconciliation
    "classify_candidates",
    "is_duplicate",
    "reconcile",
    # Recurrence
    "as_recurring",
    "compute_subscription_metrics",
    "conversion_candidates",
    "days_until_due",
    "is_due_soon",
    "next_due_date",
    "project_subscriptions",
    "projected_annual_cost",
    "projected_monthly_cost",
    "upcoming_bills",
]
