"""
Dashboard Composition

Computes every view model the dashboard shows from one snapshot and one
reference date, so a single render never mixes numbers from different
moments.
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict

from findash.config import EngineSettings, get_settings
from findash.engine import (
    compute_balance_history,
    compute_category_breakdown,
    compute_category_trend,
    compute_expense_heatmap,
    compute_monthly_flow,
    compute_monthly_report,
    compute_subscription_metrics,
    compute_summary,
    evaluate_budgets,
    project_subscriptions,
    upcoming_bills,
)
from findash.models.reports import (
    BalancePoint,
    BudgetUtilization,
    CategoryTrend,
    FinancialReport,
    HeatmapDay,
    MonthlyFlowPoint,
    ProjectedBill,
    SubscriptionMetrics,
    SummaryStats,
)
from findash.models.snapshot import OwnerSnapshot


class Dashboard(BaseModel):
    """Every report for one owner as of ``as_of``."""
    model_config = ConfigDict(frozen=True)

    owner_id: str
    as_of: date
    summary: SummaryStats
    report: FinancialReport
    monthly_flow: list[MonthlyFlowPoint]
    category_breakdown: dict[str, Decimal]
    category_trend: CategoryTrend
    balance_history: list[BalancePoint]
    expense_heatmap: list[HeatmapDay]
    budgets: list[BudgetUtilization]
    subscriptions: list[ProjectedBill]
    subscription_metrics: SubscriptionMetrics
    upcoming_bills: list[ProjectedBill]


def build_dashboard(
    snapshot: OwnerSnapshot,
    today: date,
    settings: Optional[EngineSettings] = None,
) -> Dashboard:
    settings = settings or get_settings().engine
    transactions = snapshot.transactions

    return Dashboard(
        owner_id=snapshot.owner_id,
        as_of=today,
        summary=compute_summary(transactions),
        report=compute_monthly_report(transactions, today),
        monthly_flow=compute_monthly_flow(
            transactions, today, months=settings.monthly_flow_months
        ),
        category_breakdown=compute_category_breakdown(transactions),
        category_trend=compute_category_trend(
            transactions, top_n=settings.trend_top_n
        ),
        balance_history=compute_balance_history(
            transactions, today, window_days=settings.balance_window_days
        ),
        expense_heatmap=compute_expense_heatmap(
            transactions, today, window_days=settings.heatmap_window_days
        ),
        budgets=evaluate_budgets(transactions, snapshot.budgets, today),
        subscriptions=project_subscriptions(
            transactions, today, due_soon_days=settings.due_soon_days
        ),
        subscription_metrics=compute_subscription_metrics(transactions),
        upcoming_bills=upcoming_bills(
            transactions,
            today,
            limit=settings.upcoming_bills_limit,
            due_soon_days=settings.due_soon_days,
        ),
    )
