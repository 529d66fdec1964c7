"""
Report View Models

Everything the engine returns to the presentation layer. These are frozen
values computed from a snapshot and a reference date; recomputing is the
only way to get fresh numbers.

Money is Decimal. Ratios (intensity, percentage) are float because they are
only ever displayed or compared, never summed back into money.
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from findash.models.ledger import (
    Frequency,
    Transaction,
    TransactionFields,
)
from findash.errors import ErrorKind


ZERO = Decimal("0")


class ReportModel(BaseModel):
    model_config = ConfigDict(frozen=True)


# =============================================================================
# AGGREGATION
# =============================================================================

class SummaryStats(ReportModel):
    """All-time totals."""
    total_income: Decimal = ZERO
    total_expenses: Decimal = ZERO
    total_balance: Decimal = ZERO


class MonthlyStats(ReportModel):
    """Totals for one calendar month."""
    income: Decimal = ZERO
    expenses: Decimal = ZERO
    balance: Decimal = ZERO


class FinancialReport(ReportModel):
    """
    Month-over-month report.

    ``previous_closing_balance`` is the running balance as of the first day
    of the current month, not the previous month's net.
    """
    current_month: MonthlyStats
    previous_month: MonthlyStats
    total_balance: Decimal
    previous_closing_balance: Decimal


class MonthlyFlowPoint(ReportModel):
    """Income and expense of one month (``YYYY-MM``)."""
    month_key: str
    income: Decimal = ZERO
    expense: Decimal = ZERO


class CategoryTrendRow(ReportModel):
    month_key: str
    amounts: dict[str, Decimal] = Field(default_factory=dict)


class CategoryTrend(ReportModel):
    """
    Top expense categories month by month.

    ``series`` lists the selected categories in rank order, followed by the
    synthetic ``Other`` bucket when it is non-empty.
    """
    series: list[str] = Field(default_factory=list)
    rows: list[CategoryTrendRow] = Field(default_factory=list)


class BalancePoint(ReportModel):
    date: date
    balance: Decimal


class HeatmapDay(ReportModel):
    date: date
    amount: Decimal
    intensity: float = Field(ge=0.0, le=1.0)


# =============================================================================
# RECURRENCE
# =============================================================================

class ProjectedBill(ReportModel):
    """A recurring expense with its next projected occurrence."""
    transaction: Transaction
    frequency: Frequency
    next_due_date: date
    days_until: int
    is_due_soon: bool


class SubscriptionMetrics(ReportModel):
    """Recurring expenses normalized to a month (weekly counts four times)."""
    monthly_fixed: Decimal = ZERO
    annual_projected: Decimal = ZERO
    subscription_count: int = 0


# =============================================================================
# BUDGETS
# =============================================================================

class BudgetUtilization(ReportModel):
    """
    Spend against limit for one category in the current month.

    ``percentage`` is 0 whenever no positive limit is configured, however
    much was spent.
    """
    category: str
    spent: Decimal
    limit: Decimal
    percentage: float


# =============================================================================
# RECONCILIATION
# =============================================================================

class CandidateClassification(ReportModel):
    candidate: TransactionFields
    is_duplicate: bool
    matched_transaction_id: Optional[str] = None


class ImportFailure(ReportModel):
    candidate: TransactionFields
    error_kind: ErrorKind
    message: str


class ReconciliationResult(ReportModel):
    """Outcome of merging one candidate batch into the ledger."""
    imported: list[Transaction] = Field(default_factory=list)
    skipped: list[TransactionFields] = Field(default_factory=list)
    failed: list[ImportFailure] = Field(default_factory=list)

    @property
    def imported_count(self) -> int:
        return len(self.imported)

    @property
    def skipped_count(self) -> int:
        return len(self.skipped)

    @property
    def failed_count(self) -> int:
        return len(self.failed)


# =============================================================================
# QUERIES
# =============================================================================

class DayActivity(ReportModel):
    """Transactions of one calendar day, newest-created first."""
    income: Decimal = ZERO
    expense: Decimal = ZERO
    items: list[Transaction] = Field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.items)
