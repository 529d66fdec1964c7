"""
Data Models Package

This package contains all Pydantic models used in FinDash.
All data flowing through the engine must conform to these schemas.
"""

from findash.models.ledger import (
    Budget,
    CategoryItem,
    Frequency,
    Transaction,
    TransactionFields,
    TransactionKind,
    ValidationIssue,
    ValidationResult,
)
from findash.models.reports import (
    BalancePoint,
    BudgetUtilization,
    CandidateClassification,
    CategoryTrend,
    CategoryTrendRow,
    DayActivity,
    FinancialReport,
    HeatmapDay,
    ImportFailure,
    MonthlyFlowPoint,
    MonthlyStats,
    ProjectedBill,
    ReconciliationResult,
    SubscriptionMetrics,
    SummaryStats,
)
from findash.models.snapshot import OwnerSnapshot

__all__ = [
    # Ledger models
    "Budget",
    "CategoryItem",
    "Frequency",
    "Transaction",
    "TransactionFields",
    "TransactionKind",
    "ValidationIssue",
    "ValidationResult",
    # Snapshot
    "OwnerSnapshot",
    # Report models
    "BalancePoint",
    "BudgetUtilization",
    "CandidateClassification",
    "CategoryTrend",
    "CategoryTrendRow",
    "DayActivity",
    "FinancialReport",
    "HeatmapDay",
    "ImportFailure",
    "MonthlyFlowPoint",
    "MonthlyStats",
    "ProjectedBill",
    "ReconciliationResult",
    "SubscriptionMetrics",
    "SummaryStats",
]
