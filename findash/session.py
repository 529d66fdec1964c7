"""
Owner Session

Ties together the record store, validation, the engine and reconciliation
for one owner.

Flows:
1. Load: fetch transactions, budgets and categories into a snapshot
2. Mutate: validate -> change snapshot -> durable write -> commit or roll back
3. Query: hand the current snapshot to the pure engine functions
4. Import: reconcile a candidate batch, inserting new candidates one by one

DESIGN DECISION: The session is the only holder of mutable state, and that
state is a single reference to an immutable OwnerSnapshot. Queries never
see a half-applied change.
"""

import asyncio
from datetime import date
from decimal import Decimal
from typing import Optional, Sequence
from uuid import uuid4

from findash.activity import ActivityLogger
from findash.config import EngineSettings, get_settings
from findash.dashboard import Dashboard, build_dashboard
from findash.engine import (
    as_recurring,
    compute_balance_history,
    compute_category_breakdown,
    compute_category_trend,
    compute_expense_heatmap,
    compute_monthly_flow,
    compute_monthly_report,
    compute_subscription_metrics,
    compute_summary,
    conversion_candidates,
    evaluate_budgets,
    project_subscriptions,
    reconcile,
    upcoming_bills,
)
from findash.errors import (
    FinDashError,
    NotFoundError,
    PermissionOrMissingError,
    ValidationError,
)
from findash.models.ledger import (
    Budget,
    CategoryItem,
    Frequency,
    Transaction,
    TransactionFields,
    TransactionKind,
    utc_now,
)
from findash.models.reports import (
    BalancePoint,
    BudgetUtilization,
    CategoryTrend,
    DayActivity,
    FinancialReport,
    HeatmapDay,
    MonthlyFlowPoint,
    ProjectedBill,
    ReconciliationResult,
    SubscriptionMetrics,
    SummaryStats,
)
from findash.models.snapshot import OwnerSnapshot
from findash.optimistic import SnapshotHolder, apply_optimistically
from findash.queries import TransactionFilter, daily_activity
from findash.services.feed import SimulatedBankFeed
from findash.services.storage import RecordStoreInterface
from findash.validation import TransactionValidator


PENDING_PREFIX = "pending-"


def _provisional_id() -> str:
    return f"{PENDING_PREFIX}{uuid4()}"


class FinanceSession:
    """
    One owner's working set and every operation on it.

    Mutations raise the exceptions in ``findash.errors``; when one is raised
    after the local change was applied, the snapshot has already been
    restored.
    """

    def __init__(
        self,
        owner_id: str,
        store: RecordStoreInterface,
        validator: Optional[TransactionValidator] = None,
        settings: Optional[EngineSettings] = None,
        activity_logger: Optional[ActivityLogger] = None,
    ):
        self._owner_id = owner_id
        self._store = store
        self._validator = validator or TransactionValidator()
        self._settings = settings or get_settings().engine
        self._activity = (activity_logger or ActivityLogger()).bind(owner_id)
        self._holder = SnapshotHolder(OwnerSnapshot(owner_id=owner_id))

    @property
    def owner_id(self) -> str:
        return self._owner_id

    @property
    def snapshot(self) -> OwnerSnapshot:
        return self._holder.snapshot

    @property
    def transactions(self) -> tuple[Transaction, ...]:
        return self._holder.snapshot.transactions

    # =========================================================================
    # LOADING
    # =========================================================================

    async def load(self) -> OwnerSnapshot:
        """Replace the snapshot with the store's current contents."""
        try:
            transactions, budgets, categories = await asyncio.gather(
                self._store.list_transactions(self._owner_id),
                self._store.list_budgets(self._owner_id),
                self._store.list_categories(self._owner_id),
            )
        except FinDashError as e:
            self._activity.log_store_error("load", str(e))
            raise

        self._holder.snapshot = OwnerSnapshot(
            owner_id=self._owner_id,
            transactions=tuple(transactions),
            budgets=tuple(budgets),
            categories=tuple(categories),
        )
        return self._holder.snapshot

    # =========================================================================
    # MUTATIONS
    # =========================================================================

    def _rollback_logger(self, operation: str):
        def on_rollback(error: Exception) -> None:
            kind = error.kind.value if isinstance(error, FinDashError) else type(error).__name__
            self._activity.log_mutation_rolled_back(operation, kind, str(error))
        return on_rollback

    def _validated(self, fields: TransactionFields) -> TransactionFields:
        try:
            return self._validator.validate_or_raise(fields)
        except ValidationError as e:
            self._activity.log_validation_failed(
                "transaction", [issue.model_dump() for issue in e.issues]
            )
            raise

    async def add_transaction(self, fields: TransactionFields) -> Transaction:
        """Validate and store a new transaction; it shows up first in the list."""
        fields = self._validated(fields)
        provisional = Transaction(
            id=_provisional_id(),
            owner_id=self._owner_id,
            created_at=utc_now(),
            **fields.model_dump(),
        )

        stored = await apply_optimistically(
            self._holder,
            change=lambda s: s.with_transaction(provisional),
            write=lambda: self._store.create_transaction(self._owner_id, fields),
            commit=lambda s, created: s.replacing_transaction(provisional.id, created),
            on_rollback=self._rollback_logger("create_transaction"),
        )
        self._activity.log_transaction_created(stored.id, str(stored.amount), stored.kind.value)
        return stored

    async def update_transaction(
        self,
        transaction_id: str,
        fields: TransactionFields,
    ) -> Transaction:
        """Replace every editable field of an existing transaction."""
        existing = self._holder.snapshot.find_transaction(transaction_id)
        if existing is None:
            raise NotFoundError(f"Transaction not found: {transaction_id}")

        fields = self._validated(fields)
        local = existing.replaced_with(fields)

        stored = await apply_optimistically(
            self._holder,
            change=lambda s: s.replacing_transaction(transaction_id, local),
            write=lambda: self._store.update_transaction(
                self._owner_id, transaction_id, fields
            ),
            commit=lambda s, updated: s.replacing_transaction(transaction_id, updated),
            on_rollback=self._rollback_logger("update_transaction"),
        )
        self._activity.log_transaction_updated(transaction_id)
        return stored

    async def delete_transaction(self, transaction_id: str) -> None:
        """
        Delete a transaction.

        Raises:
            NotFoundError: If the snapshot holds no such transaction
            PermissionOrMissingError: If the store deleted nothing
        """
        transaction_id = transaction_id.strip()
        if self._holder.snapshot.find_transaction(transaction_id) is None:
            raise NotFoundError(f"Transaction not found: {transaction_id}")

        async def write() -> None:
            deleted = await self._store.delete_transaction(self._owner_id, transaction_id)
            if deleted == 0:
                self._activity.log_delete_blocked("transaction", transaction_id)
                raise PermissionOrMissingError("transaction", transaction_id)

        await apply_optimistically(
            self._holder,
            change=lambda s: s.without_transaction(transaction_id),
            write=write,
            on_rollback=self._rollback_logger("delete_transaction"),
        )
        self._activity.log_transaction_deleted(transaction_id)

    async def convert_to_recurring(
        self,
        transaction_id: str,
        frequency: Frequency,
    ) -> Transaction:
        """Mark an existing expense as a weekly or monthly subscription."""
        existing = self._holder.snapshot.find_transaction(transaction_id)
        if existing is None:
            raise NotFoundError(f"Transaction not found: {transaction_id}")
        return await self.update_transaction(transaction_id, as_recurring(existing, frequency))

    async def save_budget(self, category: str, amount: Decimal) -> Budget:
        """Set the monthly limit for ``category``, replacing any previous one."""
        amount = Decimal(str(amount))
        self._validator.validate_budget(category, amount)
        local = Budget(owner_id=self._owner_id, category=category, amount=amount)

        saved = await apply_optimistically(
            self._holder,
            change=lambda s: s.with_budget(local),
            write=lambda: self._store.upsert_budget(self._owner_id, local.category, amount),
            commit=lambda s, budget: s.with_budget(budget),
            on_rollback=self._rollback_logger("upsert_budget"),
        )
        self._activity.log_budget_saved(saved.category, str(saved.amount))
        return saved

    async def add_category(
        self,
        name: str,
        kind: TransactionKind,
        color: str,
    ) -> CategoryItem:
        self._validator.validate_category(name, color)
        provisional = CategoryItem(
            id=_provisional_id(),
            owner_id=self._owner_id,
            name=name,
            color=color,
            kind=kind,
        )

        added = await apply_optimistically(
            self._holder,
            change=lambda s: s.with_category(provisional),
            write=lambda: self._store.add_category(
                self._owner_id, provisional.name, kind, color
            ),
            commit=lambda s, category: s.replacing_category(provisional.id, category),
            on_rollback=self._rollback_logger("add_category"),
        )
        self._activity.log_category_added(added.id, added.name, added.kind.value)
        return added

    async def delete_category(self, category_id: str) -> None:
        """Remove a category. Transactions keep their category text."""
        if self._holder.snapshot.find_category(category_id) is None:
            raise NotFoundError(f"Category not found: {category_id}")

        async def write() -> None:
            deleted = await self._store.delete_category(self._owner_id, category_id)
            if deleted == 0:
                self._activity.log_delete_blocked("category", category_id)
                raise PermissionOrMissingError("category", category_id)

        await apply_optimistically(
            self._holder,
            change=lambda s: s.without_category(category_id),
            write=write,
            on_rollback=self._rollback_logger("delete_category"),
        )
        self._activity.log_category_deleted(category_id)

    # =========================================================================
    # IMPORTS
    # =========================================================================

    async def import_candidates(
        self,
        candidates: Sequence[TransactionFields],
    ) -> ReconciliationResult:
        """Insert the candidates that do not duplicate the current ledger."""
        return await reconcile(
            existing=self._holder.snapshot.transactions,
            candidates=candidates,
            insert=self.add_transaction,
            tolerance=self._settings.duplicate_tolerance,
            activity_logger=self._activity,
        )

    async def import_from_feed(
        self,
        bank_id: str,
        feed: SimulatedBankFeed,
        today: Optional[date] = None,
    ) -> ReconciliationResult:
        """Pull one batch from the simulated bank feed and reconcile it."""
        candidates = feed.fetch(bank_id, today or date.today())
        return await self.import_candidates(candidates)

    # =========================================================================
    # QUERIES
    # =========================================================================

    def summary(self) -> SummaryStats:
        return compute_summary(self.transactions)

    def monthly_report(self, today: Optional[date] = None) -> FinancialReport:
        return compute_monthly_report(self.transactions, today or date.today())

    def monthly_flow(self, today: Optional[date] = None) -> list[MonthlyFlowPoint]:
        return compute_monthly_flow(
            self.transactions,
            today or date.today(),
            months=self._settings.monthly_flow_months,
        )

    def category_breakdown(self) -> dict[str, Decimal]:
        return compute_category_breakdown(self.transactions)

    def category_trend(self) -> CategoryTrend:
        return compute_category_trend(self.transactions, top_n=self._settings.trend_top_n)

    def balance_history(self, today: Optional[date] = None) -> list[BalancePoint]:
        return compute_balance_history(
            self.transactions,
            today or date.today(),
            window_days=self._settings.balance_window_days,
        )

    def expense_heatmap(self, today: Optional[date] = None) -> list[HeatmapDay]:
        return compute_expense_heatmap(
            self.transactions,
            today or date.today(),
            window_days=self._settings.heatmap_window_days,
        )

    def budget_utilization(self, today: Optional[date] = None) -> list[BudgetUtilization]:
        return evaluate_budgets(
            self.transactions, self._holder.snapshot.budgets, today or date.today()
        )

    def subscriptions(self, today: Optional[date] = None) -> list[ProjectedBill]:
        return project_subscriptions(
            self.transactions,
            today or date.today(),
            due_soon_days=self._settings.due_soon_days,
        )

    def subscription_metrics(self) -> SubscriptionMetrics:
        return compute_subscription_metrics(self.transactions)

    def upcoming_bills(self, today: Optional[date] = None) -> list[ProjectedBill]:
        return upcoming_bills(
            self.transactions,
            today or date.today(),
            limit=self._settings.upcoming_bills_limit,
            due_soon_days=self._settings.due_soon_days,
        )

    def conversion_candidates(self) -> list[Transaction]:
        return conversion_candidates(
            self.transactions, limit=self._settings.conversion_candidates_limit
        )

    def categories_for(self, kind: TransactionKind) -> list[CategoryItem]:
        """Categories offered when entering a transaction of ``kind``."""
        return [c for c in self._holder.snapshot.categories if c.kind == kind]

    def filter_transactions(self, criteria: TransactionFilter) -> list[Transaction]:
        return criteria.apply(self.transactions)

    def daily_activity(self, year: int, month: int) -> dict[int, DayActivity]:
        return daily_activity(self.transactions, year, month)

    def dashboard(self, today: Optional[date] = None) -> Dashboard:
        return build_dashboard(self._holder.snapshot, today or date.today(), self._settings)
