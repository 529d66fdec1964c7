"""Tests for the aggregation engine."""

from datetime import date, timedelta
from decimal import Decimal

from findash.engine.aggregation import (
    OTHER_SERIES,
    compute_balance_history,
    compute_category_breakdown,
    compute_category_trend,
    compute_expense_heatmap,
    compute_monthly_flow,
    compute_monthly_report,
    compute_summary,
    month_key,
    shift_month,
    week_start,
    weekday_index,
)
from findash.models.ledger import TransactionKind


INCOME = TransactionKind.INCOME


class TestCalendarHelpers:
    """Tests for month keys and Sunday-started weeks."""

    def test_month_key(self):
        assert month_key(date(2024, 3, 9)) == "2024-03"

    def test_shift_month_wraps_years(self):
        assert shift_month(2024, 1, -1) == (2023, 12)
        assert shift_month(2023, 12, 1) == (2024, 1)
        assert shift_month(2024, 5, -17) == (2022, 12)

    def test_weeks_start_on_sunday(self):
        sunday = date(2024, 1, 7)
        assert weekday_index(sunday) == 0
        assert weekday_index(date(2024, 1, 13)) == 6
        assert week_start(date(2024, 1, 10)) == sunday
        assert week_start(sunday) == sunday


class TestSummaryAndMonthlyReport:
    """Tests for totals and month-over-month comparison."""

    def test_summary_totals(self, make_transaction):
        transactions = [
            make_transaction(date(2023, 5, 1), 1000, kind=INCOME),
            make_transaction(date(2024, 1, 1), 250),
            make_transaction(date(2024, 1, 2), "49.99"),
        ]
        summary = compute_summary(transactions)
        assert summary.total_income == Decimal("1000")
        assert summary.total_expenses == Decimal("299.99")
        assert summary.total_balance == Decimal("700.01")

    def test_summary_of_nothing_is_zero(self):
        summary = compute_summary([])
        assert summary.total_balance == Decimal("0")

    def test_current_month_report(self, make_transaction):
        """One income and one expense in the current month."""
        transactions = [
            make_transaction(date(2024, 1, 5), 1000, kind=INCOME),
            make_transaction(date(2024, 1, 10), 200, category="Food"),
        ]
        report = compute_monthly_report(transactions, today=date(2024, 1, 15))

        assert report.current_month.income == Decimal("1000")
        assert report.current_month.expenses == Decimal("200")
        assert report.current_month.balance == Decimal("800")
        assert report.total_balance == Decimal("800")
        assert report.previous_closing_balance == Decimal("0")

    def test_previous_month_and_closing_balance(self, make_transaction):
        transactions = [
            make_transaction(date(2023, 11, 20), 300, kind=INCOME),
            make_transaction(date(2023, 12, 3), 500, kind=INCOME),
            make_transaction(date(2023, 12, 31), 120),
            make_transaction(date(2024, 1, 1), 80),
        ]
        report = compute_monthly_report(transactions, today=date(2024, 1, 15))

        assert report.previous_month.income == Decimal("500")
        assert report.previous_month.expenses == Decimal("120")
        assert report.previous_closing_balance == Decimal("680")
        assert report.total_balance == Decimal("600")

    def test_future_dated_entries_count_toward_total_only(self, make_transaction):
        transactions = [make_transaction(date(2024, 3, 1), 50)]
        report = compute_monthly_report(transactions, today=date(2024, 1, 15))
        assert report.current_month.expenses == Decimal("0")
        assert report.total_balance == Decimal("-50")


class TestMonthlyFlow:
    """Tests for the trailing monthly income/expense series."""

    def test_six_months_oldest_first(self, make_transaction):
        transactions = [
            make_transaction(date(2023, 10, 4), 100, kind=INCOME),
            make_transaction(date(2024, 3, 1), 40),
            make_transaction(date(2023, 9, 30), 999),
        ]
        flow = compute_monthly_flow(transactions, today=date(2024, 3, 10))

        assert [p.month_key for p in flow] == [
            "2023-10", "2023-11", "2023-12", "2024-01", "2024-02", "2024-03",
        ]
        assert flow[0].income == Decimal("100")
        assert flow[-1].expense == Decimal("40")
        assert sum(p.expense for p in flow) == Decimal("40")

    def test_empty_months_are_zero(self):
        flow = compute_monthly_flow([], today=date(2024, 3, 10), months=3)
        assert len(flow) == 3
        assert all(p.income == 0 and p.expense == 0 for p in flow)


class TestCategories:
    """Tests for category breakdown and trend."""

    def test_breakdown_ignores_income(self, make_transaction):
        transactions = [
            make_transaction(date(2024, 1, 1), 30, category="Food"),
            make_transaction(date(2024, 1, 2), 20, category="Transport"),
            make_transaction(date(2024, 1, 3), 15, category="Food"),
            make_transaction(date(2024, 1, 4), 900, kind=INCOME, category="Salary"),
        ]
        breakdown = compute_category_breakdown(transactions)
        assert breakdown == {"Food": Decimal("45"), "Transport": Decimal("20")}

    def test_trend_of_no_expenses_is_empty(self, make_transaction):
        trend = compute_category_trend(
            [make_transaction(date(2024, 1, 1), 10, kind=INCOME)]
        )
        assert trend.series == []
        assert trend.rows == []

    def test_trend_buckets_remaining_categories_into_other(self, make_transaction):
        names = ["A", "B", "C", "D", "E", "F", "G"]
        transactions = [
            make_transaction(date(2024, 1, 1), 100 - i * 10, category=name)
            for i, name in enumerate(names)
        ]
        transactions.append(make_transaction(date(2024, 2, 1), 5, category="G"))

        trend = compute_category_trend(transactions, top_n=5)

        assert trend.series == ["A", "B", "C", "D", "E", OTHER_SERIES]
        assert [row.month_key for row in trend.rows] == ["2024-01", "2024-02"]
        january, february = trend.rows
        assert january.amounts[OTHER_SERIES] == Decimal("90")
        assert february.amounts[OTHER_SERIES] == Decimal("5")
        assert february.amounts["A"] == Decimal("0")

    def test_trend_conserves_expense_total(self, make_transaction):
        transactions = [
            make_transaction(date(2024, m, 1), m * 7, category=f"Cat{m % 8}")
            for m in range(1, 13)
        ]
        trend = compute_category_trend(transactions, top_n=3)

        assert len(trend.series) <= 4
        for row in trend.rows:
            assert set(row.amounts) == set(trend.series)
        total = sum(sum(row.amounts.values()) for row in trend.rows)
        assert total == sum(t.amount for t in transactions)

    def test_trend_without_leftovers_has_no_other(self, make_transaction):
        transactions = [
            make_transaction(date(2024, 1, 1), 10, category="Food"),
            make_transaction(date(2024, 1, 2), 20, category="Transport"),
        ]
        trend = compute_category_trend(transactions, top_n=5)
        assert trend.series == ["Transport", "Food"]

    def test_trend_ties_keep_first_seen_order(self, make_transaction):
        transactions = [
            make_transaction(date(2024, 1, 1), 10, category="Food"),
            make_transaction(date(2024, 1, 2), 10, category="Transport"),
            make_transaction(date(2024, 1, 3), 10, category="Health"),
        ]
        trend = compute_category_trend(transactions, top_n=2)
        assert trend.series == ["Food", "Transport", OTHER_SERIES]

    def test_real_other_category_folds_into_other_series(self, make_transaction):
        transactions = [
            make_transaction(date(2024, 1, 1), 500, category="Other"),
            make_transaction(date(2024, 1, 2), 10, category="Food"),
        ]
        trend = compute_category_trend(transactions, top_n=5)
        assert trend.series == ["Food", OTHER_SERIES]
        assert trend.rows[0].amounts[OTHER_SERIES] == Decimal("500")


class TestBalanceHistory:
    """Tests for the gap-filled running balance."""

    def test_empty_history(self):
        assert compute_balance_history([], today=date(2024, 1, 13)) == []

    def test_carries_balance_forward(self, make_transaction):
        transactions = [
            make_transaction(date(2024, 1, 5), 30),
            make_transaction(date(2024, 1, 3), 100, kind=INCOME),
        ]
        history = compute_balance_history(transactions, today=date(2024, 1, 13))

        # 2024-01-03 is a Wednesday, so the grid opens on Sunday 2023-12-31
        assert history[0].date == date(2023, 12, 31)
        assert history[-1].date == date(2024, 1, 13)
        assert len(history) == 14

        by_day = {point.date: point.balance for point in history}
        assert by_day[date(2024, 1, 2)] == Decimal("0")
        assert by_day[date(2024, 1, 3)] == Decimal("100")
        assert by_day[date(2024, 1, 4)] == Decimal("100")
        assert by_day[date(2024, 1, 5)] == Decimal("70")
        assert by_day[date(2024, 1, 13)] == Decimal("70")

    def test_window_opens_with_earlier_balance(self, make_transaction):
        transactions = [
            make_transaction(date(2023, 1, 1), 50, kind=INCOME),
            make_transaction(date(2024, 1, 10), 20),
        ]
        history = compute_balance_history(
            transactions, today=date(2024, 1, 13), window_days=7
        )

        assert history[0].date == date(2023, 12, 31)
        assert history[0].balance == Decimal("50")
        assert history[-1].balance == Decimal("30")

    def test_consecutive_days(self, make_transaction):
        transactions = [make_transaction(date(2023, 6, 1), 10, kind=INCOME)]
        history = compute_balance_history(transactions, today=date(2024, 1, 13))
        for earlier, later in zip(history, history[1:]):
            assert later.date - earlier.date == timedelta(days=1)


class TestExpenseHeatmap:
    """Tests for the whole-week daily expense grid."""

    def test_grid_covers_whole_weeks(self):
        heatmap = compute_expense_heatmap([], today=date(2024, 1, 10))
        assert weekday_index(heatmap[0].date) == 0
        assert weekday_index(heatmap[-1].date) == 6
        assert len(heatmap) % 7 == 0
        assert heatmap[-1].date == date(2024, 1, 13)
        assert all(day.intensity == 0.0 for day in heatmap)

    def test_intensity_relative_to_peak(self, make_transaction):
        transactions = [
            make_transaction(date(2024, 1, 8), 25),
            make_transaction(date(2024, 1, 8), 15),
            make_transaction(date(2024, 1, 9), 20),
            make_transaction(date(2024, 1, 9), 500, kind=INCOME),
        ]
        heatmap = compute_expense_heatmap(
            transactions, today=date(2024, 1, 10), window_days=7
        )
        by_day = {day.date: day for day in heatmap}

        assert len(heatmap) == 14
        assert by_day[date(2024, 1, 8)].amount == Decimal("40")
        assert by_day[date(2024, 1, 8)].intensity == 1.0
        assert by_day[date(2024, 1, 9)].intensity == 0.5
        assert all(0.0 <= day.intensity <= 1.0 for day in heatmap)

    def test_expenses_outside_grid_ignored(self, make_transaction):
        transactions = [make_transaction(date(2023, 1, 1), 1000)]
        heatmap = compute_expense_heatmap(
            transactions, today=date(2024, 1, 10), window_days=7
        )
        assert all(day.amount == 0 for day in heatmap)
