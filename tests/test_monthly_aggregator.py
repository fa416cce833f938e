"""
Unit Tests for Monthly Aggregator

Tests verify month grouping, the month-day grid, and that VPG is
recomputed from summed totals rather than averaged.
"""

import pytest
from datetime import date
from decimal import Decimal
from salesboard.calculators.daily import DailyAggregator
from salesboard.calculators.monthly import MonthlyAggregator, month_days
from salesboard.models import DailyMetric, SaleRecord


def make_sale(day, amount, tours, commission='0'):
    return SaleRecord(
        id=None,
        project_id=1,
        date=day,
        client_last_name="Jones",
        sale_amount=Decimal(str(amount)),
        sale_type="DEED",
        commission_percentage=Decimal('4'),
        commission_amount=Decimal(commission),
        number_of_tours=tours
    )


class TestMonthlyTotals:
    """Grouping and summing daily metrics by year-month."""

    @pytest.fixture
    def aggregator(self):
        return MonthlyAggregator()

    def test_vpg_is_summed_totals_not_average_of_daily(self, aggregator):
        """Tours 1 and 9: averaging daily VPGs would give 455.56, not 100."""
        daily = DailyAggregator().aggregate([
            make_sale(date(2026, 6, 1), 900, 1),
            make_sale(date(2026, 6, 2), 100, 9),
        ])
        totals = aggregator.aggregate(daily)["2026-06"]

        average_of_daily = sum(m.daily_vpg for m in daily) / len(daily)

        assert totals.total_volume == Decimal('1000')
        assert totals.total_tours == 10
        assert totals.vpg == Decimal('100')
        assert totals.vpg != average_of_daily

    def test_groups_by_month_in_chronological_order(self, aggregator):
        daily = [
            DailyMetric(date=date(2026, 7, 2), total_sales=1, total_volume=Decimal('30000'), total_tours=3),
            DailyMetric(date=date(2026, 6, 30), total_sales=2, total_volume=Decimal('50000'), total_tours=5),
            DailyMetric(date=date(2026, 6, 1), total_sales=1, total_volume=Decimal('10000'), total_tours=5),
        ]
        result = aggregator.aggregate(daily)

        assert list(result) == ["2026-06", "2026-07"]
        assert result["2026-06"].total_sales == 3
        assert result["2026-06"].total_volume == Decimal('60000')
        assert result["2026-06"].vpg == Decimal('6000')
        assert result["2026-07"].vpg == Decimal('10000')

    def test_zero_tours_gives_zero_vpg(self, aggregator):
        daily = [DailyMetric(date=date(2026, 6, 1), total_sales=1, total_volume=Decimal('500'))]
        assert aggregator.aggregate(daily)["2026-06"].vpg == Decimal('0')

    def test_empty_input(self, aggregator):
        assert aggregator.aggregate([]) == {}

    def test_thirty_day_grid_with_two_active_days(self, aggregator):
        sales = [
            make_sale(date(2026, 9, 5), 20000, 2, commission='1000.00'),
            make_sale(date(2026, 9, 20), 60000, 4, commission='3600.00'),
        ]
        daily = DailyAggregator().aggregate(sales, days=month_days(2026, 9))
        result = aggregator.aggregate(daily)

        assert len(daily) == 30
        assert list(result) == ["2026-09"]
        totals = result["2026-09"]
        assert totals.total_sales == 2
        assert totals.total_volume == Decimal('80000')
        assert totals.total_commission == Decimal('4600.00')
        assert totals.total_tours == 6
        assert totals.vpg == Decimal('80000') / Decimal('6')


class TestMonthlyReport:
    """Full month-day grid report."""

    @pytest.fixture
    def aggregator(self):
        return MonthlyAggregator()

    def test_every_day_of_month_present(self, aggregator):
        report = aggregator.build_report([make_sale(date(2026, 2, 14), 25000, 2)], 2026, 2)

        assert len(report.days) == 28
        assert report.days[0].date == date(2026, 2, 1)
        assert report.days[0].is_first_of_month
        assert report.days[-1].date == date(2026, 2, 28)
        assert report.totals.total_volume == Decimal('25000')
        assert report.totals.vpg == Decimal('12500')

    def test_sales_from_other_months_are_ignored(self, aggregator):
        sales = [
            make_sale(date(2026, 1, 31), 10000, 1),
            make_sale(date(2026, 2, 1), 30000, 3),
            make_sale(date(2026, 3, 1), 50000, 5),
        ]
        report = aggregator.build_report(sales, 2026, 2)

        assert report.totals.total_volume == Decimal('30000')
        assert report.totals.total_tours == 3

    def test_title_and_key(self, aggregator):
        report = aggregator.build_report([], 2026, 10)

        assert report.title == "October 2026"
        assert report.month_key == "2026-10"
        assert report.totals.total_sales == 0

    def test_leap_february(self):
        assert len(month_days(2028, 2)) == 29
        assert len(month_days(2026, 12)) == 31
