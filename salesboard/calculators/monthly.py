"""
Monthly Aggregator

Sums daily metrics into per-month totals and builds the full month-day
grid used by the monthly report.
"""

import calendar
from datetime import date
from decimal import Decimal

from ..models import DailyMetric, MonthlyReport, MonthlyTotals, SaleRecord
from .daily import DailyAggregator, day_range, volume_per_guest


def month_days(year: int, month: int) -> list[date]:
    """Every calendar day of the given month."""
    last_day = calendar.monthrange(year, month)[1]
    return day_range(date(year, month, 1), date(year, month, last_day))


def month_key(day: date) -> str:
    return f"{day.year:04d}-{day.month:02d}"


class MonthlyAggregator:
    """Rolls DailyMetric lists up to year-month totals."""

    def __init__(self, daily_aggregator: DailyAggregator | None = None):
        self.daily_aggregator = daily_aggregator or DailyAggregator()

    def aggregate(self, daily_metrics: list[DailyMetric]) -> dict[str, MonthlyTotals]:
        """
        Group daily metrics by "YYYY-MM" and sum them.

        VPG is recomputed from the summed volume and tours; averaging
        daily VPGs would over-weight low-tour days.
        """
        grouped: dict[str, list[DailyMetric]] = {}
        for metric in sorted(daily_metrics, key=lambda m: m.date):
            grouped.setdefault(month_key(metric.date), []).append(metric)

        return {key: self.totals(metrics) for key, metrics in grouped.items()}

    def totals(self, daily_metrics: list[DailyMetric]) -> MonthlyTotals:
        total_volume = sum((m.total_volume for m in daily_metrics), Decimal('0'))
        total_tours = sum(m.total_tours for m in daily_metrics)

        return MonthlyTotals(
            total_sales=sum(m.total_sales for m in daily_metrics),
            total_volume=total_volume,
            total_commission=sum((m.total_commission for m in daily_metrics), Decimal('0')),
            total_tours=total_tours,
            vpg=volume_per_guest(total_volume, total_tours)
        )

    def build_report(self, sales: list[SaleRecord], year: int, month: int) -> MonthlyReport:
        """Month-day grid report: every day of the month appears, active or not."""
        days = self.daily_aggregator.aggregate(sales, days=month_days(year, month))

        return MonthlyReport(
            year=year,
            month=month,
            title=date(year, month, 1).strftime("%B %Y"),
            days=days,
            totals=self.totals(days)
        )
