"""
Daily Aggregator

Partitions sale records by calendar date and computes per-day totals.
"""

from datetime import date, timedelta
from decimal import Decimal

from ..models import DailyMetric, SaleRecord


def day_range(start: date, end: date) -> list[date]:
    """Every calendar day from start to end, inclusive."""
    return [start + timedelta(days=offset) for offset in range((end - start).days + 1)]


def volume_per_guest(total_volume: Decimal, total_tours: int) -> Decimal:
    if total_tours > 0:
        return total_volume / Decimal(total_tours)
    return Decimal('0')


class DailyAggregator:
    """Rolls raw sale records into one DailyMetric per calendar day."""

    def aggregate(self, sales: list[SaleRecord], days: list[date] | None = None) -> list[DailyMetric]:
        """
        Aggregate sales by day.

        With a caller-supplied day grid, exactly those days are reported (in
        chronological order) and sales outside the grid are ignored. Without
        one, the grid spans the earliest to the latest sale date.
        """
        by_date: dict[date, list[SaleRecord]] = {}
        for sale in sales:
            by_date.setdefault(sale.date, []).append(sale)

        if days is None:
            if not by_date:
                return []
            days = day_range(min(by_date), max(by_date))

        return [self.metric_for_day(day, by_date.get(day, [])) for day in sorted(set(days))]

    def metric_for_day(self, day: date, entries: list[SaleRecord]) -> DailyMetric:
        """
        Totals for a single day.

        Tours count every entry; volume, commission and sale count only
        include entries that are neither cancelled nor no-sale.
        """
        active = [sale for sale in entries if sale.is_active]

        total_volume = sum((sale.sale_amount for sale in active), Decimal('0'))
        total_tours = sum(sale.number_of_tours for sale in entries)

        return DailyMetric(
            date=day,
            total_sales=len(active),
            total_volume=total_volume,
            total_commission=sum((sale.commission_amount for sale in active), Decimal('0')),
            total_tours=total_tours,
            daily_vpg=volume_per_guest(total_volume, total_tours),
            is_first_of_month=day.day == 1,
            entries=list(entries)
        )
