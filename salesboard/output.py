"""
Output Builder

Converts engine results into JSON-ready dictionaries for the API layers.
"""

from decimal import Decimal
from typing import Optional

from .calculators.commission import quantize_money
from .models import (
    CommissionQuote, CommissionTier, DailyMetric, MonthlyReport,
    MonthlyTotals, Project, SaleRecord
)


class OutputBuilder:
    """Builds the API response structures."""

    @staticmethod
    def to_money(value: Decimal) -> float:
        """Convert Decimal to float with 2 decimal places."""
        return float(quantize_money(value))

    @staticmethod
    def to_rate(value: Decimal) -> float:
        return float(value)

    def tier(self, tier: Optional[CommissionTier]) -> Optional[dict]:
        if tier is None:
            return None
        return tier.to_dict()

    def project(self, project: Project) -> dict:
        return {
            "id": project.id,
            "name": project.name,
            "created_at": project.created_at,
            "updated_at": project.updated_at,
            "commission_tiers": [self.tier(t) for t in project.commission_tiers],
        }

    def quote(self, quote: CommissionQuote) -> dict:
        return {
            "base_rate": self.to_rate(quote.base_rate),
            "additional_rate": self.to_rate(quote.additional_rate),
            "sale_type_adjustment": self.to_rate(quote.sale_type_adjustment),
            "total_percentage": self.to_rate(quote.total_percentage),
            "commission_amount": self.to_money(quote.commission_amount),
            "matched_tier": self.tier(quote.matched_tier),
        }

    def sale_record(self, record: SaleRecord) -> dict:
        return {
            "id": record.id,
            "project_id": record.project_id,
            "date": record.date.isoformat(),
            "client_last_name": record.client_last_name,
            "lead_number": record.lead_number,
            "manager_name": record.manager_name,
            "sale_amount": self.to_money(record.sale_amount),
            "sale_type": record.sale_type,
            "commission_percentage": self.to_rate(record.commission_percentage),
            "commission_amount": self.to_money(record.commission_amount),
            "number_of_tours": record.number_of_tours,
            "is_cancelled": record.is_cancelled,
            "fdi_points": float(record.fdi_points),
            "fdi_given_points": float(record.fdi_given_points),
            "fdi_cost": self.to_money(record.fdi_cost),
            "notes": record.notes,
        }

    def daily_metric(self, metric: DailyMetric, include_entries: bool = True) -> dict:
        result = {
            "date": metric.date.isoformat(),
            "total_sales": metric.total_sales,
            "total_volume": self.to_money(metric.total_volume),
            "total_commission": self.to_money(metric.total_commission),
            "total_tours": metric.total_tours,
            "daily_vpg": self.to_money(metric.daily_vpg),
            "is_first_of_month": metric.is_first_of_month,
        }
        if include_entries:
            result["entries"] = [self.sale_record(sale) for sale in metric.entries]
        return result

    def monthly_totals(self, totals: MonthlyTotals) -> dict:
        return {
            "total_sales": totals.total_sales,
            "total_volume": self.to_money(totals.total_volume),
            "total_commission": self.to_money(totals.total_commission),
            "total_tours": totals.total_tours,
            "vpg": self.to_money(totals.vpg),
        }

    def monthly_totals_map(self, totals: dict[str, MonthlyTotals]) -> dict:
        return {key: self.monthly_totals(value) for key, value in totals.items()}

    def monthly_report(self, report: MonthlyReport) -> dict:
        return {
            "month": report.month_key,
            "title": report.title,
            "totals": self.monthly_totals(report.totals),
            "days": [self.daily_metric(day) for day in report.days],
        }
