"""
Sales Tracker - Main Orchestrator

Coordinates sale entry and reporting through discrete, testable steps:
1. Validate Input
2. Resolve Commission (against pre-sale cumulative volume)
3. Compute FDI Points and Cost
4. Freeze and Persist the Record
5. Aggregate Daily / Monthly Reports on demand
"""

import logging
import re
from datetime import date
from decimal import Decimal
from typing import Any, Callable, Dict, Optional

from .calculators import CommissionResolver, DailyAggregator, FdiCalculator, MonthlyAggregator
from .errors import NotFoundError, PersistenceError, ValidationError
from .models import (
    NO_MANAGER, NO_SALE, CommissionQuote, CommissionTier, DailyMetric,
    MonthlyReport, MonthlyTotals, Project, SaleEntry, SaleRecord, to_decimal,
    to_optional_int
)
from .output import OutputBuilder
from .storage import InMemoryStorage, ReportStore, utc_now
from .tiers import DEFAULT_COMMISSION_TIERS, CommissionTierStore, default_tiers
from .validators import InputValidator

logger = logging.getLogger(__name__)

SAVED_REPORTS_PATH = "/reports/saved"


def slugify(name: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")
    return slug or "report"


class SalesTracker:
    """
    Main orchestrator for the single-user sales dashboard.

    Commission and FDI figures are computed once, when a sale is entered,
    and stored with the record. Reports are recomputed from the stored
    records on every call and never cached.
    """

    def __init__(
        self,
        storage: Optional[InMemoryStorage] = None,
        report_store: Optional[ReportStore] = None,
        resolver: Optional[CommissionResolver] = None,
        fdi_calculator: Optional[FdiCalculator] = None,
        today: Callable[[], date] = date.today,
        default_schedule=DEFAULT_COMMISSION_TIERS
    ):
        self.storage = storage if storage is not None else InMemoryStorage()
        self.report_store = report_store if report_store is not None else ReportStore()
        self.validator = InputValidator()
        self.resolver = resolver or CommissionResolver()
        self.fdi_calculator = fdi_calculator or FdiCalculator()
        self.daily_aggregator = DailyAggregator()
        self.monthly_aggregator = MonthlyAggregator(self.daily_aggregator)
        self.tier_store = CommissionTierStore(self.storage, self.validator)
        self.output_builder = OutputBuilder()
        self.today = today
        self.default_schedule = default_schedule

    # =========================================================================
    # PROJECTS
    # =========================================================================

    def current_project(self) -> Project:
        """The active project, created on first access if none exists."""
        projects = self.storage.list_projects()
        if projects:
            return projects[0]
        return self.create_project(self.today().strftime("%B %Y"))

    def create_project(self, name: str) -> Project:
        """Create a project seeded with its own copy of the default tiers."""
        now = utc_now()
        project = Project(
            id=None,
            name=name,
            created_at=now,
            updated_at=now,
            commission_tiers=default_tiers(self.default_schedule)
        )

        project_id = self.storage.add_project(project)
        logger.info(f"Created project {project_id}: {name}")
        return self.get_project(project_id)

    def get_project(self, project_id: int) -> Project:
        project = self.storage.get_project(project_id)
        if project is None:
            raise NotFoundError(f"Project not found: {project_id}")
        return project

    def clear_all_data(self) -> Project:
        """Wipe every project and sale, then start a fresh current project."""
        self.storage.clear()
        return self.current_project()

    def _resolve_project_id(self, project_id: Optional[int]) -> int:
        if project_id is None:
            return self.current_project().id
        return self.get_project(project_id).id

    # =========================================================================
    # TIERS
    # =========================================================================

    def get_tiers(self, project_id: Optional[int] = None) -> list[CommissionTier]:
        return self.tier_store.get_tiers(self._resolve_project_id(project_id))

    def update_tier(self, tier: CommissionTier, project_id: Optional[int] = None) -> list[CommissionTier]:
        return self.tier_store.update_tier(self._resolve_project_id(project_id), tier)

    def current_tier(self, project_id: Optional[int] = None) -> Optional[CommissionTier]:
        """Tier containing the project's current cumulative volume."""
        project_id = self._resolve_project_id(project_id)
        return self.resolver.find_tier(self.cumulative_volume(project_id), self.get_tiers(project_id))

    # =========================================================================
    # SALE ENTRY
    # =========================================================================

    def cumulative_volume(self, project_id: int, before_sale_id: Optional[int] = None) -> Decimal:
        """
        Sum of active (non-cancelled, non-no-sale) sale amounts so far.

        With before_sale_id, only sales recorded ahead of that sale count.
        """
        return sum(
            (
                sale.sale_amount for sale in self.storage.list_sales(project_id)
                if sale.is_active and (before_sale_id is None or sale.id < before_sale_id)
            ),
            Decimal('0')
        )

    def quote(self, entry: SaleEntry, project_id: Optional[int] = None) -> CommissionQuote:
        """Preview the commission a sale would receive, without saving it."""
        self.validator.validate_entry(entry, require_client_name=False)
        if entry.is_no_sale:
            return CommissionQuote()

        project_id = self._resolve_project_id(project_id)
        return self.resolver.quote(
            entry.sale_amount,
            self.cumulative_volume(project_id),
            entry.sale_type,
            self.get_tiers(project_id)
        )

    def fdi_for(self, entry: SaleEntry) -> tuple[Decimal, Decimal]:
        """(points available, cost of points given) for an entry; zero for no-sales."""
        if entry.is_no_sale:
            return Decimal('0'), Decimal('0')
        points = self.fdi_calculator.available_points(entry.sale_amount)
        return points, self.fdi_calculator.point_cost(entry.fdi_given_points, points)

    def record_sale(self, entry: SaleEntry, project_id: Optional[int] = None) -> SaleRecord:
        """
        Validate, price and persist a sale entry.

        Commission percentage and amount are frozen on the record; later
        tier edits or sales never change them.
        """
        self.validator.validate_entry(entry)
        project_id = self._resolve_project_id(project_id)

        if entry.is_no_sale:
            record = self._build_no_sale_record(entry, project_id)
        else:
            record = self._build_sale_record(entry, project_id)

        try:
            record.id = self.storage.save_sale(record)
        except PersistenceError as e:
            logger.error(f"Failed to save sale for project {project_id}: {str(e)}")
            raise

        logger.info(
            f"Recorded sale {record.id} ({record.client_last_name}) for project {project_id}: "
            f"{record.sale_amount} at {record.commission_percentage}%"
        )
        return record

    def record_sale_from_dict(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Record a sale from raw dictionary input.

        Convenience method for API usage.
        """
        record = self.record_sale(
            SaleEntry.from_dict(data),
            to_optional_int(data.get("project_id"), "project_id")
        )
        return self.output_builder.sale_record(record)

    def cancel_sale(self, sale_id: int) -> SaleRecord:
        """Mark a sale cancelled. Its frozen commission figures are kept."""
        sale = self.storage.get_sale(sale_id)
        if sale is None:
            raise NotFoundError(f"Sale not found: {sale_id}")

        sale.is_cancelled = True
        self.storage.save_sale(sale)
        logger.info(f"Cancelled sale {sale_id}")
        return sale

    def update_sale(self, sale_id: int, entry: SaleEntry) -> SaleRecord:
        """
        Replace a recorded sale with edited values and re-price it.

        The sale keeps its id and project. Commission is resolved against the
        volume of the sales recorded before it, as it was on first entry.
        """
        existing = self.storage.get_sale(sale_id)
        if existing is None:
            raise NotFoundError(f"Sale not found: {sale_id}")

        self.validator.validate_entry(entry)
        project_id = existing.project_id

        if entry.is_no_sale:
            record = self._build_no_sale_record(entry, project_id)
        else:
            record = self._build_sale_record(
                entry, project_id, self.cumulative_volume(project_id, before_sale_id=sale_id)
            )
        record.id = sale_id

        try:
            self.storage.save_sale(record)
        except PersistenceError as e:
            logger.error(f"Failed to update sale {sale_id}: {str(e)}")
            raise

        logger.info(
            f"Updated sale {sale_id} ({record.client_last_name}): "
            f"{record.sale_amount} at {record.commission_percentage}%"
        )
        return record

    def update_sale_from_dict(self, sale_id: int, data: Dict[str, Any]) -> Dict[str, Any]:
        """Edit a sale from raw dictionary input."""
        record = self.update_sale(sale_id, SaleEntry.from_dict(data))
        return self.output_builder.sale_record(record)

    def list_sales(self, project_id: Optional[int] = None) -> list[SaleRecord]:
        return self.storage.list_sales(self._resolve_project_id(project_id))

    def _build_sale_record(
        self, entry: SaleEntry, project_id: int, volume: Optional[Decimal] = None
    ) -> SaleRecord:
        if volume is None:
            volume = self.cumulative_volume(project_id)
        quote = self.resolver.quote(
            entry.sale_amount,
            volume,
            entry.sale_type,
            self.get_tiers(project_id)
        )
        fdi_points, fdi_cost = self.fdi_for(entry)

        return SaleRecord(
            id=None,
            project_id=project_id,
            date=entry.date,
            client_last_name=entry.client_last_name.strip(),
            sale_amount=entry.sale_amount,
            sale_type=entry.sale_type,
            commission_percentage=quote.total_percentage,
            commission_amount=quote.commission_amount,
            number_of_tours=entry.number_of_tours,
            is_cancelled=entry.is_cancelled,
            fdi_points=fdi_points,
            fdi_given_points=entry.fdi_given_points,
            fdi_cost=fdi_cost,
            lead_number=entry.lead_number,
            manager_name=entry.manager_name,
            notes=entry.notes
        )

    def _build_no_sale_record(self, entry: SaleEntry, project_id: int) -> SaleRecord:
        """No-sale tours only count toward tour totals; money fields are forced to zero."""
        return SaleRecord(
            id=None,
            project_id=project_id,
            date=entry.date,
            client_last_name=NO_SALE,
            sale_amount=Decimal('0'),
            sale_type=entry.sale_type,
            commission_percentage=Decimal('0'),
            commission_amount=Decimal('0'),
            number_of_tours=entry.number_of_tours,
            is_cancelled=entry.is_cancelled,
            lead_number=entry.lead_number,
            manager_name=NO_MANAGER,
            notes=entry.notes
        )

    # =========================================================================
    # REPORTS
    # =========================================================================

    def daily_report(self, project_id: Optional[int] = None) -> list[DailyMetric]:
        """One metric per day from the first to the last sale date."""
        return self.daily_aggregator.aggregate(self.list_sales(project_id))

    def monthly_totals(self, project_id: Optional[int] = None) -> dict[str, MonthlyTotals]:
        return self.monthly_aggregator.aggregate(self.daily_report(project_id))

    def monthly_report(self, year: int, month: int, project_id: Optional[int] = None) -> MonthlyReport:
        """Every day of the month, including days without entries."""
        return self.monthly_aggregator.build_report(self.list_sales(project_id), year, month)

    def save_report(self, name: str, report: MonthlyReport) -> dict:
        """Store a JSON snapshot of a monthly report in the report store."""
        path = f"{SAVED_REPORTS_PATH}/{slugify(name)}-{report.month_key}"
        content = {
            "name": name,
            "metadata": {
                "total_sales": report.totals.total_sales,
                "total_volume": self.output_builder.to_money(report.totals.total_volume),
            },
            "report": self.output_builder.monthly_report(report),
        }

        stored = self.report_store.put(path, content)
        logger.info(f"Saved report '{name}' to {path}")
        return stored

    def recent_reports(self, limit: int = 4) -> list[dict]:
        """Newest saved report snapshots first."""
        reports = [
            stored for stored in self.report_store.list_files(SAVED_REPORTS_PATH)
            if stored["type"] == "file"
        ]
        reports.sort(key=lambda stored: (stored["created_at"], stored["sequence"]), reverse=True)

        return [
            {
                "name": stored["content"]["name"],
                "path": stored["path"],
                "created_at": stored["created_at"],
                "metadata": stored["content"]["metadata"],
            }
            for stored in reports[:limit]
        ]

    def get_report(self, path: str) -> dict:
        stored = self.report_store.get(path)
        if stored is None:
            raise NotFoundError(f"Report not found: {path}")
        return stored["content"]


# =============================================================================
# CONVENIENCE FUNCTIONS (stateless)
# =============================================================================

def quote_commission_from_dict(input_data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Quote a sale from a raw dict without any stored project.

    Expects sale_amount, cumulative_volume and sale_type; tiers default to
    the standard schedule when omitted.
    """
    validator = InputValidator()
    entry = SaleEntry.from_dict({**input_data, "date": input_data.get("date", date.today().isoformat())})
    validator.validate_entry(entry, require_client_name=False)

    cumulative_volume = to_decimal(input_data.get("cumulative_volume"), "cumulative_volume")
    if not cumulative_volume.is_finite() or cumulative_volume < 0:
        raise ValidationError(f"cumulative_volume must be a non-negative number, got: {cumulative_volume}")

    if "tiers" in input_data:
        tiers = [CommissionTier.from_dict(t) for t in input_data["tiers"]]
        validator.validate_tiers(tiers)
    else:
        tiers = default_tiers()

    tracker = SalesTracker()
    output = tracker.output_builder
    if entry.is_no_sale:
        quote = CommissionQuote()
    else:
        quote = tracker.resolver.quote(entry.sale_amount, cumulative_volume, entry.sale_type, tiers)
    fdi_points, fdi_cost = tracker.fdi_for(entry)

    result = output.quote(quote)
    result["sale_amount"] = output.to_money(entry.sale_amount if not entry.is_no_sale else Decimal('0'))
    result["cumulative_volume"] = output.to_money(cumulative_volume)
    result["fdi_points"] = float(fdi_points)
    result["fdi_cost"] = output.to_money(fdi_cost)
    return result
