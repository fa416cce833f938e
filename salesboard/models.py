"""
Domain Models for the Salesboard commission engine

These dataclasses provide type-safe representations of sale entries,
commission tiers, projects and the derived report structures.
All monetary values use Decimal for precision.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation

from .errors import ValidationError

NO_SALE = "NO SALE"
NO_MANAGER = "-"

SALE_TYPE_DEED = "DEED"
SALE_TYPE_TRUST = "TRUST"
SALE_TYPES = (SALE_TYPE_DEED, SALE_TYPE_TRUST)


def to_decimal(value, name: str = "value") -> Decimal:
    if value is None or value == "":
        return Decimal("0")
    try:
        return Decimal(str(value))
    except InvalidOperation:
        raise ValidationError(f"{name} must be a number, got: {value!r}") from None


def to_date(value) -> date:
    """Calendar date only; any time of day is dropped."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        raise ValidationError(f"date must be an ISO calendar date (YYYY-MM-DD), got: {value!r}") from None


def to_optional_int(value, name: str = "value") -> int | None:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValidationError(f"{name} must be an integer, got: {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{name} must be an integer, got: {value!r}") from None


# =============================================================================
# INPUT MODELS
# =============================================================================


@dataclass
class CommissionTier:
    """A cumulative-volume bracket carrying an additional commission percentage."""

    level: int
    min_amount: Decimal
    max_amount: Decimal
    additional_commission: Decimal

    def contains(self, volume: Decimal) -> bool:
        return self.min_amount <= volume <= self.max_amount

    @classmethod
    def from_dict(cls, data: dict) -> "CommissionTier":
        return cls(
            level=int(data["level"]),
            min_amount=to_decimal(data["min_amount"], "min_amount"),
            max_amount=to_decimal(data["max_amount"], "max_amount"),
            additional_commission=to_decimal(data["additional_commission"], "additional_commission"),
        )

    def to_dict(self) -> dict:
        return {
            "level": self.level,
            "min_amount": float(self.min_amount),
            "max_amount": float(self.max_amount),
            "additional_commission": float(self.additional_commission),
        }


@dataclass
class SaleEntry:
    """A sale (or no-sale tour) as typed in by the user, before commission is resolved."""

    date: date
    client_last_name: str
    sale_amount: Decimal = Decimal("0")
    sale_type: str = SALE_TYPE_DEED
    number_of_tours: int = 0
    is_cancelled: bool = False
    is_no_sale: bool = False
    fdi_given_points: Decimal = Decimal("0")
    lead_number: str = ""
    manager_name: str = ""
    notes: str = ""

    def __post_init__(self):
        if isinstance(self.date, datetime):
            self.date = self.date.date()
        if isinstance(self.client_last_name, str):
            self.client_last_name = self.client_last_name.strip()
            # The sentinel last name always marks a no-sale, whatever the flag says
            if self.client_last_name == NO_SALE and self.is_no_sale is False:
                self.is_no_sale = True

    @classmethod
    def from_dict(cls, data: dict) -> "SaleEntry":
        return cls(
            date=to_date(data["date"]),
            client_last_name=data.get("client_last_name", "") or "",
            sale_amount=to_decimal(data.get("sale_amount"), "sale_amount"),
            sale_type=data.get("sale_type", SALE_TYPE_DEED),
            number_of_tours=data.get("number_of_tours", 0),
            is_cancelled=data.get("is_cancelled", False),
            is_no_sale=data.get("is_no_sale", False),
            fdi_given_points=to_decimal(data.get("fdi_given_points"), "fdi_given_points"),
            lead_number=data.get("lead_number", "") or "",
            manager_name=data.get("manager_name", "") or "",
            notes=data.get("notes", "") or "",
        )


# =============================================================================
# STORED RECORDS
# =============================================================================


@dataclass
class SaleRecord:
    """A stored sale with its commission and FDI figures frozen at entry time."""

    id: int | None
    project_id: int
    date: date
    client_last_name: str
    sale_amount: Decimal
    sale_type: str
    commission_percentage: Decimal
    commission_amount: Decimal
    number_of_tours: int
    is_cancelled: bool = False
    fdi_points: Decimal = Decimal("0")
    fdi_given_points: Decimal = Decimal("0")
    fdi_cost: Decimal = Decimal("0")
    lead_number: str = ""
    manager_name: str = ""
    notes: str = ""

    @property
    def is_no_sale(self) -> bool:
        return self.client_last_name == NO_SALE

    @property
    def is_active(self) -> bool:
        """Counts toward volume, commission and sale totals."""
        return not self.is_cancelled and not self.is_no_sale


@dataclass
class Project:
    """A reporting project owning its own commission tier schedule."""

    id: int | None
    name: str
    created_at: str
    updated_at: str
    commission_tiers: list[CommissionTier] = field(default_factory=list)


# =============================================================================
# OUTPUT / RESULT MODELS
# =============================================================================


@dataclass
class CommissionQuote:
    """Breakdown of a commission resolution for one sale."""

    base_rate: Decimal = Decimal("0")
    additional_rate: Decimal = Decimal("0")
    sale_type_adjustment: Decimal = Decimal("0")
    total_percentage: Decimal = Decimal("0")
    commission_amount: Decimal = Decimal("0")
    matched_tier: CommissionTier | None = None


@dataclass
class DailyMetric:
    """Aggregated totals for one calendar day. Derived, never persisted."""

    date: date
    total_sales: int = 0
    total_volume: Decimal = Decimal("0")
    total_commission: Decimal = Decimal("0")
    total_tours: int = 0
    daily_vpg: Decimal = Decimal("0")
    is_first_of_month: bool = False
    entries: list[SaleRecord] = field(default_factory=list)


@dataclass
class MonthlyTotals:
    """Totals for one year-month, with VPG recomputed from the summed figures."""

    total_sales: int = 0
    total_volume: Decimal = Decimal("0")
    total_commission: Decimal = Decimal("0")
    total_tours: int = 0
    vpg: Decimal = Decimal("0")


@dataclass
class MonthlyReport:
    """Full month-day grid plus the month's totals."""

    year: int
    month: int
    title: str
    days: list[DailyMetric]
    totals: MonthlyTotals

    @property
    def month_key(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"
