"""
Input Validation for the Salesboard commission engine

Validates sale entries and commission tiers before they reach the
calculators. Raises ValidationError with clear messages for any
constraint violation.
"""

from datetime import date, datetime
from decimal import Decimal

from .errors import ValidationError
from .models import SALE_TYPES, CommissionTier, SaleEntry


class InputValidator:
    """Validates entry-time input according to business rules."""

    def validate_entry(self, entry: SaleEntry, require_client_name: bool = True) -> None:
        """
        Run all sale-entry validations. Raises ValidationError if any check fails.
        """
        if not isinstance(entry.date, date) or isinstance(entry.date, datetime):
            raise ValidationError(f"date must be a calendar date, got: {entry.date!r}")

        if entry.sale_type not in SALE_TYPES:
            raise ValidationError(
                f"Invalid sale_type: {entry.sale_type}. Must be one of {', '.join(SALE_TYPES)}"
            )

        if isinstance(entry.number_of_tours, bool) or not isinstance(entry.number_of_tours, int):
            raise ValidationError(f"number_of_tours must be an integer, got: {entry.number_of_tours!r}")
        if entry.number_of_tours < 0:
            raise ValidationError(f"number_of_tours cannot be negative, got: {entry.number_of_tours}")

        self._validate_amount("sale_amount", entry.sale_amount)
        self._validate_amount("fdi_given_points", entry.fdi_given_points)

        for flag in ("is_cancelled", "is_no_sale"):
            if not isinstance(getattr(entry, flag), bool):
                raise ValidationError(f"{flag} must be true or false, got: {getattr(entry, flag)!r}")

        if require_client_name and not entry.is_no_sale and not entry.client_last_name.strip():
            raise ValidationError("client_last_name is required for a sale entry")

    def validate_tiers(self, tiers: list[CommissionTier]) -> None:
        """
        Validate a full tier list. Overlaps and gaps are allowed: the first
        matching tier in list order wins at resolution time.
        """
        seen = set()
        for tier in tiers:
            if tier.level in seen:
                raise ValidationError(f"Duplicate tier level: {tier.level}")
            seen.add(tier.level)
            self.validate_tier(tier)

    def validate_tier(self, tier: CommissionTier) -> None:
        self._validate_amount(f"Tier {tier.level} min_amount", tier.min_amount)
        self._validate_amount(f"Tier {tier.level} max_amount", tier.max_amount)
        self._validate_amount(f"Tier {tier.level} additional_commission", tier.additional_commission)

        if tier.min_amount > tier.max_amount:
            raise ValidationError(
                f"Tier {tier.level} min_amount ({tier.min_amount}) cannot exceed max_amount ({tier.max_amount})"
            )

    def _validate_amount(self, name: str, value: Decimal) -> None:
        if not value.is_finite():
            raise ValidationError(f"{name} must be a finite number, got: {value}")
        if value < 0:
            raise ValidationError(f"{name} cannot be negative, got: {value}")
