"""
Commission Resolver

Resolves the commission percentage for a sale from the sale-amount base
rate plus the additional rate of the cumulative-volume tier in effect.
All use Decimal for precision with ROUND_HALF_UP rounding.
"""

from decimal import ROUND_HALF_UP, Decimal

from ..models import CommissionQuote, CommissionTier


def quantize_money(value: Decimal) -> Decimal:
    """Round to 2 decimal places, ties away from zero."""
    return value.quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)


class CommissionResolver:
    """Determines the base and tier-based commission rates for a sale."""

    # (threshold, rate): first threshold the sale amount reaches wins
    BASE_RATES = (
        (Decimal('50000'), Decimal('6')),
        (Decimal('20000'), Decimal('5')),
    )
    MINIMUM_BASE_RATE = Decimal('4')

    def __init__(self, sale_type_adjustments: dict | None = None):
        # Percentage points added per sale type; DEED and TRUST share the base table
        self.sale_type_adjustments = {
            key: Decimal(str(value)) for key, value in (sale_type_adjustments or {}).items()
        }

    def resolve(
        self,
        sale_amount: Decimal,
        cumulative_volume: Decimal,
        sale_type: str,
        tiers: list[CommissionTier]
    ) -> Decimal:
        """Total commission percentage (unrounded) for a validated sale."""
        return self.quote(sale_amount, cumulative_volume, sale_type, tiers).total_percentage

    def quote(
        self,
        sale_amount: Decimal,
        cumulative_volume: Decimal,
        sale_type: str,
        tiers: list[CommissionTier]
    ) -> CommissionQuote:
        """
        Resolve the full commission breakdown for a sale.

        - Base rate depends only on the sale amount
        - Additional rate comes from the tier containing the volume
          accumulated BEFORE this sale (first match wins)
        - Commission amount is rounded to cents once, here
        """
        base = self.base_rate(sale_amount)
        tier = self.find_tier(cumulative_volume, tiers)
        additional = tier.additional_commission if tier else Decimal('0')
        adjustment = self.sale_type_adjustments.get(sale_type, Decimal('0'))

        total = base + additional + adjustment

        return CommissionQuote(
            base_rate=base,
            additional_rate=additional,
            sale_type_adjustment=adjustment,
            total_percentage=total,
            commission_amount=self.commission_amount(sale_amount, total),
            matched_tier=tier
        )

    def base_rate(self, sale_amount: Decimal) -> Decimal:
        """4% under $20K, 5% from $20K, 6% from $50K."""
        for threshold, rate in self.BASE_RATES:
            if sale_amount >= threshold:
                return rate
        return self.MINIMUM_BASE_RATE

    def additional_rate(self, cumulative_volume: Decimal, tiers: list[CommissionTier]) -> Decimal:
        tier = self.find_tier(cumulative_volume, tiers)
        return tier.additional_commission if tier else Decimal('0')

    @staticmethod
    def find_tier(cumulative_volume: Decimal, tiers: list[CommissionTier]) -> CommissionTier | None:
        for tier in tiers:
            if tier.contains(cumulative_volume):
                return tier
        return None

    @staticmethod
    def commission_amount(sale_amount: Decimal, percentage: Decimal) -> Decimal:
        return quantize_money(sale_amount * percentage / Decimal('100'))
