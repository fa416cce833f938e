"""
FDI Incentive Calculator

Derives the incentive points a sale makes available and the cost of
points given away beyond that allotment.
"""

from decimal import Decimal

from .commission import quantize_money


class FdiCalculator:
    """Pure lookups over the FDI point schedule."""

    # (minimum sale amount, points available): highest band reached wins
    POINT_BANDS = (
        (Decimal('0'), Decimal('0')),
        (Decimal('10000'), Decimal('2500')),
        (Decimal('20000'), Decimal('5000')),
        (Decimal('30000'), Decimal('7500')),
        (Decimal('50000'), Decimal('10000')),
        (Decimal('75000'), Decimal('15000')),
        (Decimal('100000'), Decimal('20000')),
    )
    COST_PER_POINT = Decimal('0.10')

    def __init__(self, point_bands=None, cost_per_point=None):
        if point_bands is not None:
            self.POINT_BANDS = tuple(
                (Decimal(str(amount)), Decimal(str(points)))
                for amount, points in sorted(point_bands, key=lambda band: Decimal(str(band[0])))
            )
        if cost_per_point is not None:
            self.COST_PER_POINT = Decimal(str(cost_per_point))

    def available_points(self, sale_amount: Decimal) -> Decimal:
        """Points granted for a sale of this size (monotonic in sale_amount)."""
        points = Decimal('0')
        for minimum, band_points in self.POINT_BANDS:
            if sale_amount < minimum:
                break
            points = max(points, band_points)
        return points

    def point_cost(self, given_points: Decimal, available_points: Decimal) -> Decimal:
        """Zero within the allotment; each excess point costs COST_PER_POINT."""
        excess = given_points - available_points
        if excess <= 0:
            return Decimal('0')
        return quantize_money(excess * self.COST_PER_POINT)
