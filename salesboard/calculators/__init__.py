"""
Calculators Package

Provides the commission, incentive and aggregation components.
"""

from .commission import CommissionResolver
from .daily import DailyAggregator
from .fdi import FdiCalculator
from .monthly import MonthlyAggregator

__all__ = [
    "CommissionResolver",
    "FdiCalculator",
    "DailyAggregator",
    "MonthlyAggregator",
]
