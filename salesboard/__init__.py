"""
SALESBOARD COMMISSION ENGINE
Tiered commission resolution and daily/monthly sales reporting
"""

from .errors import NotFoundError, PersistenceError, SalesboardError, ValidationError
from .models import CommissionTier, SaleEntry, SaleRecord
from .tracker import SalesTracker

__all__ = [
    'SalesTracker',
    'SaleEntry',
    'SaleRecord',
    'CommissionTier',
    'SalesboardError',
    'ValidationError',
    'NotFoundError',
    'PersistenceError',
]
