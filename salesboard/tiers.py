"""
Commission Tier Store

Per-project, ordered commission tier schedules. Every project starts from
its own copy of the default schedule and is edited one tier at a time.
"""

import logging
from decimal import Decimal

from .errors import NotFoundError, PersistenceError
from .models import CommissionTier
from .validators import InputValidator

logger = logging.getLogger(__name__)

# (level, min_amount, max_amount, additional_commission)
DEFAULT_COMMISSION_TIERS = (
    (1, '162500', '243749', '1'),
    (2, '243750', '324999', '2'),
    (3, '325000', '406249', '3'),
    (4, '406250', '487499', '3.5'),
    (5, '487500', '584999', '4'),
    (6, '585000', '682499', '5'),
    (7, '682500', '893749', '5.5'),
    (8, '893750', '999999999', '6'),
)


def default_tiers(schedule=DEFAULT_COMMISSION_TIERS) -> list[CommissionTier]:
    """A fresh, independently mutable copy of the default schedule."""
    return [
        CommissionTier(
            level=level,
            min_amount=Decimal(min_amount),
            max_amount=Decimal(max_amount),
            additional_commission=Decimal(additional)
        )
        for level, min_amount, max_amount, additional in schedule
    ]


class CommissionTierStore:
    """Reads and edits tier lists through the storage collaborator."""

    def __init__(self, storage, validator: InputValidator | None = None):
        self.storage = storage
        self.validator = validator or InputValidator()

    def get_tiers(self, project_id: int) -> list[CommissionTier]:
        return self._get_project(project_id).commission_tiers

    def set_tiers(self, project_id: int, tiers: list[CommissionTier]) -> bool:
        """
        Replace the whole tier list.

        Overlapping or gapped ranges are accepted; resolution uses the
        first matching tier in list order.
        """
        self.validator.validate_tiers(tiers)
        self._get_project(project_id)

        try:
            updated = self.storage.update_tiers(project_id, tiers)
        except PersistenceError:
            logger.error(f"Failed to update commission tiers for project {project_id}")
            raise

        if not updated:
            raise NotFoundError(f"Project not found: {project_id}")

        logger.info(f"Updated {len(tiers)} commission tiers for project {project_id}")
        return True

    def update_tier(self, project_id: int, tier: CommissionTier) -> list[CommissionTier]:
        """Replace the tier with the same level and persist the full list."""
        tiers = self.get_tiers(project_id)

        if not any(existing.level == tier.level for existing in tiers):
            raise NotFoundError(f"Commission tier level {tier.level} not found in project {project_id}")

        updated = [tier if existing.level == tier.level else existing for existing in tiers]
        self.set_tiers(project_id, updated)
        return updated

    def _get_project(self, project_id: int):
        project = self.storage.get_project(project_id)
        if project is None:
            raise NotFoundError(f"Project not found: {project_id}")
        return project
