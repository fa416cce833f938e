"""
Unit Tests for Commission Tier Store
"""

import pytest
from decimal import Decimal
from salesboard.errors import NotFoundError, PersistenceError, ValidationError
from salesboard.models import CommissionTier, Project
from salesboard.storage import InMemoryStorage
from salesboard.tiers import DEFAULT_COMMISSION_TIERS, CommissionTierStore, default_tiers


def add_project(storage, name="Test Project"):
    return storage.add_project(Project(
        id=None, name=name, created_at="", updated_at="", commission_tiers=default_tiers()
    ))


class FailingStorage(InMemoryStorage):
    def update_tiers(self, project_id, tiers):
        raise PersistenceError("store unavailable")


class TestDefaultSchedule:

    def test_eight_levels(self):
        tiers = default_tiers()

        assert [t.level for t in tiers] == list(range(1, 9))
        assert tiers[0].min_amount == Decimal('162500')
        assert tiers[3].additional_commission == Decimal('3.5')
        assert tiers[-1].max_amount == Decimal('999999999')

    def test_each_call_returns_independent_copy(self):
        first = default_tiers()
        first[0].additional_commission = Decimal('99')

        assert default_tiers()[0].additional_commission == Decimal('1')
        assert DEFAULT_COMMISSION_TIERS[0][3] == '1'


class TestCommissionTierStore:

    @pytest.fixture
    def storage(self):
        return InMemoryStorage()

    @pytest.fixture
    def store(self, storage):
        return CommissionTierStore(storage)

    def test_get_tiers(self, storage, store):
        project_id = add_project(storage)
        assert len(store.get_tiers(project_id)) == 8

    def test_update_tier_replaces_matching_level(self, storage, store):
        project_id = add_project(storage)
        edited = CommissionTier(level=3, min_amount=Decimal('300000'),
                                max_amount=Decimal('400000'), additional_commission=Decimal('2.5'))

        store.update_tier(project_id, edited)
        tiers = store.get_tiers(project_id)

        assert tiers[2] == edited
        assert [t.level for t in tiers] == list(range(1, 9))
        assert tiers[1].additional_commission == Decimal('2')

    def test_edits_do_not_leak_between_projects(self, storage, store):
        first = add_project(storage, "First")
        second = add_project(storage, "Second")
        store.update_tier(first, CommissionTier(1, Decimal('0'), Decimal('1000'), Decimal('9')))

        assert store.get_tiers(first)[0].additional_commission == Decimal('9')
        assert store.get_tiers(second)[0].additional_commission == Decimal('1')

    def test_returned_list_is_a_copy(self, storage, store):
        project_id = add_project(storage)
        store.get_tiers(project_id)[0].additional_commission = Decimal('50')

        assert store.get_tiers(project_id)[0].additional_commission == Decimal('1')

    def test_unknown_level(self, storage, store):
        project_id = add_project(storage)
        with pytest.raises(NotFoundError, match="level 42"):
            store.update_tier(project_id, CommissionTier(42, Decimal('0'), Decimal('1'), Decimal('1')))

    def test_unknown_project(self, store):
        with pytest.raises(NotFoundError):
            store.get_tiers(7)
        with pytest.raises(NotFoundError):
            store.set_tiers(7, default_tiers())

    def test_overlapping_ranges_are_accepted(self, storage, store):
        project_id = add_project(storage)
        tiers = [
            CommissionTier(1, Decimal('0'), Decimal('100000'), Decimal('1')),
            CommissionTier(2, Decimal('50000'), Decimal('200000'), Decimal('2')),
        ]

        assert store.set_tiers(project_id, tiers) is True
        assert store.get_tiers(project_id) == tiers

    def test_min_above_max_rejected(self, storage, store):
        project_id = add_project(storage)
        bad = CommissionTier(1, Decimal('5000'), Decimal('1000'), Decimal('1'))

        with pytest.raises(ValidationError, match="cannot exceed max_amount"):
            store.update_tier(project_id, bad)

    def test_negative_additional_rejected(self, storage, store):
        project_id = add_project(storage)
        bad = CommissionTier(1, Decimal('0'), Decimal('1000'), Decimal('-1'))

        with pytest.raises(ValidationError):
            store.update_tier(project_id, bad)

    def test_duplicate_levels_rejected(self, storage, store):
        project_id = add_project(storage)
        tiers = default_tiers()
        tiers[1].level = 1

        with pytest.raises(ValidationError, match="Duplicate"):
            store.set_tiers(project_id, tiers)

    def test_persistence_failure_surfaces_and_leaves_tiers_unchanged(self):
        storage = FailingStorage()
        store = CommissionTierStore(storage)
        project_id = add_project(storage)

        with pytest.raises(PersistenceError):
            store.update_tier(project_id, CommissionTier(1, Decimal('0'), Decimal('1'), Decimal('9')))

        assert store.get_tiers(project_id) == default_tiers()
