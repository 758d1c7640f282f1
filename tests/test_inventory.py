"""
Tests for the repository inventory and candidate filtering.
"""

from datetime import datetime, timedelta, timezone

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from repo_archiver.exceptions import HostError, InvariantViolation
from repo_archiver.hosts.base import filter_candidates
from repo_archiver.inventory import Inventory
from repo_archiver.testing import MockRepositoryHost, create_mock_repository
from repo_archiver.types.repos import RepositoryRecord

EPOCH = datetime(2000, 1, 1, tzinfo=timezone.utc)

record_strategy = st.builds(
    lambda i, days, archived: create_mock_repository(
        name=f"repo-{i}",
        created_at=EPOCH + timedelta(days=days),
        archived=archived,
    ),
    st.integers(min_value=0, max_value=10_000),
    st.integers(min_value=0, max_value=9_000),
    st.booleans(),
)
cutoff_strategy = st.integers(min_value=0, max_value=9_000).map(lambda d: EPOCH + timedelta(days=d))


@given(records=st.lists(record_strategy, max_size=30), cutoff=cutoff_strategy)
@settings(max_examples=100)
def test_inventory_is_exactly_the_old_unarchived_records(
    records: list[RepositoryRecord], cutoff: datetime
) -> None:
    """
    Property 4: Filtering

    For any cutoff C and listing R, the inventory holds exactly the records
    of R with created_at < C and archived == False, in listing order.
    """
    host = MockRepositoryHost(records)

    inventory = Inventory.fetch(host, cutoff)

    expected = [r for r in records if r.created_at < cutoff and not r.archived]
    assert list(inventory) == expected
    assert host.call_count("list_repositories") == 1


def test_cutoff_is_strict() -> None:
    cutoff = datetime(2020, 1, 1, tzinfo=timezone.utc)
    on_cutoff = create_mock_repository(name="exact", created_at=cutoff)
    before = create_mock_repository(name="before", created_at=cutoff - timedelta(seconds=1))

    assert filter_candidates([on_cutoff, before], cutoff) == [before]


def test_fetch_preserves_source_order(mock_host, fixed_now) -> None:
    cutoff = fixed_now - timedelta(days=365)
    inventory = Inventory.fetch(mock_host, cutoff)

    assert [r.name for r in inventory] == ["alpha", "bravo", "charlie"]
    assert inventory.cutoff == cutoff


def test_fetch_propagates_host_errors(fixed_now) -> None:
    host = MockRepositoryHost()
    host.configure_list(error=HostError("LIST_FAILED", "gh: not logged in"))

    with pytest.raises(HostError):
        Inventory.fetch(host, fixed_now)


class TestSelection:
    """Tests for selection flags."""

    def _inventory(self, count: int = 3) -> Inventory:
        records = [create_mock_repository(name=f"r{i}") for i in range(count)]
        return Inventory(records, datetime(2020, 1, 1, tzinfo=timezone.utc))

    def test_starts_unselected(self) -> None:
        inventory = self._inventory()
        assert inventory.selected_count == 0
        assert inventory.selected_indices() == []

    def test_toggle_flips(self) -> None:
        inventory = self._inventory()
        inventory.toggle(1)
        assert inventory.is_selected(1)
        assert inventory.selected_count == 1
        inventory.toggle(1)
        assert not inventory.is_selected(1)

    def test_selected_pairs_in_inventory_order(self) -> None:
        inventory = self._inventory(4)
        inventory.toggle(3)
        inventory.toggle(0)

        assert [(i, r.name) for i, r in inventory.selected()] == [(0, "r0"), (3, "r3")]

    @pytest.mark.parametrize("index", [-1, 3, 100])
    def test_out_of_range_toggle_is_an_invariant_violation(self, index: int) -> None:
        inventory = self._inventory(3)
        with pytest.raises(InvariantViolation):
            inventory.toggle(index)

    def test_empty_inventory_is_falsy(self) -> None:
        assert not self._inventory(0)
        assert len(self._inventory(2)) == 2
