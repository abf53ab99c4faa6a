"""
Unit tests for the in-memory location share store and the privacy filter.
"""

import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from towgo.core.models.io.common import GeoPoint
from towgo.core.models.io.location_share import LocationShare
from towgo.server.services.location_sharing import LocationShareStore, apply_privacy


def make_share(seconds: float = 600, accuracy: str = "exact", include_vehicle: bool = False) -> LocationShare:
    return LocationShare(
        address="1 Main St, Springfield, IL",
        location=GeoPoint(lat=39.781721, lng=-89.650148),
        accuracy=accuracy,
        expires=datetime.now(timezone.utc) + timedelta(seconds=seconds),
        include_vehicle_info=include_vehicle,
        vehicle_info={"make": "Ford", "model": "F-150"},
    )


@pytest.fixture
def store():
    store = LocationShareStore()
    yield store
    store.clear()


class TestApplyPrivacy:
    def test_exact_keeps_coordinates(self):
        share = apply_privacy(make_share(include_vehicle=True))
        assert share.location == GeoPoint(lat=39.781721, lng=-89.650148)
        assert share.vehicle_info is not None

    def test_approximate_rounds(self):
        share = apply_privacy(make_share(accuracy="approximate"))
        assert share.location == GeoPoint(lat=39.78, lng=-89.65)
        assert share.address == "1 Main St, Springfield, IL"

    def test_city_drops_coordinates(self):
        share = apply_privacy(make_share(accuracy="city"))
        assert share.location is None
        assert share.address == "1 Main St"

    def test_vehicle_hidden_without_opt_in(self):
        assert apply_privacy(make_share()).vehicle_info is None

    def test_original_is_not_modified(self):
        original = make_share(accuracy="city")
        apply_privacy(original)
        assert original.location is not None


class TestLocationShareStore:
    def test_create_and_get_without_loop(self, store):
        share = make_share()
        share_id = store.create(share)
        assert store.get(share_id) is share
        assert len(store) == 1

    def test_past_expiry_is_rejected(self, store):
        with pytest.raises(ValueError):
            store.create(make_share(seconds=-1))
        assert len(store) == 0

    def test_naive_expiry_is_treated_as_utc(self, store):
        share = make_share()
        naive = share.model_copy(update={"expires": datetime.now(timezone.utc).replace(tzinfo=None) + timedelta(minutes=5)})
        share_id = store.create(naive)
        assert store.get(share_id) is naive

    def test_expired_entry_is_removed_on_read(self, store):
        share_id = store.create(make_share())
        store._shares[share_id] = make_share(seconds=-5)
        assert store.get(share_id) is None
        assert len(store) == 0

    def test_delete(self, store):
        share_id = store.create(make_share())
        assert store.delete(share_id) is True
        assert store.delete(share_id) is False
        assert store.get(share_id) is None

    def test_list_active_skips_expired(self, store):
        keep = store.create(make_share())
        drop = store.create(make_share())
        store._shares[drop] = make_share(seconds=-5)

        assert [share_id for share_id, _ in store.list_active()] == [keep]
        assert len(store) == 1

    @pytest.mark.asyncio
    async def test_timer_removes_share(self, store):
        share_id = store.create(make_share(seconds=0.05))
        assert share_id in store._timers
        await asyncio.sleep(0.1)
        assert len(store) == 0
        assert share_id not in store._timers

    @pytest.mark.asyncio
    async def test_clear_cancels_timers(self, store):
        store.create(make_share())
        timer = next(iter(store._timers.values()))
        store.clear()
        assert timer.cancelled()
        assert len(store) == 0

    @pytest.mark.asyncio
    async def test_delete_cancels_timer(self, store):
        share_id = store.create(make_share())
        timer = store._timers[share_id]

        assert store.delete(share_id) is True
        assert timer.cancelled()
        assert share_id not in store._timers

    @pytest.mark.asyncio
    async def test_expiry_leaves_other_shares_alone(self, store):
        short_lived = store.create(make_share(seconds=0.05))
        long_lived = store.create(make_share(seconds=600))

        await asyncio.sleep(0.1)

        assert store.get(short_lived) is None
        assert store.get(long_lived) is not None
        assert not store._timers[long_lived].cancelled()
        assert [share_id for share_id, _ in store.list_active()] == [long_lived]
