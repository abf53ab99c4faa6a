"""Unit tests for the favorite, payment, referral and achievement repositories.

Run against in-memory SQLite; the base CRUD behaviour is covered once in the
user repository tests.
"""

from __future__ import annotations

import pytest

from towgo.core.database.entities import Favorite, Payment, PaymentStatus, Referral, User
from towgo.core.database.repositories import (
    AchievementRepository,
    FavoriteRepository,
    PaymentRepository,
    ReferralRepository,
    ServiceRepository,
)

pytestmark = pytest.mark.asyncio


class TestFavoriteRepository:
    @pytest.fixture
    def repository(self, in_memory_session) -> FavoriteRepository:
        return FavoriteRepository(in_memory_session)

    def _favorite(self, user_id: int, place_id: str) -> Favorite:
        return Favorite(user_id=user_id, place_id=place_id, name=place_id, address="1 Main St", location={"lat": 0, "lng": 0})

    async def test_list_and_delete_for_user(self, repository, stored_user):
        await repository.create(self._favorite(stored_user.id, "first"))
        await repository.create(self._favorite(stored_user.id, "second"))

        assert [f.place_id for f in await repository.list_for_user(stored_user.id)] == ["first", "second"]
        assert (await repository.get_for_user(stored_user.id, "second")).name == "second"

        assert await repository.delete_for_user(stored_user.id, "first") is True
        assert await repository.delete_for_user(stored_user.id, "first") is False
        assert [f.place_id for f in await repository.list_for_user(stored_user.id)] == ["second"]

    async def test_other_users_favorites_are_invisible(self, repository, stored_user):
        await repository.create(self._favorite(stored_user.id, "mine"))
        assert await repository.list_for_user(stored_user.id + 1) == []
        assert await repository.delete_for_user(stored_user.id + 1, "mine") is False


class TestPaymentRepository:
    @pytest.fixture
    def repository(self, in_memory_session) -> PaymentRepository:
        return PaymentRepository(in_memory_session)

    async def test_lookup_by_stripe_ids(self, repository, stored_user, stored_service):
        payment = await repository.create(
            Payment(user_id=stored_user.id, service_id=stored_service.id, amount=89.99, session_id="cs_1")
        )

        assert (await repository.get_by_session_id("cs_1")).id == payment.id
        assert await repository.get_by_session_id("cs_2") is None

        await repository.update_status(payment, PaymentStatus.COMPLETED.value, payment_intent_id="pi_1")
        assert (await repository.get_by_payment_intent_id("pi_1")).status == "completed"

    async def test_update_status_keeps_first_payment_intent(self, repository, stored_user, stored_service):
        payment = await repository.create(
            Payment(user_id=stored_user.id, service_id=stored_service.id, amount=1.0, payment_intent_id="pi_a")
        )
        updated = await repository.update_status(payment, PaymentStatus.FAILED.value, payment_intent_id="pi_b")
        assert updated.payment_intent_id == "pi_a"
        assert updated.status == "failed"

    async def test_list_for_user_newest_first(self, repository, stored_user, stored_service):
        first = await repository.create(Payment(user_id=stored_user.id, service_id=stored_service.id, amount=1.0))
        second = await repository.create(Payment(user_id=stored_user.id, service_id=stored_service.id, amount=2.0))
        second.created_at = first.created_at.replace(year=first.created_at.year + 1)
        await repository.update(second)

        assert [p.id for p in await repository.list_for_user(stored_user.id)] == [second.id, first.id]


class TestServiceRepository:
    async def test_crud(self, in_memory_session, stored_service):
        repository = ServiceRepository(in_memory_session)
        stored_service.price_id = "price_1"
        await repository.update(stored_service)

        services = await repository.list(filters={"active": True})
        assert [s.price_id for s in services] == ["price_1"]


class TestReferralRepository:
    async def test_count_and_lookup(self, in_memory_session, stored_user):
        repository = ReferralRepository(in_memory_session)
        friends = [User(username=f"friend{i}") for i in range(3)]
        in_memory_session.add_all(friends)
        await in_memory_session.commit()

        for friend in friends:
            await repository.create(Referral(referrer_id=stored_user.id, referred_user_id=friend.id))

        assert await repository.count_for_referrer(stored_user.id) == 3
        assert await repository.count_for_referrer(friends[0].id) == 0
        assert (await repository.get_by_referred_user(friends[1].id)).referrer_id == stored_user.id
        assert await repository.get_by_referred_user(stored_user.id) is None


class TestAchievementRepository:
    async def test_get_or_create_is_idempotent(self, in_memory_session, stored_user):
        repository = AchievementRepository(in_memory_session)

        first = await repository.get_or_create(stored_user.id, "location-master")
        first.progress = 2
        await repository.update(first)
        again = await repository.get_or_create(stored_user.id, "location-master")

        assert again.id == first.id
        assert again.progress == 2
        assert len(await repository.list_for_user(stored_user.id)) == 1
        assert await repository.get_for_user(stored_user.id, "first-search") is None
