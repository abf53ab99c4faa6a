"""Unit tests for the user repository against in-memory SQLite."""

from __future__ import annotations

import asyncio

import pytest

from towgo.core.database.entities import User
from towgo.core.database.repositories import UserRepository

pytestmark = pytest.mark.asyncio


@pytest.fixture
def repository(in_memory_session) -> UserRepository:
    return UserRepository(in_memory_session)


async def test_create_and_get(repository):
    user = await repository.create(User(username="rookie"))
    assert user.id is not None
    assert (await repository.get_by_id(user.id)).username == "rookie"
    assert await repository.get_by_id(999) is None


async def test_get_by_username(repository, stored_user):
    assert (await repository.get_by_username("driver")).id == stored_user.id
    assert await repository.get_by_username("Driver") is None
    assert await repository.username_exists("driver")
    assert not await repository.username_exists("ghost")


async def test_email_lookup_ignores_case(repository, stored_user):
    assert (await repository.get_by_email("driver@example.com")).id == stored_user.id
    assert (await repository.get_by_email("DRIVER@EXAMPLE.COM")).id == stored_user.id
    assert await repository.get_by_email("other@example.com") is None


async def test_token_lookups(repository, stored_user):
    stored_user.verification_token = "v" * 64
    stored_user.reset_password_token = "r" * 64
    await repository.update(stored_user)

    assert (await repository.get_by_verification_token("v" * 64)).id == stored_user.id
    assert (await repository.get_by_reset_token("r" * 64)).id == stored_user.id
    assert await repository.get_by_reset_token("v" * 64) is None


async def test_provider_lookup_needs_both_ids(repository):
    user = await repository.create(User(username="gh", provider_id="github", provider_user_id="42"))

    assert (await repository.get_by_provider("github", "42")).id == user.id
    assert await repository.get_by_provider("google", "42") is None


async def test_customer_and_referral_code_lookup(repository, stored_user):
    stored_user.customer_id = "cus_1"
    await repository.update(stored_user)

    assert (await repository.get_by_customer_id("cus_1")).id == stored_user.id
    assert (await repository.get_by_referral_code(stored_user.referral_code.lower())).id == stored_user.id


async def test_update_refreshes_updated_at(repository, stored_user):
    before = stored_user.updated_at
    await asyncio.sleep(0.01)
    stored_user.display_name = "Renamed"
    updated = await repository.update(stored_user)
    assert updated.updated_at > before


async def test_delete(repository, stored_user):
    assert await repository.delete(stored_user.id) is True
    assert await repository.delete(stored_user.id) is False


async def test_list_with_filters_and_pagination(repository):
    for name in ("a", "b", "c"):
        await repository.create(User(username=name, email_verified=name != "b"))

    assert [u.username for u in await repository.list()] == ["a", "b", "c"]
    assert [u.username for u in await repository.list(limit=1, offset=1)] == ["b"]
    assert [u.username for u in await repository.list(filters={"email_verified": True})] == ["a", "c"]
    assert len(await repository.list(filters={"email_verified": None, "no_such_column": 1})) == 3
