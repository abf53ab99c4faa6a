import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio

FAVORITE = {
    "place_id": "ChIJ-tow-1",
    "name": "Joe's Towing",
    "address": "12 Main St, Austin, TX 78701",
    "phone_number": "(512) 555-0101",
    "location": {"lat": 30.2672, "lng": -97.7431},
}


async def test_create_and_list_favorites(client: AsyncClient, auth_headers):
    response = await client.post("/api/favorites", json=FAVORITE, headers=auth_headers)
    assert response.status_code == 201
    created = response.json()
    assert created["place_id"] == "ChIJ-tow-1"
    assert created["location"] == {"lat": 30.2672, "lng": -97.7431}

    response = await client.get("/api/favorites", headers=auth_headers)
    assert response.status_code == 200
    assert [f["place_id"] for f in response.json()] == ["ChIJ-tow-1"]


async def test_duplicate_favorite_conflicts(client: AsyncClient, auth_headers):
    await client.post("/api/favorites", json=FAVORITE, headers=auth_headers)
    response = await client.post("/api/favorites", json=FAVORITE, headers=auth_headers)
    assert response.status_code == 409
    assert response.json()["detail"] == "Favorite already exists"


async def test_same_place_for_two_users(client: AsyncClient, auth_headers, other_user, headers_for):
    first = await client.post("/api/favorites", json=FAVORITE, headers=auth_headers)
    second = await client.post("/api/favorites", json=FAVORITE, headers=headers_for(other_user))
    assert first.status_code == second.status_code == 201


async def test_favorites_are_private(client: AsyncClient, auth_headers, other_user, headers_for):
    await client.post("/api/favorites", json=FAVORITE, headers=auth_headers)
    response = await client.get("/api/favorites", headers=headers_for(other_user))
    assert response.json() == []


async def test_delete_favorite(client: AsyncClient, auth_headers):
    await client.post("/api/favorites", json=FAVORITE, headers=auth_headers)
    response = await client.delete("/api/favorites/ChIJ-tow-1", headers=auth_headers)
    assert response.status_code == 204

    response = await client.delete("/api/favorites/ChIJ-tow-1", headers=auth_headers)
    assert response.status_code == 404
    assert response.json()["detail"] == "Favorite not found"


async def test_invalid_coordinates_rejected(client: AsyncClient, auth_headers):
    payload = {**FAVORITE, "location": {"lat": 123.0, "lng": 0}}
    response = await client.post("/api/favorites", json=payload, headers=auth_headers)
    assert response.status_code == 422


async def test_favorites_require_authentication(client: AsyncClient):
    response = await client.get("/api/favorites")
    assert response.status_code == 401
