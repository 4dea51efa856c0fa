"""
Tests for hotel catalog endpoints.
"""

import pytest
from httpx import AsyncClient
from prometheus_client import REGISTRY

from hotel_booking.services import cache_service
from tests import factories


@pytest.mark.asyncio
async def test_list_hotels(client: AsyncClient, eligible_headers, hotel):
    response = await client.get("/api/v1/hotels", headers=eligible_headers)
    assert response.status_code == 200
    data = response.json()
    assert [h["id"] for h in data] == [hotel.id]
    assert data[0]["name"] == hotel.name
    assert "createdAt" in data[0]


@pytest.mark.asyncio
async def test_list_hotels_without_enrollment(client: AsyncClient, auth_headers, hotel):
    response = await client.get("/api/v1/hotels", headers=auth_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_list_hotels_remote_ticket(client: AsyncClient, db_session, test_user, auth_headers, hotel):
    enrollment = await factories.create_enrollment(db_session, test_user)
    ticket_type = await factories.create_ticket_type(db_session, is_remote=True, includes_hotel=False)
    await factories.create_ticket(db_session, enrollment.id, ticket_type.id)

    response = await client.get("/api/v1/hotels", headers=auth_headers)
    assert response.status_code == 402


@pytest.mark.asyncio
async def test_hotel_rooms_show_occupancy(client: AsyncClient, db_session, eligible_user, eligible_headers, hotel):
    busy = await factories.create_room(db_session, hotel.id, capacity=2)
    empty = await factories.create_room(db_session, hotel.id, capacity=1)
    await factories.create_booking(db_session, eligible_user.id, busy.id)

    response = await client.get(f"/api/v1/hotels/{hotel.id}", headers=eligible_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["id"] == hotel.id
    rooms = {r["id"]: r for r in data["Rooms"]}
    assert rooms[busy.id]["booked"] == 1
    assert rooms[busy.id]["capacity"] == 2
    assert rooms[busy.id]["hotelId"] == hotel.id
    assert rooms[empty.id]["booked"] == 0


@pytest.mark.asyncio
async def test_hotel_not_found(client: AsyncClient, eligible_headers, hotel):
    response = await client.get(f"/api/v1/hotels/{hotel.id + 1}", headers=eligible_headers)
    assert response.status_code == 404


class FakeRedis:
    def __init__(self):
        self.store = {}

    async def get(self, key):
        return self.store.get(key)

    async def setex(self, key, ttl, value):
        self.store[key] = value


@pytest.mark.asyncio
async def test_hotel_list_is_cached(client: AsyncClient, db_session, eligible_headers, hotel, monkeypatch):
    fake = FakeRedis()

    async def get_fake_redis():
        return fake

    monkeypatch.setattr(cache_service, "get_redis", get_fake_redis)

    first = await client.get("/api/v1/hotels", headers=eligible_headers)
    assert cache_service.HOTEL_LIST_KEY in fake.store

    # Served from cache: a hotel added afterwards is not listed until expiry
    await factories.create_hotel(db_session)
    second = await client.get("/api/v1/hotels", headers=eligible_headers)
    assert second.status_code == 200
    assert second.json() == first.json()


@pytest.mark.asyncio
async def test_cache_does_not_bypass_eligibility(client: AsyncClient, auth_headers, monkeypatch):
    fake = FakeRedis()
    fake.store[cache_service.HOTEL_LIST_KEY] = "[]"

    async def get_fake_redis():
        return fake

    monkeypatch.setattr(cache_service, "get_redis", get_fake_redis)

    response = await client.get("/api/v1/hotels", headers=auth_headers)
    assert response.status_code == 404


def _cache_count(operation, result):
    value = REGISTRY.get_sample_value(
        "cache_operations_total", {"operation": operation, "result": result}
    )
    return value or 0


class BrokenRedis:
    async def get(self, key):
        raise ConnectionError("redis down")

    async def setex(self, key, ttl, value):
        raise ConnectionError("redis down")


@pytest.mark.asyncio
async def test_cache_operations_are_counted(client: AsyncClient, eligible_headers, hotel, monkeypatch):
    fake = FakeRedis()

    async def get_fake_redis():
        return fake

    monkeypatch.setattr(cache_service, "get_redis", get_fake_redis)
    before = {key: _cache_count(*key) for key in [("get", "miss"), ("set", "ok"), ("get", "hit")]}

    await client.get("/api/v1/hotels", headers=eligible_headers)
    await client.get("/api/v1/hotels", headers=eligible_headers)

    assert _cache_count("get", "miss") == before[("get", "miss")] + 1
    assert _cache_count("set", "ok") == before[("set", "ok")] + 1
    assert _cache_count("get", "hit") == before[("get", "hit")] + 1


@pytest.mark.asyncio
async def test_cache_failure_is_counted_and_served_from_db(
    client: AsyncClient, eligible_headers, hotel, monkeypatch
):
    async def get_broken_redis():
        return BrokenRedis()

    monkeypatch.setattr(cache_service, "get_redis", get_broken_redis)
    get_errors = _cache_count("get", "error")
    set_errors = _cache_count("set", "error")

    response = await client.get("/api/v1/hotels", headers=eligible_headers)

    assert response.status_code == 200
    assert [h["id"] for h in response.json()] == [hotel.id]
    assert _cache_count("get", "error") == get_errors + 1
    assert _cache_count("set", "error") == set_errors + 1
