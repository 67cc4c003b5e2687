"""Tests for sleep_tracker.services.cache_service and the user read-through helpers."""

import pytest

from sleep_tracker.services import cache_service
from sleep_tracker.services.cache_service import (
    InMemoryCache,
    following_ids_key,
    statistics_key,
    statistics_prefix,
    user_key,
)
from sleep_tracker.services.user_service import UserService
from tests.conftest import make_follow, make_user


class TestKeys:
    def test_key_layout(self):
        assert user_key("abc") == "user:abc"
        assert following_ids_key("abc") == "user:abc:following_ids"
        assert statistics_key("abc", 30) == "user:abc:sleep_statistics:30days"
        assert statistics_key("abc", 7).startswith(statistics_prefix("abc"))


class TestInMemoryCache:
    async def test_set_get_delete(self):
        cache = InMemoryCache()
        await cache.set("k", {"a": [1, 2]}, 60)
        assert await cache.get("k") == {"a": [1, 2]}
        await cache.delete("k")
        assert await cache.get("k") is None

    async def test_returns_copies(self):
        cache = InMemoryCache()
        await cache.set("k", {"a": 1}, 60)
        first = await cache.get("k")
        first["a"] = 2
        assert await cache.get("k") == {"a": 1}

    async def test_expiry(self, monkeypatch):
        cache = InMemoryCache()
        clock = [100.0]
        monkeypatch.setattr(cache_service, "monotonic", lambda: clock[0])

        await cache.set("k", "v", 10)
        clock[0] = 109.9
        assert await cache.get("k") == "v"
        clock[0] = 110.0
        assert await cache.get("k") is None
        assert "k" not in cache._entries

    async def test_delete_prefix(self):
        cache = InMemoryCache()
        await cache.set("user:1:sleep_statistics:7days", 1, 60)
        await cache.set("user:1:sleep_statistics:30days", 2, 60)
        await cache.set("user:1:following_ids", [], 60)
        await cache.set("user:10:sleep_statistics:7days", 3, 60)

        await cache.delete_prefix(statistics_prefix("1"))

        assert sorted(cache._entries) == ["user:10:sleep_statistics:7days", "user:1:following_ids"]


class TestUserReadThrough:
    async def test_user_is_cached_after_first_lookup(self, db, cache):
        user = await make_user(db, "Alice")

        found = await UserService.find_with_cache(db, cache, user.id)
        assert found.name == "Alice"
        assert (await cache.get(user_key(user.id)))["name"] == "Alice"

    async def test_cached_user_served_without_store(self, db, cache):
        await cache.set(user_key("ghost"), {"id": "ghost", "name": "Cached"}, 60)
        found = await UserService.find_with_cache(db, cache, "ghost")
        assert found.id == "ghost"
        assert found.name == "Cached"

    async def test_missing_user_is_not_cached(self, db, cache):
        assert await UserService.find_with_cache(db, cache, "nope") is None
        assert await cache.get(user_key("nope")) is None

    async def test_following_ids_cached(self, db, cache):
        alice = await make_user(db, "Alice")
        bob = await make_user(db, "Bob")
        await make_follow(db, alice, bob)

        ids = await UserService.following_ids_with_cache(db, cache, alice.id)
        assert ids == [bob.id]
        assert await cache.get(following_ids_key(alice.id)) == [bob.id]

    async def test_empty_following_list_is_cached(self, db, cache):
        alice = await make_user(db, "Alice")
        assert await UserService.following_ids_with_cache(db, cache, alice.id) == []
        assert await cache.get(following_ids_key(alice.id)) == []

    async def test_update_refreshes_cache(self, db, cache):
        user = await make_user(db, "Alice")
        await UserService.find_with_cache(db, cache, user.id)

        await UserService.update_user(db, cache, user.id, "Alicia")

        assert (await cache.get(user_key(user.id)))["name"] == "Alicia"
        assert (await UserService.find_with_cache(db, cache, user.id)).name == "Alicia"
