"""API tests for follow / unfollow."""

from sqlalchemy import func, select

from sleep_tracker.models import UserFollowing
from sleep_tracker.services.cache_service import following_ids_key
from tests.conftest import make_follow, make_user


async def edge_count(session_factory):
    async with session_factory() as session:
        result = await session.execute(select(func.count()).select_from(UserFollowing))
        return result.scalar()


class TestFollow:
    async def test_follow_creates_edge(self, client, db, session_factory):
        alice = await make_user(db, "Alice")
        bob = await make_user(db, "Bob")

        response = await client.post(f"/users/{alice.id}/follow/{bob.id}")

        assert response.status_code == 201
        assert response.json() == {"message": "Successfully followed user"}
        assert await edge_count(session_factory) == 1

    async def test_follow_is_idempotent(self, client, db, session_factory):
        alice = await make_user(db, "Alice")
        bob = await make_user(db, "Bob")
        await client.post(f"/users/{alice.id}/follow/{bob.id}")

        response = await client.post(f"/users/{alice.id}/follow/{bob.id}")

        assert response.status_code == 200
        assert response.json() == {"message": "Already following this user"}
        assert await edge_count(session_factory) == 1

    async def test_follow_is_directed(self, client, db, session_factory):
        alice = await make_user(db, "Alice")
        bob = await make_user(db, "Bob")
        await client.post(f"/users/{alice.id}/follow/{bob.id}")

        response = await client.post(f"/users/{bob.id}/follow/{alice.id}")

        assert response.status_code == 201
        assert await edge_count(session_factory) == 2

    async def test_cannot_follow_self(self, client, db):
        alice = await make_user(db, "Alice")

        response = await client.post(f"/users/{alice.id}/follow/{alice.id}")

        assert response.status_code == 422
        assert response.json() == {"error": "You cannot follow yourself"}

    async def test_unknown_follower(self, client, db):
        bob = await make_user(db, "Bob")

        response = await client.post(f"/users/missing/follow/{bob.id}")

        assert response.status_code == 404
        assert response.json() == {"error": "Follower user not found"}

    async def test_unknown_followed(self, client, db):
        alice = await make_user(db, "Alice")

        response = await client.post(f"/users/{alice.id}/follow/missing")

        assert response.status_code == 404
        assert response.json() == {"error": "User to follow not found"}

    async def test_follow_refreshes_friends_list(self, client, db, cache):
        alice = await make_user(db, "Alice")
        bob = await make_user(db, "Bob")

        first = (await client.get(f"/users/{alice.id}/friends_sleep_records")).json()
        assert first["following_count"] == 0
        assert await cache.get(following_ids_key(alice.id)) == []

        await client.post(f"/users/{alice.id}/follow/{bob.id}")

        assert await cache.get(following_ids_key(alice.id)) is None
        second = (await client.get(f"/users/{alice.id}/friends_sleep_records")).json()
        assert second["following_count"] == 1


class TestUnfollow:
    async def test_unfollow_removes_edge(self, client, db, session_factory):
        alice = await make_user(db, "Alice")
        bob = await make_user(db, "Bob")
        await make_follow(db, alice, bob)

        response = await client.delete(f"/users/{alice.id}/unfollow/{bob.id}")

        assert response.status_code == 200
        assert response.json() == {"message": "Successfully unfollowed user"}
        assert await edge_count(session_factory) == 0

    async def test_unfollow_without_edge(self, client, db):
        alice = await make_user(db, "Alice")
        bob = await make_user(db, "Bob")

        response = await client.delete(f"/users/{alice.id}/unfollow/{bob.id}")

        assert response.status_code == 404
        assert response.json() == {"error": "You are not following this user"}

    async def test_unfollow_unknown_user(self, client, db):
        alice = await make_user(db, "Alice")

        response = await client.delete(f"/users/{alice.id}/unfollow/missing")

        assert response.status_code == 404

    async def test_unfollow_evicts_following_ids(self, client, db, cache):
        alice = await make_user(db, "Alice")
        bob = await make_user(db, "Bob")
        await make_follow(db, alice, bob)
        await client.get(f"/users/{alice.id}/friends_sleep_records")
        assert await cache.get(following_ids_key(alice.id)) == [bob.id]

        await client.delete(f"/users/{alice.id}/unfollow/{bob.id}")

        assert await cache.get(following_ids_key(alice.id)) is None
