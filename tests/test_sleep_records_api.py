"""API tests for sleep history and friends' sleep records."""

from datetime import timedelta

from sleep_tracker.utils.time_utils import previous_week_range, utcnow
from tests.conftest import make_follow, make_record, make_user


async def seed_history(db, user, count):
    """``count`` completed nights, one per day, oldest first."""
    start = (utcnow() - timedelta(days=count + 1)).replace(hour=22, minute=0, second=0, microsecond=0)
    return [
        await make_record(db, user, start + timedelta(days=i), timedelta(hours=8))
        for i in range(count)
    ]


class TestSleepHistory:
    async def test_offset_pagination_newest_first(self, client, db):
        user = await make_user(db)
        records = await seed_history(db, user, 15)

        response = await client.get(f"/users/{user.id}/sleep_records")

        assert response.status_code == 200
        body = response.json()
        ids = [r["id"] for r in body["sleep_records"]]
        assert ids == [r.id for r in reversed(records)][:10]
        assert body["pagination"] == {
            "type": "traditional",
            "current_page": 1,
            "total_pages": 2,
            "total_count": 15,
            "per_page": 10,
        }

    async def test_second_page(self, client, db):
        user = await make_user(db)
        records = await seed_history(db, user, 15)

        response = await client.get(f"/users/{user.id}/sleep_records", params={"page": 2})

        body = response.json()
        assert [r["id"] for r in body["sleep_records"]] == [r.id for r in reversed(records)][10:]
        assert body["pagination"]["current_page"] == 2

    async def test_limit_is_normalized(self, client, db):
        user = await make_user(db)
        await seed_history(db, user, 3)

        capped = await client.get(f"/users/{user.id}/sleep_records", params={"limit": 500})
        defaulted = await client.get(f"/users/{user.id}/sleep_records", params={"limit": 0, "page": -1})

        assert capped.json()["pagination"]["per_page"] == 100
        assert defaulted.json()["pagination"]["per_page"] == 10
        assert defaulted.json()["pagination"]["current_page"] == 1

    async def test_includes_active_session(self, client, db):
        user = await make_user(db)
        await seed_history(db, user, 2)
        active = await make_record(db, user, utcnow() - timedelta(hours=1))

        body = (await client.get(f"/users/{user.id}/sleep_records")).json()

        assert body["sleep_records"][0]["id"] == active.id
        assert body["sleep_records"][0]["wake_up_at"] is None

    async def test_only_own_records(self, client, db):
        alice = await make_user(db, "Alice")
        bob = await make_user(db, "Bob")
        await seed_history(db, alice, 2)
        await seed_history(db, bob, 3)

        body = (await client.get(f"/users/{alice.id}/sleep_records")).json()

        assert body["pagination"]["total_count"] == 2
        assert {r["user_id"] for r in body["sleep_records"]} == {alice.id}

    async def test_cursor_pagination(self, client, db):
        user = await make_user(db)
        records = await seed_history(db, user, 5)
        newest_first = [r.id for r in reversed(records)]

        first = await client.get(
            f"/users/{user.id}/sleep_records", params={"cursor": max(newest_first) + 1, "limit": 3}
        )
        first_body = first.json()
        assert [r["id"] for r in first_body["sleep_records"]] == newest_first[:3]
        assert first_body["pagination"] == {
            "type": "cursor",
            "has_more": True,
            "next_cursor": newest_first[2],
            "limit": 3,
        }

        second = await client.get(
            f"/users/{user.id}/sleep_records",
            params={"cursor": first_body["pagination"]["next_cursor"], "limit": 3},
        )
        second_body = second.json()
        assert [r["id"] for r in second_body["sleep_records"]] == newest_first[3:]
        assert second_body["pagination"]["has_more"] is False

    async def test_cursor_past_the_end(self, client, db):
        user = await make_user(db)
        records = await seed_history(db, user, 2)

        body = (
            await client.get(f"/users/{user.id}/sleep_records", params={"cursor": min(r.id for r in records)})
        ).json()

        assert body["sleep_records"] == []
        assert body["pagination"]["has_more"] is False
        assert body["pagination"]["next_cursor"] is None

    async def test_unknown_user(self, client):
        response = await client.get("/users/missing/sleep_records")
        assert response.status_code == 404
        assert response.json() == {"error": "User not found"}


class TestFriendsSleepRecords:
    async def test_previous_week_longest_first(self, client, db):
        me = await make_user(db, "Me")
        bob = await make_user(db, "Bob")
        carol = await make_user(db, "Carol")
        stranger = await make_user(db, "Stranger")
        await make_follow(db, me, bob)
        await make_follow(db, me, carol)

        week_start, week_end = previous_week_range(utcnow())
        night = week_start + timedelta(days=2, hours=22)
        short = await make_record(db, bob, night, timedelta(hours=6))
        long = await make_record(db, carol, night, timedelta(hours=9))
        # outside the window or not followed
        await make_record(db, bob, week_start - timedelta(days=2), timedelta(hours=10))
        await make_record(db, carol, week_end + timedelta(hours=1), timedelta(hours=11))
        await make_record(db, stranger, night, timedelta(hours=12))
        # active sessions never show up
        await make_record(db, bob, week_start + timedelta(days=4))

        response = await client.get(f"/users/{me.id}/friends_sleep_records")

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Sleep records from friends in the previous week"
        assert body["following_count"] == 2
        assert body["week_range"] == {
            "start_date": week_start.strftime("%Y-%m-%d"),
            "end_date": week_end.strftime("%Y-%m-%d"),
        }

        items = body["friends_sleep_records"]
        assert [item["id"] for item in items] == [long.id, short.id]
        assert items[0]["user"] == {"id": carol.id, "name": "Carol"}
        assert items[0]["duration_formatted"] == "9h 0m"
        assert items[0]["duration_hours"] == 9.0
        assert items[1]["duration_formatted"] == "6h 0m"
        assert body["pagination"]["total_count"] == 2

    async def test_week_is_monday_to_sunday(self, client, db):
        me = await make_user(db, "Me")

        body = (await client.get(f"/users/{me.id}/friends_sleep_records")).json()

        week_start, week_end = previous_week_range(utcnow())
        assert week_start.weekday() == 0
        assert week_end.weekday() == 6
        assert body["week_range"]["start_date"] == week_start.strftime("%Y-%m-%d")

    async def test_not_following_anyone(self, client, db):
        me = await make_user(db, "Me")

        response = await client.get(f"/users/{me.id}/friends_sleep_records", params={"page": -1})

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "User is not following anyone"
        assert body["friends_sleep_records"] == []
        assert body["following_count"] == 0
        assert body["pagination"]["current_page"] == 1
        assert body["pagination"]["total_count"] == 0

    async def test_pagination(self, client, db):
        me = await make_user(db, "Me")
        week_start, _ = previous_week_range(utcnow())
        for index in range(3):
            friend = await make_user(db, f"Friend {index}")
            await make_follow(db, me, friend)
            await make_record(
                db, friend, week_start + timedelta(days=index, hours=23), timedelta(hours=5 + index)
            )

        body = (
            await client.get(f"/users/{me.id}/friends_sleep_records", params={"page": 2, "limit": 2})
        ).json()

        assert len(body["friends_sleep_records"]) == 1
        assert body["friends_sleep_records"][0]["duration_formatted"] == "5h 0m"
        assert body["pagination"] == {
            "type": "traditional",
            "current_page": 2,
            "total_pages": 2,
            "total_count": 3,
            "per_page": 2,
        }

    async def test_unknown_user(self, client):
        response = await client.get("/users/missing/friends_sleep_records")
        assert response.status_code == 404
