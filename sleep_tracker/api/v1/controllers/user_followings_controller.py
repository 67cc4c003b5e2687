"""
User Followings Controller
"""
from fastapi import Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from sleep_tracker.schemas.following_schemas import FollowResponse
from sleep_tracker.services.cache_service import CacheBackend
from sleep_tracker.services.follow_service import FollowService


class UserFollowingsController:
    """Controller for follow / unfollow."""

    @staticmethod
    async def follow(
        db: AsyncSession,
        cache: CacheBackend,
        response: Response,
        follower_id: str,
        followed_id: str
    ) -> FollowResponse:
        created = await FollowService.follow(db, cache, follower_id, followed_id)
        if not created:
            response.status_code = status.HTTP_200_OK
            return FollowResponse(message="Already following this user")

        response.status_code = status.HTTP_201_CREATED
        return FollowResponse(message="Successfully followed user")

    @staticmethod
    async def unfollow(
        db: AsyncSession,
        cache: CacheBackend,
        follower_id: str,
        followed_id: str
    ) -> FollowResponse:
        await FollowService.unfollow(db, cache, follower_id, followed_id)
        return FollowResponse(message="Successfully unfollowed user")
