"""
Following Routes
"""
from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from sleep_tracker.database.connection import get_db
from sleep_tracker.services.cache_service import CacheBackend, get_cache
from sleep_tracker.api.v1.controllers.user_followings_controller import UserFollowingsController
from sleep_tracker.schemas.following_schemas import FollowResponse

router = APIRouter(prefix="/users", tags=["Following"])


@router.post(
    "/{follower_id}/follow/{followed_id}",
    summary="Follow User",
    description="201 when the edge is created, 200 when it already exists.",
    response_model=FollowResponse,
    status_code=201
)
async def follow(
    follower_id: str,
    followed_id: str,
    response: Response,
    db: AsyncSession = Depends(get_db),
    cache: CacheBackend = Depends(get_cache)
):
    return await UserFollowingsController.follow(db, cache, response, follower_id, followed_id)


@router.delete(
    "/{follower_id}/unfollow/{followed_id}",
    summary="Unfollow User",
    response_model=FollowResponse
)
async def unfollow(
    follower_id: str,
    followed_id: str,
    db: AsyncSession = Depends(get_db),
    cache: CacheBackend = Depends(get_cache)
):
    return await UserFollowingsController.unfollow(db, cache, follower_id, followed_id)
