"""
Sleep Record Routes
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from sleep_tracker.database.connection import get_db
from sleep_tracker.services.cache_service import CacheBackend, get_cache
from sleep_tracker.api.v1.controllers.sleep_records_controller import SleepRecordsController
from sleep_tracker.schemas.sleep_record_schemas import (
    SleepRecordListResponse, FriendsSleepRecordsResponse
)
from sleep_tracker.schemas.statistics_schemas import SleepStatisticsResponse

router = APIRouter(prefix="/users", tags=["Sleep Records"])


@router.get(
    "/{user_id}/sleep_records",
    summary="Get Sleep History",
    description="Paginated sleep history, newest first. Pass `cursor` for cursor pagination.",
    response_model=SleepRecordListResponse
)
async def list_sleep_records(
    user_id: str,
    page: Optional[int] = Query(None, description="Page number (page/limit mode)"),
    limit: Optional[int] = Query(None, description="Page size, default 10, max 100"),
    cursor: Optional[int] = Query(None, description="Return records with id below this value"),
    db: AsyncSession = Depends(get_db),
    cache: CacheBackend = Depends(get_cache)
):
    return await SleepRecordsController.list_sleep_records(db, cache, user_id, page, limit, cursor)


@router.get(
    "/{user_id}/friends_sleep_records",
    summary="Get Friends' Sleep Records",
    description="Completed sleep records of followed users from the previous week, longest first.",
    response_model=FriendsSleepRecordsResponse
)
async def friends_sleep_records(
    user_id: str,
    page: Optional[int] = Query(None),
    limit: Optional[int] = Query(None),
    db: AsyncSession = Depends(get_db),
    cache: CacheBackend = Depends(get_cache)
):
    return await SleepRecordsController.friends_sleep_records(db, cache, user_id, page, limit)


@router.get(
    "/{user_id}/sleep_statistics",
    summary="Get Sleep Statistics",
    description="Quality, consistency, sleep debt, duration distribution and time-of-day patterns.",
    response_model=SleepStatisticsResponse,
    response_model_exclude_unset=True
)
async def sleep_statistics(
    user_id: str,
    period_days: int = Query(30, ge=1, le=365, description="Trailing window in days"),
    db: AsyncSession = Depends(get_db),
    cache: CacheBackend = Depends(get_cache)
):
    """
    Statistics over the user's completed sessions in the window.

    `statistics` is null when there are no sessions. `cached` tells whether
    the snapshot was served from the cache.
    """
    return await SleepRecordsController.sleep_statistics(db, cache, user_id, period_days)
