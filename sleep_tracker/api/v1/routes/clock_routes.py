"""
Clock Routes
"""
from typing import Optional

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from sleep_tracker.database.connection import get_db
from sleep_tracker.services.cache_service import CacheBackend, get_cache
from sleep_tracker.api.v1.controllers.clock_controller import ClockController
from sleep_tracker.schemas.sleep_record_schemas import (
    ClockInRequest, ClockOutRequest, ClockInResponse, ClockOutResponse
)

router = APIRouter(prefix="/users", tags=["Clock"])


@router.post(
    "/{user_id}/clock_in",
    summary="Clock In",
    description="Start a sleep session. Bedtime defaults to now.",
    response_model=ClockInResponse,
    status_code=status.HTTP_201_CREATED
)
async def clock_in(
    user_id: str,
    payload: Optional[ClockInRequest] = Body(None),
    db: AsyncSession = Depends(get_db),
    cache: CacheBackend = Depends(get_cache)
):
    """
    Open a sleep session for the user.

    Fails with 422 if a session is already active, and with 400 if the
    bedtime is malformed, in the future or more than 30 days old.
    """
    return await ClockController.clock_in(db, cache, user_id, payload)


@router.patch(
    "/{user_id}/clock_out",
    summary="Clock Out",
    description="Complete the active sleep session. Wake up time defaults to now.",
    response_model=ClockOutResponse
)
async def clock_out(
    user_id: str,
    payload: Optional[ClockOutRequest] = Body(None),
    db: AsyncSession = Depends(get_db),
    cache: CacheBackend = Depends(get_cache)
):
    """
    Complete the user's active session.

    Fails with 422 when there is nothing to clock out of, and with 400 when
    the wake up time is malformed, in the future, not after bedtime, or gives
    a duration outside [1 minute, 24 hours).
    """
    return await ClockController.clock_out(db, cache, user_id, payload)
