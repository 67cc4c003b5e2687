"""
Clock Controller
"""
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from sleep_tracker.schemas.sleep_record_schemas import (
    ClockInRequest, ClockOutRequest, ClockInResponse, ClockOutResponse,
    SleepRecordResponse, CompletedSleepRecordResponse
)
from sleep_tracker.services.cache_service import CacheBackend
from sleep_tracker.services.sleep_session_service import SleepSessionService
from sleep_tracker.services.user_service import UserService
from sleep_tracker.utils.time_utils import seconds_to_hours
from sleep_tracker.core.logger import get_logger

logger = get_logger("clock_controller")


class ClockController:
    """Controller for clock in / clock out."""

    @staticmethod
    async def clock_in(
        db: AsyncSession,
        cache: CacheBackend,
        user_id: str,
        payload: Optional[ClockInRequest]
    ) -> ClockInResponse:
        user = await UserService.get_or_404(db, cache, user_id)
        requested = payload.go_to_bed_at if payload else None

        record = await SleepSessionService.clock_in(db, user.id, requested)

        return ClockInResponse(
            message="Clock in successful",
            sleep_record=SleepRecordResponse.model_validate(record)
        )

    @staticmethod
    async def clock_out(
        db: AsyncSession,
        cache: CacheBackend,
        user_id: str,
        payload: Optional[ClockOutRequest]
    ) -> ClockOutResponse:
        user = await UserService.get_or_404(db, cache, user_id)
        requested = payload.wake_up_at if payload else None

        record = await SleepSessionService.clock_out(db, cache, user.id, requested)

        return ClockOutResponse(
            message="Clock out successful - woke up!",
            sleep_record=CompletedSleepRecordResponse(
                **SleepRecordResponse.model_validate(record).model_dump(),
                duration_hours=seconds_to_hours(record.duration)
            )
        )
