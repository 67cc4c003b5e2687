"""
Sleep Records Controller
"""
from typing import Optional

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from sleep_tracker.models import SleepRecord, User
from sleep_tracker.schemas.sleep_record_schemas import (
    SleepRecordListResponse, SleepRecordResponse, FriendsSleepRecordsResponse,
    FriendSleepRecord, WeekRange, OffsetPagination
)
from sleep_tracker.schemas.statistics_schemas import SleepStatisticsResponse
from sleep_tracker.schemas.user_schemas import UserSummary
from sleep_tracker.services.cache_service import CacheBackend
from sleep_tracker.services.sleep_statistics_service import SleepStatisticsService
from sleep_tracker.services.user_service import UserService
from sleep_tracker.utils.pagination import (
    normalize_limit, normalize_page, paginate_by_cursor, paginate_by_offset
)
from sleep_tracker.utils.time_utils import (
    format_duration, previous_week_range, seconds_to_hours, utcnow
)
from sleep_tracker.core.logger import get_logger

logger = get_logger("sleep_records_controller")


class SleepRecordsController:
    """Controller for sleep history, friends' records and statistics."""

    @staticmethod
    async def list_sleep_records(
        db: AsyncSession,
        cache: CacheBackend,
        user_id: str,
        page: Optional[int],
        limit: Optional[int],
        cursor: Optional[int]
    ) -> SleepRecordListResponse:
        """Cursor pagination when a cursor is given, page/limit otherwise."""
        user = await UserService.get_or_404(db, cache, user_id)
        limit = normalize_limit(limit)

        query = (
            select(SleepRecord)
            .where(SleepRecord.user_id == user.id)
            .order_by(desc(SleepRecord.created_at), desc(SleepRecord.id))
        )

        if cursor is not None:
            records, pagination = await paginate_by_cursor(db, query, SleepRecord.id, cursor, limit)
        else:
            records, pagination = await paginate_by_offset(db, query, normalize_page(page), limit)

        return SleepRecordListResponse(
            sleep_records=[SleepRecordResponse.model_validate(r) for r in records],
            pagination=pagination
        )

    @staticmethod
    async def friends_sleep_records(
        db: AsyncSession,
        cache: CacheBackend,
        user_id: str,
        page: Optional[int],
        limit: Optional[int]
    ) -> FriendsSleepRecordsResponse:
        """
        Completed sessions of followed users from the previous Monday-Sunday
        week, longest first. Page/limit pagination since the week is bounded.
        """
        user = await UserService.get_or_404(db, cache, user_id)
        page = normalize_page(page)
        limit = normalize_limit(limit)

        week_start, week_end = previous_week_range(utcnow())
        week_range = WeekRange(
            start_date=week_start.strftime("%Y-%m-%d"),
            end_date=week_end.strftime("%Y-%m-%d")
        )

        following_ids = await UserService.following_ids_with_cache(db, cache, user.id)
        if not following_ids:
            return FriendsSleepRecordsResponse(
                message="User is not following anyone",
                friends_sleep_records=[],
                week_range=week_range,
                pagination=OffsetPagination(
                    current_page=1, total_pages=0, total_count=0, per_page=limit
                ),
                following_count=0
            )

        query = (
            select(SleepRecord, User.name)
            .join(User, User.id == SleepRecord.user_id)
            .where(SleepRecord.user_id.in_(following_ids))
            .where(SleepRecord.go_to_bed_at >= week_start)
            .where(SleepRecord.go_to_bed_at <= week_end)
            .where(SleepRecord.wake_up_at.isnot(None))
            .where(SleepRecord.duration > 0)
            .order_by(desc(SleepRecord.duration), SleepRecord.id)
        )
        rows, pagination = await paginate_by_offset(db, query, page, limit, scalars=False)

        formatted = [
            FriendSleepRecord(
                id=record.id,
                user=UserSummary(id=record.user_id, name=name),
                go_to_bed_at=record.go_to_bed_at,
                wake_up_at=record.wake_up_at,
                duration=record.duration,
                duration_hours=seconds_to_hours(record.duration),
                duration_formatted=format_duration(record.duration),
                created_at=record.created_at
            )
            for record, name in rows
        ]

        return FriendsSleepRecordsResponse(
            message="Sleep records from friends in the previous week",
            friends_sleep_records=formatted,
            week_range=week_range,
            pagination=OffsetPagination(**pagination),
            following_count=len(following_ids)
        )

    @staticmethod
    async def sleep_statistics(
        db: AsyncSession,
        cache: CacheBackend,
        user_id: str,
        period_days: int
    ) -> SleepStatisticsResponse:
        user = await UserService.get_or_404(db, cache, user_id)

        snapshot, cached = await SleepStatisticsService.get_statistics(
            db, cache, user.id, period_days
        )
        return SleepStatisticsResponse(**snapshot, cached=cached)
