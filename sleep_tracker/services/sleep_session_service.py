"""
Sleep session state machine.

A user is either without an active session or has exactly one active
session (bed time set, wake time NULL). Clock in opens a session, clock out
completes it. Every rule is checked against the database before anything
is written; the cache is never consulted for these decisions.
"""
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from sleep_tracker.core.logger import get_logger
from sleep_tracker.exceptions import (
    ActiveSessionExists,
    InvalidBedTime,
    InvalidFormat,
    InvalidWakeTime,
    NoActiveSession,
    PersistenceFailure,
)
from sleep_tracker.models import SleepRecord
from sleep_tracker.services.cache_service import CacheBackend, statistics_prefix
from sleep_tracker.utils.time_utils import parse_timestamp, utcnow

logger = get_logger("sleep_session_service")

MAX_BEDTIME_AGE = timedelta(days=30)
MAX_SLEEP_DURATION = timedelta(hours=24)
MIN_SLEEP_DURATION = timedelta(minutes=1)

BEDTIME_EXAMPLE = "2025-09-13T22:30:00Z"
WAKE_TIME_EXAMPLE = "2025-09-14T06:30:00Z"


def _parse_or_raise(value: str, example: str) -> datetime:
    try:
        return parse_timestamp(value)
    except ValueError:
        raise InvalidFormat(example)


def resolve_bed_time(requested: Optional[str], now: datetime) -> datetime:
    """Effective bed time for a clock in; ``now`` when nothing was requested."""
    if not requested or not requested.strip():
        return now

    parsed = _parse_or_raise(requested, BEDTIME_EXAMPLE)
    if parsed > now:
        raise InvalidBedTime("Bedtime cannot be in the future")
    if parsed < now - MAX_BEDTIME_AGE:
        raise InvalidBedTime("Bedtime cannot be more than 30 days ago")
    return parsed


def resolve_wake_time(requested: Optional[str], bed_time: datetime, now: datetime) -> datetime:
    """Effective wake time for a clock out; ``now`` when nothing was requested."""
    if not requested or not requested.strip():
        return now

    parsed = _parse_or_raise(requested, WAKE_TIME_EXAMPLE)
    if parsed > now:
        raise InvalidWakeTime("Wake up time cannot be in the future")
    if parsed <= bed_time:
        raise InvalidWakeTime(f"Wake up time must be after bedtime ({bed_time.isoformat()})")

    duration = parsed - bed_time
    if duration >= MAX_SLEEP_DURATION:
        raise InvalidWakeTime("Sleep duration cannot exceed 24 hours")
    if duration < MIN_SLEEP_DURATION:
        raise InvalidWakeTime("Sleep duration must be at least 1 minute")
    return parsed


class SleepSessionService:
    """Clock in / clock out transitions for a user's sleep sessions."""

    @staticmethod
    async def find_active_session(db: AsyncSession, user_id: str) -> Optional[SleepRecord]:
        result = await db.execute(
            select(SleepRecord)
            .where(SleepRecord.user_id == user_id)
            .where(SleepRecord.wake_up_at.is_(None))
            .limit(1)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def clock_in(
        db: AsyncSession,
        user_id: str,
        requested_bed_time: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> SleepRecord:
        now = now or utcnow()

        active = await SleepSessionService.find_active_session(db, user_id)
        if active is not None:
            raise ActiveSessionExists(active.id, active.go_to_bed_at.isoformat())

        bed_time = resolve_bed_time(requested_bed_time, now)

        record = SleepRecord(user_id=user_id, go_to_bed_at=bed_time)
        db.add(record)
        try:
            await db.commit()
        except IntegrityError as e:
            # Lost a race against a concurrent clock in for the same user
            await db.rollback()
            winner = await SleepSessionService.find_active_session(db, user_id)
            if winner is not None:
                raise ActiveSessionExists(winner.id, winner.go_to_bed_at.isoformat())
            logger.error(f"Failed to clock in user {user_id}: {e}")
            raise PersistenceFailure("Failed to clock in", details=[str(e.orig)])
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"Failed to clock in user {user_id}: {e}")
            raise PersistenceFailure("Failed to clock in", details=[str(e)])

        await db.refresh(record)
        logger.info(f"User {user_id} clocked in at {bed_time.isoformat()} (record {record.id})")
        return record

    @staticmethod
    async def clock_out(
        db: AsyncSession,
        cache: CacheBackend,
        user_id: str,
        requested_wake_time: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> SleepRecord:
        now = now or utcnow()

        active = await SleepSessionService.find_active_session(db, user_id)
        if active is None:
            raise NoActiveSession()

        wake_time = resolve_wake_time(requested_wake_time, active.go_to_bed_at, now)
        duration_seconds = int((wake_time - active.go_to_bed_at).total_seconds())

        active.wake_up_at = wake_time
        active.duration = duration_seconds
        try:
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"Failed to clock out user {user_id}: {e}")
            raise PersistenceFailure("Failed to clock out", details=[str(e)])

        await db.refresh(active)

        # A newly completed session changes every statistics window
        await cache.delete_prefix(statistics_prefix(user_id))

        logger.info(f"User {user_id} clocked out after {duration_seconds}s (record {active.id})")
        return active
