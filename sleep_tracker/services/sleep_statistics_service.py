"""
Sleep statistics engine.

Aggregates a user's completed sleep sessions over a trailing window of days
into an overview (quality, consistency, sleep debt), a duration analysis and
bed/wake time-of-day patterns.

``summarize`` is pure: it only looks at the sessions it is given.
``SleepStatisticsService.compute`` selects the window from the database and
never touches the cache; ``get_statistics`` wraps it with the read-through
cache and reports whether the snapshot was served from there.

Scoring:
    consistency   = max(100 - stddev(duration hours) * 20, 0)
    duration      = max(100 - |mean hours - 8| * 15, 0)
    quality       = duration * 0.7 + consistency * 0.3
    sleep debt    = (total seconds - 8h * N) in hours, negative when short of 8h a night
    time of day   = max(100 - stddev(decimal hours) * 50, 0)

Time-of-day consistency works on raw decimal hours with no wrap-around at
midnight, so bedtimes spread around 00:00 (23:30 vs 00:30) score as widely
scattered. That is the established behaviour of the score and is kept as is.
"""
import math
from datetime import datetime, timedelta
from typing import Dict, List, Optional, Sequence, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from sleep_tracker.core.config import settings
from sleep_tracker.core.logger import get_logger
from sleep_tracker.models import SleepRecord
from sleep_tracker.services.cache_service import CacheBackend, statistics_key
from sleep_tracker.utils.time_utils import (
    beginning_of_day,
    end_of_day,
    format_duration,
    format_time_of_day,
    hour_of_day,
    round_half_up,
    seconds_to_hours,
    utcnow,
)

logger = get_logger("sleep_statistics_service")

OPTIMAL_DURATION_HOURS = 8.0
NO_RECORDS_MESSAGE = "No sleep records found for this period"

# Fixed order also decides ties for the most common range
DURATION_BUCKETS = ("under_6h", "6_7h", "7_8h", "8_9h", "over_9h")


def duration_bucket(hours: float) -> str:
    if hours < 6:
        return "under_6h"
    if hours < 7:
        return "6_7h"
    if hours < 8:
        return "7_8h"
    if hours < 9:
        return "8_9h"
    return "over_9h"


def humanize(key: str) -> str:
    """``"under_6h"`` -> ``"Under 6h"``, ``"7_8h"`` -> ``"7 8h"``."""
    text = key.replace("_", " ").strip()
    return text[:1].upper() + text[1:]


def _mean_and_stddev(values: Sequence[float]) -> Tuple[float, float]:
    # Population variance (divide by N)
    mean = sum(values) / len(values)
    variance = sum((v - mean) ** 2 for v in values) / len(values)
    return mean, math.sqrt(variance)


def calculate_time_consistency(times: Sequence[float]) -> float:
    """Consistency of decimal-hour times of day; 1h stddev costs 50 points."""
    if len(times) <= 1:
        return 100.0
    _, std_dev = _mean_and_stddev(times)
    return round_half_up(max(100 - std_dev * 50, 0), 1)


def period_window(period_days: int, now: datetime) -> Tuple[datetime, datetime]:
    return beginning_of_day(now - timedelta(days=period_days)), end_of_day(now)


def _extreme(record) -> Dict:
    return {
        "duration_hours": seconds_to_hours(record.duration),
        "date": record.go_to_bed_at.strftime("%Y-%m-%d"),
        "formatted": format_duration(record.duration),
    }


def summarize(records: Sequence) -> Optional[Dict]:
    """
    Statistics over completed sessions ordered by bed time.

    Returns None when there are no sessions.
    """
    if not records:
        return None

    total_records = len(records)
    durations = [r.duration for r in records]
    total_sleep_seconds = sum(durations)
    average_duration = total_sleep_seconds / total_records

    duration_hours = [d / 3600.0 for d in durations]
    mean_duration_hours, duration_std = _mean_and_stddev(duration_hours)
    consistency_score = round_half_up(max(100 - duration_std * 20, 0), 1)

    duration_score = max(100 - abs(mean_duration_hours - OPTIMAL_DURATION_HOURS) * 15, 0)
    quality_score = round_half_up(duration_score * 0.7 + consistency_score * 0.3, 1)

    recommended_total = OPTIMAL_DURATION_HOURS * total_records * 3600
    sleep_debt_hours = (total_sleep_seconds - recommended_total) / 3600.0

    distribution = {bucket: 0 for bucket in DURATION_BUCKETS}
    for hours in duration_hours:
        distribution[duration_bucket(hours)] += 1
    most_common_range = max(DURATION_BUCKETS, key=lambda bucket: distribution[bucket])

    # min/max keep the first session in bed-time order on ties
    shortest = min(records, key=lambda r: r.duration)
    longest = max(records, key=lambda r: r.duration)

    bedtimes = [hour_of_day(r.go_to_bed_at) for r in records]
    wake_times = [hour_of_day(r.wake_up_at) for r in records]

    return {
        "overview": {
            "total_records": total_records,
            "average_duration_hours": round_half_up(average_duration / 3600.0, 2),
            "sleep_quality_score": quality_score,
            "sleep_debt_hours": round_half_up(sleep_debt_hours, 2),
            "consistency_score": consistency_score,
        },
        "duration_analysis": {
            "shortest_sleep": _extreme(shortest),
            "longest_sleep": _extreme(longest),
            "most_common_range": humanize(most_common_range),
            "duration_distribution": distribution,
        },
        "patterns": {
            "average_bedtime": format_time_of_day(sum(bedtimes) / len(bedtimes)),
            "average_wake_time": format_time_of_day(sum(wake_times) / len(wake_times)),
            "bedtime_consistency": calculate_time_consistency(bedtimes),
            "wake_time_consistency": calculate_time_consistency(wake_times),
        },
    }


def build_snapshot(user_id: str, period_days: int, records: Sequence, now: datetime) -> Dict:
    """Wrap ``summarize`` with the window description and generation time."""
    period = f"last_{period_days}_days"
    statistics = summarize(records)

    if statistics is None:
        return {
            "user_id": user_id,
            "period": period,
            "message": NO_RECORDS_MESSAGE,
            "statistics": None,
        }

    start_date, end_date = period_window(period_days, now)
    return {
        "user_id": user_id,
        "period": period,
        "period_range": {
            "start_date": start_date.strftime("%Y-%m-%d"),
            "end_date": (end_date - timedelta(days=1)).strftime("%Y-%m-%d"),
        },
        "statistics": statistics,
        "generated_at": now.replace(microsecond=0).isoformat() + "Z",
    }


class SleepStatisticsService:
    """Database-backed statistics, with and without the cache."""

    @staticmethod
    async def completed_records_in_period(
        db: AsyncSession, user_id: str, period_days: int, now: datetime
    ) -> List[SleepRecord]:
        start_date, end_date = period_window(period_days, now)
        result = await db.execute(
            select(SleepRecord)
            .where(SleepRecord.user_id == user_id)
            .where(SleepRecord.go_to_bed_at >= start_date)
            .where(SleepRecord.go_to_bed_at <= end_date)
            .where(SleepRecord.wake_up_at.isnot(None))
            .where(SleepRecord.duration > 0)
            .order_by(SleepRecord.go_to_bed_at, SleepRecord.id)
        )
        return list(result.scalars().all())

    @staticmethod
    async def compute(
        db: AsyncSession, user_id: str, period_days: int, now: Optional[datetime] = None
    ) -> Dict:
        now = now or utcnow()
        records = await SleepStatisticsService.completed_records_in_period(
            db, user_id, period_days, now
        )
        return build_snapshot(user_id, period_days, records, now)

    @staticmethod
    async def get_statistics(
        db: AsyncSession,
        cache: CacheBackend,
        user_id: str,
        period_days: int,
        now: Optional[datetime] = None,
    ) -> Tuple[Dict, bool]:
        """Returns the snapshot and whether it came from the cache."""
        key = statistics_key(user_id, period_days)
        cached = await cache.get(key)
        if cached is not None:
            logger.debug(f"Statistics cache hit for {key}")
            return cached, True

        snapshot = await SleepStatisticsService.compute(db, user_id, period_days, now)
        await cache.set(key, snapshot, settings.STATISTICS_CACHE_TTL_SECONDS)
        logger.debug(f"Statistics computed and cached for {key}")
        return snapshot, False
