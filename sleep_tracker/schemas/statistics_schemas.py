"""
Sleep Statistics API Schemas
"""
from pydantic import BaseModel, Field
from typing import Dict, Optional


class SleepOverview(BaseModel):
    total_records: int
    average_duration_hours: float
    sleep_quality_score: float
    sleep_debt_hours: float  # negative when short of 8h per night
    consistency_score: float


class SleepExtreme(BaseModel):
    """Shortest or longest sleep in the window"""
    duration_hours: float
    date: str
    formatted: str


class DurationAnalysis(BaseModel):
    shortest_sleep: SleepExtreme
    longest_sleep: SleepExtreme
    most_common_range: str
    duration_distribution: Dict[str, int]


class SleepPatterns(BaseModel):
    average_bedtime: str
    average_wake_time: str
    bedtime_consistency: float
    wake_time_consistency: float


class SleepStatistics(BaseModel):
    overview: SleepOverview
    duration_analysis: DurationAnalysis
    patterns: SleepPatterns


class PeriodRange(BaseModel):
    start_date: str
    end_date: str


class SleepStatisticsResponse(BaseModel):
    """Statistics snapshot plus the cache flag"""
    user_id: str
    period: str
    period_range: Optional[PeriodRange] = None
    message: Optional[str] = None
    statistics: Optional[SleepStatistics] = None
    generated_at: Optional[str] = None
    cached: bool = Field(False, description="True when served from the cache")
