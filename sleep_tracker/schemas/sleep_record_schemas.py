"""
Sleep Record API Schemas
"""
from pydantic import AliasChoices, BaseModel, Field
from typing import List, Optional
from datetime import datetime

from sleep_tracker.schemas.user_schemas import UserSummary


class ClockInRequest(BaseModel):
    """Optional bedtime for clock in; current time is used when omitted"""
    go_to_bed_at: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("go_to_bed_at", "goToBedAt"),
        description="ISO 8601 bedtime",
        examples=["2025-09-13T22:30:00Z"]
    )


class ClockOutRequest(BaseModel):
    """Optional wake up time for clock out; current time is used when omitted"""
    wake_up_at: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("wake_up_at", "wakeUpAt"),
        description="ISO 8601 wake up time",
        examples=["2025-09-14T06:30:00Z"]
    )


class SleepRecordResponse(BaseModel):
    """Sleep record as stored"""
    id: int
    user_id: str
    go_to_bed_at: datetime
    wake_up_at: Optional[datetime] = None
    duration: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class CompletedSleepRecordResponse(SleepRecordResponse):
    """Sleep record after clock out, with derived hours"""
    duration_hours: float


class ClockInResponse(BaseModel):
    message: str
    sleep_record: SleepRecordResponse


class ClockOutResponse(BaseModel):
    message: str
    sleep_record: CompletedSleepRecordResponse


class CursorPagination(BaseModel):
    type: str = "cursor"
    has_more: bool
    next_cursor: Optional[int]
    limit: int


class OffsetPagination(BaseModel):
    type: str = "traditional"
    current_page: int
    total_pages: int
    total_count: int
    per_page: int


class SleepRecordListResponse(BaseModel):
    sleep_records: List[SleepRecordResponse]
    pagination: CursorPagination | OffsetPagination


class WeekRange(BaseModel):
    start_date: str
    end_date: str


class FriendSleepRecord(BaseModel):
    """A followed user's completed sleep record"""
    id: int
    user: UserSummary
    go_to_bed_at: datetime
    wake_up_at: datetime
    duration: int
    duration_hours: float
    duration_formatted: str
    created_at: Optional[datetime] = None


class FriendsSleepRecordsResponse(BaseModel):
    message: str
    friends_sleep_records: List[FriendSleepRecord]
    week_range: WeekRange
    pagination: OffsetPagination
    following_count: int
