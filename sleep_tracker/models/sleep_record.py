from sqlalchemy import (
    Column, String, ForeignKey, DateTime, Integer, BigInteger,
    CheckConstraint, Index, text
)
from sqlalchemy.orm import relationship
from sleep_tracker.database.base import Base
from sleep_tracker.utils.time_utils import utcnow


class SleepRecord(Base):
    """
    One sleep session. Active while wake_up_at is NULL; duration in seconds
    is set together with wake_up_at on clock-out.
    """
    __tablename__ = "sleep_records"

    # Integer ids keep cursor pagination ("id < cursor") meaningful
    id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)
    user_id = Column(String(25), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    go_to_bed_at = Column(DateTime, nullable=False)
    wake_up_at = Column(DateTime, nullable=True)
    duration = Column(BigInteger, nullable=True)

    created_at = Column(DateTime, default=utcnow, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    user = relationship("User", back_populates="sleep_records")

    __table_args__ = (
        CheckConstraint("duration IS NULL OR duration > 0", name="ck_sleep_records_duration_positive"),
        Index("ix_sleep_records_user_created", "user_id", "created_at"),
        Index("ix_sleep_records_user_bed_duration", "user_id", "go_to_bed_at", "duration"),
        # At most one active session per user
        Index(
            "uq_sleep_records_user_active",
            "user_id",
            unique=True,
            postgresql_where=text("wake_up_at IS NULL"),
            sqlite_where=text("wake_up_at IS NULL"),
        ),
    )
