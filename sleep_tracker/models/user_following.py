from sqlalchemy import Column, String, ForeignKey, DateTime, UniqueConstraint, Index
from sqlalchemy.orm import relationship
from sleep_tracker.database.base import Base
from sleep_tracker.utils.time_utils import utcnow
import cuid


class UserFollowing(Base):
    """Directed follow edge: follower sees followed's sleep records."""

    __tablename__ = "user_followings"

    id = Column(String(25), primary_key=True, index=True, default=lambda: cuid.cuid())
    follower_id = Column(String(25), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    followed_id = Column(String(25), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    follower = relationship("User", foreign_keys=[follower_id], back_populates="following_relationships")
    followed = relationship("User", foreign_keys=[followed_id], back_populates="follower_relationships")

    __table_args__ = (
        UniqueConstraint("follower_id", "followed_id", name="uq_user_followings_pair"),
        Index("ix_user_followings_follower_created", "follower_id", "created_at"),
    )
