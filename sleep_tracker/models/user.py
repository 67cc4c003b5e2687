from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import relationship
from sleep_tracker.database.base import Base
from sleep_tracker.utils.time_utils import utcnow
import cuid


class User(Base):
    """A person who records sleep sessions and follows other users."""

    __tablename__ = "users"

    id = Column(String(25), primary_key=True, index=True, default=lambda: cuid.cuid())
    name = Column(String(255), nullable=False)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    sleep_records = relationship("SleepRecord", back_populates="user", passive_deletes=True)
    following_relationships = relationship(
        "UserFollowing",
        foreign_keys="UserFollowing.follower_id",
        back_populates="follower",
        passive_deletes=True,
    )
    follower_relationships = relationship(
        "UserFollowing",
        foreign_keys="UserFollowing.followed_id",
        back_populates="followed",
        passive_deletes=True,
    )

    def to_cache_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
