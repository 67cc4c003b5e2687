"""
Models package for the application.
"""

from .user import User
from .sleep_record import SleepRecord
from .user_following import UserFollowing

__all__ = [
    "User",
    "SleepRecord",
    "UserFollowing",
]
