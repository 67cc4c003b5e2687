"""
API v1 routes package.
"""

from .user_routes import router as user_router
from .clock_routes import router as clock_router
from .sleep_record_routes import router as sleep_record_router
from .following_routes import router as following_router
from .health_routes import router as health_router

__all__ = [
    "user_router",
    "clock_router",
    "sleep_record_router",
    "following_router",
    "health_router",
]
