"""
Users Controller
"""
from sqlalchemy.ext.asyncio import AsyncSession

from sleep_tracker.exceptions import ValidationFailure
from sleep_tracker.schemas.user_schemas import UserCreate, UserUpdate, UserResponse
from sleep_tracker.services.cache_service import CacheBackend
from sleep_tracker.services.user_service import UserService


def _clean_name(name: str) -> str:
    cleaned = name.strip()
    if not cleaned:
        raise ValidationFailure("Invalid name", detail_message="Name can't be blank")
    return cleaned


class UsersController:
    """Controller for user records."""

    @staticmethod
    async def create_user(db: AsyncSession, cache: CacheBackend, payload: UserCreate) -> UserResponse:
        return await UserService.create_user(db, cache, _clean_name(payload.name))

    @staticmethod
    async def get_user(db: AsyncSession, cache: CacheBackend, user_id: str) -> UserResponse:
        return await UserService.get_or_404(db, cache, user_id)

    @staticmethod
    async def update_user(
        db: AsyncSession, cache: CacheBackend, user_id: str, payload: UserUpdate
    ) -> UserResponse:
        return await UserService.update_user(db, cache, user_id, _clean_name(payload.name))

    @staticmethod
    async def delete_user(db: AsyncSession, cache: CacheBackend, user_id: str) -> dict:
        await UserService.delete_user(db, cache, user_id)
        return {"message": "User deleted"}
