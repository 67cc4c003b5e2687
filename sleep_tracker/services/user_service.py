from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from sleep_tracker.core.config import settings
from sleep_tracker.core.logger import get_logger
from sleep_tracker.exceptions import NotFoundError, PersistenceFailure
from sleep_tracker.models import SleepRecord, User, UserFollowing
from sleep_tracker.schemas.user_schemas import UserResponse
from sleep_tracker.services.cache_service import (
    CacheBackend,
    following_ids_key,
    statistics_prefix,
    user_key,
)

logger = get_logger("user_service")


class UserService:
    """User lookups backed by the read-through cache, plus user mutations."""

    @staticmethod
    async def find_with_cache(
        db: AsyncSession, cache: CacheBackend, user_id: str
    ) -> Optional[UserResponse]:
        cached = await cache.get(user_key(user_id))
        if cached is not None:
            logger.debug(f"User cache hit for {user_id}")
            return UserResponse(**cached)

        result = await db.execute(select(User).where(User.id == user_id))
        user = result.scalar_one_or_none()
        if user is None:
            return None

        await UserService.cache_user(cache, user)
        return UserResponse.model_validate(user)

    @staticmethod
    async def get_or_404(
        db: AsyncSession,
        cache: CacheBackend,
        user_id: str,
        message: str = "User not found",
    ) -> UserResponse:
        user = await UserService.find_with_cache(db, cache, user_id)
        if user is None:
            raise NotFoundError(message)
        return user

    @staticmethod
    async def cache_user(cache: CacheBackend, user: User) -> None:
        await cache.set(user_key(user.id), user.to_cache_dict(), settings.USER_CACHE_TTL_SECONDS)

    @staticmethod
    async def clear_cache(cache: CacheBackend, user_id: str) -> None:
        await cache.delete(user_key(user_id))

    @staticmethod
    async def following_ids_with_cache(
        db: AsyncSession, cache: CacheBackend, user_id: str
    ) -> List[str]:
        key = following_ids_key(user_id)
        cached = await cache.get(key)
        if cached is not None:
            logger.debug(f"Following ids cache hit for {user_id}")
            return cached

        result = await db.execute(
            select(UserFollowing.followed_id).where(UserFollowing.follower_id == user_id)
        )
        ids = list(result.scalars().all())
        await cache.set(key, ids, settings.FOLLOWING_CACHE_TTL_SECONDS)
        return ids

    @staticmethod
    async def create_user(db: AsyncSession, cache: CacheBackend, name: str) -> UserResponse:
        user = User(name=name)
        db.add(user)
        try:
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"Failed to create user: {e}")
            raise PersistenceFailure("Failed to create user", details=[str(e)])
        await db.refresh(user)

        await UserService.cache_user(cache, user)
        logger.info(f"Created user {user.id}")
        return UserResponse.model_validate(user)

    @staticmethod
    async def update_user(
        db: AsyncSession, cache: CacheBackend, user_id: str, name: str
    ) -> UserResponse:
        result = await db.execute(select(User).where(User.id == user_id))
        user = result.scalar_one_or_none()
        if user is None:
            raise NotFoundError()

        user.name = name
        try:
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"Failed to update user {user_id}: {e}")
            raise PersistenceFailure("Failed to update user", details=[str(e)])
        await db.refresh(user)

        # Refresh so readers never see the old name
        await UserService.cache_user(cache, user)
        logger.info(f"Updated user {user_id}")
        return UserResponse.model_validate(user)

    @staticmethod
    async def delete_user(db: AsyncSession, cache: CacheBackend, user_id: str) -> None:
        result = await db.execute(select(User).where(User.id == user_id))
        user = result.scalar_one_or_none()
        if user is None:
            raise NotFoundError()

        follower_result = await db.execute(
            select(UserFollowing.follower_id).where(UserFollowing.followed_id == user_id)
        )
        follower_ids = list(follower_result.scalars().all())

        try:
            await db.execute(delete(SleepRecord).where(SleepRecord.user_id == user_id))
            await db.execute(
                delete(UserFollowing).where(
                    (UserFollowing.follower_id == user_id) | (UserFollowing.followed_id == user_id)
                )
            )
            await db.delete(user)
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"Failed to delete user {user_id}: {e}")
            raise PersistenceFailure("Failed to delete user", details=[str(e)])

        await UserService.clear_cache(cache, user_id)
        await cache.delete(following_ids_key(user_id))
        await cache.delete_prefix(statistics_prefix(user_id))
        for follower_id in follower_ids:
            await cache.delete(following_ids_key(follower_id))
        logger.info(f"Deleted user {user_id}")
