from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from sleep_tracker.core.logger import get_logger
from sleep_tracker.exceptions import NotFoundError, PersistenceFailure, SelfFollowError
from sleep_tracker.models import UserFollowing
from sleep_tracker.services.cache_service import CacheBackend, following_ids_key
from sleep_tracker.services.user_service import UserService

logger = get_logger("follow_service")


class FollowService:
    """Direct follow / unfollow edges between users."""

    @staticmethod
    async def follow(
        db: AsyncSession, cache: CacheBackend, follower_id: str, followed_id: str
    ) -> bool:
        """
        Create the follow edge.

        Returns True when a new edge was created, False when it already existed.
        """
        follower = await UserService.get_or_404(db, cache, follower_id, "Follower user not found")
        followed = await UserService.get_or_404(db, cache, followed_id, "User to follow not found")

        if follower.id == followed.id:
            raise SelfFollowError()

        existing = await FollowService._find_edge(db, follower.id, followed.id)
        if existing is not None:
            return False

        db.add(UserFollowing(follower_id=follower.id, followed_id=followed.id))
        try:
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"Failed to follow {followed.id} for {follower.id}: {e}")
            raise PersistenceFailure("Failed to follow user", details=[str(e)])

        await cache.delete(following_ids_key(follower.id))
        logger.info(f"User {follower.id} followed {followed.id}")
        return True

    @staticmethod
    async def unfollow(
        db: AsyncSession, cache: CacheBackend, follower_id: str, followed_id: str
    ) -> None:
        follower = await UserService.get_or_404(db, cache, follower_id, "Follower user not found")
        followed = await UserService.get_or_404(db, cache, followed_id, "User to follow not found")

        edge = await FollowService._find_edge(db, follower.id, followed.id)
        if edge is None:
            raise NotFoundError("You are not following this user")

        try:
            await db.delete(edge)
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"Failed to unfollow {followed.id} for {follower.id}: {e}")
            raise PersistenceFailure("Failed to unfollow user", details=[str(e)])

        await cache.delete(following_ids_key(follower.id))
        logger.info(f"User {follower.id} unfollowed {followed.id}")

    @staticmethod
    async def _find_edge(db: AsyncSession, follower_id: str, followed_id: str):
        result = await db.execute(
            select(UserFollowing)
            .where(UserFollowing.follower_id == follower_id)
            .where(UserFollowing.followed_id == followed_id)
        )
        return result.scalar_one_or_none()
