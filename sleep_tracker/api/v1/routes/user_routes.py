from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from sleep_tracker.database.connection import get_db
from sleep_tracker.services.cache_service import CacheBackend, get_cache
from sleep_tracker.api.v1.controllers.users_controller import UsersController
from sleep_tracker.schemas.user_schemas import UserCreate, UserUpdate, UserResponse

router = APIRouter(prefix="/users", tags=["User"])


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    payload: UserCreate,
    db: AsyncSession = Depends(get_db),
    cache: CacheBackend = Depends(get_cache)
):
    """Create a user"""
    return await UsersController.create_user(db, cache, payload)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: str,
    db: AsyncSession = Depends(get_db),
    cache: CacheBackend = Depends(get_cache)
):
    """Get a user, served from the cache when possible"""
    return await UsersController.get_user(db, cache, user_id)


@router.patch("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: str,
    payload: UserUpdate,
    db: AsyncSession = Depends(get_db),
    cache: CacheBackend = Depends(get_cache)
):
    """Rename a user and refresh the cached copy"""
    return await UsersController.update_user(db, cache, user_id, payload)


@router.delete("/{user_id}")
async def delete_user(
    user_id: str,
    db: AsyncSession = Depends(get_db),
    cache: CacheBackend = Depends(get_cache)
):
    """Delete a user with their sleep records and follow edges"""
    return await UsersController.delete_user(db, cache, user_id)
