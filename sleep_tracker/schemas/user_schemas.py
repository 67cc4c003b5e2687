"""
User API Schemas
"""
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class UserCreate(BaseModel):
    """Payload for creating a user"""
    name: str = Field(..., min_length=1, max_length=255, examples=["Alice"])


class UserUpdate(BaseModel):
    """Payload for renaming a user"""
    name: str = Field(..., min_length=1, max_length=255)


class UserResponse(BaseModel):
    """User as returned by the API and stored in the cache"""
    id: str
    name: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class UserSummary(BaseModel):
    """Compact user reference embedded in friends' records"""
    id: str
    name: str
