"""
Follow API Schemas
"""
from pydantic import BaseModel


class FollowResponse(BaseModel):
    message: str
