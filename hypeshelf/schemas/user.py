"""User schemas"""

from pydantic import BaseModel
from typing import Optional
from datetime import datetime

from ..models.user import Role


class UserResponse(BaseModel):
    """Schema for user response"""

    id: int
    external_id: str
    email: str
    display_name: str
    avatar_url: Optional[str] = None
    role: Role
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
