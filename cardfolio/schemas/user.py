"""
Pydantic schemas for User-related responses.

hashed_password is never included in any response schema.
"""

import uuid
from datetime import datetime

from pydantic import BaseModel

from cardfolio.models.user import UserRole


class UserResponse(BaseModel):
    """Public representation of a User (never includes password hash)."""
    id: uuid.UUID
    username: str
    email: str
    role: UserRole
    created_at: datetime

    model_config = {"from_attributes": True}


class RoleUpdateRequest(BaseModel):
    """Request body for PATCH /admin/users/{user_id}."""
    role: UserRole
