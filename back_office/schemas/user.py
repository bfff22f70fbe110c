"""
Pydantic schemas for back-office users.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from back_office.models.enums import UserRole
from back_office.schemas.common import Command


class UserCreate(Command):
    name: str = Field(min_length=1, max_length=255)
    email: str = Field(min_length=5, max_length=255)
    role: UserRole = UserRole.STAFF


class UserUpdate(Command):
    name: str = Field(min_length=1, max_length=255)
    role: UserRole
    is_active: bool = True


class UserResponse(BaseModel):
    id: int
    name: str
    email: str
    role: UserRole
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}
