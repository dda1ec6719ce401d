"""User Pydantic Schemas"""

from datetime import datetime
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, EmailStr, Field, ConfigDict

from app.models.enums import UserRole


class UserBase(BaseModel):
    """Base user schema with common fields"""
    email: EmailStr
    name: str = Field(..., min_length=1, max_length=255)
    house_no: Optional[str] = Field(None, max_length=50)
    cnic: Optional[str] = Field(None, max_length=20)


class UserCreate(UserBase):
    """Admin-created account"""
    password: str = Field(..., min_length=8, description="Password must be at least 8 characters")
    role: UserRole = UserRole.RESIDENT


class UserResponse(BaseModel):
    """Schema for user responses"""
    id: UUID
    email: EmailStr
    name: str
    house_no: Optional[str] = None
    role: UserRole
    is_active: bool
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class PasswordChange(BaseModel):
    """Schema for changing password"""
    current_password: str
    new_password: str = Field(..., min_length=8, description="New password must be at least 8 characters")
