"""
Pydantic schemas for user accounts and tokens.
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field, UUID4
from typing import Optional
from datetime import datetime

from delivery_hub.models.user import UserRole


class UserCreateRequest(BaseModel):
    """Admin request to create an account."""
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=72)  # bcrypt limit
    username: Optional[str] = Field(None, max_length=50)
    role: UserRole = UserRole.DRIVER


class UserUpdateRequest(BaseModel):
    """Admin request to update an account. Omitted fields are left unchanged."""
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=6, max_length=72)
    username: Optional[str] = Field(None, max_length=50)


class TokenResponse(BaseModel):
    """JWT token response."""
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class TokenRefreshRequest(BaseModel):
    """Request schema for refreshing access token."""
    refresh_token: str


class UserResponse(BaseModel):
    """User profile response (no sensitive data)."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID4
    email: str
    username: Optional[str] = None
    role: UserRole
    is_active: bool
    created_at: Optional[datetime] = None
    last_login_at: Optional[datetime] = None
