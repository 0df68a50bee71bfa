"""
Pydantic schemas for the login and two-factor endpoints.
"""

from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional

from delivery_hub.schemas.user import UserResponse


class LoginRequest(BaseModel):
    """Primary credentials"""
    email: EmailStr
    password: str = Field(..., min_length=1)


class LoginResponse(BaseModel):
    """Password accepted; a second factor is required before tokens are issued"""
    two_factor_required: bool = True
    two_factor_token: str
    token_type: str = "bearer"


class RequestCodeRequest(BaseModel):
    """
    Request a 6-digit code by email.

    The email is kept exactly as sent; it is the rate-limiting identifier.
    """
    email: str = Field(..., min_length=1, max_length=254)

    @field_validator("email")
    @classmethod
    def email_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("email must not be blank")
        return v


class VerifyCodeRequest(BaseModel):
    """Submit a code for verification"""
    email: str = Field(..., min_length=1, max_length=254)
    code: str = Field(..., min_length=1, max_length=32, description="6-digit verification code")

    @field_validator("email")
    @classmethod
    def email_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("email must not be blank")
        return v


class SendCodeResponse(BaseModel):
    """Response after requesting a code"""
    success: bool
    message: str
    expires_in_minutes: int = 10


class VerifyCodeResponse(BaseModel):
    """Tokens issued after a successful verification"""
    success: bool = True
    message: str = "Verification successful"
    user_id: str
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    user: Optional[UserResponse] = None
