# schemas/user_auth.py
from pydantic import BaseModel, EmailStr, Field, ConfigDict
from typing import Optional
from datetime import datetime
from uuid import UUID

from healthjournal.models.user_auth import Status


class RegisterRequest(BaseModel):
    """Public account registration."""
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=72)
    username: Optional[str] = Field(None, max_length=50)


class UserAuthOut(BaseModel):
    """Public view of an account."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: EmailStr
    username: Optional[str] = None
    status: Status
    created_at: Optional[datetime] = None


class LoginRequest(BaseModel):
    """User login request."""
    email: EmailStr
    password: str = Field(..., min_length=1)


class TokenResponse(BaseModel):
    """Authentication token response."""
    access_token: str
    token_type: str = "bearer"
    refresh_token: str
    user: UserAuthOut


class RefreshTokenRequest(BaseModel):
    """Refresh token request."""
    refresh_token: str
