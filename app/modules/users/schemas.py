from pydantic import EmailStr, Field, field_validator
from typing import Optional
from datetime import datetime

from app.core.responses import CamelModel
from app.modules.users.models import UserRole


class RegisterRequest(CamelModel):
    """Self-service registration request"""
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=72)
    phone: Optional[str] = Field(None, pattern=r"^[0-9]{10}$")
    role: UserRole = UserRole.USER

    @field_validator("name")
    @classmethod
    def strip_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Name is required")
        return v

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v):
        return v.lower()

    @field_validator("role")
    @classmethod
    def no_self_service_admin(cls, v):
        """Admins are provisioned, never self-registered"""
        if v == UserRole.ADMIN:
            raise ValueError("Cannot register with the admin role")
        return v


class LoginRequest(CamelModel):
    """User login request"""
    email: EmailStr
    password: str

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v):
        return v.lower()


class UserResponse(CamelModel):
    """Public user profile (the password hash is never exposed)"""
    id: int
    name: str
    email: str
    phone: Optional[str] = None
    role: UserRole
    is_active: bool
    last_login_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class AuthPayload(CamelModel):
    """Token plus the user it was issued for"""
    token: str
    token_type: str = "bearer"
    user: UserResponse


class ProfileUpdate(CamelModel):
    """Update own profile"""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    phone: Optional[str] = Field(None, pattern=r"^[0-9]{10}$")


class ChangePasswordRequest(CamelModel):
    current_password: str
    new_password: str = Field(..., min_length=6, max_length=72)


class UserStatusUpdate(CamelModel):
    """Admin status change; omitting isActive toggles the current value"""
    is_active: Optional[bool] = None
