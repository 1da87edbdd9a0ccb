"""
Pydantic schemas for staff accounts and authentication.
"""

from pydantic import BaseModel, EmailStr, Field, UUID4, field_validator
from typing import Optional
from datetime import date, datetime

from app.models.user import UserRole, Gender


class LoginRequest(BaseModel):
    """Request schema for user login."""
    email: EmailStr
    password: str


class TokenRefreshRequest(BaseModel):
    """Request schema for refreshing access token."""
    refresh_token: str


class DepartmentRef(BaseModel):
    id: UUID4
    name: str

    class Config:
        from_attributes = True


class UserResponse(BaseModel):
    """Staff profile response (no credentials)."""
    id: UUID4
    employee_id: str
    name_en: str
    name_kh: str
    email: str
    role: UserRole
    position: Optional[str] = None
    gender: Gender
    join_date: Optional[date] = None
    is_active: bool
    department: Optional[DepartmentRef] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class TokenResponse(BaseModel):
    """JWT token response."""
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    user: Optional[UserResponse] = None


class UserBase(BaseModel):
    employee_id: str = Field(..., min_length=1, max_length=50)
    name_en: str = Field(..., min_length=1, max_length=200)
    name_kh: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    role: UserRole = UserRole.STAFF
    position: Optional[str] = None
    department_id: UUID4
    gender: Gender = Gender.MALE
    join_date: Optional[date] = None


class UserCreateRequest(UserBase):
    password: str = Field(..., min_length=6, max_length=72)  # bcrypt limit


class UserUpdateRequest(UserBase):
    """Full update; the password is only changed when supplied (non-blank)."""
    password: Optional[str] = Field(None, min_length=6, max_length=72)
    is_active: Optional[bool] = None

    @field_validator("password", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str) and v.strip() == "":
            return None
        return v
