"""User, profile and role schemas."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class RoleRead(BaseModel):
    id: str
    name: str
    display_name: str
    description: str | None = None
    level: int
    is_system: bool
    permissions: list[str] = Field(default_factory=list)
    is_active: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class RoleCreate(BaseModel):
    name: str = Field(..., max_length=50)
    display_name: str = Field(..., max_length=100)
    description: str | None = Field(default=None, max_length=500)
    level: int = Field(default=0, ge=0)
    permissions: list[str] = Field(default_factory=list)
    metadata: dict[str, Any] = Field(default_factory=dict)


class RoleUpdate(BaseModel):
    display_name: str | None = Field(default=None, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    level: int | None = None
    permissions: list[str] | None = None

    model_config = ConfigDict(extra="forbid")


class RoleAssignmentCreate(BaseModel):
    user_id: str
    expires_at: datetime | None = None


class RoleAssignmentRead(BaseModel):
    id: str
    user_id: str
    role_id: str
    assigned_by: str | None = None
    assigned_at: datetime | None = None
    expires_at: datetime | None = None
    is_active: bool

    model_config = ConfigDict(from_attributes=True)


class UserRead(BaseModel):
    id: str
    name: str
    email: EmailStr
    is_active: bool
    last_login: datetime | None = None
    created_at: datetime | None = None
    role: RoleRead

    model_config = ConfigDict(from_attributes=True)


class UserProfileRead(BaseModel):
    id: str
    user_id: str
    first_name: str | None = None
    last_name: str | None = None
    display_name: str | None = None
    bio: str | None = None
    website: str | None = None
    location: str | None = None
    timezone: str
    language: str
    gender: str | None = None
    date_of_birth: date | None = None
    phone_number: str | None = None
    is_phone_verified: bool
    social_links: dict[str, str] = Field(default_factory=dict)
    preferences: dict[str, Any] = Field(default_factory=dict)
    avatar_url: str | None = None
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class UserProfileUpdate(BaseModel):
    """Fields a user may change on their own profile; omitted fields are kept."""

    first_name: str | None = None
    last_name: str | None = None
    display_name: str | None = None
    bio: str | None = None
    website: str | None = None
    location: str | None = None
    timezone: str = Field(default="UTC", max_length=50)
    language: str = Field(default="en", max_length=10)
    gender: str | None = None
    date_of_birth: date | None = None
    phone_number: str | None = None
    social_links: dict[str, str] = Field(default_factory=dict)
    preferences: dict[str, Any] = Field(default_factory=dict)
    avatar_url: str | None = None

    model_config = ConfigDict(extra="forbid")


class UserActivityRead(BaseModel):
    id: str
    user_id: str
    type: str
    action: str
    description: str | None = None
    resource: str | None = None
    resource_id: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class UserProfileDetail(BaseModel):
    user: UserRead
    profile: UserProfileRead
    display_name: str
    roles: list[RoleRead] = Field(default_factory=list)
    recent_activity: list[UserActivityRead] = Field(default_factory=list)


class ProfileUpdateResult(BaseModel):
    success: bool = True
    message: str
    profile: UserProfileRead


__all__ = [
    "ProfileUpdateResult",
    "RoleAssignmentCreate",
    "RoleAssignmentRead",
    "RoleCreate",
    "RoleRead",
    "RoleUpdate",
    "UserActivityRead",
    "UserProfileDetail",
    "UserProfileRead",
    "UserProfileUpdate",
    "UserRead",
]
