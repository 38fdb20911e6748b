"""SQLAlchemy models for users, their profiles and activity log."""

from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, JSON, String, Text
from sqlalchemy.orm import relationship

from notifyhub.infrastructure.database import Base
from notifyhub.utils import now_in_app_naive_datetime


class UserModel(Base):
    """Database representation of the system user."""

    __tablename__ = "user"

    id = Column(String(36), primary_key=True)
    role_id = Column(String(36), ForeignKey("role.id"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(120), nullable=False, unique=True, index=True)
    password = Column(String(255), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    last_login = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False, default=now_in_app_naive_datetime)
    updated_at = Column(DateTime, nullable=True)

    role = relationship("RoleModel", lazy="joined")


class UserProfileModel(Base):
    """Profile attributes stored one-to-one with a user."""

    __tablename__ = "user_profile"

    id = Column(String(36), primary_key=True)
    user_id = Column(
        String(36), ForeignKey("user.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    display_name = Column(String(255), nullable=True)
    bio = Column(Text, nullable=True)
    website = Column(String(500), nullable=True)
    location = Column(String(255), nullable=True)
    timezone = Column(String(50), nullable=False, default="UTC")
    language = Column(String(10), nullable=False, default="en")
    gender = Column(String(20), nullable=True)
    date_of_birth = Column(Date, nullable=True)
    phone_number = Column(String(20), nullable=True)
    is_phone_verified = Column(Boolean, nullable=False, default=False)
    social_links = Column(JSON, nullable=False, default=dict)
    preferences = Column(JSON, nullable=False, default=dict)
    avatar_url = Column(String(500), nullable=True)
    is_email_verified = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=False, default=now_in_app_naive_datetime)
    updated_at = Column(DateTime, nullable=False, default=now_in_app_naive_datetime)


class UserActivityModel(Base):
    """Append-only log of user activity."""

    __tablename__ = "user_activity"

    id = Column(String(36), primary_key=True)
    user_id = Column(String(36), ForeignKey("user.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(String(50), nullable=False, index=True)
    action = Column(String(50), nullable=False)
    description = Column(Text, nullable=True)
    resource = Column(String(50), nullable=True)
    resource_id = Column(String(64), nullable=True)
    metadata_ = Column("metadata", JSON, nullable=False, default=dict)
    ip_address = Column(String(45), nullable=True)
    user_agent = Column(String(255), nullable=True)
    created_at = Column(DateTime, nullable=False, default=now_in_app_naive_datetime, index=True)


__all__ = ["UserActivityModel", "UserModel", "UserProfileModel"]
