"""SQLAlchemy models for user roles and role assignments."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, JSON, String, Text, UniqueConstraint

from notifyhub.infrastructure.database import Base
from notifyhub.utils import now_in_app_naive_datetime


class RoleModel(Base):
    """Database representation of the system roles."""

    __tablename__ = "role"

    id = Column(String(36), primary_key=True)
    name = Column(String(50), nullable=False, unique=True, index=True)
    display_name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    level = Column(Integer, nullable=False, default=0)
    is_system = Column(Boolean, nullable=False, default=False)
    permissions = Column(JSON, nullable=False, default=list)
    metadata_ = Column("metadata", JSON, nullable=False, default=dict)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)
    updated_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)


class RoleAssignmentModel(Base):
    """Binding between a user and a role."""

    __tablename__ = "user_role_assignment"
    __table_args__ = (UniqueConstraint("user_id", "role_id", name="uq_user_role_assignment"),)

    id = Column(String(36), primary_key=True)
    user_id = Column(String(36), ForeignKey("user.id", ondelete="CASCADE"), nullable=False, index=True)
    role_id = Column(String(36), ForeignKey("role.id", ondelete="CASCADE"), nullable=False, index=True)
    assigned_by = Column(String(36), nullable=True)
    assigned_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)
    expires_at = Column(DateTime(), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    metadata_ = Column("metadata", JSON, nullable=False, default=dict)


__all__ = ["RoleAssignmentModel", "RoleModel"]
