"""SQLAlchemy models for notifications, templates and channel preferences."""

from sqlalchemy import Boolean, Column, DateTime, Integer, JSON, String, Text, UniqueConstraint

from notifyhub.infrastructure.database import Base
from notifyhub.utils import now_in_app_naive_datetime


class NotificationModel(Base):
    """Database representation for user notifications."""

    __tablename__ = "notification"

    id = Column(String(36), primary_key=True)
    user_id = Column(String(64), nullable=False, index=True)
    type = Column(String(20), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    channels = Column(JSON, nullable=False, default=list)
    status = Column(String(20), nullable=False, index=True)
    priority = Column(String(20), nullable=False)
    template_id = Column(String(64), nullable=True)
    scheduled_for = Column(DateTime(), nullable=True)
    sent_at = Column(DateTime(), nullable=True)
    delivered_at = Column(DateTime(), nullable=True)
    read_at = Column(DateTime(), nullable=True)
    expires_at = Column(DateTime(), nullable=True)
    metadata_ = Column("metadata", JSON, nullable=False, default=dict)
    delivery_data = Column(JSON, nullable=False, default=dict)
    retry_count = Column(Integer, nullable=False, default=0)
    max_retries = Column(Integer, nullable=False, default=3)
    last_error = Column(Text, nullable=True)
    created_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime, index=True)
    updated_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)


class NotificationTemplateModel(Base):
    """Reusable notification body with placeholders."""

    __tablename__ = "notification_template"

    id = Column(String(36), primary_key=True)
    name = Column(String(120), nullable=False)
    slug = Column(String(120), nullable=False, unique=True, index=True)
    type = Column(String(20), nullable=False)
    channel = Column(String(20), nullable=False)
    template = Column(Text, nullable=False)
    subject = Column(String(255), nullable=True)
    description = Column(Text, nullable=True)
    variables = Column(JSON, nullable=False, default=list)
    default_values = Column(JSON, nullable=False, default=dict)
    is_system = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True)
    metadata_ = Column("metadata", JSON, nullable=False, default=dict)
    created_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)
    updated_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)


class NotificationPreferenceModel(Base):
    """Per user and notification type channel switches."""

    __tablename__ = "notification_preference"
    __table_args__ = (
        UniqueConstraint("user_id", "type", name="uq_notification_preference_user_type"),
    )

    id = Column(String(36), primary_key=True)
    user_id = Column(String(64), nullable=False, index=True)
    type = Column(String(20), nullable=False)
    email_enabled = Column(Boolean, nullable=False, default=True)
    sms_enabled = Column(Boolean, nullable=False, default=False)
    push_enabled = Column(Boolean, nullable=False, default=True)
    in_app_enabled = Column(Boolean, nullable=False, default=True)
    frequency = Column(String(20), nullable=False, default="immediate")
    quiet_hours_enabled = Column(Boolean, nullable=False, default=False)
    quiet_hours_start = Column(String(5), nullable=True)
    quiet_hours_end = Column(String(5), nullable=True)
    timezone = Column(String(50), nullable=False, default="UTC")
    metadata_ = Column("metadata", JSON, nullable=False, default=dict)
    created_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)
    updated_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)


__all__ = ["NotificationModel", "NotificationPreferenceModel", "NotificationTemplateModel"]
