"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class SendNotificationPayload(BaseModel):
    """Body of ``POST /notifications/send``.

    Values are checked by the send use case so that malformed input is
    reported with the usual ``Validation failed: ...`` message.
    """

    recipient_id: str | None = Field(
        default=None, description="Recipient user id; defaults to the authenticated user"
    )
    type: str
    title: str = ""
    content: str = ""
    channels: list[str] = Field(default_factory=list)
    priority: str | None = None
    template_id: str | None = None
    template_variables: dict[str, Any] = Field(default_factory=dict)
    scheduled_at: datetime | None = None
    expires_at: datetime | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class NotificationRead(BaseModel):
    """Representation of a notification delivered to the client."""

    id: str
    user_id: str
    type: str
    title: str
    message: str
    channels: list[str]
    status: str
    priority: str
    template_id: str | None = None
    scheduled_for: datetime | None = None
    sent_at: datetime | None = None
    delivered_at: datetime | None = None
    read_at: datetime | None = None
    expires_at: datetime | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    delivery_data: dict[str, Any] = Field(default_factory=dict)
    retry_count: int = 0
    max_retries: int = 3
    last_error: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class ChannelDeliveryRead(BaseModel):
    channel: str
    success: bool
    message_id: str | None = None
    error: str | None = None

    model_config = ConfigDict(from_attributes=True)


class SendNotificationResult(BaseModel):
    success: bool
    message: str | None = None
    error: str | None = None
    notification: NotificationRead | None = None
    deliveries: list[ChannelDeliveryRead] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)


class NotificationListResponse(BaseModel):
    success: bool
    notifications: list[NotificationRead] = Field(default_factory=list)
    total: int = 0
    page: int = 1
    limit: int = 10
    has_more: bool = False
    error: str | None = None

    model_config = ConfigDict(from_attributes=True)


class NotificationActionResult(BaseModel):
    success: bool
    message: str | None = None
    notification: NotificationRead | None = None


class NotificationCountResult(BaseModel):
    success: bool = True
    count: int


class NotificationStatsRead(BaseModel):
    total: int
    unread: int
    by_status: dict[str, int]

    model_config = ConfigDict(from_attributes=True)


class CleanupRead(BaseModel):
    expired: int
    outdated: int
    total: int

    model_config = ConfigDict(from_attributes=True)


class NotificationPreferenceRead(BaseModel):
    id: str
    user_id: str
    type: str
    email_enabled: bool
    sms_enabled: bool
    push_enabled: bool
    in_app_enabled: bool
    frequency: str
    quiet_hours_enabled: bool
    quiet_hours_start: str | None = None
    quiet_hours_end: str | None = None
    timezone: str
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class NotificationPreferenceUpdate(BaseModel):
    type: str = "general"
    channel: str | None = None
    enabled: bool | None = None
    frequency: str | None = None
    quiet_hours_enabled: bool | None = None
    quiet_hours_start: str | None = Field(default=None, description="HH:MM")
    quiet_hours_end: str | None = Field(default=None, description="HH:MM")
    timezone: str | None = None

    model_config = ConfigDict(extra="forbid")


class NotificationTemplateCreate(BaseModel):
    name: str = Field(..., max_length=255)
    slug: str = Field(..., max_length=255)
    type: str
    channel: str
    template: str
    subject: str | None = None
    description: str | None = None
    variables: list[str] = Field(default_factory=list)
    default_values: dict[str, Any] = Field(default_factory=dict)
    metadata: dict[str, Any] = Field(default_factory=dict)


class NotificationTemplateRead(BaseModel):
    id: str
    name: str
    slug: str
    type: str
    channel: str
    template: str
    subject: str | None = None
    description: str | None = None
    variables: list[str] = Field(default_factory=list)
    default_values: dict[str, Any] = Field(default_factory=dict)
    is_system: bool
    is_active: bool
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


__all__ = [
    "ChannelDeliveryRead",
    "CleanupRead",
    "NotificationActionResult",
    "NotificationCountResult",
    "NotificationListResponse",
    "NotificationPreferenceRead",
    "NotificationPreferenceUpdate",
    "NotificationRead",
    "NotificationStatsRead",
    "NotificationTemplateCreate",
    "NotificationTemplateRead",
    "SendNotificationPayload",
    "SendNotificationResult",
]
