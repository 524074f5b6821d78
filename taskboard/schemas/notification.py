"""Notification schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from taskboard.models.enums import NotificationType


class NotificationResponse(BaseModel):
    """Notification response."""

    model_config = ConfigDict(from_attributes=True)

    notification_id: str
    notification_type: NotificationType
    task_id: str | None
    message: str
    is_read: bool
    created_at: datetime


class NotificationUpdate(BaseModel):
    """Mark a notification read or unread."""

    is_read: bool


class NotificationListResponse(BaseModel):
    notifications: list[NotificationResponse]


class NotificationEnvelope(BaseModel):
    message: str
    notification: NotificationResponse
