"""Notification API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends

from taskboard.api.dependencies import CurrentIdentity, get_notification_service
from taskboard.schemas.notification import (
    NotificationEnvelope,
    NotificationListResponse,
    NotificationResponse,
    NotificationUpdate,
)
from taskboard.services.notification_service import NotificationService

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


@router.get("", response_model=NotificationListResponse)
def get_notifications(
    identity: CurrentIdentity,
    service: Annotated[NotificationService, Depends(get_notification_service)],
):
    """Get the caller's notifications, newest first."""
    notifications = service.list_for_user(identity)
    return NotificationListResponse(
        notifications=[NotificationResponse.model_validate(n) for n in notifications]
    )


@router.put("/{notification_id}", response_model=NotificationEnvelope)
def update_notification(
    notification_id: str,
    update: NotificationUpdate,
    identity: CurrentIdentity,
    service: Annotated[NotificationService, Depends(get_notification_service)],
):
    """Mark a notification read or unread (recipient only)."""
    notification = service.set_read(identity, notification_id, update.is_read)
    return NotificationEnvelope(
        message="Notification updated",
        notification=NotificationResponse.model_validate(notification),
    )
