"""Notification service for creating and updating user notifications."""

import logging

from sqlalchemy.orm import Session

from taskboard.errors import NotFound
from taskboard.models.enums import NotificationType
from taskboard.models.mixins import new_id, utcnow
from taskboard.models.notification import Notification
from taskboard.schemas.auth import IdentityClaim
from taskboard.services.authorization import require_owner

logger = logging.getLogger(__name__)


class NotificationService:
    """Service for notification operations."""

    def __init__(self, db: Session):
        self.db = db

    def notify(
        self,
        user_id: str,
        notification_type: NotificationType,
        message: str,
        task_id: str | None = None,
    ) -> Notification:
        """Stage a notification for a user. The caller owns the transaction."""
        notification = Notification(
            notification_id=new_id(),
            user_id=user_id,
            notification_type=notification_type.value,
            task_id=task_id,
            message=message,
            is_read=False,
            created_at=utcnow(),
        )
        self.db.add(notification)
        logger.debug(f"Queued {notification_type.value} notification for user {user_id}")
        return notification

    def list_for_user(self, identity: IdentityClaim) -> list[Notification]:
        """Get the caller's notifications, newest first."""
        return (
            self.db.query(Notification)
            .filter(Notification.user_id == identity.user_id)
            .order_by(Notification.created_at.desc())
            .all()
        )

    def set_read(self, identity: IdentityClaim, notification_id: str, is_read: bool) -> Notification:
        """Mark a notification read or unread. Recipient only; repeating a value is a no-op."""
        notification = (
            self.db.query(Notification)
            .filter(Notification.notification_id == notification_id)
            .first()
        )
        if not notification:
            raise NotFound("Notification not found")
        require_owner(identity, notification.user_id, "Cannot update this notification")

        notification.is_read = is_read
        self.db.commit()
        self.db.refresh(notification)
        return notification
