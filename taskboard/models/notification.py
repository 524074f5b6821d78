"""Notification model."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String

from taskboard.database import Base
from taskboard.models.mixins import new_id, utcnow


class Notification(Base):
    """Message addressed to one user. Only the recipient may change it."""

    __tablename__ = "notifications"

    notification_id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("users.user_id"), nullable=False, index=True)
    notification_type = Column(String(50), nullable=False)
    task_id = Column(String(36), ForeignKey("tasks.task_id"), nullable=True, index=True)
    message = Column(String, nullable=False)
    is_read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
