"""Celery tasks for due date reminders."""

import logging
from datetime import UTC, datetime, timedelta

from sqlalchemy.orm import Session

from taskboard.celery_app import app as celery_app
from taskboard.config import get_settings
from taskboard.database import SessionLocal, atomic
from taskboard.models import Notification, Task
from taskboard.models.enums import NotificationType, TaskStatus
from taskboard.services.notification_service import NotificationService

logger = logging.getLogger(__name__)


def create_due_date_reminders(db: Session, now: datetime | None = None) -> dict:
    """Create due_soon notifications for tasks due within the reminder window.

    Recipients are the task creator and its assignees. A user gets at most one
    due_soon notification per task.

    Returns:
        dict with processing statistics
    """
    settings = get_settings()
    now = now or datetime.now(UTC)
    horizon = (now + timedelta(hours=settings.reminder_window_hours)).date()
    stats = {"tasks_checked": 0, "notifications_created": 0}

    due_tasks = (
        db.query(Task)
        .filter(
            Task.due_date.isnot(None),
            Task.due_date >= now.date(),
            Task.due_date <= horizon,
            Task.status != TaskStatus.COMPLETED.value,
        )
        .all()
    )

    notification_service = NotificationService(db)
    with atomic(db):
        for task in due_tasks:
            stats["tasks_checked"] += 1
            already_notified = {
                user_id
                for (user_id,) in db.query(Notification.user_id).filter(
                    Notification.task_id == task.task_id,
                    Notification.notification_type == NotificationType.DUE_SOON.value,
                )
            }
            recipients = [task.creator_id] + [a.user_id for a in task.assignees]
            for user_id in dict.fromkeys(recipients):
                if user_id in already_notified:
                    continue
                notification_service.notify(
                    user_id,
                    NotificationType.DUE_SOON,
                    f'Task "{task.title}" is due on {task.due_date.isoformat()}.',
                    task_id=task.task_id,
                )
                stats["notifications_created"] += 1

    return stats


@celery_app.task
def send_due_date_reminders() -> dict:
    """Hourly beat task wrapping create_due_date_reminders."""
    db: Session = SessionLocal()
    try:
        stats = create_due_date_reminders(db)
        logger.info(f"Due date reminders: {stats}")
        return stats
    except Exception as e:
        logger.error(f"Error creating due date reminders: {e}", exc_info=True)
        raise
    finally:
        db.close()
