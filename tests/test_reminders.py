"""Tests for due date reminders."""

from datetime import UTC, date, datetime
from unittest.mock import patch

import pytest

from taskboard.models import Notification, Task, TaskAssignee, User
from taskboard.models.enums import NotificationType, TaskStatus
from taskboard.tasks.reminders import create_due_date_reminders, send_due_date_reminders

NOW = datetime(2030, 1, 10, 9, 0, tzinfo=UTC)


@pytest.fixture
def users(db):
    alice = User(name="Alice", email="alice@example.com", password_hash="x")
    bob = User(name="Bob", email="bob@example.com", password_hash="x")
    db.add_all([alice, bob])
    db.commit()
    return alice, bob


def add_task(db, creator, due_date, status=TaskStatus.PENDING, assignees=()) -> Task:
    task = Task(
        title=f"Due {due_date}",
        due_date=due_date,
        status=status.value,
        creator_id=creator.user_id,
    )
    db.add(task)
    db.flush()
    for user in assignees:
        db.add(TaskAssignee(task_id=task.task_id, user_id=user.user_id))
    db.commit()
    return task


def due_soon(db) -> list[Notification]:
    return (
        db.query(Notification)
        .filter(Notification.notification_type == NotificationType.DUE_SOON.value)
        .all()
    )


class TestCreateDueDateReminders:
    def test_notifies_creator_and_assignees(self, db, users):
        alice, bob = users
        task = add_task(db, alice, date(2030, 1, 11), assignees=[bob])

        stats = create_due_date_reminders(db, now=NOW)

        assert stats == {"tasks_checked": 1, "notifications_created": 2}
        notifications = due_soon(db)
        assert {n.user_id for n in notifications} == {alice.user_id, bob.user_id}
        assert all(n.task_id == task.task_id for n in notifications)
        assert "2030-01-11" in notifications[0].message

    def test_creator_assigned_to_own_task_notified_once(self, db, users):
        alice, _ = users
        add_task(db, alice, date(2030, 1, 10), assignees=[alice])

        create_due_date_reminders(db, now=NOW)

        assert len(due_soon(db)) == 1

    def test_runs_are_idempotent(self, db, users):
        alice, bob = users
        add_task(db, alice, date(2030, 1, 10), assignees=[bob])

        create_due_date_reminders(db, now=NOW)
        stats = create_due_date_reminders(db, now=NOW)

        assert stats["notifications_created"] == 0
        assert len(due_soon(db)) == 2

    @pytest.mark.parametrize(
        "due_date,status",
        [
            (date(2030, 1, 10), TaskStatus.COMPLETED),
            (date(2030, 1, 9), TaskStatus.PENDING),
            (date(2030, 1, 20), TaskStatus.IN_PROGRESS),
            (None, TaskStatus.PENDING),
        ],
    )
    def test_skips_tasks_outside_window(self, db, users, due_date, status):
        alice, _ = users
        add_task(db, alice, due_date, status=status)

        stats = create_due_date_reminders(db, now=NOW)

        assert stats == {"tasks_checked": 0, "notifications_created": 0}
        assert due_soon(db) == []


class TestSendDueDateReminders:
    def test_uses_own_session(self, db, users):
        alice, _ = users
        add_task(db, alice, datetime.now(UTC).date())

        with patch("taskboard.tasks.reminders.SessionLocal", return_value=db), patch.object(
            db, "close"
        ) as close:
            stats = send_due_date_reminders()

        assert stats["notifications_created"] == 1
        close.assert_called_once()

    def test_beat_schedule_registered(self):
        from taskboard.celery_app import app

        schedule = app.conf.beat_schedule["send-due-date-reminders"]
        assert schedule["task"] == send_due_date_reminders.name
