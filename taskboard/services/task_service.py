"""Task service: creation, updates, deletion and child rows of tasks."""

import logging
from collections.abc import Iterable

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from taskboard.database import atomic
from taskboard.errors import InvalidInput, NotFound
from taskboard.models.enums import NotificationType, TaskStatus
from taskboard.models.label import Label, TaskLabel
from taskboard.models.mixins import new_id, utcnow
from taskboard.models.notification import Notification
from taskboard.models.project import Project
from taskboard.models.task import Subtask, Task, TaskAssignee, TaskComment
from taskboard.models.user import User
from taskboard.schemas.auth import IdentityClaim
from taskboard.schemas.task import (
    AssigneeResponse,
    CommentCreate,
    CommentResponse,
    SubtaskCreate,
    SubtaskResponse,
    SubtaskUpdate,
    TaskCreate,
    TaskDetail,
    TaskSummary,
    TaskUpdate,
)
from taskboard.services.authorization import require_owner
from taskboard.services.notification_service import NotificationService
from taskboard.services.realtime import (
    EventPublisher,
    new_comment_event,
    task_created_event,
    task_deleted_event,
    task_updated_event,
)

logger = logging.getLogger(__name__)

# Dependent tables, in the order they are cleared before the task row itself
TASK_CHILD_MODELS = (Subtask, TaskComment, TaskAssignee, TaskLabel)

# Fields a null value cannot clear
REQUIRED_TASK_FIELDS = ("title", "priority", "status")


def _task_columns(task: Task) -> dict:
    return {column.name: getattr(task, column.name) for column in Task.__table__.columns}


def to_summary(task: Task) -> TaskSummary:
    """Build the list representation of a task."""
    return TaskSummary(
        **_task_columns(task),
        assignees=[a.user_id for a in task.assignees],
        labels=[link.label_id for link in task.label_links],
    )


def to_detail(task: Task) -> TaskDetail:
    """Build the full representation of a task with its children."""
    return TaskDetail(
        **_task_columns(task),
        subtasks=[SubtaskResponse.model_validate(s) for s in task.subtasks],
        comments=[CommentResponse.model_validate(c) for c in task.comments],
        assignees=[AssigneeResponse(user_id=a.user_id, name=a.user.name) for a in task.assignees],
        labels=[link.label_id for link in task.label_links],
    )


class TaskService:
    """Service for task operations.

    Every mutation runs in one transaction and publishes its event only after
    the transaction commits.
    """

    def __init__(self, db: Session, publisher: EventPublisher):
        self.db = db
        self.publisher = publisher
        self.notifications = NotificationService(db)

    # Lookups

    def get_task(self, task_id: str) -> Task:
        """Get a task by id. Any authenticated caller may read any task."""
        task = self.db.query(Task).filter(Task.task_id == task_id).first()
        if not task:
            raise NotFound("Task not found")
        return task

    def get_owned_task(self, identity: IdentityClaim, task_id: str) -> Task:
        """Get a task the caller created, for mutation."""
        task = self.get_task(task_id)
        require_owner(identity, task.creator_id, "Only the task creator can modify the task")
        return task

    def list_tasks(self, identity: IdentityClaim, status: TaskStatus | None = None) -> list[Task]:
        """Get tasks the caller created or is assigned to."""
        assigned = select(TaskAssignee.task_id).where(TaskAssignee.user_id == identity.user_id)
        query = self.db.query(Task).filter(
            or_(Task.creator_id == identity.user_id, Task.task_id.in_(assigned))
        )
        if status is not None:
            query = query.filter(Task.status == status.value)
        return query.order_by(Task.created_at.desc()).all()

    # Reference checks for ids supplied in request bodies

    def _require_project(self, project_id: str) -> None:
        if not self.db.query(Project.project_id).filter(Project.project_id == project_id).first():
            raise InvalidInput(f"Project {project_id} does not exist")

    def _require_users(self, user_ids: Iterable[str]) -> dict[str, User]:
        user_ids = list(user_ids)
        users = {u.user_id: u for u in self.db.query(User).filter(User.user_id.in_(user_ids)).all()}
        missing = [uid for uid in user_ids if uid not in users]
        if missing:
            raise InvalidInput(f"Unknown assignee(s): {', '.join(missing)}")
        return users

    def _require_labels(self, label_ids: Iterable[str]) -> None:
        label_ids = list(label_ids)
        found = {
            lid for (lid,) in self.db.query(Label.label_id).filter(Label.label_id.in_(label_ids)).all()
        }
        missing = [lid for lid in label_ids if lid not in found]
        if missing:
            raise InvalidInput(f"Unknown label(s): {', '.join(missing)}")

    # Task mutations

    def create_task(self, identity: IdentityClaim, data: TaskCreate) -> Task:
        """Create a task with its subtasks, assignees and labels atomically."""
        assignee_ids = list(dict.fromkeys(data.assignees))
        label_ids = list(dict.fromkeys(data.labels))
        if data.project_id:
            self._require_project(data.project_id)
        self._require_users(assignee_ids)
        self._require_labels(label_ids)

        now = utcnow()
        task = Task(
            task_id=new_id(),
            title=data.title,
            description=data.description,
            due_date=data.due_date,
            priority=data.priority.value,
            status=data.status.value,
            creator_id=identity.user_id,
            project_id=data.project_id or None,
            created_at=now,
            updated_at=now,
        )
        with atomic(self.db):
            self.db.add(task)
            self.db.flush()
            for subtask in data.subtasks:
                self.db.add(self._new_subtask(task.task_id, subtask, now))
            for user_id in assignee_ids:
                self.db.add(
                    TaskAssignee(
                        record_id=new_id(), task_id=task.task_id, user_id=user_id, assigned_at=now
                    )
                )
                if user_id != identity.user_id:
                    self.notifications.notify(
                        user_id,
                        NotificationType.ASSIGNMENT,
                        f'You have been assigned to task "{task.title}".',
                        task_id=task.task_id,
                    )
            for label_id in label_ids:
                self.db.add(TaskLabel(record_id=new_id(), task_id=task.task_id, label_id=label_id))

        self.db.refresh(task)
        logger.info(f"Task {task.task_id} created by {identity.user_id}")
        self.publisher.publish(task_created_event(task))
        return task

    def update_task(self, identity: IdentityClaim, task_id: str, data: TaskUpdate) -> Task:
        """Apply a sparse update. Only supplied fields change; updated_at always moves."""
        task = self.get_owned_task(identity, task_id)

        supplied = data.model_dump(mode="json", exclude_unset=True)
        for name in REQUIRED_TASK_FIELDS:
            if supplied.get(name, "") is None:
                supplied.pop(name)
        if "project_id" in supplied:
            # An empty id detaches the task from its project
            supplied["project_id"] = supplied["project_id"] or None
            if supplied["project_id"]:
                self._require_project(supplied["project_id"])

        previous_status = task.status
        now = utcnow()
        with atomic(self.db):
            for name, value in data.model_dump(exclude_unset=True).items():
                if name not in supplied:
                    continue
                if name == "project_id":
                    value = supplied["project_id"]
                setattr(task, name, getattr(value, "value", value))
            task.updated_at = now
            if task.status != previous_status:
                self._notify_status_change(identity, task)

        self.db.refresh(task)
        self.publisher.publish(task_updated_event(task.task_id, supplied, now))
        return task

    def delete_task(self, identity: IdentityClaim, task_id: str) -> None:
        """Delete a task and every row that depends on it."""
        self.get_owned_task(identity, task_id)

        with atomic(self.db):
            for model in TASK_CHILD_MODELS:
                self.db.query(model).filter(model.task_id == task_id).delete(
                    synchronize_session=False
                )
            # Notifications outlive the task they mention
            self.db.query(Notification).filter(Notification.task_id == task_id).update(
                {Notification.task_id: None}, synchronize_session=False
            )
            self.db.query(Task).filter(Task.task_id == task_id).delete()

        logger.info(f"Task {task_id} deleted by {identity.user_id}")
        self.publisher.publish(task_deleted_event(task_id))

    def add_comment(self, identity: IdentityClaim, task_id: str, data: CommentCreate) -> TaskComment:
        """Append a comment to a task. Any authenticated caller may comment."""
        task = self.get_task(task_id)

        comment = TaskComment(
            comment_id=new_id(),
            task_id=task_id,
            user_id=identity.user_id,
            comment_text=data.comment_text,
            created_at=utcnow(),
        )
        with atomic(self.db):
            self.db.add(comment)
            if task.creator_id != identity.user_id:
                self.notifications.notify(
                    task.creator_id,
                    NotificationType.COMMENT,
                    f'{identity.display_name} commented on "{task.title}".',
                    task_id=task_id,
                )

        self.db.refresh(comment)
        self.publisher.publish(new_comment_event(comment))
        return comment

    # Child rows of an owned task

    def add_subtask(self, identity: IdentityClaim, task_id: str, data: SubtaskCreate) -> Subtask:
        task = self.get_owned_task(identity, task_id)
        now = utcnow()
        subtask = self._new_subtask(task_id, data, now)
        with atomic(self.db):
            self.db.add(subtask)
            task.updated_at = now
        self.db.refresh(subtask)
        self._publish_children_changed(task, "subtasks")
        return subtask

    def update_subtask(
        self, identity: IdentityClaim, task_id: str, subtask_id: str, data: SubtaskUpdate
    ) -> Subtask:
        task = self.get_owned_task(identity, task_id)
        subtask = self._get_subtask(task_id, subtask_id)
        now = utcnow()
        with atomic(self.db):
            if data.title is not None:
                subtask.title = data.title
            if data.is_completed is not None:
                subtask.is_completed = data.is_completed
            subtask.updated_at = now
            task.updated_at = now
        self.db.refresh(subtask)
        self._publish_children_changed(task, "subtasks")
        return subtask

    def delete_subtask(self, identity: IdentityClaim, task_id: str, subtask_id: str) -> None:
        task = self.get_owned_task(identity, task_id)
        subtask = self._get_subtask(task_id, subtask_id)
        with atomic(self.db):
            self.db.delete(subtask)
            task.updated_at = utcnow()
        self._publish_children_changed(task, "subtasks")

    def add_assignee(self, identity: IdentityClaim, task_id: str, user_id: str) -> Task:
        task = self.get_owned_task(identity, task_id)
        self._require_users([user_id])
        if any(a.user_id == user_id for a in task.assignees):
            raise InvalidInput("User is already assigned to this task")

        now = utcnow()
        with atomic(self.db):
            self.db.add(
                TaskAssignee(record_id=new_id(), task_id=task_id, user_id=user_id, assigned_at=now)
            )
            if user_id != identity.user_id:
                self.notifications.notify(
                    user_id,
                    NotificationType.ASSIGNMENT,
                    f'You have been assigned to task "{task.title}".',
                    task_id=task_id,
                )
            task.updated_at = now
        self.db.refresh(task)
        self._publish_children_changed(task, "assignees")
        return task

    def remove_assignee(self, identity: IdentityClaim, task_id: str, user_id: str) -> Task:
        task = self.get_owned_task(identity, task_id)
        record = (
            self.db.query(TaskAssignee)
            .filter(TaskAssignee.task_id == task_id, TaskAssignee.user_id == user_id)
            .first()
        )
        if not record:
            raise NotFound("Assignee not found")
        with atomic(self.db):
            self.db.delete(record)
            task.updated_at = utcnow()
        self.db.refresh(task)
        self._publish_children_changed(task, "assignees")
        return task

    def add_label(self, identity: IdentityClaim, task_id: str, label_id: str) -> Task:
        task = self.get_owned_task(identity, task_id)
        self._require_labels([label_id])
        if any(link.label_id == label_id for link in task.label_links):
            raise InvalidInput("Label is already attached to this task")
        with atomic(self.db):
            self.db.add(TaskLabel(record_id=new_id(), task_id=task_id, label_id=label_id))
            task.updated_at = utcnow()
        self.db.refresh(task)
        self._publish_children_changed(task, "labels")
        return task

    def remove_label(self, identity: IdentityClaim, task_id: str, label_id: str) -> Task:
        task = self.get_owned_task(identity, task_id)
        link = (
            self.db.query(TaskLabel)
            .filter(TaskLabel.task_id == task_id, TaskLabel.label_id == label_id)
            .first()
        )
        if not link:
            raise NotFound("Label is not attached to this task")
        with atomic(self.db):
            self.db.delete(link)
            task.updated_at = utcnow()
        self.db.refresh(task)
        self._publish_children_changed(task, "labels")
        return task

    # Helpers

    def _new_subtask(self, task_id: str, data: SubtaskCreate, now) -> Subtask:
        return Subtask(
            subtask_id=new_id(),
            task_id=task_id,
            title=data.title,
            is_completed=False,
            created_at=now,
            updated_at=now,
        )

    def _get_subtask(self, task_id: str, subtask_id: str) -> Subtask:
        subtask = (
            self.db.query(Subtask)
            .filter(Subtask.subtask_id == subtask_id, Subtask.task_id == task_id)
            .first()
        )
        if not subtask:
            raise NotFound("Subtask not found")
        return subtask

    def _notify_status_change(self, identity: IdentityClaim, task: Task) -> None:
        for assignee in task.assignees:
            if assignee.user_id == identity.user_id:
                continue
            self.notifications.notify(
                assignee.user_id,
                NotificationType.STATUS_CHANGE,
                f'Task "{task.title}" status updated to {task.status}.',
                task_id=task.task_id,
            )

    def _publish_children_changed(self, task: Task, collection: str) -> None:
        self.db.refresh(task)
        if collection == "subtasks":
            value = [SubtaskResponse.model_validate(s).model_dump(mode="json") for s in task.subtasks]
        elif collection == "assignees":
            value = [a.user_id for a in task.assignees]
        else:
            value = [link.label_id for link in task.label_links]
        self.publisher.publish(task_updated_event(task.task_id, {collection: value}, task.updated_at))
