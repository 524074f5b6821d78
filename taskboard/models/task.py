"""Task model and its dependent rows."""

from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import relationship

from taskboard.database import Base
from taskboard.models.enums import TaskPriority, TaskStatus
from taskboard.models.mixins import TimestampMixin, new_id, utcnow


class Task(Base, TimestampMixin):
    """Task model. Only the creator may update or delete it."""

    __tablename__ = "tasks"

    task_id = Column(String(36), primary_key=True, default=new_id)
    title = Column(String(500), nullable=False)
    description = Column(String, nullable=True)
    due_date = Column(Date, nullable=True, index=True)
    priority = Column(String(20), nullable=False, default=TaskPriority.MEDIUM.value)
    status = Column(String(20), nullable=False, default=TaskStatus.PENDING.value, index=True)
    creator_id = Column(String(36), ForeignKey("users.user_id"), nullable=False, index=True)
    project_id = Column(String(36), ForeignKey("projects.project_id"), nullable=True, index=True)

    # Relationships. Dependent rows are removed explicitly by the task service.
    creator = relationship("User", foreign_keys=[creator_id])
    project = relationship("Project", back_populates="tasks")
    subtasks = relationship("Subtask", back_populates="task", order_by="Subtask.created_at")
    comments = relationship("TaskComment", back_populates="task", order_by="TaskComment.created_at")
    assignees = relationship("TaskAssignee", back_populates="task")
    label_links = relationship("TaskLabel", back_populates="task")


class Subtask(Base, TimestampMixin):
    """Checklist entry belonging to a task."""

    __tablename__ = "subtasks"

    subtask_id = Column(String(36), primary_key=True, default=new_id)
    task_id = Column(String(36), ForeignKey("tasks.task_id"), nullable=False, index=True)
    title = Column(String(500), nullable=False)
    is_completed = Column(Boolean, nullable=False, default=False)

    task = relationship("Task", back_populates="subtasks")


class TaskComment(Base):
    """Comment on a task. Append-only."""

    __tablename__ = "task_comments"

    comment_id = Column(String(36), primary_key=True, default=new_id)
    task_id = Column(String(36), ForeignKey("tasks.task_id"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("users.user_id"), nullable=False, index=True)
    comment_text = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    task = relationship("Task", back_populates="comments")
    author = relationship("User")


class TaskAssignee(Base):
    """Join row assigning a user to a task."""

    __tablename__ = "task_assignees"
    __table_args__ = (UniqueConstraint("task_id", "user_id", name="uq_task_assignee"),)

    record_id = Column(String(36), primary_key=True, default=new_id)
    task_id = Column(String(36), ForeignKey("tasks.task_id"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("users.user_id"), nullable=False, index=True)
    assigned_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    task = relationship("Task", back_populates="assignees")
    user = relationship("User")
