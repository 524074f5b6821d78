"""SQLAlchemy models."""

from taskboard.models.label import Label, TaskLabel
from taskboard.models.notification import Notification
from taskboard.models.project import Project
from taskboard.models.task import Subtask, Task, TaskAssignee, TaskComment
from taskboard.models.user import User

__all__ = [
    "User",
    "Project",
    "Task",
    "Subtask",
    "TaskComment",
    "TaskAssignee",
    "Label",
    "TaskLabel",
    "Notification",
]
