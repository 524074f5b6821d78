"""Enums for model fields."""

from enum import Enum


class TaskPriority(str, Enum):
    """Task priority levels."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TaskStatus(str, Enum):
    """Task workflow states."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class UserRole(str, Enum):
    """User roles. New registrations always get USER."""

    USER = "user"
    MANAGER = "manager"
    ADMIN = "admin"


class NotificationType(str, Enum):
    """Kinds of notification stored for a recipient."""

    ASSIGNMENT = "assignment"
    COMMENT = "comment"
    STATUS_CHANGE = "status_change"
    DUE_SOON = "due_soon"
