"""Pydantic schemas for API requests and responses."""

from taskboard.schemas.auth import (
    AuthResponse,
    IdentityClaim,
    ProfileUpdate,
    UserLogin,
    UserRegister,
    UserResponse,
)
from taskboard.schemas.project import ProjectCreate, ProjectResponse, ProjectUpdate
from taskboard.schemas.task import TaskCreate, TaskDetail, TaskSummary, TaskUpdate

__all__ = [
    "UserRegister",
    "UserLogin",
    "UserResponse",
    "AuthResponse",
    "IdentityClaim",
    "ProfileUpdate",
    "ProjectCreate",
    "ProjectUpdate",
    "ProjectResponse",
    "TaskCreate",
    "TaskUpdate",
    "TaskSummary",
    "TaskDetail",
]
