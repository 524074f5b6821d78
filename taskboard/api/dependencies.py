"""FastAPI dependencies for authentication, database and services."""

from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from taskboard.database import get_db
from taskboard.errors import Unauthenticated
from taskboard.schemas.auth import IdentityClaim
from taskboard.services.auth import verify_token
from taskboard.services.notification_service import NotificationService
from taskboard.services.project_service import ProjectService
from taskboard.services.realtime import EventPublisher
from taskboard.services.task_service import TaskService

security = HTTPBearer(auto_error=False)


def get_current_identity(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> IdentityClaim:
    """Get the caller's identity claim from the bearer token."""
    if credentials is None or not credentials.credentials:
        raise Unauthenticated()
    return verify_token(credentials.credentials)


def get_publisher(request: Request) -> EventPublisher:
    """Get the application's event publisher."""
    return request.app.state.publisher


def get_task_service(
    db: Annotated[Session, Depends(get_db)],
    publisher: Annotated[EventPublisher, Depends(get_publisher)],
) -> TaskService:
    """Get task service with dependencies."""
    return TaskService(db, publisher)


def get_project_service(
    db: Annotated[Session, Depends(get_db)],
) -> ProjectService:
    """Get project service with dependencies."""
    return ProjectService(db)


def get_notification_service(
    db: Annotated[Session, Depends(get_db)],
) -> NotificationService:
    """Get notification service with dependencies."""
    return NotificationService(db)


CurrentIdentity = Annotated[IdentityClaim, Depends(get_current_identity)]
