"""Project service."""

import logging

from sqlalchemy.orm import Session

from taskboard.database import atomic
from taskboard.errors import NotFound
from taskboard.models.mixins import new_id, utcnow
from taskboard.models.project import Project
from taskboard.models.task import Task
from taskboard.schemas.auth import IdentityClaim
from taskboard.schemas.project import ProjectCreate, ProjectUpdate
from taskboard.services.authorization import require_owner

logger = logging.getLogger(__name__)


class ProjectService:
    """Service for project operations."""

    def __init__(self, db: Session):
        self.db = db

    def get_project(self, project_id: str) -> Project:
        project = self.db.query(Project).filter(Project.project_id == project_id).first()
        if not project:
            raise NotFound("Project not found")
        return project

    def get_owned_project(self, identity: IdentityClaim, project_id: str) -> Project:
        project = self.get_project(project_id)
        require_owner(identity, project.creator_id, "Only the project creator can modify the project")
        return project

    def create_project(self, identity: IdentityClaim, data: ProjectCreate) -> Project:
        now = utcnow()
        project = Project(
            project_id=new_id(),
            title=data.title,
            description=data.description,
            due_date=data.due_date,
            creator_id=identity.user_id,
            created_at=now,
            updated_at=now,
        )
        self.db.add(project)
        self.db.commit()
        self.db.refresh(project)
        logger.info(f"Project {project.project_id} created by {identity.user_id}")
        return project

    def list_projects(self, identity: IdentityClaim) -> list[Project]:
        return (
            self.db.query(Project)
            .filter(Project.creator_id == identity.user_id)
            .order_by(Project.created_at.desc())
            .all()
        )

    def project_tasks(self, project_id: str) -> list[Task]:
        return self.db.query(Task).filter(Task.project_id == project_id).all()

    def update_project(self, identity: IdentityClaim, project_id: str, data: ProjectUpdate) -> Project:
        project = self.get_owned_project(identity, project_id)

        changes = data.model_dump(exclude_unset=True)
        if changes.get("title") is None:
            changes.pop("title", None)
        for field, value in changes.items():
            setattr(project, field, value)
        project.updated_at = utcnow()

        self.db.commit()
        self.db.refresh(project)
        return project

    def delete_project(self, identity: IdentityClaim, project_id: str) -> None:
        """Delete a project. Its tasks stay, detached from the project."""
        project = self.get_owned_project(identity, project_id)
        with atomic(self.db):
            self.db.query(Task).filter(Task.project_id == project_id).update(
                {Task.project_id: None}, synchronize_session=False
            )
            self.db.delete(project)
        logger.info(f"Project {project_id} deleted by {identity.user_id}")
