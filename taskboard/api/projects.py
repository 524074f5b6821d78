"""Project API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from taskboard.api.dependencies import CurrentIdentity, get_project_service
from taskboard.schemas.project import (
    ProjectCreate,
    ProjectDetail,
    ProjectDetailEnvelope,
    ProjectEnvelope,
    ProjectListResponse,
    ProjectResponse,
    ProjectTask,
    ProjectUpdate,
)
from taskboard.services.project_service import ProjectService

router = APIRouter(prefix="/api/projects", tags=["projects"])

Service = Annotated[ProjectService, Depends(get_project_service)]


@router.post("", response_model=ProjectEnvelope, status_code=status.HTTP_201_CREATED)
def create_project(project_data: ProjectCreate, identity: CurrentIdentity, service: Service):
    """Create a new project."""
    project = service.create_project(identity, project_data)
    return ProjectEnvelope(message="Project created", project=ProjectResponse.model_validate(project))


@router.get("", response_model=ProjectListResponse)
def get_projects(identity: CurrentIdentity, service: Service):
    """Get projects the caller created."""
    projects = service.list_projects(identity)
    return ProjectListResponse(projects=[ProjectResponse.model_validate(p) for p in projects])


@router.get("/{project_id}", response_model=ProjectDetailEnvelope)
def get_project(project_id: str, identity: CurrentIdentity, service: Service):
    """Get a project and its tasks."""
    project = service.get_project(project_id)
    detail = ProjectDetail(
        **ProjectResponse.model_validate(project).model_dump(),
        tasks=[ProjectTask.model_validate(t) for t in service.project_tasks(project_id)],
    )
    return ProjectDetailEnvelope(project=detail)


@router.put("/{project_id}", response_model=ProjectEnvelope)
def update_project(
    project_id: str, project_data: ProjectUpdate, identity: CurrentIdentity, service: Service
):
    """Update a project (creator only)."""
    project = service.update_project(identity, project_id, project_data)
    return ProjectEnvelope(message="Project updated", project=ProjectResponse.model_validate(project))


@router.delete("/{project_id}")
def delete_project(project_id: str, identity: CurrentIdentity, service: Service):
    """Delete a project (creator only). Its tasks are kept without a project."""
    service.delete_project(identity, project_id)
    return {"message": "Project deleted successfully"}
