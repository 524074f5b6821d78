"""Project schemas."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from taskboard.models.enums import TaskStatus


class ProjectCreate(BaseModel):
    """Create a new project."""

    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = Field(None, max_length=5000)
    due_date: date | None = None


class ProjectUpdate(BaseModel):
    """Sparse project update."""

    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = Field(None, max_length=5000)
    due_date: date | None = None


class ProjectResponse(BaseModel):
    """Project response."""

    model_config = ConfigDict(from_attributes=True)

    project_id: str
    title: str
    description: str | None
    due_date: date | None
    creator_id: str
    created_at: datetime
    updated_at: datetime


class ProjectTask(BaseModel):
    """Task row as listed under its project."""

    model_config = ConfigDict(from_attributes=True)

    task_id: str
    title: str
    status: TaskStatus
    due_date: date | None


class ProjectDetail(ProjectResponse):
    tasks: list[ProjectTask] = Field(default_factory=list)


class ProjectEnvelope(BaseModel):
    message: str | None = None
    project: ProjectResponse


class ProjectDetailEnvelope(BaseModel):
    project: ProjectDetail


class ProjectListResponse(BaseModel):
    projects: list[ProjectResponse]
