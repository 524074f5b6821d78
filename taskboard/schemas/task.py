"""Task schemas."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from taskboard.models.enums import TaskPriority, TaskStatus


class SubtaskCreate(BaseModel):
    """Subtask supplied on task creation or added later."""

    title: str = Field(..., min_length=1, max_length=500)


class SubtaskUpdate(BaseModel):
    """Update a subtask."""

    title: str | None = Field(None, min_length=1, max_length=500)
    is_completed: bool | None = None


class SubtaskResponse(BaseModel):
    """Subtask response."""

    model_config = ConfigDict(from_attributes=True)

    subtask_id: str
    task_id: str
    title: str
    is_completed: bool


class TaskCreate(BaseModel):
    """Create a new task with optional children."""

    title: str = Field(..., min_length=1, max_length=500)
    description: str | None = Field(None, max_length=5000)
    due_date: date | None = None
    priority: TaskPriority = TaskPriority.MEDIUM
    status: TaskStatus = TaskStatus.PENDING
    project_id: str | None = None
    assignees: list[str] = Field(default_factory=list)
    labels: list[str] = Field(default_factory=list)
    subtasks: list[SubtaskCreate] = Field(default_factory=list)


class TaskUpdate(BaseModel):
    """Sparse task update. Only fields present in the request are applied."""

    title: str | None = Field(None, min_length=1, max_length=500)
    description: str | None = Field(None, max_length=5000)
    due_date: date | None = None
    priority: TaskPriority | None = None
    status: TaskStatus | None = None
    project_id: str | None = None


class TaskSummary(BaseModel):
    """Task row with assignee and label ids."""

    model_config = ConfigDict(from_attributes=True)

    task_id: str
    title: str
    description: str | None
    due_date: date | None
    priority: TaskPriority
    status: TaskStatus
    creator_id: str
    project_id: str | None
    created_at: datetime
    updated_at: datetime
    assignees: list[str] = Field(default_factory=list)
    labels: list[str] = Field(default_factory=list)


class CommentCreate(BaseModel):
    """Add a comment to a task."""

    comment_text: str = Field(..., min_length=1, max_length=5000)


class CommentResponse(BaseModel):
    """Comment response."""

    model_config = ConfigDict(from_attributes=True)

    comment_id: str
    task_id: str
    user_id: str
    comment_text: str
    created_at: datetime


class AssigneeAdd(BaseModel):
    """Assign a user to a task."""

    user_id: str = Field(..., min_length=1)


class AssigneeResponse(BaseModel):
    """Assigned user with display name."""

    user_id: str
    name: str


class TaskLabelAdd(BaseModel):
    """Attach a label to a task."""

    label_id: str = Field(..., min_length=1)


class TaskDetail(TaskSummary):
    """Full task with children."""

    subtasks: list[SubtaskResponse] = Field(default_factory=list)
    comments: list[CommentResponse] = Field(default_factory=list)
    assignees: list[AssigneeResponse] = Field(default_factory=list)  # type: ignore[assignment]


class TaskEnvelope(BaseModel):
    message: str | None = None
    task: TaskSummary


class TaskDetailEnvelope(BaseModel):
    task: TaskDetail


class TaskListResponse(BaseModel):
    tasks: list[TaskSummary]


class CommentEnvelope(BaseModel):
    message: str
    comment: CommentResponse


class SubtaskEnvelope(BaseModel):
    message: str
    subtask: SubtaskResponse
