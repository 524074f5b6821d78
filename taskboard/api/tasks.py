"""Task API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from taskboard.api.dependencies import CurrentIdentity, get_task_service
from taskboard.models.enums import TaskStatus
from taskboard.schemas.task import (
    AssigneeAdd,
    CommentCreate,
    CommentEnvelope,
    CommentResponse,
    SubtaskCreate,
    SubtaskEnvelope,
    SubtaskResponse,
    SubtaskUpdate,
    TaskCreate,
    TaskDetailEnvelope,
    TaskEnvelope,
    TaskLabelAdd,
    TaskListResponse,
    TaskUpdate,
)
from taskboard.services.task_service import TaskService, to_detail, to_summary

router = APIRouter(prefix="/api/tasks", tags=["tasks"])

Service = Annotated[TaskService, Depends(get_task_service)]


@router.post("", response_model=TaskEnvelope, status_code=status.HTTP_201_CREATED)
def create_task(task_data: TaskCreate, identity: CurrentIdentity, service: Service):
    """Create a task with optional subtasks, assignees and labels."""
    task = service.create_task(identity, task_data)
    return TaskEnvelope(message="Task created", task=to_summary(task))


@router.get("", response_model=TaskListResponse)
def get_tasks(
    identity: CurrentIdentity,
    service: Service,
    task_status: TaskStatus | None = Query(default=None, alias="status"),
):
    """Get tasks the caller created or is assigned to."""
    tasks = service.list_tasks(identity, task_status)
    return TaskListResponse(tasks=[to_summary(t) for t in tasks])


@router.get("/{task_id}", response_model=TaskDetailEnvelope)
def get_task(task_id: str, identity: CurrentIdentity, service: Service):
    """Get a task with its subtasks, comments, assignees and labels."""
    return TaskDetailEnvelope(task=to_detail(service.get_task(task_id)))


@router.put("/{task_id}", response_model=TaskEnvelope)
def update_task(task_id: str, task_data: TaskUpdate, identity: CurrentIdentity, service: Service):
    """Update a task (creator only)."""
    task = service.update_task(identity, task_id, task_data)
    return TaskEnvelope(message="Task updated", task=to_summary(task))


@router.delete("/{task_id}")
def delete_task(task_id: str, identity: CurrentIdentity, service: Service):
    """Delete a task and everything attached to it (creator only)."""
    service.delete_task(identity, task_id)
    return {"message": "Task deleted successfully"}


@router.post(
    "/{task_id}/comments", response_model=CommentEnvelope, status_code=status.HTTP_201_CREATED
)
def add_comment(
    task_id: str, comment_data: CommentCreate, identity: CurrentIdentity, service: Service
):
    """Add a comment to a task."""
    comment = service.add_comment(identity, task_id, comment_data)
    return CommentEnvelope(message="Comment added", comment=CommentResponse.model_validate(comment))


@router.post(
    "/{task_id}/subtasks", response_model=SubtaskEnvelope, status_code=status.HTTP_201_CREATED
)
def add_subtask(
    task_id: str, subtask_data: SubtaskCreate, identity: CurrentIdentity, service: Service
):
    """Add a subtask (task creator only)."""
    subtask = service.add_subtask(identity, task_id, subtask_data)
    return SubtaskEnvelope(message="Subtask added", subtask=SubtaskResponse.model_validate(subtask))


@router.put("/{task_id}/subtasks/{subtask_id}", response_model=SubtaskEnvelope)
def update_subtask(
    task_id: str,
    subtask_id: str,
    subtask_data: SubtaskUpdate,
    identity: CurrentIdentity,
    service: Service,
):
    """Rename a subtask or toggle its completion (task creator only)."""
    subtask = service.update_subtask(identity, task_id, subtask_id, subtask_data)
    return SubtaskEnvelope(
        message="Subtask updated", subtask=SubtaskResponse.model_validate(subtask)
    )


@router.delete("/{task_id}/subtasks/{subtask_id}")
def delete_subtask(task_id: str, subtask_id: str, identity: CurrentIdentity, service: Service):
    """Delete a subtask (task creator only)."""
    service.delete_subtask(identity, task_id, subtask_id)
    return {"message": "Subtask deleted"}


@router.post("/{task_id}/assignees", response_model=TaskEnvelope, status_code=status.HTTP_201_CREATED)
def add_assignee(
    task_id: str, assignee_data: AssigneeAdd, identity: CurrentIdentity, service: Service
):
    """Assign a user to a task (task creator only)."""
    task = service.add_assignee(identity, task_id, assignee_data.user_id)
    return TaskEnvelope(message="Assignee added", task=to_summary(task))


@router.delete("/{task_id}/assignees/{user_id}", response_model=TaskEnvelope)
def remove_assignee(task_id: str, user_id: str, identity: CurrentIdentity, service: Service):
    """Unassign a user from a task (task creator only)."""
    task = service.remove_assignee(identity, task_id, user_id)
    return TaskEnvelope(message="Assignee removed", task=to_summary(task))


@router.post("/{task_id}/labels", response_model=TaskEnvelope, status_code=status.HTTP_201_CREATED)
def add_label(task_id: str, label_data: TaskLabelAdd, identity: CurrentIdentity, service: Service):
    """Attach a label to a task (task creator only)."""
    task = service.add_label(identity, task_id, label_data.label_id)
    return TaskEnvelope(message="Label added", task=to_summary(task))


@router.delete("/{task_id}/labels/{label_id}", response_model=TaskEnvelope)
def remove_label(task_id: str, label_id: str, identity: CurrentIdentity, service: Service):
    """Detach a label from a task (task creator only)."""
    task = service.remove_label(identity, task_id, label_id)
    return TaskEnvelope(message="Label removed", task=to_summary(task))
