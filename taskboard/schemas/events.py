"""Realtime event payloads."""

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel

from taskboard.models.enums import TaskStatus


class TaskCreatedData(BaseModel):
    task_id: str
    title: str
    status: TaskStatus
    due_date: date | None
    creator_id: str


class TaskUpdatedData(BaseModel):
    task_id: str
    updated_fields: dict[str, Any]
    updated_at: datetime


class TaskDeletedData(BaseModel):
    task_id: str


class NewCommentData(BaseModel):
    comment_id: str
    task_id: str
    user_id: str
    comment_text: str
    created_at: datetime


class EventEnvelope(BaseModel):
    """Message pushed to realtime connections."""

    event: str
    data: dict[str, Any]
