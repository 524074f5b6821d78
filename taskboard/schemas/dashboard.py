"""Dashboard schemas."""

from datetime import date

from pydantic import BaseModel, ConfigDict


class DashboardStatistics(BaseModel):
    """Task counts by status for tasks the caller created."""

    pending: int = 0
    in_progress: int = 0
    completed: int = 0
    total_tasks: int = 0


class UpcomingDeadline(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    task_id: str
    title: str
    due_date: date


class DashboardResponse(BaseModel):
    statistics: DashboardStatistics
    upcoming_deadlines: list[UpcomingDeadline]
