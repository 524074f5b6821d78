"""Dashboard API endpoint."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy import func
from sqlalchemy.orm import Session

from taskboard.api.dependencies import CurrentIdentity
from taskboard.database import get_db
from taskboard.models.task import Task
from taskboard.schemas.dashboard import DashboardResponse, DashboardStatistics, UpcomingDeadline

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])

UPCOMING_DEADLINE_LIMIT = 5


@router.get("", response_model=DashboardResponse)
def get_dashboard(
    identity: CurrentIdentity,
    db: Annotated[Session, Depends(get_db)],
):
    """Get task counts by status and the next due tasks for tasks the caller created."""
    counts = dict(
        db.query(Task.status, func.count(Task.task_id))
        .filter(Task.creator_id == identity.user_id)
        .group_by(Task.status)
        .all()
    )
    statistics = DashboardStatistics(
        pending=counts.get("pending", 0),
        in_progress=counts.get("in_progress", 0),
        completed=counts.get("completed", 0),
        total_tasks=sum(counts.values()),
    )

    upcoming = (
        db.query(Task)
        .filter(Task.creator_id == identity.user_id, Task.due_date.isnot(None))
        .order_by(Task.due_date.asc())
        .limit(UPCOMING_DEADLINE_LIMIT)
        .all()
    )

    return DashboardResponse(
        statistics=statistics,
        upcoming_deadlines=[UpcomingDeadline.model_validate(t) for t in upcoming],
    )
