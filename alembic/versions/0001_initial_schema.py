"""initial schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("user_id", sa.String(length=36), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("profile_picture", sa.String(length=1000), nullable=True),
        sa.Column("role", sa.String(length=20), nullable=False, server_default="user"),
        *_timestamps(),
    )
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)

    op.create_table(
        "projects",
        sa.Column("project_id", sa.String(length=36), primary_key=True),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("due_date", sa.Date(), nullable=True),
        sa.Column("creator_id", sa.String(length=36), sa.ForeignKey("users.user_id"), nullable=False),
        *_timestamps(),
    )
    op.create_index(op.f("ix_projects_creator_id"), "projects", ["creator_id"])

    op.create_table(
        "tasks",
        sa.Column("task_id", sa.String(length=36), primary_key=True),
        sa.Column("title", sa.String(length=500), nullable=False),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("due_date", sa.Date(), nullable=True),
        sa.Column("priority", sa.String(length=20), nullable=False, server_default="medium"),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="pending"),
        sa.Column("creator_id", sa.String(length=36), sa.ForeignKey("users.user_id"), nullable=False),
        sa.Column(
            "project_id", sa.String(length=36), sa.ForeignKey("projects.project_id"), nullable=True
        ),
        *_timestamps(),
    )
    op.create_index(op.f("ix_tasks_due_date"), "tasks", ["due_date"])
    op.create_index(op.f("ix_tasks_status"), "tasks", ["status"])
    op.create_index(op.f("ix_tasks_creator_id"), "tasks", ["creator_id"])
    op.create_index(op.f("ix_tasks_project_id"), "tasks", ["project_id"])

    op.create_table(
        "subtasks",
        sa.Column("subtask_id", sa.String(length=36), primary_key=True),
        sa.Column("task_id", sa.String(length=36), sa.ForeignKey("tasks.task_id"), nullable=False),
        sa.Column("title", sa.String(length=500), nullable=False),
        sa.Column("is_completed", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
    )
    op.create_index(op.f("ix_subtasks_task_id"), "subtasks", ["task_id"])

    op.create_table(
        "task_comments",
        sa.Column("comment_id", sa.String(length=36), primary_key=True),
        sa.Column("task_id", sa.String(length=36), sa.ForeignKey("tasks.task_id"), nullable=False),
        sa.Column("user_id", sa.String(length=36), sa.ForeignKey("users.user_id"), nullable=False),
        sa.Column("comment_text", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index(op.f("ix_task_comments_task_id"), "task_comments", ["task_id"])
    op.create_index(op.f("ix_task_comments_user_id"), "task_comments", ["user_id"])

    op.create_table(
        "task_assignees",
        sa.Column("record_id", sa.String(length=36), primary_key=True),
        sa.Column("task_id", sa.String(length=36), sa.ForeignKey("tasks.task_id"), nullable=False),
        sa.Column("user_id", sa.String(length=36), sa.ForeignKey("users.user_id"), nullable=False),
        sa.Column("assigned_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("task_id", "user_id", name="uq_task_assignee"),
    )
    op.create_index(op.f("ix_task_assignees_task_id"), "task_assignees", ["task_id"])
    op.create_index(op.f("ix_task_assignees_user_id"), "task_assignees", ["user_id"])

    op.create_table(
        "labels",
        sa.Column("label_id", sa.String(length=36), primary_key=True),
        sa.Column("label_name", sa.String(length=100), nullable=False, unique=True),
    )

    op.create_table(
        "task_labels",
        sa.Column("record_id", sa.String(length=36), primary_key=True),
        sa.Column("task_id", sa.String(length=36), sa.ForeignKey("tasks.task_id"), nullable=False),
        sa.Column("label_id", sa.String(length=36), sa.ForeignKey("labels.label_id"), nullable=False),
        sa.UniqueConstraint("task_id", "label_id", name="uq_task_label"),
    )
    op.create_index(op.f("ix_task_labels_task_id"), "task_labels", ["task_id"])
    op.create_index(op.f("ix_task_labels_label_id"), "task_labels", ["label_id"])

    op.create_table(
        "notifications",
        sa.Column("notification_id", sa.String(length=36), primary_key=True),
        sa.Column("user_id", sa.String(length=36), sa.ForeignKey("users.user_id"), nullable=False),
        sa.Column("notification_type", sa.String(length=50), nullable=False),
        sa.Column("task_id", sa.String(length=36), sa.ForeignKey("tasks.task_id"), nullable=True),
        sa.Column("message", sa.String(), nullable=False),
        sa.Column("is_read", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index(op.f("ix_notifications_user_id"), "notifications", ["user_id"])
    op.create_index(op.f("ix_notifications_task_id"), "notifications", ["task_id"])


def downgrade() -> None:
    # Children before parents
    for table in (
        "notifications",
        "task_labels",
        "labels",
        "task_assignees",
        "task_comments",
        "subtasks",
        "tasks",
        "projects",
        "users",
    ):
        op.drop_table(table)
