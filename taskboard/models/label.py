"""Label vocabulary and task links."""

from sqlalchemy import Column, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import relationship

from taskboard.database import Base
from taskboard.models.mixins import new_id


class Label(Base):
    """Global label shared by all users."""

    __tablename__ = "labels"

    label_id = Column(String(36), primary_key=True, default=new_id)
    label_name = Column(String(100), unique=True, nullable=False)


class TaskLabel(Base):
    """Many-to-many link between tasks and labels."""

    __tablename__ = "task_labels"
    __table_args__ = (UniqueConstraint("task_id", "label_id", name="uq_task_label"),)

    record_id = Column(String(36), primary_key=True, default=new_id)
    task_id = Column(String(36), ForeignKey("tasks.task_id"), nullable=False, index=True)
    label_id = Column(String(36), ForeignKey("labels.label_id"), nullable=False, index=True)

    task = relationship("Task", back_populates="label_links")
    label = relationship("Label")
