"""Project model."""

from sqlalchemy import Column, Date, ForeignKey, String
from sqlalchemy.orm import relationship

from taskboard.database import Base
from taskboard.models.mixins import TimestampMixin, new_id


class Project(Base, TimestampMixin):
    """A project groups tasks. Owned by its creator."""

    __tablename__ = "projects"

    project_id = Column(String(36), primary_key=True, default=new_id)
    title = Column(String(255), nullable=False)
    description = Column(String, nullable=True)
    due_date = Column(Date, nullable=True)
    creator_id = Column(String(36), ForeignKey("users.user_id"), nullable=False, index=True)

    # Relationships
    creator = relationship("User", backref="projects")
    tasks = relationship("Task", back_populates="project")
