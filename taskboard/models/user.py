"""User model."""

from sqlalchemy import Column, String

from taskboard.database import Base
from taskboard.models.enums import UserRole
from taskboard.models.mixins import TimestampMixin, new_id


class User(Base, TimestampMixin):
    """User model for authentication and ownership."""

    __tablename__ = "users"

    user_id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    profile_picture = Column(String(1000), nullable=True)
    role = Column(String(20), nullable=False, default=UserRole.USER.value)
