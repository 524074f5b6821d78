"""User profile API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from taskboard.api.dependencies import CurrentIdentity
from taskboard.database import get_db
from taskboard.errors import DuplicateEmail, NotFound
from taskboard.models.mixins import utcnow
from taskboard.models.user import User
from taskboard.schemas.auth import IdentityClaim, ProfileResponse, ProfileUpdate, UserResponse
from taskboard.services.auth import get_user_by_email

router = APIRouter(prefix="/api/users", tags=["users"])


def get_own_user(db: Session, identity: IdentityClaim) -> User:
    """Load the caller's user record."""
    user = db.query(User).filter(User.user_id == identity.user_id).first()
    if not user:
        raise NotFound("User not found")
    return user


@router.get("/profile", response_model=ProfileResponse)
def get_profile(
    identity: CurrentIdentity,
    db: Annotated[Session, Depends(get_db)],
):
    """Get the caller's profile."""
    user = get_own_user(db, identity)
    return ProfileResponse(user=UserResponse.model_validate(user))


@router.put("/profile", response_model=ProfileResponse)
def update_profile(
    profile_data: ProfileUpdate,
    identity: CurrentIdentity,
    db: Annotated[Session, Depends(get_db)],
):
    """Update the caller's name, email and profile picture."""
    user = get_own_user(db, identity)

    if profile_data.email != user.email:
        other = get_user_by_email(db, profile_data.email)
        if other and other.user_id != user.user_id:
            raise DuplicateEmail()

    user.name = profile_data.name
    user.email = profile_data.email
    user.profile_picture = profile_data.profile_picture
    user.updated_at = utcnow()
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise DuplicateEmail() from None
    db.refresh(user)

    return ProfileResponse(message="Profile updated", user=UserResponse.model_validate(user))
