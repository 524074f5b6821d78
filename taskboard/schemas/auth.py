"""Authentication and user schemas."""

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from taskboard.models.enums import UserRole


class UserRegister(BaseModel):
    """User registration request."""

    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr = Field(..., max_length=255)
    password: str = Field(..., min_length=8, max_length=128)
    profile_picture: str | None = Field(None, max_length=1000)


class UserLogin(BaseModel):
    """User login request."""

    email: EmailStr = Field(..., max_length=255)
    password: str = Field(..., min_length=1, max_length=128)


class UserResponse(BaseModel):
    """User information response."""

    model_config = ConfigDict(from_attributes=True)

    user_id: str
    name: str
    email: str
    profile_picture: str | None = None
    role: UserRole


class AuthResponse(BaseModel):
    """Authentication response with token and user info."""

    message: str
    token: str
    token_type: str = "bearer"  # noqa: S105
    user: UserResponse


class IdentityClaim(BaseModel):
    """Verified identity carried by a session token."""

    model_config = ConfigDict(frozen=True)

    user_id: str
    email: str
    display_name: str
    role: UserRole


class ProfileUpdate(BaseModel):
    """Profile update. Name and email are required, as on registration."""

    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr = Field(..., max_length=255)
    profile_picture: str | None = Field(None, max_length=1000)


class ProfileResponse(BaseModel):
    """Profile envelope."""

    message: str | None = None
    user: UserResponse
