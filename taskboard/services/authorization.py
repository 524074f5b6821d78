"""Ownership checks for mutating operations."""

from enum import Enum

from taskboard.errors import Forbidden
from taskboard.schemas.auth import IdentityClaim


class Decision(str, Enum):
    ALLOW = "allow"
    FORBIDDEN = "forbidden"


def authorize(identity: IdentityClaim, resource_owner_id: str) -> Decision:
    """Allow iff the caller is the resource owner."""
    if identity.user_id == resource_owner_id:
        return Decision.ALLOW
    return Decision.FORBIDDEN


def require_owner(identity: IdentityClaim, resource_owner_id: str, message: str | None = None) -> None:
    """Raise Forbidden unless the caller owns the resource."""
    if authorize(identity, resource_owner_id) is Decision.FORBIDDEN:
        raise Forbidden(message)
