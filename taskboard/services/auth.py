"""Authentication service for JWT and password handling."""

import logging
from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt
from passlib.context import CryptContext
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from taskboard.config import get_settings
from taskboard.errors import DuplicateEmail, InvalidCredentials, InvalidToken
from taskboard.models.enums import UserRole
from taskboard.models.mixins import new_id, utcnow
from taskboard.models.user import User
from taskboard.schemas.auth import IdentityClaim, UserRegister

logger = logging.getLogger(__name__)
settings = get_settings()

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password."""
    return pwd_context.hash(password)


def create_access_token(user: User, expires_delta: timedelta | None = None) -> str:
    """Create a signed session token for a user.

    The token carries the identity claim (id, email, name, role) and an expiry,
    24 hours from now unless ``expires_delta`` says otherwise.
    """
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.jwt_expiration_minutes)
    expire = datetime.now(UTC) + expires_delta
    to_encode = {
        "sub": user.user_id,
        "email": user.email,
        "name": user.name,
        "role": user.role,
        "exp": expire,
    }
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_token(token: str) -> IdentityClaim:
    """Check a token's signature and expiry and return its identity claim.

    Shared by the HTTP and realtime entry points. Raises InvalidToken on any failure.
    """
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError as e:
        logger.debug(f"Token rejected: {e}")
        raise InvalidToken() from e

    try:
        return IdentityClaim(
            user_id=payload["sub"],
            email=payload["email"],
            display_name=payload["name"],
            role=payload["role"],
        )
    except (KeyError, ValidationError) as e:
        logger.debug(f"Token has malformed claims: {e}")
        raise InvalidToken() from e


def get_user_by_email(db: Session, email: str) -> User | None:
    """Get a user by email."""
    return db.query(User).filter(User.email == email).first()


def register_user(db: Session, data: UserRegister) -> tuple[User, str]:
    """Create a new user and issue a token for it."""
    if get_user_by_email(db, data.email):
        raise DuplicateEmail()

    now = utcnow()
    user = User(
        user_id=new_id(),
        name=data.name,
        email=data.email,
        password_hash=get_password_hash(data.password),
        profile_picture=data.profile_picture,
        role=UserRole.USER.value,
        created_at=now,
        updated_at=now,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race with a concurrent registration for the same email
        db.rollback()
        raise DuplicateEmail() from None
    db.refresh(user)
    logger.info(f"Registered user {user.user_id}")
    return user, create_access_token(user)


def authenticate_user(db: Session, email: str, password: str) -> User | None:
    """Authenticate a user by email and password."""
    user = get_user_by_email(db, email)
    if not user:
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user


def login(db: Session, email: str, password: str) -> tuple[str, User]:
    """Verify credentials and issue a token.

    Unknown email and wrong password fail identically.
    """
    user = authenticate_user(db, email, password)
    if user is None:
        raise InvalidCredentials()
    return create_access_token(user), user
