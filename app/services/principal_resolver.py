import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session

from app.core.exceptions import InvalidCredentialsError, NotFoundError
from app.crud import user as user_crud
from app.models.user_models import User, UserRole
from app.utils.hashing import verify_password

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Principal:
    """The authenticated user for the duration of one request."""

    id: int
    email: str
    username: str
    role: UserRole
    is_active: bool
    email_verified: bool

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @classmethod
    def from_user(cls, user: User) -> "Principal":
        return cls(
            id=user.id,
            email=user.email,
            username=user.username,
            role=UserRole(user.role),
            is_active=bool(user.is_active),
            email_verified=bool(user.email_verified),
        )


def resolve_by_id(db: Session, user_id: int) -> Principal:
    # missing and deactivated users are reported the same way
    user = user_crud.find_by_id(db, user_id)
    if not user or not user.is_active:
        logger.debug("No active user for id %s", user_id)
        raise NotFoundError("User", user_id)
    return Principal.from_user(user)


def resolve_by_credentials(db: Session, identifier: str, raw_password: str) -> Principal:
    identifier = (identifier or "").strip()

    user = None
    if "@" in identifier:
        user = user_crud.find_by_email(db, identifier)
    if user is None and identifier:
        user = user_crud.find_by_username(db, identifier)

    if user is None or not user.is_active:
        raise InvalidCredentialsError()

    if not verify_password(raw_password, user.password_hash):
        raise InvalidCredentialsError()

    return Principal.from_user(user)
