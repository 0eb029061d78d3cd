# Auth service: login / refresh / logout
import logging
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import InvalidCredentialsError, InvalidTokenError
from app.crud import user as user_crud
from app.schemas.auth_schemas import JwtAuthenticationResponse
from app.services.principal_resolver import (
    Principal,
    resolve_by_credentials,
    resolve_by_id,
)
from app.services.token_service import TokenCodec, TokenKind, ValidToken
from app.utils.clock import utcnow

logger = logging.getLogger(__name__)


def _issue_pair(codec: TokenCodec, principal: Principal, now: datetime | None) -> JwtAuthenticationResponse:
    access_token = codec.issue(
        principal.id, principal.role, TokenKind.ACCESS, now=now, email=principal.email
    )
    refresh_token = codec.issue(principal.id, principal.role, TokenKind.REFRESH, now=now)

    return JwtAuthenticationResponse(
        access_token=access_token,
        refresh_token=refresh_token,
        token_type="Bearer",
        expires_in_seconds=int(codec.access_ttl.total_seconds()),
        user_id=principal.id,
        email=principal.email,
        role=principal.role.value,
    )


def _record_last_login(db: Session, user_id: int) -> None:
    # a failed timestamp write must not fail the login
    try:
        user_crud.update_last_login(db, user_id, utcnow())
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to update last login for user %s", user_id)


def login(
    db: Session,
    codec: TokenCodec,
    identifier: str,
    password: str,
    now: datetime | None = None,
) -> JwtAuthenticationResponse:
    try:
        principal = resolve_by_credentials(db, identifier, password)
    except InvalidCredentialsError:
        logger.warning("Failed login attempt for %s", identifier)
        raise

    response = _issue_pair(codec, principal, now)
    _record_last_login(db, principal.id)

    logger.info("User %s logged in with role %s", principal.id, principal.role.value)
    return response


def refresh(
    db: Session,
    codec: TokenCodec,
    refresh_token: str,
    now: datetime | None = None,
) -> JwtAuthenticationResponse:
    result = codec.validate(refresh_token, now)
    if not isinstance(result, ValidToken):
        logger.info("Refresh rejected: %s", result.value)
        raise InvalidTokenError()
    if not result.is_refresh:
        logger.info("Refresh rejected: access token presented")
        raise InvalidTokenError()

    # re-resolve so role changes and deactivation take effect
    principal = resolve_by_id(db, codec.subject_of(result))
    return _issue_pair(codec, principal, now)


def logout() -> None:
    """Nothing to clear server side.

    Tokens are stateless: already issued access and refresh tokens stay
    valid until they expire. Revocation would need a denylist store.
    """
    logger.debug("Logout requested")
