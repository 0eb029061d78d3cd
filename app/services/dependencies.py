import logging

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from app.core.exceptions import (
    ForbiddenError,
    InvalidTokenError,
    NotFoundError,
    UnauthenticatedError,
)
from app.db.database import get_db
from app.services.access_control import AccessRule, Decision, RequiresRoleOrSelf, evaluate
from app.services.principal_resolver import Principal, resolve_by_id
from app.services.token_service import TokenCodec, ValidToken, get_token_codec

logger = logging.getLogger(__name__)

# ✅ HTTPBearer for extracting Bearer token from Authorization header
http_bearer = HTTPBearer(auto_error=False)


def _get_bearer_token(credentials: HTTPAuthorizationCredentials | None) -> str | None:
    if not credentials or not credentials.scheme or credentials.scheme.lower() != "bearer":
        return None
    return credentials.credentials or None


def principal_from_access_token(db: Session, codec: TokenCodec, token: str) -> Principal:
    result = codec.validate(token)
    if not isinstance(result, ValidToken):
        raise InvalidTokenError()

    # refresh tokens only work on /auth/refresh
    if result.is_refresh:
        raise InvalidTokenError()

    try:
        return resolve_by_id(db, codec.subject_of(result))
    except NotFoundError:
        raise InvalidTokenError()


def get_optional_principal(
    credentials: HTTPAuthorizationCredentials | None = Depends(http_bearer),
    db: Session = Depends(get_db),
    codec: TokenCodec = Depends(get_token_codec),
) -> Principal | None:
    token = _get_bearer_token(credentials)
    if token is None:
        return None
    try:
        return principal_from_access_token(db, codec, token)
    except InvalidTokenError:
        logger.info("Ignoring invalid bearer token on public route")
        return None


def get_current_principal(
    credentials: HTTPAuthorizationCredentials | None = Depends(http_bearer),
    db: Session = Depends(get_db),
    codec: TokenCodec = Depends(get_token_codec),
) -> Principal:
    token = _get_bearer_token(credentials)
    if token is None:
        raise UnauthenticatedError()
    return principal_from_access_token(db, codec, token)


def get_refresh_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(http_bearer),
) -> str:
    token = _get_bearer_token(credentials)
    if token is None:
        raise InvalidTokenError()
    return token


def _target_id(request: Request, rule: AccessRule) -> int | None:
    if not isinstance(rule, RequiresRoleOrSelf):
        return None
    raw = request.path_params.get(rule.target_param)
    try:
        return int(raw) if raw is not None else None
    except (TypeError, ValueError):
        return None


def require(rule: AccessRule):
    """Build a dependency that enforces `rule` and yields the principal."""

    def dependency(
        request: Request,
        credentials: HTTPAuthorizationCredentials | None = Depends(http_bearer),
        db: Session = Depends(get_db),
        codec: TokenCodec = Depends(get_token_codec),
    ) -> Principal | None:
        token = _get_bearer_token(credentials)
        principal = principal_from_access_token(db, codec, token) if token else None

        decision = evaluate(rule, principal, _target_id(request, rule))
        if decision == Decision.UNAUTHENTICATED:
            raise UnauthenticatedError()
        if decision == Decision.FORBIDDEN:
            logger.info(
                "Forbidden: user %s on %s %s",
                principal.id if principal else None,
                request.method,
                request.url.path,
            )
            raise ForbiddenError()
        return principal

    return dependency
