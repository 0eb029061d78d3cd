"""Signing and parsing of access / refresh session tokens (JWT).

`TokenCodec.validate` never raises for client supplied input; it returns
either a `ValidToken` or a `TokenFailure`. Only a `ValidToken` exposes the
subject id, so callers cannot read claims of a token they did not validate.
"""

import enum
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from functools import lru_cache

import jwt
from jwt.exceptions import (
    DecodeError,
    ExpiredSignatureError,
    InvalidSignatureError,
    InvalidTokenError,
    MissingRequiredClaimError,
)

from app.core.config import get_settings
from app.models.user_models import UserRole

REFRESH_TYPE = "refresh"


class TokenKind(str, enum.Enum):
    ACCESS = "access"
    REFRESH = "refresh"


class TokenFailure(str, enum.Enum):
    INVALID_SIGNATURE = "invalid_signature"
    MALFORMED = "malformed"
    EXPIRED = "expired"
    UNSUPPORTED = "unsupported"


@dataclass(frozen=True)
class ValidToken:
    subject_id: int
    kind: TokenKind
    issued_at: datetime
    expires_at: datetime
    role: UserRole | None = None
    email: str | None = None

    @property
    def is_refresh(self) -> bool:
        return self.kind == TokenKind.REFRESH


def _as_utc(now: datetime | None) -> datetime:
    if now is None:
        return datetime.now(timezone.utc)
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now.astimezone(timezone.utc)


class TokenCodec:
    def __init__(
        self,
        secret_key: str,
        access_ttl: timedelta,
        refresh_ttl: timedelta,
        algorithm: str = "HS512",
    ) -> None:
        if not secret_key:
            raise RuntimeError("SECRET_KEY is missing")
        self._secret_key = secret_key
        self._algorithm = algorithm
        self.access_ttl = access_ttl
        self.refresh_ttl = refresh_ttl

    def issue(
        self,
        subject_id: int,
        role: UserRole,
        kind: TokenKind,
        now: datetime | None = None,
        email: str | None = None,
    ) -> str:
        issued_at = _as_utc(now)
        ttl = self.refresh_ttl if kind == TokenKind.REFRESH else self.access_ttl

        payload = {
            "sub": str(subject_id),
            "iat": int(issued_at.timestamp()),
            "exp": int((issued_at + ttl).timestamp()),
        }
        if kind == TokenKind.REFRESH:
            payload["type"] = REFRESH_TYPE
        else:
            payload["role"] = UserRole(role).value
            if email:
                payload["email"] = email

        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

    def validate(self, token: str, now: datetime | None = None) -> ValidToken | TokenFailure:
        if not token or not isinstance(token, str):
            return TokenFailure.MALFORMED

        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                options={
                    "verify_exp": False,
                    "verify_iat": False,
                    "require": ["sub", "iat", "exp"],
                },
            )
        except InvalidSignatureError:
            return TokenFailure.INVALID_SIGNATURE
        except ExpiredSignatureError:
            return TokenFailure.EXPIRED
        except (MissingRequiredClaimError, DecodeError):
            return TokenFailure.MALFORMED
        except InvalidTokenError:
            return TokenFailure.UNSUPPORTED
        except (TypeError, ValueError):
            return TokenFailure.MALFORMED

        try:
            subject_id = int(payload["sub"])
            issued_at = datetime.fromtimestamp(int(payload["iat"]), tz=timezone.utc)
            expires_at = datetime.fromtimestamp(int(payload["exp"]), tz=timezone.utc)
        except (TypeError, ValueError, OverflowError, OSError):
            return TokenFailure.MALFORMED

        if _as_utc(now) >= expires_at:
            return TokenFailure.EXPIRED

        token_type = payload.get("type")
        if token_type == REFRESH_TYPE:
            return ValidToken(
                subject_id=subject_id,
                kind=TokenKind.REFRESH,
                issued_at=issued_at,
                expires_at=expires_at,
            )
        if token_type is not None:
            return TokenFailure.UNSUPPORTED

        try:
            role = UserRole(payload.get("role"))
        except ValueError:
            return TokenFailure.UNSUPPORTED

        return ValidToken(
            subject_id=subject_id,
            kind=TokenKind.ACCESS,
            issued_at=issued_at,
            expires_at=expires_at,
            role=role,
            email=payload.get("email"),
        )

    def subject_of(self, token: ValidToken) -> int:
        return token.subject_id

    def is_refresh(self, token: str, now: datetime | None = None) -> bool:
        result = self.validate(token, now)
        return isinstance(result, ValidToken) and result.is_refresh


@lru_cache
def get_token_codec() -> TokenCodec:
    settings = get_settings()
    return TokenCodec(
        secret_key=settings.secret_key,
        access_ttl=timedelta(minutes=settings.access_token_expire_minutes),
        refresh_ttl=timedelta(days=settings.refresh_token_expire_days),
        algorithm=settings.algorithm,
    )
