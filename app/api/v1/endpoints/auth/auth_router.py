from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.exceptions import InvalidTokenError, NotFoundError
from app.db.database import get_db
from app.schemas.auth_schemas import (
    JwtAuthenticationResponse,
    LoginSchema,
    MessageResponse,
    UserRegistrationSchema,
)
from app.schemas.user_schemas import UserResponse
from app.services import auth_service, user_service
from app.services.dependencies import get_current_principal, get_refresh_token
from app.services.principal_resolver import Principal
from app.services.token_service import TokenCodec, get_token_codec

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/login", response_model=JwtAuthenticationResponse)
def login(
    payload: LoginSchema,
    db: Session = Depends(get_db),
    codec: TokenCodec = Depends(get_token_codec),
):
    return auth_service.login(db, codec, payload.identifier, payload.password)


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register(payload: UserRegistrationSchema, db: Session = Depends(get_db)):
    return user_service.register_user(db, payload)


@router.post("/refresh", response_model=JwtAuthenticationResponse)
def refresh(
    refresh_token: str = Depends(get_refresh_token),
    db: Session = Depends(get_db),
    codec: TokenCodec = Depends(get_token_codec),
):
    try:
        return auth_service.refresh(db, codec, refresh_token)
    except NotFoundError:
        # a deleted or deactivated subject is just an unusable token to the client
        raise InvalidTokenError()


@router.post("/logout", response_model=MessageResponse)
def logout():
    auth_service.logout()
    return MessageResponse(message="User logged out successfully")


@router.get("/me", response_model=UserResponse)
def me(
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    return user_service.get_user(db, principal.id)
