import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import BadRequestError, NotFoundError
from app.crud import user as user_crud
from app.crud.pagination import apply_sort, paginate
from app.models.user_models import User, UserRole
from app.schemas.auth_schemas import UserRegistrationSchema
from app.schemas.page_schemas import Page
from app.schemas.user_schemas import UserResponse, UserStatistics, UserUpdateSchema
from app.utils.hashing import get_password_hash

logger = logging.getLogger(__name__)

USER_SORT_FIELDS = {"created_at", "username", "first_name", "last_name", "email", "last_login"}


def _to_page(query, page: int, size: int, sort_by: str, sort_dir: str) -> Page[UserResponse]:
    query = apply_sort(query, User, sort_by, sort_dir, USER_SORT_FIELDS)
    items, total = paginate(query, page, size)
    return Page[UserResponse](
        items=[UserResponse.model_validate(user) for user in items],
        total=total,
        page=page,
        size=size,
    )


# -------------------------
# REGISTER
# -------------------------
def register_user(db: Session, payload: UserRegistrationSchema) -> User:
    if user_crud.exists_by_email(db, payload.email):
        raise BadRequestError("Email address already in use")
    if user_crud.exists_by_username(db, payload.username):
        raise BadRequestError("Username is already taken")

    user = User(
        username=payload.username,
        email=payload.email,
        password_hash=get_password_hash(payload.password),
        first_name=payload.first_name.strip(),
        last_name=payload.last_name.strip(),
        department=payload.department,
        academic_year=payload.academic_year,
        role=UserRole.STUDENT,
        is_active=True,
        email_verified=False,
    )
    try:
        user = user_crud.create_user(db, user)
    except IntegrityError:
        db.rollback()
        raise BadRequestError("Email or username already in use")

    logger.info("Registered user %s (%s)", user.id, user.username)
    return user


# -------------------------
# READ
# -------------------------
def get_user(db: Session, user_id: int) -> User:
    user = user_crud.find_active_by_id(db, user_id)
    if not user:
        raise NotFoundError("User", user_id)
    return user


def list_users(db: Session, page: int, size: int, sort_by: str, sort_dir: str) -> Page[UserResponse]:
    return _to_page(user_crud.query_active(db), page, size, sort_by, sort_dir)


def search_users(db: Session, term: str, page: int, size: int, sort_by: str, sort_dir: str) -> Page[UserResponse]:
    return _to_page(user_crud.search(db, term), page, size, sort_by, sort_dir)


def users_by_role(db: Session, role: UserRole, page: int, size: int, sort_by: str, sort_dir: str) -> Page[UserResponse]:
    return _to_page(user_crud.by_role(db, role), page, size, sort_by, sort_dir)


def users_by_department(
    db: Session, department: str, page: int, size: int, sort_by: str, sort_dir: str
) -> Page[UserResponse]:
    return _to_page(user_crud.by_department(db, department), page, size, sort_by, sort_dir)


def get_statistics(db: Session) -> UserStatistics:
    return UserStatistics(
        total_users=user_crud.count_active(db),
        students=user_crud.count_by_role(db, UserRole.STUDENT),
        admins=user_crud.count_by_role(db, UserRole.ADMIN),
    )


def get_departments(db: Session) -> list[str]:
    return user_crud.distinct_departments(db)


# -------------------------
# UPDATE / DELETE
# -------------------------
def update_user(db: Session, user_id: int, payload: UserUpdateSchema) -> User:
    user = get_user(db, user_id)

    for field, value in payload.model_dump(exclude_unset=True).items():
        if value is None and field in ("first_name", "last_name"):
            continue
        setattr(user, field, value)

    db.commit()
    db.refresh(user)
    logger.info("Updated profile of user %s", user_id)
    return user


def deactivate_user(db: Session, user_id: int) -> None:
    user = get_user(db, user_id)
    user_crud.soft_delete(db, user)
    logger.info("Deactivated user %s", user_id)
