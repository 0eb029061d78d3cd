from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List

from app.db.database import get_db
from app.models.user_models import UserRole
from app.schemas.page_schemas import Page
from app.schemas.user_schemas import UserResponse, UserStatistics, UserUpdateSchema
from app.services import user_service
from app.services.access_control import ADMIN_ONLY, ADMIN_OR_SELF, AUTHENTICATED
from app.services.dependencies import require
from app.services.principal_resolver import Principal

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("/me", response_model=UserResponse)
def get_me(
    principal: Principal = Depends(require(AUTHENTICATED)),
    db: Session = Depends(get_db),
):
    return user_service.get_user(db, principal.id)


@router.put("/me", response_model=UserResponse)
def update_me(
    payload: UserUpdateSchema,
    principal: Principal = Depends(require(AUTHENTICATED)),
    db: Session = Depends(get_db),
):
    return user_service.update_user(db, principal.id, payload)


@router.get("", response_model=Page[UserResponse])
def list_users(
    page: int = Query(0, ge=0),
    size: int = Query(20, ge=1, le=100),
    sort_by: str = Query("created_at"),
    sort_dir: str = Query("desc"),
    _: Principal = Depends(require(ADMIN_ONLY)),
    db: Session = Depends(get_db),
):
    return user_service.list_users(db, page, size, sort_by, sort_dir)


@router.get("/search", response_model=Page[UserResponse])
def search_users(
    q: str = Query(..., min_length=1),
    page: int = Query(0, ge=0),
    size: int = Query(20, ge=1, le=100),
    sort_by: str = Query("created_at"),
    sort_dir: str = Query("desc"),
    _: Principal = Depends(require(AUTHENTICATED)),
    db: Session = Depends(get_db),
):
    return user_service.search_users(db, q, page, size, sort_by, sort_dir)


@router.get("/role/{role}", response_model=Page[UserResponse])
def users_by_role(
    role: UserRole,
    page: int = Query(0, ge=0),
    size: int = Query(20, ge=1, le=100),
    sort_by: str = Query("created_at"),
    sort_dir: str = Query("desc"),
    _: Principal = Depends(require(AUTHENTICATED)),
    db: Session = Depends(get_db),
):
    return user_service.users_by_role(db, role, page, size, sort_by, sort_dir)


@router.get("/department/{department}", response_model=Page[UserResponse])
def users_by_department(
    department: str,
    page: int = Query(0, ge=0),
    size: int = Query(20, ge=1, le=100),
    sort_by: str = Query("created_at"),
    sort_dir: str = Query("desc"),
    _: Principal = Depends(require(AUTHENTICATED)),
    db: Session = Depends(get_db),
):
    return user_service.users_by_department(db, department, page, size, sort_by, sort_dir)


@router.get("/statistics", response_model=UserStatistics)
def user_statistics(
    _: Principal = Depends(require(ADMIN_ONLY)),
    db: Session = Depends(get_db),
):
    return user_service.get_statistics(db)


@router.get("/departments", response_model=List[str])
def departments(db: Session = Depends(get_db)):
    return user_service.get_departments(db)


@router.get("/{user_id}", response_model=UserResponse)
def get_user(
    user_id: int,
    _: Principal = Depends(require(AUTHENTICATED)),
    db: Session = Depends(get_db),
):
    return user_service.get_user(db, user_id)


@router.put("/{user_id}", response_model=UserResponse)
def update_user(
    user_id: int,
    payload: UserUpdateSchema,
    _: Principal = Depends(require(ADMIN_OR_SELF)),
    db: Session = Depends(get_db),
):
    return user_service.update_user(db, user_id, payload)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: int,
    _: Principal = Depends(require(ADMIN_ONLY)),
    db: Session = Depends(get_db),
):
    user_service.deactivate_user(db, user_id)
