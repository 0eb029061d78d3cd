from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional

from app.db.database import get_db
from app.models.project_models import DifficultyLevel, ProjectStatus
from app.schemas.page_schemas import Page
from app.schemas.project_schemas import (
    CommentCreateSchema,
    CommentResponse,
    LikeToggleResponse,
    ProjectCreateSchema,
    ProjectResponse,
    ProjectUpdateSchema,
)
from app.services import project_service
from app.services.access_control import AUTHENTICATED
from app.services.dependencies import get_optional_principal, require
from app.services.principal_resolver import Principal

router = APIRouter(prefix="/projects", tags=["Projects"])


@router.get("", response_model=Page[ProjectResponse])
def list_projects(
    page: int = Query(0, ge=0),
    size: int = Query(20, ge=1, le=100),
    sort_by: str = Query("created_at"),
    sort_dir: str = Query("desc"),
    principal: Optional[Principal] = Depends(get_optional_principal),
    db: Session = Depends(get_db),
):
    return project_service.list_projects(db, principal, page, size, sort_by, sort_dir)


@router.post("", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED)
def create_project(
    payload: ProjectCreateSchema,
    principal: Principal = Depends(require(AUTHENTICATED)),
    db: Session = Depends(get_db),
):
    return project_service.create_project(db, payload, principal)


@router.get("/categories", response_model=List[str])
def project_categories(db: Session = Depends(get_db)):
    return project_service.get_categories(db)


@router.get("/tags", response_model=List[str])
def project_tags(db: Session = Depends(get_db)):
    return project_service.get_tags(db)


@router.get("/skills", response_model=List[str])
def project_skills(db: Session = Depends(get_db)):
    return project_service.get_skills(db)


@router.get("/search", response_model=Page[ProjectResponse])
def search_projects(
    q: str = Query(..., min_length=1),
    page: int = Query(0, ge=0),
    size: int = Query(20, ge=1, le=100),
    principal: Optional[Principal] = Depends(get_optional_principal),
    db: Session = Depends(get_db),
):
    return project_service.search_projects(db, q, principal, page, size)


@router.get("/featured", response_model=Page[ProjectResponse])
def featured_projects(
    page: int = Query(0, ge=0),
    size: int = Query(20, ge=1, le=100),
    principal: Optional[Principal] = Depends(get_optional_principal),
    db: Session = Depends(get_db),
):
    return project_service.featured_projects(db, principal, page, size)


@router.get("/trending", response_model=Page[ProjectResponse])
def trending_projects(
    page: int = Query(0, ge=0),
    size: int = Query(20, ge=1, le=100),
    principal: Optional[Principal] = Depends(get_optional_principal),
    db: Session = Depends(get_db),
):
    return project_service.trending_projects(db, principal, page, size)


@router.get("/most-liked", response_model=Page[ProjectResponse])
def most_liked_projects(
    page: int = Query(0, ge=0),
    size: int = Query(20, ge=1, le=100),
    principal: Optional[Principal] = Depends(get_optional_principal),
    db: Session = Depends(get_db),
):
    return project_service.most_liked_projects(db, principal, page, size)


@router.get("/category/{category}", response_model=Page[ProjectResponse])
def projects_by_category(
    category: str,
    page: int = Query(0, ge=0),
    size: int = Query(20, ge=1, le=100),
    principal: Optional[Principal] = Depends(get_optional_principal),
    db: Session = Depends(get_db),
):
    return project_service.projects_by_category(db, category, principal, page, size)


@router.get("/difficulty/{difficulty}", response_model=Page[ProjectResponse])
def projects_by_difficulty(
    difficulty: DifficultyLevel,
    page: int = Query(0, ge=0),
    size: int = Query(20, ge=1, le=100),
    principal: Optional[Principal] = Depends(get_optional_principal),
    db: Session = Depends(get_db),
):
    return project_service.projects_by_difficulty(db, difficulty, principal, page, size)


@router.get("/status/{project_status}", response_model=Page[ProjectResponse])
def projects_by_status(
    project_status: ProjectStatus,
    page: int = Query(0, ge=0),
    size: int = Query(20, ge=1, le=100),
    principal: Optional[Principal] = Depends(get_optional_principal),
    db: Session = Depends(get_db),
):
    return project_service.projects_by_status(db, project_status, principal, page, size)


@router.get("/owner/{owner_id}", response_model=Page[ProjectResponse])
def projects_by_owner(
    owner_id: int,
    page: int = Query(0, ge=0),
    size: int = Query(20, ge=1, le=100),
    principal: Optional[Principal] = Depends(get_optional_principal),
    db: Session = Depends(get_db),
):
    return project_service.projects_by_owner(db, owner_id, principal, page, size)


@router.get("/{project_id}", response_model=ProjectResponse)
def get_project(
    project_id: int,
    principal: Optional[Principal] = Depends(get_optional_principal),
    db: Session = Depends(get_db),
):
    return project_service.get_project(db, project_id, principal)


@router.put("/{project_id}", response_model=ProjectResponse)
def update_project(
    project_id: int,
    payload: ProjectUpdateSchema,
    principal: Principal = Depends(require(AUTHENTICATED)),
    db: Session = Depends(get_db),
):
    return project_service.update_project(db, project_id, payload, principal)


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_project(
    project_id: int,
    principal: Principal = Depends(require(AUTHENTICATED)),
    db: Session = Depends(get_db),
):
    project_service.delete_project(db, project_id, principal)


# -------------------------
# LIKES / COMMENTS
# -------------------------
@router.post("/{project_id}/like", response_model=LikeToggleResponse)
def toggle_like(
    project_id: int,
    principal: Principal = Depends(require(AUTHENTICATED)),
    db: Session = Depends(get_db),
):
    return project_service.toggle_like(db, project_id, principal)


@router.get("/{project_id}/comments", response_model=Page[CommentResponse])
def list_comments(
    project_id: int,
    page: int = Query(0, ge=0),
    size: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
):
    return project_service.list_comments(db, project_id, page, size)


@router.post(
    "/{project_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_comment(
    project_id: int,
    payload: CommentCreateSchema,
    principal: Principal = Depends(require(AUTHENTICATED)),
    db: Session = Depends(get_db),
):
    return project_service.add_comment(db, project_id, payload, principal)


@router.delete("/{project_id}/comments/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_comment(
    project_id: int,
    comment_id: int,
    principal: Principal = Depends(require(AUTHENTICATED)),
    db: Session = Depends(get_db),
):
    project_service.delete_comment(db, project_id, comment_id, principal)
