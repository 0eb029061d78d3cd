"""Projects, likes and comments.

Like and comment counters on `projects` follow the same rule as event
attendee counts: they move only through conditional UPDATEs issued together
with the row change they mirror, inside one transaction.
"""

import logging
from datetime import datetime, timedelta

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import BadRequestError, ConflictError, ForbiddenError, NotFoundError
from app.crud import project as project_crud
from app.crud import user as user_crud
from app.crud.pagination import apply_sort, paginate
from app.models.project_models import (
    DifficultyLevel,
    Project,
    ProjectComment,
    ProjectLike,
    ProjectStatus,
)
from app.schemas.page_schemas import Page
from app.schemas.project_schemas import (
    CommentCreateSchema,
    CommentResponse,
    LikeToggleResponse,
    OwnerInfo,
    ProjectCreateSchema,
    ProjectResponse,
    ProjectUpdateSchema,
)
from app.schemas.user_schemas import UserSummary
from app.services.access_control import is_owner_or_admin
from app.services.principal_resolver import Principal
from app.utils.clock import utcnow

logger = logging.getLogger(__name__)

PROJECT_SORT_FIELDS = {"created_at", "title", "category", "likes_count", "views_count", "comments_count"}
TRENDING_WINDOW = timedelta(days=7)


# -------------------------
# RESPONSE BUILDING
# -------------------------
def _to_responses(db: Session, projects: list[Project], principal: Principal | None) -> list[ProjectResponse]:
    owners = user_crud.find_by_ids(db, [project.owner_id for project in projects])
    liked = set()
    if principal is not None:
        liked = project_crud.liked_project_ids(db, principal.id, [p.id for p in projects])

    responses = []
    for project in projects:
        owner = owners.get(project.owner_id)
        responses.append(
            ProjectResponse(
                id=project.id,
                title=project.title,
                description=project.description,
                category=project.category,
                difficulty_level=project.difficulty_level,
                expected_duration=project.expected_duration,
                team_size=project.team_size,
                required_skills=project.required_skills or [],
                requirements=project.requirements,
                status=project.status,
                tags=project.tags or [],
                is_featured=project.is_featured,
                is_active=project.is_active,
                likes_count=project.likes_count,
                comments_count=project.comments_count,
                views_count=project.views_count,
                created_at=project.created_at,
                updated_at=project.updated_at,
                owner=(
                    OwnerInfo(
                        id=owner.id,
                        name=owner.full_name,
                        email=owner.email,
                        avatar_url=owner.avatar_url,
                        department=owner.department,
                        academic_year=owner.academic_year,
                    )
                    if owner
                    else None
                ),
                is_liked=project.id in liked,
                is_owner=principal is not None and principal.id == project.owner_id,
            )
        )
    return responses


def _to_page(
    db: Session,
    query,
    principal: Principal | None,
    page: int,
    size: int,
    sort_by: str | None = "created_at",
    sort_dir: str = "desc",
) -> Page[ProjectResponse]:
    if sort_by is not None:
        query = apply_sort(query, Project, sort_by, sort_dir, PROJECT_SORT_FIELDS)
    items, total = paginate(query, page, size)
    return Page[ProjectResponse](
        items=_to_responses(db, items, principal),
        total=total,
        page=page,
        size=size,
    )


def _get_active_project(db: Session, project_id: int) -> Project:
    project = project_crud.find_active_by_id(db, project_id)
    if not project:
        raise NotFoundError("Project", project_id)
    return project


# -------------------------
# CREATE / READ
# -------------------------
def create_project(db: Session, payload: ProjectCreateSchema, principal: Principal) -> ProjectResponse:
    project = Project(
        title=payload.title,
        description=payload.description,
        category=payload.category,
        difficulty_level=payload.difficulty_level,
        expected_duration=payload.expected_duration,
        team_size=payload.team_size,
        required_skills=payload.required_skills or [],
        requirements=payload.requirements,
        tags=payload.tags or [],
        status=ProjectStatus.SEEKING_COLLABORATORS,
        owner_id=principal.id,
        is_featured=payload.is_featured,
        is_active=True,
        likes_count=0,
        comments_count=0,
        views_count=0,
    )
    db.add(project)
    db.commit()
    db.refresh(project)

    logger.info("Project %s created by user %s", project.id, principal.id)
    return _to_responses(db, [project], principal)[0]


def get_project(db: Session, project_id: int, principal: Principal | None) -> ProjectResponse:
    project = _get_active_project(db, project_id)

    project_crud.increment_views_count(db, project_id)
    db.commit()
    db.refresh(project)

    return _to_responses(db, [project], principal)[0]


def list_projects(db: Session, principal, page, size, sort_by, sort_dir) -> Page[ProjectResponse]:
    return _to_page(db, project_crud.query_active(db), principal, page, size, sort_by, sort_dir)


def search_projects(db: Session, term: str, principal, page, size) -> Page[ProjectResponse]:
    return _to_page(db, project_crud.search(db, term), principal, page, size)


def projects_by_category(db: Session, category: str, principal, page, size) -> Page[ProjectResponse]:
    return _to_page(db, project_crud.by_category(db, category), principal, page, size)


def projects_by_difficulty(db: Session, difficulty: DifficultyLevel, principal, page, size) -> Page[ProjectResponse]:
    return _to_page(db, project_crud.by_difficulty(db, difficulty), principal, page, size)


def projects_by_status(db: Session, status: ProjectStatus, principal, page, size) -> Page[ProjectResponse]:
    return _to_page(db, project_crud.by_status(db, status), principal, page, size)


def projects_by_owner(db: Session, owner_id: int, principal, page, size) -> Page[ProjectResponse]:
    return _to_page(db, project_crud.by_owner(db, owner_id), principal, page, size)


def featured_projects(db: Session, principal, page, size) -> Page[ProjectResponse]:
    return _to_page(db, project_crud.featured(db), principal, page, size)


def most_liked_projects(db: Session, principal, page, size) -> Page[ProjectResponse]:
    return _to_page(db, project_crud.most_liked(db), principal, page, size, sort_by=None)


def trending_projects(
    db: Session, principal, page, size, now: datetime | None = None
) -> Page[ProjectResponse]:
    since = (now or utcnow()) - TRENDING_WINDOW
    return _to_page(db, project_crud.trending(db, since), principal, page, size, sort_by=None)


def get_categories(db: Session) -> list[str]:
    return project_crud.distinct_categories(db)


def get_tags(db: Session) -> list[str]:
    return project_crud.distinct_tags(db)


def get_skills(db: Session) -> list[str]:
    return project_crud.distinct_skills(db)


# -------------------------
# UPDATE / DELETE
# -------------------------
def update_project(
    db: Session, project_id: int, payload: ProjectUpdateSchema, principal: Principal
) -> ProjectResponse:
    project = _get_active_project(db, project_id)

    # only the owner edits; admins can only remove
    if project.owner_id != principal.id:
        raise ForbiddenError()

    for field, value in payload.model_dump(exclude_unset=True).items():
        if value is None and field in ("title", "description", "category", "status"):
            continue
        setattr(project, field, value)

    db.commit()
    db.refresh(project)

    logger.info("Project %s updated by user %s", project_id, principal.id)
    return _to_responses(db, [project], principal)[0]


def delete_project(db: Session, project_id: int, principal: Principal) -> None:
    project = _get_active_project(db, project_id)

    if not is_owner_or_admin(principal, project.owner_id):
        raise ForbiddenError()

    project.is_active = False
    db.commit()
    logger.info("Project %s deactivated by user %s", project_id, principal.id)


# -------------------------
# LIKES
# -------------------------
def toggle_like(db: Session, project_id: int, principal: Principal) -> LikeToggleResponse:
    project = _get_active_project(db, project_id)

    if project_crud.exists_like(db, principal.id, project_id):
        # a concurrent unlike may already have removed the row
        if project_crud.delete_like(db, principal.id, project_id):
            project_crud.decrement_likes_count(db, project_id)
        liked = False
    else:
        try:
            project_crud.save_like(db, ProjectLike(project_id=project_id, user_id=principal.id))
        except IntegrityError:
            db.rollback()
            raise ConflictError("Project already liked")
        project_crud.increment_likes_count(db, project_id)
        liked = True

    db.commit()
    db.refresh(project)

    logger.info("User %s %s project %s", principal.id, "liked" if liked else "unliked", project_id)
    return LikeToggleResponse(project_id=project_id, liked=liked, likes_count=project.likes_count)


# -------------------------
# COMMENTS
# -------------------------
def _to_comment_responses(db: Session, comments: list[ProjectComment]) -> list[CommentResponse]:
    if not comments:
        return []

    replies = project_crud.replies_for(db, [c.id for c in comments])
    authors = user_crud.find_by_ids(db, [c.user_id for c in comments] + [r.user_id for r in replies])

    def build(comment: ProjectComment, children: list[CommentResponse]) -> CommentResponse:
        author = authors.get(comment.user_id)
        return CommentResponse(
            id=comment.id,
            project_id=comment.project_id,
            user=UserSummary.model_validate(author) if author else None,
            content=comment.content,
            parent_comment_id=comment.parent_comment_id,
            replies=children,
            is_active=comment.is_active,
            created_at=comment.created_at,
            updated_at=comment.updated_at,
        )

    by_parent: dict[int, list[CommentResponse]] = {}
    for reply in replies:
        by_parent.setdefault(reply.parent_comment_id, []).append(build(reply, []))

    return [build(comment, by_parent.get(comment.id, [])) for comment in comments]


def add_comment(
    db: Session, project_id: int, payload: CommentCreateSchema, principal: Principal
) -> CommentResponse:
    _get_active_project(db, project_id)

    if payload.parent_comment_id is not None:
        parent = project_crud.find_active_comment(db, payload.parent_comment_id)
        if not parent:
            raise NotFoundError("Comment", payload.parent_comment_id)
        if parent.project_id != project_id:
            raise BadRequestError("Parent comment belongs to a different project")

    comment = ProjectComment(
        project_id=project_id,
        user_id=principal.id,
        parent_comment_id=payload.parent_comment_id,
        content=payload.content,
        is_active=True,
    )
    project_crud.save_comment(db, comment)
    project_crud.increment_comments_count(db, project_id)
    db.commit()
    db.refresh(comment)

    logger.info("User %s commented on project %s", principal.id, project_id)
    return _to_comment_responses(db, [comment])[0]


def list_comments(db: Session, project_id: int, page: int, size: int) -> Page[CommentResponse]:
    _get_active_project(db, project_id)
    items, total = paginate(project_crud.top_level_comments(db, project_id), page, size)
    return Page[CommentResponse](
        items=_to_comment_responses(db, items),
        total=total,
        page=page,
        size=size,
    )


def delete_comment(db: Session, project_id: int, comment_id: int, principal: Principal) -> None:
    comment = project_crud.find_active_comment(db, comment_id)
    if not comment or comment.project_id != project_id:
        raise NotFoundError("Comment", comment_id)

    if not is_owner_or_admin(principal, comment.user_id):
        raise ForbiddenError()

    if not project_crud.deactivate_comment(db, comment_id):
        db.rollback()
        raise NotFoundError("Comment", comment_id)
    project_crud.decrement_comments_count(db, project_id)
    db.commit()
    logger.info("Comment %s deactivated by user %s", comment_id, principal.id)
