# Project, like and comment store
from datetime import datetime

from sqlalchemy import and_, desc, func, or_, update
from sqlalchemy.orm import Session

from app.models.project_models import (
    DifficultyLevel,
    Project,
    ProjectComment,
    ProjectLike,
    ProjectStatus,
)


# -------------------------
# PROJECTS
# -------------------------
def find_active_by_id(db: Session, project_id: int) -> Project | None:
    return (
        db.query(Project)
        .filter(Project.id == project_id, Project.is_active.is_(True))
        .first()
    )


def query_active(db: Session):
    return db.query(Project).filter(Project.is_active.is_(True))


def by_category(db: Session, category: str):
    return query_active(db).filter(Project.category == category)


def by_difficulty(db: Session, difficulty: DifficultyLevel):
    return query_active(db).filter(Project.difficulty_level == difficulty)


def by_status(db: Session, status: ProjectStatus):
    return query_active(db).filter(Project.status == status)


def by_owner(db: Session, owner_id: int):
    return query_active(db).filter(Project.owner_id == owner_id)


def featured(db: Session):
    return query_active(db).filter(Project.is_featured.is_(True))


def search(db: Session, term: str):
    pattern = f"%{term.strip().lower()}%"
    return query_active(db).filter(
        or_(
            func.lower(Project.title).like(pattern),
            func.lower(Project.description).like(pattern),
        )
    )


def most_liked(db: Session):
    return query_active(db).order_by(desc(Project.likes_count), desc(Project.created_at))


def trending(db: Session, since: datetime):
    recent_likes = func.count(ProjectLike.id)
    return (
        query_active(db)
        .outerjoin(
            ProjectLike,
            and_(ProjectLike.project_id == Project.id, ProjectLike.created_at >= since),
        )
        .group_by(Project.id)
        .order_by(desc(recent_likes), desc(Project.created_at))
    )


def distinct_categories(db: Session) -> list[str]:
    rows = (
        db.query(Project.category)
        .filter(Project.is_active.is_(True))
        .distinct()
        .order_by(Project.category)
        .all()
    )
    return [row[0] for row in rows]


def _distinct_json_values(db: Session, column) -> list[str]:
    values: set[str] = set()
    for (items,) in db.query(column).filter(Project.is_active.is_(True)).all():
        values.update(items or [])
    return sorted(values)


def distinct_tags(db: Session) -> list[str]:
    return _distinct_json_values(db, Project.tags)


def distinct_skills(db: Session) -> list[str]:
    return _distinct_json_values(db, Project.required_skills)


def _bump(db: Session, project_id: int, column, delta: int) -> bool:
    conditions = [Project.id == project_id]
    if delta < 0:
        conditions.append(column > 0)
    result = db.execute(
        update(Project)
        .where(*conditions)
        .values({column.key: column + delta})
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


def increment_views_count(db: Session, project_id: int) -> bool:
    return _bump(db, project_id, Project.views_count, 1)


def increment_likes_count(db: Session, project_id: int) -> bool:
    return _bump(db, project_id, Project.likes_count, 1)


def decrement_likes_count(db: Session, project_id: int) -> bool:
    return _bump(db, project_id, Project.likes_count, -1)


def increment_comments_count(db: Session, project_id: int) -> bool:
    return _bump(db, project_id, Project.comments_count, 1)


def decrement_comments_count(db: Session, project_id: int) -> bool:
    return _bump(db, project_id, Project.comments_count, -1)


# -------------------------
# LIKES
# -------------------------
def exists_like(db: Session, user_id: int, project_id: int) -> bool:
    return (
        db.query(ProjectLike.id)
        .filter(ProjectLike.user_id == user_id, ProjectLike.project_id == project_id)
        .first()
        is not None
    )


def save_like(db: Session, like: ProjectLike) -> ProjectLike:
    db.add(like)
    db.flush()
    return like


def delete_like(db: Session, user_id: int, project_id: int) -> int:
    return (
        db.query(ProjectLike)
        .filter(ProjectLike.user_id == user_id, ProjectLike.project_id == project_id)
        .delete(synchronize_session=False)
    )


def liked_project_ids(db: Session, user_id: int, project_ids: list[int]) -> set[int]:
    if not project_ids:
        return set()
    rows = (
        db.query(ProjectLike.project_id)
        .filter(ProjectLike.user_id == user_id, ProjectLike.project_id.in_(project_ids))
        .all()
    )
    return {row[0] for row in rows}


# -------------------------
# COMMENTS
# -------------------------
def find_active_comment(db: Session, comment_id: int) -> ProjectComment | None:
    return (
        db.query(ProjectComment)
        .filter(ProjectComment.id == comment_id, ProjectComment.is_active.is_(True))
        .first()
    )


def save_comment(db: Session, comment: ProjectComment) -> ProjectComment:
    db.add(comment)
    db.flush()
    return comment


def deactivate_comment(db: Session, comment_id: int) -> bool:
    result = db.execute(
        update(ProjectComment)
        .where(ProjectComment.id == comment_id, ProjectComment.is_active.is_(True))
        .values(is_active=False)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


def top_level_comments(db: Session, project_id: int):
    return (
        db.query(ProjectComment)
        .filter(
            ProjectComment.project_id == project_id,
            ProjectComment.parent_comment_id.is_(None),
            ProjectComment.is_active.is_(True),
        )
        .order_by(desc(ProjectComment.created_at), desc(ProjectComment.id))
    )


def replies_for(db: Session, parent_ids: list[int]) -> list[ProjectComment]:
    if not parent_ids:
        return []
    return (
        db.query(ProjectComment)
        .filter(
            ProjectComment.parent_comment_id.in_(parent_ids),
            ProjectComment.is_active.is_(True),
        )
        .order_by(ProjectComment.created_at, ProjectComment.id)
        .all()
    )
