import enum

from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    Boolean,
    Text,
    ForeignKey,
    JSON,
    Enum as SAEnum,
    CheckConstraint,
    UniqueConstraint,
    Index,
)

from app.db.database import Base
from app.utils.clock import utcnow


class DifficultyLevel(str, enum.Enum):
    BEGINNER = "BEGINNER"
    INTERMEDIATE = "INTERMEDIATE"
    ADVANCED = "ADVANCED"


class ProjectStatus(str, enum.Enum):
    SEEKING_COLLABORATORS = "SEEKING_COLLABORATORS"
    IN_DEVELOPMENT = "IN_DEVELOPMENT"
    COMPLETED = "COMPLETED"
    ON_HOLD = "ON_HOLD"


class Project(Base):
    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    category = Column(String(50), nullable=False)
    difficulty_level = Column(SAEnum(DifficultyLevel, name="difficulty_level"), nullable=True)
    expected_duration = Column(String(100), nullable=True)
    team_size = Column(String(50), nullable=True)
    required_skills = Column(JSON, nullable=True)
    requirements = Column(Text, nullable=True)
    tags = Column(JSON, nullable=True)

    status = Column(
        SAEnum(ProjectStatus, name="project_status"),
        nullable=False,
        default=ProjectStatus.SEEKING_COLLABORATORS,
    )
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False)

    is_featured = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True)

    # derived counters, see app.crud.project
    likes_count = Column(Integer, nullable=False, default=0)
    comments_count = Column(Integer, nullable=False, default=0)
    views_count = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    __table_args__ = (
        CheckConstraint("likes_count >= 0", name="ck_projects_likes_count_non_negative"),
        CheckConstraint("comments_count >= 0", name="ck_projects_comments_count_non_negative"),
        CheckConstraint("views_count >= 0", name="ck_projects_views_count_non_negative"),
        Index("ix_projects_owner_id", "owner_id"),
        Index("ix_projects_category", "category"),
        Index("ix_projects_status", "status"),
    )


class ProjectLike(Base):
    __tablename__ = "project_likes"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint("project_id", "user_id", name="uq_project_likes_project_user"),
        Index("ix_project_likes_project_id", "project_id"),
    )


class ProjectComment(Base):
    __tablename__ = "project_comments"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    parent_comment_id = Column(
        Integer, ForeignKey("project_comments.id", ondelete="CASCADE"), nullable=True
    )
    content = Column(Text, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    __table_args__ = (
        Index("ix_project_comments_project_id", "project_id"),
        Index("ix_project_comments_parent_comment_id", "parent_comment_id"),
    )
