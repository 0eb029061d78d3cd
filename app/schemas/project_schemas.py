from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from app.models.project_models import DifficultyLevel, ProjectStatus
from app.schemas.user_schemas import UserSummary


def _clean_list(value: Optional[List[str]]) -> Optional[List[str]]:
    if value is None:
        return None
    cleaned = []
    for item in value:
        item = item.strip()
        if item and item not in cleaned:
            cleaned.append(item)
    return cleaned


class ProjectCreateSchema(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1, max_length=50)
    difficulty_level: DifficultyLevel
    expected_duration: Optional[str] = Field(None, max_length=100)
    team_size: Optional[str] = Field(None, max_length=50)
    required_skills: Optional[List[str]] = None
    requirements: Optional[str] = None
    tags: Optional[List[str]] = None
    is_featured: bool = False

    @field_validator("title", "description", "category")
    def not_blank(cls, value):
        value = value.strip()
        if not value:
            raise ValueError("Field must not be blank")
        return value

    @field_validator("required_skills", "tags")
    def validate_lists(cls, value):
        return _clean_list(value)


class ProjectUpdateSchema(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, min_length=1)
    category: Optional[str] = Field(None, min_length=1, max_length=50)
    difficulty_level: Optional[DifficultyLevel] = None
    expected_duration: Optional[str] = Field(None, max_length=100)
    team_size: Optional[str] = Field(None, max_length=50)
    required_skills: Optional[List[str]] = None
    requirements: Optional[str] = None
    status: Optional[ProjectStatus] = None
    tags: Optional[List[str]] = None
    is_featured: Optional[bool] = None

    @field_validator("required_skills", "tags")
    def validate_lists(cls, value):
        return _clean_list(value)


class OwnerInfo(BaseModel):
    id: int
    name: str
    email: str
    avatar_url: Optional[str] = None
    department: Optional[str] = None
    academic_year: Optional[str] = None


class ProjectResponse(BaseModel):
    id: int
    title: str
    description: str
    category: str
    difficulty_level: Optional[DifficultyLevel] = None
    expected_duration: Optional[str] = None
    team_size: Optional[str] = None
    required_skills: List[str] = []
    requirements: Optional[str] = None
    status: ProjectStatus
    tags: List[str] = []
    is_featured: bool
    is_active: bool

    likes_count: int
    comments_count: int
    views_count: int

    created_at: datetime
    updated_at: datetime

    owner: Optional[OwnerInfo] = None
    is_liked: bool = False
    is_owner: bool = False


class LikeToggleResponse(BaseModel):
    project_id: int
    liked: bool
    likes_count: int


class CommentCreateSchema(BaseModel):
    content: str = Field(..., min_length=1, max_length=2000)
    parent_comment_id: Optional[int] = None

    @field_validator("content")
    def not_blank(cls, value):
        value = value.strip()
        if not value:
            raise ValueError("Comment content is required")
        return value


class CommentResponse(BaseModel):
    id: int
    project_id: int
    user: Optional[UserSummary] = None
    content: str
    parent_comment_id: Optional[int] = None
    replies: List["CommentResponse"] = []
    is_active: bool
    created_at: datetime
    updated_at: datetime


CommentResponse.model_rebuild()
