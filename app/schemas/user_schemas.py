from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from app.models.user_models import UserRole


class UserResponse(BaseModel):
    id: int
    username: str
    email: EmailStr
    first_name: str
    last_name: str
    full_name: str
    role: UserRole
    department: Optional[str] = None
    academic_year: Optional[str] = None
    bio: Optional[str] = None
    avatar_url: Optional[str] = None
    github_username: Optional[str] = None
    linkedin_username: Optional[str] = None
    website_url: Optional[str] = None
    location: Optional[str] = None
    is_active: bool
    email_verified: bool
    last_login: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class UserSummary(BaseModel):
    id: int
    username: str
    full_name: str
    avatar_url: Optional[str] = None

    class Config:
        from_attributes = True


class UserUpdateSchema(BaseModel):
    # role, email and the active flag are not editable here
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    department: Optional[str] = Field(None, max_length=100)
    academic_year: Optional[str] = Field(None, max_length=50)
    bio: Optional[str] = Field(None, max_length=1000)
    avatar_url: Optional[str] = Field(None, max_length=500)
    github_username: Optional[str] = Field(None, max_length=100)
    linkedin_username: Optional[str] = Field(None, max_length=100)
    website_url: Optional[str] = Field(None, max_length=500)
    location: Optional[str] = Field(None, max_length=200)

    @field_validator("first_name", "last_name")
    def strip_names(cls, value):
        if value is None:
            return value
        value = value.strip()
        if not value:
            raise ValueError("Name must not be blank")
        return value


class UserStatistics(BaseModel):
    total_users: int
    students: int
    admins: int
