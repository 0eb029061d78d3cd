from datetime import date, datetime, time
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from app.models.event_registration_models import AttendanceStatus


def _clean_tags(value: Optional[List[str]]) -> Optional[List[str]]:
    if value is None:
        return None
    cleaned = []
    for tag in value:
        tag = tag.strip()
        if tag and tag not in cleaned:
            cleaned.append(tag)
    return cleaned


class EventCreateSchema(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    long_description: Optional[str] = None
    category: str = Field(..., min_length=1, max_length=50)

    event_date: date
    start_time: time
    end_time: time
    location: str = Field(..., min_length=1, max_length=255)

    max_attendees: int = Field(100, gt=0)
    requirements: Optional[str] = None
    tags: Optional[List[str]] = None
    is_featured: bool = False
    registration_deadline: Optional[datetime] = None

    @field_validator("tags")
    def validate_tags(cls, value):
        return _clean_tags(value)

    @model_validator(mode="after")
    def check_times(self):
        if self.end_time <= self.start_time:
            raise ValueError("End time must be after start time")
        return self


class EventUpdateSchema(BaseModel):
    # counters are never writable through this schema
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, min_length=1)
    long_description: Optional[str] = None
    category: Optional[str] = Field(None, min_length=1, max_length=50)

    event_date: Optional[date] = None
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    location: Optional[str] = Field(None, min_length=1, max_length=255)

    max_attendees: Optional[int] = Field(None, gt=0)
    requirements: Optional[str] = None
    tags: Optional[List[str]] = None
    is_featured: Optional[bool] = None
    registration_deadline: Optional[datetime] = None

    @field_validator("tags")
    def validate_tags(cls, value):
        return _clean_tags(value)

    @model_validator(mode="after")
    def check_times(self):
        if self.start_time and self.end_time and self.end_time <= self.start_time:
            raise ValueError("End time must be after start time")
        return self


class OrganizerInfo(BaseModel):
    id: int
    name: str
    email: str


class EventResponse(BaseModel):
    id: int
    title: str
    description: str
    long_description: Optional[str] = None
    category: str

    event_date: date
    start_time: time
    end_time: time
    location: str

    max_attendees: int
    current_attendees: int
    requirements: Optional[str] = None
    tags: List[str] = []
    is_featured: bool
    is_active: bool
    registration_deadline: Optional[datetime] = None

    created_at: datetime
    updated_at: datetime

    organizer: Optional[OrganizerInfo] = None
    is_registered: bool = False
    available_spots: int
    is_registration_open: bool
    is_past_event: bool


class RegistrationResponse(BaseModel):
    id: int
    event_id: int
    user_id: int
    attendance_status: AttendanceStatus
    registration_date: datetime

    class Config:
        from_attributes = True
